"""
Database models for the SkillBridge platform.

Importing this package registers every table on ``Base.metadata``:
- Accounts: User, Consultant
- Catalogue: Category, Course, Service, Partner
- Scheduling: Booking, BookingReschedule
- Learning: Enrollment
"""

from .booking import Booking
from .booking_reschedule import BookingReschedule
from .category import Category
from .consultant import Consultant
from .course import Course
from .enrollment import Enrollment
from .partner import Partner
from .service import Service
from .user import User

__all__ = [
    "Booking",
    "BookingReschedule",
    "Category",
    "Consultant",
    "Course",
    "Enrollment",
    "Partner",
    "Service",
    "User",
]
