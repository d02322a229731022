# backend/app/core/enums.py
"""
Core enums for the SkillBridge platform.

Enumeration types shared by models, schemas and services. Values are the
wire values exposed through the API.
"""

from enum import Enum


class RoleName(str, Enum):
    """Roles a user account can hold."""

    STUDENT = "student"
    CONSULTANT = "consultant"
    INSTRUCTOR = "instructor"
    ADMIN = "admin"


class BookingKind(str, Enum):
    """
    Tag distinguishing the two booking families.

    Both kinds share one table, one state machine and one consultant
    calendar; the kind only changes labels and listing filters.
    """

    CONSULTATION = "consultation"
    SERVICE_BOOKING = "service-booking"

    @property
    def label(self) -> str:
        return "Consultation" if self is BookingKind.CONSULTATION else "Service booking"


class BookingStatus(str, Enum):
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    RESCHEDULED = "rescheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no-show"


class BookingActor(str, Enum):
    """The part an acting user plays with respect to one booking."""

    CLIENT = "client"
    CONSULTANT = "consultant"
    ADMIN = "admin"


class EnrollmentStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    PAUSED = "paused"
    EXPIRED = "expired"


class EnrollmentType(str, Enum):
    FREE = "free"
    PAID = "paid"


class CourseStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class CourseLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class CourseLanguage(str, Enum):
    ENGLISH = "english"
    SPANISH = "spanish"
    FRENCH = "french"
    GERMAN = "german"
    OTHER = "other"


class ApprovalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ApprovalAction(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"


class CategoryType(str, Enum):
    COURSE = "course"
    SERVICE = "service"
    CONSULTANT = "consultant"


class PartnerType(str, Enum):
    CORPORATE = "corporate"
    EDUCATIONAL = "educational"
    TECHNOLOGY = "technology"
    RECRUITMENT = "recruitment"
    COMMUNITY = "community"
    OTHER = "other"


class PartnershipLevel(str, Enum):
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"
