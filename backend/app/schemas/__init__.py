# backend/app/schemas/__init__.py
"""
Pydantic schemas for the SkillBridge platform.

Request models forbid unknown fields; every model speaks camelCase on
the wire.
"""

from .admin import DashboardData, RevenueAnalytics
from .base import CamelModel, CamelRequestModel, Money, RatingValue
from .base_responses import ApiResponse, ErrorDetail, ErrorResponse, PaginationMeta

# Booking schemas - consultations and service bookings share one shape
from .booking import (
    AvailabilityResponse,
    BookingCreate,
    BookingFeedbackRequest,
    BookingRescheduleRequest,
    BookingResponse,
    BookingStatusUpdate,
    ConsultationListData,
    ServiceBookingListData,
)
from .category import CategoryCreate, CategoryResponse, CategoryUpdate
from .consultant import ConsultantApplication, ConsultantApprovalRequest, ConsultantResponse
from .course import (
    CourseContentResponse,
    CourseCreate,
    CourseListData,
    CourseResponse,
    CourseStatusUpdate,
    CourseUpdate,
)
from .enrollment import (
    EnrollmentProgressUpdate,
    EnrollmentRatingRequest,
    EnrollmentResponse,
    EnrollmentStatusUpdate,
)
from .partner import PartnerCreate, PartnerResponse, PartnerUpdate
from .service import ServiceCreate, ServiceListData, ServiceResponse, ServiceUpdate
from .user import UserResponse, UserRoleUpdate, UserStatusUpdate

__all__ = [
    # Base
    "ApiResponse",
    "CamelModel",
    "CamelRequestModel",
    "ErrorDetail",
    "ErrorResponse",
    "Money",
    "PaginationMeta",
    "RatingValue",
    # Bookings
    "AvailabilityResponse",
    "BookingCreate",
    "BookingFeedbackRequest",
    "BookingRescheduleRequest",
    "BookingResponse",
    "BookingStatusUpdate",
    "ConsultationListData",
    "ServiceBookingListData",
    # Courses and enrollments
    "CourseContentResponse",
    "CourseCreate",
    "CourseListData",
    "CourseResponse",
    "CourseStatusUpdate",
    "CourseUpdate",
    "EnrollmentProgressUpdate",
    "EnrollmentRatingRequest",
    "EnrollmentResponse",
    "EnrollmentStatusUpdate",
    # Marketplace
    "ConsultantApplication",
    "ConsultantApprovalRequest",
    "ConsultantResponse",
    "ServiceCreate",
    "ServiceListData",
    "ServiceResponse",
    "ServiceUpdate",
    # Taxonomy and partners
    "CategoryCreate",
    "CategoryResponse",
    "CategoryUpdate",
    "PartnerCreate",
    "PartnerResponse",
    "PartnerUpdate",
    # Users and admin
    "DashboardData",
    "RevenueAnalytics",
    "UserResponse",
    "UserRoleUpdate",
    "UserStatusUpdate",
]
