"""
Base response schemas for standardized API responses.

Every endpoint answers with the same envelope:
``{success, message?, data?, errors?}``. List payloads carry a pagination
block ``{currentPage, totalPages, total<Entity>, hasNext, hasPrev}`` next
to the items.
"""

from typing import Any, ClassVar, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_serializer

from ..repositories.listing import Page
from .base import CamelModel

T = TypeVar("T")


class ErrorDetail(BaseModel):
    """One field-level validation failure."""

    field: str
    message: str


class ApiResponse(BaseModel, Generic[T]):
    """Standard response envelope; absent optional keys are omitted."""

    success: bool = Field(default=True, description="Operation success status")
    message: Optional[str] = Field(default=None, description="Human-readable message")
    data: Optional[T] = Field(default=None, description="Payload")
    errors: Optional[List[ErrorDetail]] = Field(default=None, description="Field errors")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "message": "Consultation booked successfully",
                "data": {"id": "01HZY3J6ZK6V5Q8B7W2F3N4M5P"},
            }
        }
    )

    @model_serializer(mode="wrap")
    def _drop_empty_keys(self, handler: Any) -> Dict[str, Any]:
        payload = handler(self)
        return {key: value for key, value in payload.items() if value is not None or key == "success"}


class ErrorResponse(BaseModel):
    """Error envelope produced by the exception handlers."""

    success: bool = False
    message: str
    code: Optional[str] = None
    errors: Optional[List[ErrorDetail]] = None


class PaginationMeta(CamelModel):
    """
    Pagination block shared by all list endpoints.

    Subclasses name the total after the entity, e.g. ``totalCourses``.
    """

    total_field: ClassVar[str] = "total"

    current_page: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def from_page(cls, page: Page[Any]) -> "PaginationMeta":
        return cls(
            current_page=page.page,
            total_pages=page.total_pages,
            has_next=page.has_next,
            has_prev=page.has_prev,
            **{cls.total_field: page.total},
        )


class ConsultationPagination(PaginationMeta):
    total_field: ClassVar[str] = "total_consultations"
    total_consultations: int


class ServiceBookingPagination(PaginationMeta):
    total_field: ClassVar[str] = "total_service_bookings"
    total_service_bookings: int


class CoursePagination(PaginationMeta):
    total_field: ClassVar[str] = "total_courses"
    total_courses: int


class ServicePagination(PaginationMeta):
    total_field: ClassVar[str] = "total_services"
    total_services: int


class EnrollmentPagination(PaginationMeta):
    total_field: ClassVar[str] = "total_enrollments"
    total_enrollments: int


class UserPagination(PaginationMeta):
    total_field: ClassVar[str] = "total_users"
    total_users: int


class ConsultantPagination(PaginationMeta):
    total_field: ClassVar[str] = "total_consultants"
    total_consultants: int


class PartnerPagination(PaginationMeta):
    total_field: ClassVar[str] = "total_partners"
    total_partners: int


class DeletedData(CamelModel):
    id: str
