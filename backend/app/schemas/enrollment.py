"""Enrollment schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from ..core.constants import MAX_RATING, MAX_REVIEW_LENGTH, MIN_RATING
from ..core.enums import EnrollmentStatus
from ..core.timezone_utils import ensure_utc
from .base import CamelModel, CamelRequestModel, Money
from .base_responses import EnrollmentPagination


class EnrollmentProgressUpdate(CamelRequestModel):
    lesson_id: str = Field(..., min_length=1, max_length=64)
    time_spent: Optional[int] = Field(None, ge=0, description="Minutes spent on the lesson")
    quiz_score: Optional[int] = Field(None, ge=0, le=100)


class EnrollmentStatusUpdate(CamelRequestModel):
    status: EnrollmentStatus


class EnrollmentRatingRequest(CamelRequestModel):
    score: int = Field(..., ge=MIN_RATING, le=MAX_RATING)
    review: Optional[str] = Field(None, max_length=MAX_REVIEW_LENGTH)


class CompletedLesson(CamelModel):
    lesson_id: str
    completed_at: Optional[str] = None
    time_spent: int = 0
    quiz_score: Optional[int] = None


class EnrollmentCourseInfo(CamelModel):
    id: str
    title: str
    total_lessons: int = 0
    enrollment_count: int = 0


class EnrollmentResponse(CamelModel):
    id: str
    user_id: str
    course_id: str
    course: Optional[EnrollmentCourseInfo] = None
    status: str
    enrollment_type: str
    progress: int
    completed_lessons: List[CompletedLesson] = Field(default_factory=list)
    current_lesson_id: Optional[str] = None
    last_accessed_at: Optional[datetime] = None
    total_time_spent: int = 0
    amount_paid: Money
    currency: str
    completed_at: Optional[datetime] = None
    certificate_id: Optional[str] = None
    certificate_issued_at: Optional[datetime] = None
    rating_score: Optional[int] = None
    review: Optional[str] = None
    rated_at: Optional[datetime] = None
    enrolled_at: datetime

    @field_validator(
        "last_accessed_at", "completed_at", "certificate_issued_at", "rated_at", "enrolled_at"
    )
    @classmethod
    def _as_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)


class EnrollmentListData(CamelModel):
    enrollments: List[EnrollmentResponse]
    pagination: EnrollmentPagination
