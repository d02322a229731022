"""Course catalogue schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, Dict, List, Optional

from pydantic import AfterValidator, AliasChoices, Field, field_validator

from ..core.constants import (
    MAX_COURSE_HOURS,
    MAX_COURSE_OBJECTIVES,
    MIN_COURSE_HOURS,
    MIN_COURSE_OBJECTIVES,
)
from ..core.enums import CourseLanguage, CourseLevel, CourseStatus
from ..core.timezone_utils import ensure_utc
from .base import CamelModel, CamelRequestModel, Money, RatingValue
from .base_responses import CoursePagination


class Lesson(CamelRequestModel):
    id: str = Field(..., min_length=1, max_length=64)
    title: str = Field(..., min_length=1, max_length=200)
    duration_minutes: int = Field(0, ge=0)


def _check_objectives(objectives: List[str]) -> List[str]:
    cleaned = [item.strip() for item in objectives if item and item.strip()]
    if not MIN_COURSE_OBJECTIVES <= len(cleaned) <= MAX_COURSE_OBJECTIVES:
        raise ValueError(
            f"Course must have between {MIN_COURSE_OBJECTIVES} and "
            f"{MAX_COURSE_OBJECTIVES} objectives"
        )
    return cleaned


def _check_lessons(lessons: List[Lesson]) -> List[Lesson]:
    ids = [lesson.id for lesson in lessons]
    if len(ids) != len(set(ids)):
        raise ValueError("Lesson ids must be unique within a course")
    return lessons


Objectives = Annotated[List[str], AfterValidator(_check_objectives)]
Lessons = Annotated[List[Lesson], AfterValidator(_check_lessons)]


class CourseCreate(CamelRequestModel):
    title: str = Field(..., min_length=5, max_length=100)
    description: str = Field(..., min_length=20, max_length=2000)
    short_description: str = Field(..., min_length=10, max_length=200)
    category_id: Optional[str] = Field(None, alias="category")
    level: CourseLevel
    language: CourseLanguage = CourseLanguage.ENGLISH
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    duration_hours: int = Field(..., alias="duration", ge=MIN_COURSE_HOURS, le=MAX_COURSE_HOURS)
    objectives: Objectives
    lessons: Lessons = Field(default_factory=list)


class CourseUpdate(CamelRequestModel):
    title: Optional[str] = Field(None, min_length=5, max_length=100)
    description: Optional[str] = Field(None, min_length=20, max_length=2000)
    short_description: Optional[str] = Field(None, min_length=10, max_length=200)
    category_id: Optional[str] = Field(None, alias="category")
    level: Optional[CourseLevel] = None
    language: Optional[CourseLanguage] = None
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    duration_hours: Optional[int] = Field(
        None, alias="duration", ge=MIN_COURSE_HOURS, le=MAX_COURSE_HOURS
    )
    objectives: Optional[Objectives] = None
    lessons: Optional[Lessons] = None
    status: Optional[CourseStatus] = None


class CourseStatusUpdate(CamelRequestModel):
    status: CourseStatus


class InstructorInfo(CamelModel):
    id: str
    full_name: str


class CategoryInfo(CamelModel):
    id: str
    name: str
    slug: str


class CourseResponse(CamelModel):
    id: str
    title: str
    description: str
    short_description: str
    level: str
    language: str
    price: Money
    duration: int = Field(validation_alias=AliasChoices("duration_hours", "duration"))
    objectives: List[str] = Field(default_factory=list)
    total_lessons: int = 0
    status: str
    is_published: bool
    published_at: Optional[datetime] = None
    enrollment_count: int
    rating_average: RatingValue
    rating_count: int
    instructor: Optional[InstructorInfo] = None
    category: Optional[CategoryInfo] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    @field_validator("published_at", "created_at", "updated_at")
    @classmethod
    def _as_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)


class CourseListData(CamelModel):
    courses: List[CourseResponse]
    pagination: CoursePagination


class CourseContentResponse(CamelModel):
    course_id: str
    title: str
    lessons: List[Dict[str, Any]]
    progress: Optional[int] = None
    completed_lessons: List[str] = Field(default_factory=list)
