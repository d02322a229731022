# backend/app/models/course.py
"""
Course model.

Courses are authored by instructors. ``status`` drives visibility and
``is_published`` is kept equal to ``status == 'published'`` by
``set_status``. ``enrollment_count`` and the rating columns are
denormalized aggregates owned by the enrollment and rating services.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.enums import CourseStatus
from ..core.timezone_utils import utc_now
from ..core.ulid_helper import generate_ulid
from ..database import Base


class Course(Base):
    __tablename__ = "courses"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    instructor_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)
    category_id = Column(String(26), ForeignKey("categories.id"), nullable=True, index=True)

    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    short_description = Column(String(200), nullable=False)
    level = Column(String(20), nullable=False, index=True)
    language = Column(String(20), nullable=False, default="english", index=True)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    duration_hours = Column(Integer, nullable=False)
    objectives = Column(JSON, nullable=False, default=list)
    # Ordered [{"id", "title", "durationMinutes"}]
    lessons = Column(JSON, nullable=False, default=list)

    status = Column(String(20), nullable=False, default=CourseStatus.DRAFT.value, index=True)
    is_published = Column(Boolean, nullable=False, default=False)
    published_at = Column(DateTime(timezone=True), nullable=True)

    enrollment_count = Column(Integer, nullable=False, default=0)
    rating_average = Column(Numeric(2, 1), nullable=False, default=0)
    rating_count = Column(Integer, nullable=False, default=0)

    created_at = Column(
        DateTime(timezone=True), default=utc_now, server_default=func.now(), nullable=False
    )
    updated_at = Column(DateTime(timezone=True), onupdate=utc_now)

    instructor = relationship("User")
    category = relationship("Category")

    __table_args__ = (
        CheckConstraint(
            "status IN ('draft', 'published', 'archived')",
            name="ck_courses_status",
        ),
        CheckConstraint(
            "level IN ('beginner', 'intermediate', 'advanced')",
            name="ck_courses_level",
        ),
        CheckConstraint("price >= 0", name="ck_courses_price_non_negative"),
        CheckConstraint("enrollment_count >= 0", name="ck_courses_enrollment_count"),
    )

    def set_status(self, status: CourseStatus) -> None:
        value = CourseStatus(status).value
        self.status = value
        self.is_published = value == CourseStatus.PUBLISHED.value
        if self.is_published and self.published_at is None:
            self.published_at = utc_now()

    @property
    def total_lessons(self) -> int:
        return len(self.lessons or [])

    @property
    def lesson_ids(self) -> List[str]:
        return [str(lesson.get("id")) for lesson in (self.lessons or [])]

    def lesson(self, lesson_id: str) -> Optional[Dict[str, Any]]:
        for lesson in self.lessons or []:
            if str(lesson.get("id")) == lesson_id:
                return lesson
        return None

    def __repr__(self) -> str:
        return f"<Course {self.title!r} status={self.status}>"
