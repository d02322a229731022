# backend/app/models/enrollment.py
"""
Enrollment model.

Links one student to one course. At most one active or completed
enrollment may exist per (user, course); the partial unique index below
enforces that in the store, and the enrollment service checks it first to
return a friendly message.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.booking_policy import ACTIVE_ENROLLMENT_STATUSES
from ..core.constants import CURRENCY_USD
from ..core.enums import EnrollmentStatus, EnrollmentType
from ..core.timezone_utils import to_base36, utc_now
from ..core.ulid_helper import generate_ulid
from ..database import Base

_LIVE_VALUES = sorted(status.value for status in ACTIVE_ENROLLMENT_STATUSES)


class Enrollment(Base):
    __tablename__ = "enrollments"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    user_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)
    course_id = Column(String(26), ForeignKey("courses.id"), nullable=False, index=True)

    status = Column(String(20), nullable=False, default=EnrollmentStatus.ACTIVE.value, index=True)
    enrollment_type = Column(String(20), nullable=False, default=EnrollmentType.PAID.value)

    progress = Column(Integer, nullable=False, default=0)
    # [{"lessonId", "completedAt", "timeSpent", "quizScore"}]
    completed_lessons = Column(JSON, nullable=False, default=list)
    current_lesson_id = Column(String(64), nullable=True)
    last_accessed_at = Column(DateTime(timezone=True), nullable=True)
    total_time_spent = Column(Integer, nullable=False, default=0)  # minutes

    amount_paid = Column(Numeric(10, 2), nullable=False, default=0)
    currency = Column(String(3), nullable=False, default=CURRENCY_USD)

    completed_at = Column(DateTime(timezone=True), nullable=True)
    certificate_id = Column(String(64), nullable=True, unique=True)
    certificate_issued_at = Column(DateTime(timezone=True), nullable=True)

    rating_score = Column(Integer, nullable=True)
    review = Column(Text, nullable=True)
    rated_at = Column(DateTime(timezone=True), nullable=True)

    enrolled_at = Column(
        DateTime(timezone=True), default=utc_now, server_default=func.now(), nullable=False
    )
    updated_at = Column(DateTime(timezone=True), onupdate=utc_now)

    user = relationship("User")
    course = relationship("Course")

    __table_args__ = (
        CheckConstraint(
            "status IN ('active', 'completed', 'cancelled', 'paused', 'expired')",
            name="ck_enrollments_status",
        ),
        CheckConstraint("progress >= 0 AND progress <= 100", name="ck_enrollments_progress_range"),
        CheckConstraint(
            "rating_score IS NULL OR (rating_score >= 1 AND rating_score <= 5)",
            name="ck_enrollments_rating_range",
        ),
    )

    def __repr__(self) -> str:
        return f"<Enrollment user={self.user_id} course={self.course_id} status={self.status}>"

    @property
    def completed_lesson_ids(self) -> List[str]:
        return [str(entry.get("lessonId")) for entry in (self.completed_lessons or [])]

    def add_completed_lesson(
        self, lesson_id: str, time_spent: int = 0, quiz_score: Optional[int] = None
    ) -> bool:
        """Record a lesson as completed; returns False when it already was."""
        if lesson_id in self.completed_lesson_ids:
            return False
        entry: Dict[str, Any] = {
            "lessonId": lesson_id,
            "completedAt": utc_now().isoformat(),
            "timeSpent": time_spent,
            "quizScore": quiz_score,
        }
        # Reassign so the JSON column is flagged dirty
        self.completed_lessons = [*(self.completed_lessons or []), entry]
        self.total_time_spent = (self.total_time_spent or 0) + time_spent
        return True

    def recompute_progress(self, total_lessons: int) -> int:
        if total_lessons <= 0:
            self.progress = 0
        else:
            done = len(self.completed_lessons or [])
            percent = (Decimal(done * 100) / Decimal(total_lessons)).quantize(
                Decimal("1"), rounding=ROUND_HALF_UP
            )
            self.progress = min(100, int(percent))
        return self.progress

    def issue_certificate(self) -> str:
        """
        Issue the completion certificate once.

        The identifier is derived from this record's id and the issue
        timestamp.
        """
        if self.certificate_id:
            return self.certificate_id
        issued_at = utc_now()
        stamp = to_base36(int(issued_at.timestamp() * 1000))
        self.certificate_id = f"CERT-{self.id[-12:].upper()}-{stamp}"
        self.certificate_issued_at = issued_at
        return self.certificate_id


Index(
    "uq_enrollments_user_course_live",
    Enrollment.user_id,
    Enrollment.course_id,
    unique=True,
    postgresql_where=Enrollment.status.in_(_LIVE_VALUES),
    sqlite_where=Enrollment.status.in_(_LIVE_VALUES),
)
