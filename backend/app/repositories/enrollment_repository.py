# backend/app/repositories/enrollment_repository.py
"""Enrollment data access."""

from datetime import datetime
import logging
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Query, Session, selectinload

from ..core.booking_policy import ACTIVE_ENROLLMENT_STATUSES
from ..core.enums import SortOrder
from ..models.course import Course
from ..models.enrollment import Enrollment
from .base_repository import BaseRepository
from .listing import ListingParams, ListingQueryBuilder, Page

logger = logging.getLogger(__name__)

_LIVE_STATUSES = [status.value for status in ACTIVE_ENROLLMENT_STATUSES]

ENROLLMENT_LISTING = ListingQueryBuilder(
    Enrollment,
    filterable={"status": Enrollment.status, "course": Enrollment.course_id},
    sortable={
        "enrolledAt": Enrollment.enrolled_at,
        "progress": Enrollment.progress,
        "lastAccessed": Enrollment.last_accessed_at,
    },
    default_sort="enrolledAt",
    default_order=SortOrder.DESC,
)


class EnrollmentRepository(BaseRepository[Enrollment]):
    def __init__(self, db: Session):
        super().__init__(db, Enrollment)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(selectinload(Enrollment.course))

    def find_live(
        self, user_id: str, course_id: str, exclude_id: Optional[str] = None
    ) -> Optional[Enrollment]:
        """The user's active or completed enrollment in the course, if any."""
        query = self.db.query(Enrollment).filter(
            Enrollment.user_id == user_id,
            Enrollment.course_id == course_id,
            Enrollment.status.in_(_LIVE_STATUSES),
        )
        if exclude_id:
            query = query.filter(Enrollment.id != exclude_id)
        return query.first()

    def list_for_user(self, user_id: str, params: ListingParams) -> Page[Enrollment]:
        query = self._apply_eager_loading(
            self.db.query(Enrollment).filter(Enrollment.user_id == user_id)
        )
        return ENROLLMENT_LISTING.paginate(query, params)

    def rating_stats_for_course(self, course_id: str) -> Tuple[int, int]:
        """(sum, count) of enrollment ratings for the course."""
        row = (
            self.db.query(
                func.coalesce(func.sum(Enrollment.rating_score), 0),
                func.count(Enrollment.rating_score),
            )
            .filter(Enrollment.course_id == course_id, Enrollment.rating_score.isnot(None))
            .one()
        )
        return int(row[0]), int(row[1])

    def count_created_since(self, since: datetime) -> int:
        return self._execute_scalar(
            self.db.query(func.count(Enrollment.id)).filter(Enrollment.enrolled_at >= since)
        )

    def revenue_since(self, since: datetime) -> float:
        total = self._execute_scalar(
            self.db.query(func.coalesce(func.sum(Enrollment.amount_paid), 0)).filter(
                Enrollment.enrolled_at >= since
            )
        )
        return float(total or 0)

    def enrollments_since(self, since: datetime) -> List[Enrollment]:
        return self._execute_query(
            self.db.query(Enrollment)
            .filter(Enrollment.enrolled_at >= since)
            .order_by(Enrollment.enrolled_at.asc())
        )

    def top_courses_by_revenue(
        self, since: datetime, limit: int = 10
    ) -> Sequence[Tuple[str, str, float, int]]:
        """(course_id, title, revenue, enrollments) in the window."""
        revenue = func.sum(Enrollment.amount_paid)
        return self._execute_query(
            self.db.query(Course.id, Course.title, revenue, func.count(Enrollment.id))
            .join(Course, Course.id == Enrollment.course_id)
            .filter(Enrollment.enrolled_at >= since)
            .group_by(Course.id, Course.title)
            .order_by(revenue.desc())
            .limit(limit)
        )
