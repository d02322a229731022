# backend/app/repositories/course_repository.py
"""Course data access and catalogue listing."""

import logging
from typing import List

from sqlalchemy.orm import Query, Session, selectinload

from ..core.enums import CourseStatus, SortOrder
from ..core.constants import DEFAULT_COURSE_PAGE_SIZE
from ..models.course import Course
from .base_repository import BaseRepository
from .listing import ListingParams, ListingQueryBuilder, Page

logger = logging.getLogger(__name__)

COURSE_LISTING = ListingQueryBuilder(
    Course,
    filterable={
        "category": Course.category_id,
        "level": Course.level,
        "language": Course.language,
        "instructor": Course.instructor_id,
        "status": Course.status,
    },
    search_columns=(Course.title, Course.description, Course.short_description),
    sortable={
        "rating": Course.rating_average,
        "price": Course.price,
        "createdAt": Course.created_at,
        "enrollmentCount": Course.enrollment_count,
        "title": Course.title,
    },
    default_sort="rating",
    default_order=SortOrder.DESC,
    default_limit=DEFAULT_COURSE_PAGE_SIZE,
    price_column=Course.price,
)


class CourseRepository(BaseRepository[Course]):
    def __init__(self, db: Session):
        super().__init__(db, Course)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(selectinload(Course.instructor), selectinload(Course.category))

    def list_published(self, params: ListingParams) -> Page[Course]:
        query = self._apply_eager_loading(
            self.db.query(Course).filter(
                Course.is_published.is_(True),
                Course.status == CourseStatus.PUBLISHED.value,
            )
        )
        return COURSE_LISTING.paginate(query, params)

    def list_any(self, params: ListingParams) -> Page[Course]:
        """All courses regardless of status (instructor and admin views)."""
        return COURSE_LISTING.paginate(self._apply_eager_loading(self.db.query(Course)), params)

    def most_enrolled(self, limit: int = 5) -> List[Course]:
        return self._execute_query(
            self.db.query(Course)
            .order_by(Course.enrollment_count.desc(), Course.id.asc())
            .limit(limit)
        )
