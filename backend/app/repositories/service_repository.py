# backend/app/repositories/service_repository.py
"""Marketplace service data access and listing."""

import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Query, Session, selectinload

from ..core.enums import SortOrder
from ..models.service import Service
from .base_repository import BaseRepository
from .listing import ListingParams, ListingQueryBuilder, Page

logger = logging.getLogger(__name__)

SERVICE_LISTING = ListingQueryBuilder(
    Service,
    filterable={
        "category": Service.category_id,
        "duration": Service.duration,
        "consultant": Service.consultant_id,
        "isActive": Service.is_active,
    },
    search_columns=(Service.title, Service.description),
    sortable={
        "createdAt": Service.created_at,
        "price": Service.price,
        "rating": Service.rating_average,
        "totalBookings": Service.total_bookings,
        "title": Service.title,
    },
    default_sort="createdAt",
    default_order=SortOrder.DESC,
    price_column=Service.price,
)


class ServiceRepository(BaseRepository[Service]):
    def __init__(self, db: Session):
        super().__init__(db, Service)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(selectinload(Service.consultant), selectinload(Service.category))

    def list_services(self, params: ListingParams) -> Page[Service]:
        return SERVICE_LISTING.paginate(self._apply_eager_loading(self.db.query(Service)), params)

    def find_by_title_for_consultant(
        self, consultant_id: str, title: str, exclude_id: Optional[str] = None
    ) -> Optional[Service]:
        """Case-insensitive title match among one consultant's services."""
        query = self.db.query(Service).filter(
            Service.consultant_id == consultant_id,
            func.lower(Service.title) == title.strip().lower(),
        )
        if exclude_id:
            query = query.filter(Service.id != exclude_id)
        return query.first()
