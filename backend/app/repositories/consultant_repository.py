# backend/app/repositories/consultant_repository.py
"""Consultant profile data access."""

import logging
from typing import Optional

from sqlalchemy.orm import Query, Session, selectinload

from ..core.enums import ApprovalStatus, SortOrder
from ..models.consultant import Consultant
from .base_repository import BaseRepository
from .listing import ListingParams, ListingQueryBuilder, Page

logger = logging.getLogger(__name__)

CONSULTANT_LISTING = ListingQueryBuilder(
    Consultant,
    filterable={"specialization": Consultant.specialization},
    search_columns=(Consultant.name, Consultant.specialization, Consultant.bio),
    sortable={
        "rating": Consultant.rating,
        "createdAt": Consultant.created_at,
        "name": Consultant.name,
    },
    default_sort="rating",
    default_order=SortOrder.DESC,
)

# Approval queue is served oldest first
PENDING_LISTING = ListingQueryBuilder(
    Consultant,
    sortable={"createdAt": Consultant.created_at},
    default_sort="createdAt",
    default_order=SortOrder.ASC,
)


class ConsultantRepository(BaseRepository[Consultant]):
    def __init__(self, db: Session):
        super().__init__(db, Consultant)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(selectinload(Consultant.user))

    def get_by_user_id(self, user_id: str) -> Optional[Consultant]:
        return self.find_one_by(user_id=user_id)

    def list_approved(self, params: ListingParams) -> Page[Consultant]:
        query = self.db.query(Consultant).filter(
            Consultant.is_active.is_(True),
            Consultant.approval_status == ApprovalStatus.APPROVED.value,
        )
        return CONSULTANT_LISTING.paginate(query, params)

    def list_pending(self, params: ListingParams) -> Page[Consultant]:
        query = self._apply_eager_loading(
            self.db.query(Consultant).filter(
                Consultant.approval_status == ApprovalStatus.PENDING.value
            )
        )
        return PENDING_LISTING.paginate(query, params)
