# backend/app/repositories/partner_repository.py
"""Partner data access."""

import logging

from sqlalchemy.orm import Session

from ..core.enums import SortOrder
from ..models.partner import Partner
from .base_repository import BaseRepository
from .listing import ListingParams, ListingQueryBuilder, Page

logger = logging.getLogger(__name__)

PARTNER_LISTING = ListingQueryBuilder(
    Partner,
    filterable={
        "type": Partner.type,
        "level": Partner.partnership_level,
        "isActive": Partner.is_active,
    },
    search_columns=(Partner.name, Partner.description),
    sortable={"createdAt": Partner.created_at, "name": Partner.name},
    default_sort="createdAt",
    default_order=SortOrder.DESC,
)


class PartnerRepository(BaseRepository[Partner]):
    def __init__(self, db: Session):
        super().__init__(db, Partner)

    def list_partners(self, params: ListingParams) -> Page[Partner]:
        return PARTNER_LISTING.paginate(self.db.query(Partner), params)
