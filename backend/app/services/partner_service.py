# backend/app/services/partner_service.py
"""
Partner Service for SkillBridge

Partners are listed publicly while active; admins maintain them.
"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.exceptions import (
    BusinessRuleException,
    ConflictException,
    NotFoundException,
    RepositoryException,
)
from ..models.partner import Partner
from ..repositories.factory import RepositoryFactory
from ..repositories.listing import ListingParams, Page
from ..schemas.partner import PartnerCreate, PartnerUpdate
from .base import BaseService

logger = logging.getLogger(__name__)

NULLABLE_FIELDS = ("description", "website", "contact_email", "start_date", "end_date")


class PartnerService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = RepositoryFactory.create_partner_repository(db)

    def _load_partner(self, partner_id: str) -> Partner:
        partner = self.repository.get_by_id(partner_id, load_relationships=False)
        if partner is None:
            raise NotFoundException("Partner not found", code="PARTNER_NOT_FOUND")
        return partner

    def _ensure_unique_name(self, name: str, exclude_id: Optional[str] = None) -> None:
        existing = self.repository.find_one_by(name=name)
        if existing is not None and existing.id != exclude_id:
            raise ConflictException("Partner with this name already exists", code="DUPLICATE_PARTNER")

    @BaseService.measure_operation("list_partners")
    def list_partners(self, params: ListingParams, include_inactive: bool = False) -> Page[Partner]:
        if not include_inactive:
            params.filters["isActive"] = True
        return self.repository.list_partners(params)

    @BaseService.measure_operation("get_partner")
    def get_partner(self, partner_id: str, include_inactive: bool = False) -> Partner:
        partner = self._load_partner(partner_id)
        if not partner.is_active and not include_inactive:
            raise NotFoundException("Partner not found", code="PARTNER_NOT_FOUND")
        return partner

    @BaseService.measure_operation("create_partner")
    def create_partner(self, partner_data: PartnerCreate) -> Partner:
        try:
            with self.transaction():
                self._ensure_unique_name(partner_data.name)
                partner = self.repository.create(**partner_data.model_dump())
        except RepositoryException as exc:
            if isinstance(exc.__cause__, IntegrityError):
                raise ConflictException(
                    "Partner with this name already exists", code="DUPLICATE_PARTNER"
                ) from exc
            raise
        self.logger.info(f"Partner {partner.id} created")
        return partner

    @BaseService.measure_operation("update_partner")
    def update_partner(self, partner_id: str, partner_data: PartnerUpdate) -> Partner:
        with self.transaction():
            partner = self._load_partner(partner_id)
            changes = partner_data.model_dump(exclude_unset=True)
            if changes.get("name"):
                self._ensure_unique_name(changes["name"], exclude_id=partner.id)
            for field, value in changes.items():
                if value is None and field not in NULLABLE_FIELDS:
                    continue
                setattr(partner, field, value)
            if partner.start_date and partner.end_date and partner.end_date < partner.start_date:
                raise BusinessRuleException(
                    "endDate must not be before startDate", code="INVALID_DATE_RANGE"
                )
            self.repository.flush()
        return partner

    @BaseService.measure_operation("deactivate_partner")
    def delete_partner(self, partner_id: str) -> Partner:
        with self.transaction():
            partner = self._load_partner(partner_id)
            partner.is_active = False
            self.repository.flush()
        self.logger.info(f"Partner {partner_id} deactivated")
        return partner
