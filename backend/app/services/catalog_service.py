# backend/app/services/catalog_service.py
"""
Catalog Service for SkillBridge

Marketplace services offered by consultants: public browsing, the
consultant's own listing and owner/admin management. Deleting a service
only deactivates it so existing bookings keep their reference.
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from ..core.constants import DEFAULT_WEEKDAY_AVAILABILITY
from ..core.enums import ApprovalStatus, RoleName
from ..core.exceptions import (
    ConflictException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from ..models.consultant import Consultant
from ..models.service import Service
from ..models.user import User
from ..repositories.factory import RepositoryFactory
from ..repositories.listing import ListingParams, Page
from ..schemas.service import ServiceCreate, ServiceUpdate
from .base import BaseService

logger = logging.getLogger(__name__)

MY_SERVICES_STATUS_FILTERS = {"all": None, "active": True, "inactive": False}


class CatalogService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = RepositoryFactory.create_service_repository(db)
        self.consultant_repository = RepositoryFactory.create_consultant_repository(db)
        self.category_repository = RepositoryFactory.create_category_repository(db)

    def _load_service(self, service_id: str) -> Service:
        service = self.repository.get_by_id(service_id)
        if service is None:
            raise NotFoundException("Service not found", code="SERVICE_NOT_FOUND")
        return service

    def _consultant_profile(self, user: User) -> Consultant:
        """The caller's approved consultant profile."""
        profile = self.consultant_repository.get_by_user_id(user.id)
        if (
            profile is None
            or not user.has_role(RoleName.CONSULTANT)
            or profile.approval_status != ApprovalStatus.APPROVED.value
        ):
            raise ForbiddenException("Only consultants can manage services")
        return profile

    def _ensure_can_manage(self, service: Service, user: User) -> None:
        if user.is_admin:
            return
        profile = self.consultant_repository.get_by_user_id(user.id)
        if profile is None or service.consultant_id != profile.id:
            raise ForbiddenException("Not authorized to modify this service")

    def _ensure_category(self, category_id: Optional[str]) -> None:
        if category_id and self.category_repository.get_by_id(category_id) is None:
            raise NotFoundException("Category not found", code="CATEGORY_NOT_FOUND")

    def _ensure_unique_title(
        self, consultant_id: str, title: str, exclude_id: Optional[str] = None
    ) -> None:
        if self.repository.find_by_title_for_consultant(consultant_id, title, exclude_id):
            raise ConflictException(
                "You already have a service with this title", code="DUPLICATE_SERVICE_TITLE"
            )

    @BaseService.measure_operation("list_services")
    def list_services(self, params: ListingParams) -> Page[Service]:
        """Active services only."""
        params.filters["isActive"] = True
        return self.repository.list_services(params)

    @BaseService.measure_operation("get_service")
    def get_service(self, service_id: str, user: Optional[User] = None) -> Service:
        service = self._load_service(service_id)
        if service.is_active:
            return service
        if user is not None:
            profile = self.consultant_repository.get_by_user_id(user.id)
            if user.is_admin or (profile is not None and profile.id == service.consultant_id):
                return service
        raise NotFoundException("Service not found", code="SERVICE_NOT_FOUND")

    @BaseService.measure_operation("list_consultant_services")
    def list_consultant_services(self, consultant_id: str, params: ListingParams) -> Page[Service]:
        consultant = self.consultant_repository.get_by_id(consultant_id, load_relationships=False)
        if consultant is None:
            raise NotFoundException("Consultant not found", code="CONSULTANT_NOT_FOUND")
        params.filters["consultant"] = consultant.id
        params.filters["isActive"] = True
        return self.repository.list_services(params)

    @BaseService.measure_operation("list_my_services")
    def list_my_services(self, user: User, status: str, params: ListingParams) -> Page[Service]:
        """
        The caller's services filtered by ``status`` (all, active, inactive).

        Raises:
            ValidationException: Unknown status filter
        """
        if status not in MY_SERVICES_STATUS_FILTERS:
            raise ValidationException(
                "Status must be one of: all, active, inactive",
                code="INVALID_STATUS_FILTER",
                field="status",
            )
        profile = self._consultant_profile(user)
        params.filters["consultant"] = profile.id
        params.filters["isActive"] = MY_SERVICES_STATUS_FILTERS[status]
        return self.repository.list_services(params)

    @BaseService.measure_operation("create_service")
    def create_service(self, user: User, service_data: ServiceCreate) -> Service:
        profile = self._consultant_profile(user)

        with self.transaction():
            self._ensure_category(service_data.category_id)
            self._ensure_unique_title(profile.id, service_data.title)
            payload: Dict[str, Any] = service_data.model_dump(exclude={"time_slots", "availability"})
            service = self.repository.create(
                consultant_id=profile.id,
                availability=service_data.availability or dict(DEFAULT_WEEKDAY_AVAILABILITY),
                time_slots=[slot.model_dump(by_alias=True) for slot in service_data.time_slots],
                **payload,
            )

        self.logger.info(f"Consultant {profile.id} created service {service.id}")
        return self.repository.get_by_id(service.id)

    @BaseService.measure_operation("update_service")
    def update_service(self, user: User, service_id: str, service_data: ServiceUpdate) -> Service:
        with self.transaction():
            service = self._load_service(service_id)
            self._ensure_can_manage(service, user)

            changes = service_data.model_dump(exclude_unset=True, exclude={"time_slots"})
            if changes.get("title"):
                self._ensure_unique_title(service.consultant_id, changes["title"], service.id)
            if "category_id" in changes:
                self._ensure_category(changes["category_id"])
            if "availability" in changes and changes["availability"] is not None:
                changes["availability"] = {**(service.availability or {}), **changes["availability"]}
            for field, value in changes.items():
                # Only the category may be cleared
                if value is None and field != "category_id":
                    continue
                setattr(service, field, value)
            if service_data.time_slots is not None:
                service.time_slots = [slot.model_dump(by_alias=True) for slot in service_data.time_slots]
            self.repository.flush()

        return service

    @BaseService.measure_operation("deactivate_service")
    def delete_service(self, user: User, service_id: str) -> Service:
        """Soft delete: the service is deactivated, never removed."""
        return self._set_active(user, service_id, False)

    @BaseService.measure_operation("toggle_service_active")
    def toggle_active(self, user: User, service_id: str) -> Service:
        service = self._load_service(service_id)
        return self._set_active(user, service_id, not service.is_active)

    def _set_active(self, user: User, service_id: str, is_active: bool) -> Service:
        with self.transaction():
            service = self._load_service(service_id)
            self._ensure_can_manage(service, user)
            service.is_active = is_active
            self.repository.flush()
        self.logger.info(
            f"Service {service_id} {'activated' if is_active else 'deactivated'} by user {user.id}"
        )
        return service
