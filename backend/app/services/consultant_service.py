# backend/app/services/consultant_service.py
"""
Consultant Service for SkillBridge

Consultant applications, public consultant browsing and the approval
workflow. A profile becomes bookable only once an admin approves it;
approval also grants the user the consultant role.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..core.enums import ApprovalAction, ApprovalStatus, RoleName
from ..core.exceptions import ConflictException, NotFoundException
from ..core.timezone_utils import utc_now
from ..models.consultant import Consultant
from ..models.user import User
from ..repositories.factory import RepositoryFactory
from ..repositories.listing import ListingParams, Page
from ..schemas.consultant import ConsultantApplication
from .base import BaseService

logger = logging.getLogger(__name__)


class ConsultantService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = RepositoryFactory.create_consultant_repository(db)

    @BaseService.measure_operation("apply_as_consultant")
    def apply(self, user: User, application: ConsultantApplication) -> Consultant:
        """
        Submit a consultant application for admin review.

        Raises:
            ConflictException: The user already has a profile
        """
        with self.transaction():
            if self.repository.get_by_user_id(user.id) is not None:
                raise ConflictException(
                    "Consultant profile already exists", code="CONSULTANT_PROFILE_EXISTS"
                )
            profile = self.repository.create(
                user_id=user.id,
                name=user.full_name,
                email=user.email,
                specialization=application.specialization,
                bio=application.bio,
                approval_status=ApprovalStatus.PENDING.value,
                is_active=False,
            )
        self.logger.info(f"User {user.id} applied as consultant ({profile.id})")
        return profile

    @BaseService.measure_operation("get_my_consultant_profile")
    def get_my_profile(self, user: User) -> Consultant:
        profile = self.repository.get_by_user_id(user.id)
        if profile is None:
            raise NotFoundException("Consultant profile not found", code="CONSULTANT_NOT_FOUND")
        return profile

    @BaseService.measure_operation("list_consultants")
    def list_consultants(self, params: ListingParams) -> Page[Consultant]:
        """Approved, active consultants."""
        return self.repository.list_approved(params)

    @BaseService.measure_operation("get_consultant")
    def get_consultant(self, consultant_id: str) -> Consultant:
        profile = self.repository.get_by_id(consultant_id)
        if profile is None or not profile.is_bookable:
            raise NotFoundException("Consultant not found", code="CONSULTANT_NOT_FOUND")
        return profile

    @BaseService.measure_operation("list_pending_consultants")
    def list_pending(self, params: ListingParams) -> Page[Consultant]:
        return self.repository.list_pending(params)

    @BaseService.measure_operation("review_consultant")
    def review(
        self, consultant_id: str, action: ApprovalAction, reason: Optional[str] = None
    ) -> Consultant:
        """
        Approve or reject an application.

        Approval activates the profile and gives the owner the consultant
        role; rejection deactivates it and records the reason.
        """
        action = ApprovalAction(action)
        with self.transaction():
            profile = self.repository.get_by_id(consultant_id)
            if profile is None:
                raise NotFoundException("Consultant not found", code="CONSULTANT_NOT_FOUND")

            if action is ApprovalAction.APPROVE:
                profile.approval_status = ApprovalStatus.APPROVED.value
                profile.is_active = True
                profile.approved_at = utc_now()
                profile.rejection_reason = None
                owner = profile.user
                if owner is not None and not owner.is_admin:
                    owner.role = RoleName.CONSULTANT.value
            else:
                profile.approval_status = ApprovalStatus.REJECTED.value
                profile.is_active = False
                profile.rejection_reason = reason
            self.repository.flush()

        self.logger.info(f"Consultant {consultant_id} {profile.approval_status}")
        return profile

    def ensure_profile_for_role(self, user: User) -> Consultant:
        """
        Give a user promoted to consultant an approved, active profile.

        Called inside the caller's transaction.
        """
        profile = self.repository.get_by_user_id(user.id)
        if profile is None:
            return self.repository.create(
                user_id=user.id,
                name=user.full_name,
                email=user.email,
                approval_status=ApprovalStatus.APPROVED.value,
                approved_at=utc_now(),
                is_active=True,
            )
        profile.approval_status = ApprovalStatus.APPROVED.value
        profile.approved_at = profile.approved_at or utc_now()
        profile.is_active = True
        return profile
