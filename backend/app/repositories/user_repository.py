# backend/app/repositories/user_repository.py
"""
User Repository for SkillBridge

Account lookups used by authentication, plus the admin user listing and
dashboard counts.
"""

from datetime import datetime
import logging
from typing import Dict, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..core.enums import SortOrder
from ..models.user import User
from .base_repository import BaseRepository
from .listing import ListingParams, ListingQueryBuilder, Page

logger = logging.getLogger(__name__)

USER_LISTING = ListingQueryBuilder(
    User,
    filterable={"role": User.role, "isActive": User.is_active},
    search_columns=(User.full_name, User.email),
    sortable={
        "createdAt": User.created_at,
        "name": User.full_name,
        "email": User.email,
    },
    default_sort="createdAt",
    default_order=SortOrder.DESC,
)


class UserRepository(BaseRepository[User]):
    """Repository for User data access."""

    def __init__(self, db: Session):
        super().__init__(db, User)
        self.logger = logging.getLogger(__name__)

    def get_by_email(self, email: str) -> Optional[User]:
        return self.find_one_by(email=email.strip().lower())

    def list_users(self, params: ListingParams) -> Page[User]:
        return USER_LISTING.paginate(self.db.query(User), params)

    def count_by_role(self) -> Dict[str, int]:
        rows = self._execute_query(
            self.db.query(User.role, func.count(User.id)).group_by(User.role)
        )
        return {role: int(count) for role, count in rows}

    def count_created_since(self, since: datetime) -> int:
        return self._execute_scalar(
            self.db.query(func.count(User.id)).filter(User.created_at >= since)
        )
