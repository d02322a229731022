# backend/app/models/user.py
"""
User model for the SkillBridge platform.

A single account table for students, consultants, instructors and admins,
differentiated by ``role``. Consultant-specific data lives on the separate
Consultant profile (one-to-one).
"""

import logging
from typing import Any

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.enums import RoleName
from ..core.timezone_utils import utc_now
from ..core.ulid_helper import generate_ulid
from ..database import Base

logger = logging.getLogger(__name__)


class User(Base):
    """
    Account identity plus role.

    Attributes:
        id: ULID primary key
        email: Unique email address, used as the token subject
        full_name: Display name
        role: One of student, consultant, instructor, admin
        is_active: Deactivated accounts cannot authenticate
    """

    __tablename__ = "users"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    email = Column(String(255), unique=True, nullable=False, index=True)
    full_name = Column(String(100), nullable=False)
    role = Column(String(20), nullable=False, default=RoleName.STUDENT.value, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(
        DateTime(timezone=True), default=utc_now, server_default=func.now(), nullable=False
    )
    updated_at = Column(DateTime(timezone=True), onupdate=utc_now)

    consultant_profile = relationship("Consultant", back_populates="user", uselist=False)

    __table_args__ = (
        CheckConstraint(
            "role IN ('student', 'consultant', 'instructor', 'admin')",
            name="ck_users_role",
        ),
    )

    def __repr__(self) -> str:
        return f"<User {self.email} role={self.role}>"

    @property
    def is_admin(self) -> bool:
        return self.role == RoleName.ADMIN.value

    def has_role(self, *roles: Any) -> bool:
        wanted = {getattr(role, "value", role) for role in roles}
        return self.role in wanted
