# backend/app/models/consultant.py
"""
Consultant profile model.

A consultant profile is linked one-to-one to a User and must be approved by
an admin before its services can be booked. Profiles are never hard-deleted;
``is_active`` is the soft state.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.enums import ApprovalStatus
from ..core.timezone_utils import utc_now
from ..core.ulid_helper import generate_ulid
from ..database import Base


class Consultant(Base):
    __tablename__ = "consultants"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    user_id = Column(String(26), ForeignKey("users.id"), nullable=False, unique=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    specialization = Column(String(100), nullable=True)
    bio = Column(Text, nullable=True)

    approval_status = Column(
        String(20), nullable=False, default=ApprovalStatus.PENDING.value, index=True
    )
    rejection_reason = Column(Text, nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    is_active = Column(Boolean, nullable=False, default=False)

    # Aggregate maintained by the rating service
    rating = Column(Numeric(2, 1), nullable=False, default=0)
    total_ratings = Column(Integer, nullable=False, default=0)

    created_at = Column(
        DateTime(timezone=True), default=utc_now, server_default=func.now(), nullable=False
    )
    updated_at = Column(DateTime(timezone=True), onupdate=utc_now)

    user = relationship("User", back_populates="consultant_profile")
    services = relationship("Service", back_populates="consultant")

    __table_args__ = (
        CheckConstraint(
            "approval_status IN ('pending', 'approved', 'rejected')",
            name="ck_consultants_approval_status",
        ),
        CheckConstraint("rating >= 0 AND rating <= 5", name="ck_consultants_rating_range"),
    )

    @property
    def is_bookable(self) -> bool:
        """Active and approved consultants accept bookings."""
        return bool(self.is_active) and self.approval_status == ApprovalStatus.APPROVED.value

    def __repr__(self) -> str:
        return f"<Consultant {self.name} status={self.approval_status} active={self.is_active}>"
