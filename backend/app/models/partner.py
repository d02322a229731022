# backend/app/models/partner.py
"""Partner organisations shown on the platform (not part of booking)."""

from sqlalchemy import Boolean, CheckConstraint, Column, Date, DateTime, String, Text
from sqlalchemy.sql import func

from ..core.timezone_utils import utc_now
from ..core.ulid_helper import generate_ulid
from ..database import Base


class Partner(Base):
    __tablename__ = "partners"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    name = Column(String(100), nullable=False, unique=True)
    type = Column(String(20), nullable=False, index=True)
    description = Column(Text, nullable=True)
    website = Column(String(255), nullable=True)
    contact_email = Column(String(255), nullable=True)
    partnership_level = Column(String(20), nullable=False, default="bronze")
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(
        DateTime(timezone=True), default=utc_now, server_default=func.now(), nullable=False
    )
    updated_at = Column(DateTime(timezone=True), onupdate=utc_now)

    __table_args__ = (
        CheckConstraint(
            "type IN ('corporate', 'educational', 'technology', 'recruitment', 'community', 'other')",
            name="ck_partners_type",
        ),
        CheckConstraint(
            "partnership_level IN ('bronze', 'silver', 'gold', 'platinum')",
            name="ck_partners_level",
        ),
        CheckConstraint(
            "end_date IS NULL OR start_date IS NULL OR end_date >= start_date",
            name="ck_partners_date_order",
        ),
    )

    def __repr__(self) -> str:
        return f"<Partner {self.name!r} type={self.type}>"
