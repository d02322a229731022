# backend/app/models/category.py
"""Category taxonomy for courses, services and consultants."""

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.timezone_utils import utc_now
from ..core.ulid_helper import generate_ulid
from ..database import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    name = Column(String(50), nullable=False, unique=True)
    slug = Column(String(60), nullable=False, unique=True, index=True)
    description = Column(String(200), nullable=True)
    type = Column(String(20), nullable=False, index=True)
    parent_id = Column(String(26), ForeignKey("categories.id"), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    order = Column(Integer, nullable=False, default=0)
    created_at = Column(
        DateTime(timezone=True), default=utc_now, server_default=func.now(), nullable=False
    )
    updated_at = Column(DateTime(timezone=True), onupdate=utc_now)

    parent = relationship("Category", remote_side=[id], backref="children")

    __table_args__ = (
        CheckConstraint(
            "type IN ('course', 'service', 'consultant')",
            name="ck_categories_type",
        ),
    )

    def __repr__(self) -> str:
        return f"<Category {self.slug} type={self.type}>"
