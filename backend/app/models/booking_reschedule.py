"""Append-only reschedule history for bookings."""

from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.timezone_utils import utc_now
from ..core.ulid_helper import generate_ulid
from ..database import Base


class BookingReschedule(Base):
    """One move of a booking from ``previous_date`` to ``new_date``."""

    __tablename__ = "booking_reschedules"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    booking_id = Column(
        String(26),
        ForeignKey("bookings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    previous_date = Column(DateTime(timezone=True), nullable=False)
    new_date = Column(DateTime(timezone=True), nullable=False)
    previous_time_slot = Column(String(50), nullable=True)
    new_time_slot = Column(String(50), nullable=True)
    reason = Column(Text, nullable=False)
    rescheduled_by_id = Column(String(26), ForeignKey("users.id"), nullable=False)
    rescheduled_at = Column(
        DateTime(timezone=True), nullable=False, default=utc_now, server_default=func.now()
    )

    booking = relationship("Booking", back_populates="reschedules")
    rescheduled_by = relationship("User")

    def __repr__(self) -> str:
        return f"<BookingReschedule booking={self.booking_id} {self.previous_date} -> {self.new_date}>"
