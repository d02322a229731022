# backend/app/models/service.py
"""
Marketplace service model.

A Service is a bookable offering of one consultant: fixed price and
duration, a weekday availability map and optional daily time windows.
``is_active`` is the soft-delete flag. Rating and booking counters are
denormalized and only written through atomic updates or the rating service.
"""

from datetime import date, time
from typing import Dict, List

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.constants import DEFAULT_WEEKDAY_AVAILABILITY, WEEKDAYS
from ..core.timezone_utils import parse_hhmm, utc_now
from ..core.ulid_helper import generate_ulid
from ..database import Base


def _default_availability() -> Dict[str, bool]:
    return dict(DEFAULT_WEEKDAY_AVAILABILITY)


def _empty_distribution() -> Dict[str, int]:
    return {str(star): 0 for star in range(1, 6)}


class Service(Base):
    __tablename__ = "services"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    consultant_id = Column(String(26), ForeignKey("consultants.id"), nullable=False, index=True)
    category_id = Column(String(26), ForeignKey("categories.id"), nullable=True, index=True)

    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    duration = Column(Integer, nullable=False)  # minutes
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    availability = Column(JSON, nullable=False, default=_default_availability)
    # [{"startTime": "09:00", "endTime": "12:00", "isAvailable": true}]
    time_slots = Column(JSON, nullable=False, default=list)

    rating_average = Column(Numeric(2, 1), nullable=False, default=0)
    rating_count = Column(Integer, nullable=False, default=0)
    rating_distribution = Column(JSON, nullable=False, default=_empty_distribution)
    total_bookings = Column(Integer, nullable=False, default=0)
    completed_bookings = Column(Integer, nullable=False, default=0)

    created_at = Column(
        DateTime(timezone=True), default=utc_now, server_default=func.now(), nullable=False
    )
    updated_at = Column(DateTime(timezone=True), onupdate=utc_now)

    consultant = relationship("Consultant", back_populates="services")
    category = relationship("Category")

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_services_price_non_negative"),
        CheckConstraint("duration >= 15 AND duration <= 480", name="ck_services_duration_range"),
    )

    def is_available_on(self, day: date) -> bool:
        """Weekday flag for ``day``; unknown keys count as unavailable."""
        flags = self.availability or {}
        return bool(flags.get(WEEKDAYS[day.weekday()], False))

    def open_windows(self) -> List[tuple[time, time]]:
        """Available daily windows as (start, end) times."""
        windows = []
        for slot in self.time_slots or []:
            if not slot.get("isAvailable", True):
                continue
            windows.append((parse_hhmm(slot["startTime"]), parse_hhmm(slot["endTime"])))
        return windows

    def accepts_start(self, start: time) -> bool:
        """
        Whether a booking may start at ``start`` given the configured windows.

        Services without windows accept any start inside the day grid.
        """
        windows = self.open_windows()
        if not windows:
            return True
        return any(window_start <= start < window_end for window_start, window_end in windows)

    def __repr__(self) -> str:
        return f"<Service {self.title!r} consultant={self.consultant_id} active={self.is_active}>"
