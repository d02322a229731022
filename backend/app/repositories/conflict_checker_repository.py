# backend/app/repositories/conflict_checker_repository.py
"""
ConflictChecker Repository for SkillBridge

Data access for calendar conflict detection. A consultant's calendar is
shared by every booking kind, so none of these queries filter on kind.
"""

from datetime import datetime
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.booking_policy import NON_TERMINAL_BOOKING_STATUSES
from ..models.booking import Booking
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)

_LIVE_STATUSES = [status.value for status in NON_TERMINAL_BOOKING_STATUSES]


class ConflictCheckerRepository(BaseRepository[Booking]):
    """Repository for conflict checking data access."""

    def __init__(self, db: Session):
        super().__init__(db, Booking)
        self.logger = logging.getLogger(__name__)

    def find_overlapping(
        self,
        consultant_id: str,
        start: datetime,
        end: datetime,
        exclude_booking_id: Optional[str] = None,
    ) -> List[Booking]:
        """
        Live bookings of ``consultant_id`` whose interval overlaps [start, end).

        Back-to-back bookings (existing.end == start) do not overlap.
        """
        query = self.db.query(Booking).filter(
            Booking.consultant_id == consultant_id,
            Booking.status.in_(_LIVE_STATUSES),
            Booking.scheduled_at < end,
            Booking.end_at > start,
        )
        if exclude_booking_id:
            query = query.filter(Booking.id != exclude_booking_id)
        return self._execute_query(query.order_by(Booking.scheduled_at.asc()))

    def get_live_bookings_between(
        self, consultant_id: str, window_start: datetime, window_end: datetime
    ) -> List[Booking]:
        """Live bookings touching [window_start, window_end), earliest first."""
        return self.find_overlapping(consultant_id, window_start, window_end)
