# backend/app/services/conflict_checker.py
"""
Conflict Checker Service for SkillBridge

Handles calendar conflict detection for consultant bookings:
- Checking whether an interval overlaps a live booking
- Validating that a requested start lies in the future
- Listing the free slots of a consultant for one day

Intervals are half-open [start, start + duration), so a session ending at
10:30 never collides with one starting at 10:30. Cancelled, completed and
no-show bookings free their slot.
"""

from datetime import date, datetime, timedelta
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import BookingConflictException, BusinessRuleException
from ..core.timezone_utils import day_bounds, ensure_utc, format_hhmm, utc_now
from ..models.booking import Booking
from ..models.service import Service
from ..repositories import RepositoryFactory
from ..repositories.conflict_checker_repository import ConflictCheckerRepository
from .base import BaseService

logger = logging.getLogger(__name__)


def intervals_overlap(
    a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime
) -> bool:
    """Half-open interval overlap test."""
    return a_start < b_end and a_end > b_start


class ConflictChecker(BaseService):
    """
    Service for checking booking conflicts and time validation.

    A consultant has one calendar shared by consultations and service
    bookings; every check here ignores the booking kind.
    """

    def __init__(self, db: Session, repository: Optional[ConflictCheckerRepository] = None):
        """
        Initialize conflict checker service.

        Args:
            db: Database session
            repository: Optional ConflictCheckerRepository instance
        """
        super().__init__(db)
        self.logger = logging.getLogger(__name__)
        self.repository = repository or RepositoryFactory.create_conflict_checker_repository(db)

    @BaseService.measure_operation("find_conflict")
    def find_conflict(
        self,
        consultant_id: str,
        start: datetime,
        duration_minutes: int,
        exclude_booking_id: Optional[str] = None,
    ) -> Optional[Booking]:
        """
        First live booking overlapping [start, start + duration), if any.

        Args:
            consultant_id: Consultant whose calendar is checked
            start: Requested start (UTC)
            duration_minutes: Requested length
            exclude_booking_id: Booking being moved, ignored in the check

        Returns:
            The earliest conflicting booking or None
        """
        start = ensure_utc(start)
        end = Booking.compute_end(start, duration_minutes)
        overlapping = self.repository.find_overlapping(
            consultant_id, start, end, exclude_booking_id=exclude_booking_id
        )
        if overlapping:
            self.logger.info(
                f"Found {len(overlapping)} conflicting bookings for consultant {consultant_id} "
                f"between {start.isoformat()} and {end.isoformat()}"
            )
            return overlapping[0]
        return None

    def is_available(
        self,
        consultant_id: str,
        start: datetime,
        duration_minutes: int,
        exclude_booking_id: Optional[str] = None,
    ) -> bool:
        return (
            self.find_conflict(consultant_id, start, duration_minutes, exclude_booking_id) is None
        )

    def ensure_available(
        self,
        consultant_id: str,
        start: datetime,
        duration_minutes: int,
        exclude_booking_id: Optional[str] = None,
    ) -> None:
        """
        Raise BookingConflictException when the interval is taken.

        Raises:
            BookingConflictException: If a live booking overlaps
        """
        conflict = self.find_conflict(consultant_id, start, duration_minutes, exclude_booking_id)
        if conflict is not None:
            raise BookingConflictException(conflicting_booking_id=conflict.id)

    @staticmethod
    def validate_future(start: datetime, now: Optional[datetime] = None) -> None:
        """
        Raises:
            BusinessRuleException: If ``start`` is not strictly after now
        """
        reference = now or utc_now()
        if ensure_utc(start) <= reference:
            raise BusinessRuleException(
                "Scheduled date must be in the future", code="DATE_NOT_IN_FUTURE"
            )

    @staticmethod
    def day_grid(day: date) -> List[datetime]:
        """Candidate slot starts for ``day`` on the configured grid."""
        day_start, _ = day_bounds(day)
        first = day_start + timedelta(hours=settings.availability_start_hour)
        closing = day_start + timedelta(hours=settings.availability_end_hour)
        step = timedelta(minutes=settings.slot_step_minutes)

        starts = []
        current = first
        while current < closing:
            starts.append(current)
            current += step
        return starts

    @BaseService.measure_operation("get_available_slots")
    def get_available_slots(
        self,
        consultant_id: str,
        day: date,
        duration_minutes: int,
        service: Optional[Service] = None,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        Free start times of a consultant on one day.

        A grid start is offered when the whole session ends by closing
        time, lies in the future, fits the service's weekday flag and time
        windows (when a service is given) and overlaps no live booking.

        Returns:
            Dict with date, available_slots (HH:MM labels) and
            booked_consultations ([{time, duration}])
        """
        reference = now or utc_now()
        day_start, day_end = day_bounds(day)
        closing = day_start + timedelta(hours=settings.availability_end_hour)

        booked = self.repository.get_live_bookings_between(consultant_id, day_start, day_end)
        booked_intervals = [(b.starts_at, b.ends_at) for b in booked]

        slots: List[str] = []
        if service is None or service.is_available_on(day):
            for start in self.day_grid(day):
                end = start + timedelta(minutes=duration_minutes)
                if end > closing or start <= reference:
                    continue
                if service is not None and not service.accepts_start(start.time()):
                    continue
                if any(
                    intervals_overlap(start, end, taken_start, taken_end)
                    for taken_start, taken_end in booked_intervals
                ):
                    continue
                slots.append(format_hhmm(start))

        return {
            "date": day,
            "available_slots": slots,
            "booked_consultations": [
                {"time": format_hhmm(b.starts_at), "duration": b.duration_minutes}
                for b in booked
                if day_start <= b.starts_at < day_end
            ],
        }
