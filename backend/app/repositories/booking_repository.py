# backend/app/repositories/booking_repository.py
"""
Booking Repository for SkillBridge

Data access for consultations and service bookings: participant-scoped
listing, rating statistics for aggregation, and admin reporting queries.
"""

from datetime import datetime
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Query, Session, selectinload

from ..core.enums import BookingStatus, SortOrder
from ..models.booking import Booking
from ..models.consultant import Consultant
from .base_repository import BaseRepository
from .listing import ListingParams, ListingQueryBuilder, Page

logger = logging.getLogger(__name__)

BOOKING_LISTING = ListingQueryBuilder(
    Booking,
    filterable={
        "status": Booking.status,
        "type": Booking.kind,
        "consultant": Booking.consultant_id,
        "user": Booking.client_id,
    },
    sortable={
        "scheduledDate": Booking.scheduled_at,
        "createdAt": Booking.created_at,
        "amount": Booking.amount,
        "status": Booking.status,
    },
    default_sort="scheduledDate",
    default_order=SortOrder.ASC,
)


class BookingRepository(BaseRepository[Booking]):
    def __init__(self, db: Session):
        super().__init__(db, Booking)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(
            selectinload(Booking.service),
            selectinload(Booking.consultant),
            selectinload(Booking.client),
            selectinload(Booking.reschedules),
        )

    def list_for_participant(
        self,
        user_id: str,
        consultant_id: Optional[str],
        params: ListingParams,
    ) -> Page[Booking]:
        """Bookings the user made, plus those they provide as a consultant."""
        participant = Booking.client_id == user_id
        if consultant_id:
            participant = or_(participant, Booking.consultant_id == consultant_id)
        query = self._apply_eager_loading(self.db.query(Booking).filter(participant))
        return BOOKING_LISTING.paginate(query, params)

    def list_all(self, params: ListingParams) -> Page[Booking]:
        query = self._apply_eager_loading(self.db.query(Booking))
        return BOOKING_LISTING.paginate(query, params)

    def rating_stats_for_consultant(self, consultant_id: str) -> Tuple[int, int]:
        """(sum, count) of ratings recorded against the consultant."""
        row = (
            self.db.query(func.coalesce(func.sum(Booking.rating), 0), func.count(Booking.rating))
            .filter(Booking.consultant_id == consultant_id, Booking.rating.isnot(None), Booking.rating > 0)
            .one()
        )
        return int(row[0]), int(row[1])

    def rating_histogram_for_service(self, service_id: str) -> Dict[int, int]:
        """Count of ratings per star value for the service."""
        rows = self._execute_query(
            self.db.query(Booking.rating, func.count(Booking.id))
            .filter(Booking.service_id == service_id, Booking.rating.isnot(None), Booking.rating > 0)
            .group_by(Booking.rating)
        )
        return {int(rating): int(count) for rating, count in rows}

    # Admin reporting

    def count_created_since(self, since: datetime) -> int:
        return self._execute_scalar(
            self.db.query(func.count(Booking.id)).filter(Booking.created_at >= since)
        )

    def status_distribution(self) -> Dict[str, int]:
        rows = self._execute_query(
            self.db.query(Booking.status, func.count(Booking.id)).group_by(Booking.status)
        )
        return {status: int(count) for status, count in rows}

    def completed_revenue_since(self, since: datetime) -> float:
        total = self._execute_scalar(
            self.db.query(func.coalesce(func.sum(Booking.amount), 0)).filter(
                Booking.status == BookingStatus.COMPLETED.value,
                Booking.completed_at >= since,
            )
        )
        return float(total or 0)

    def completed_bookings_since(self, since: datetime) -> List[Booking]:
        """Completed bookings in the window, for per-day revenue bucketing."""
        return self._execute_query(
            self.db.query(Booking)
            .filter(
                Booking.status == BookingStatus.COMPLETED.value,
                Booking.completed_at >= since,
            )
            .order_by(Booking.completed_at.asc())
        )

    def top_consultants_by_revenue(
        self, since: datetime, limit: int = 10
    ) -> Sequence[Tuple[str, str, float, int]]:
        """(consultant_id, name, revenue, bookings) for completed bookings in the window."""
        revenue = func.sum(Booking.amount)
        return self._execute_query(
            self.db.query(
                Consultant.id,
                Consultant.name,
                revenue,
                func.count(Booking.id),
            )
            .join(Consultant, Consultant.id == Booking.consultant_id)
            .filter(
                Booking.status == BookingStatus.COMPLETED.value,
                Booking.completed_at >= since,
            )
            .group_by(Consultant.id, Consultant.name)
            .order_by(revenue.desc())
            .limit(limit)
        )
