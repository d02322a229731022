# backend/app/models/booking.py
"""
Booking model for the SkillBridge platform.

One table holds both consultations and marketplace service bookings,
distinguished by ``kind``. Every booking occupies the half-open interval
[scheduled_at, end_at) on its consultant's calendar, and the amount is a
snapshot of the service price at booking time.

Status changes are validated by the booking service against the transition
table in ``core.booking_policy``; the helpers here only apply a change that
has already been authorized.
"""

from datetime import datetime, timedelta
import logging
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.booking_policy import NON_TERMINAL_BOOKING_STATUSES
from ..core.enums import BookingKind, BookingStatus
from ..core.timezone_utils import ensure_utc, utc_now
from ..core.ulid_helper import generate_ulid
from ..database import Base

logger = logging.getLogger(__name__)

_NON_TERMINAL_VALUES = sorted(status.value for status in NON_TERMINAL_BOOKING_STATUSES)


class Booking(Base):
    """
    A scheduled one-on-one session between a client and a consultant.

    Attributes:
        kind: consultation | service-booking
        client_id: User who booked
        consultant_id: Consultant profile providing the session
        service_id: Service booked
        scheduled_at / end_at: UTC interval, end_at = scheduled_at + duration
        time_slot: Display label chosen by the client
        amount: Service price at booking time
    """

    __tablename__ = "bookings"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    kind = Column(String(20), nullable=False, default=BookingKind.CONSULTATION.value, index=True)

    client_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)
    consultant_id = Column(String(26), ForeignKey("consultants.id"), nullable=False)
    service_id = Column(String(26), ForeignKey("services.id"), nullable=False, index=True)

    scheduled_at = Column(DateTime(timezone=True), nullable=False)
    end_at = Column(DateTime(timezone=True), nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    time_slot = Column(String(50), nullable=False)

    amount = Column(Numeric(10, 2), nullable=False)
    status = Column(String(20), nullable=False, default=BookingStatus.SCHEDULED.value, index=True)
    notes = Column(Text, nullable=True)
    special_requirements = Column(Text, nullable=True)

    cancellation_reason = Column(Text, nullable=True)
    cancelled_by_id = Column(String(26), ForeignKey("users.id"), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    confirmed_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    rating = Column(Integer, nullable=True)
    feedback = Column(Text, nullable=True)
    feedback_provided = Column(Boolean, nullable=False, default=False)
    feedback_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(
        DateTime(timezone=True), default=utc_now, server_default=func.now(), nullable=False
    )
    updated_at = Column(DateTime(timezone=True), onupdate=utc_now)

    client = relationship("User", foreign_keys=[client_id])
    consultant = relationship("Consultant")
    service = relationship("Service")
    cancelled_by = relationship("User", foreign_keys=[cancelled_by_id])
    reschedules = relationship(
        "BookingReschedule",
        back_populates="booking",
        order_by="BookingReschedule.rescheduled_at, BookingReschedule.id",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('scheduled', 'confirmed', 'rescheduled', 'completed', 'cancelled', 'no-show')",
            name="ck_bookings_status",
        ),
        CheckConstraint(
            "kind IN ('consultation', 'service-booking')",
            name="ck_bookings_kind",
        ),
        CheckConstraint(
            "duration_minutes >= 15 AND duration_minutes <= 480",
            name="ck_bookings_duration_range",
        ),
        CheckConstraint("amount >= 0", name="ck_bookings_amount_non_negative"),
        CheckConstraint("end_at > scheduled_at", name="ck_bookings_interval_order"),
        CheckConstraint(
            "rating IS NULL OR (rating >= 1 AND rating <= 5)",
            name="ck_bookings_rating_range",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<Booking {self.id}: kind={self.kind} consultant={self.consultant_id} "
            f"start={self.scheduled_at} status={self.status}>"
        )

    @staticmethod
    def compute_end(start: datetime, duration_minutes: int) -> datetime:
        return start + timedelta(minutes=duration_minutes)

    @property
    def starts_at(self) -> datetime:
        return ensure_utc(self.scheduled_at)

    @property
    def ends_at(self) -> datetime:
        return ensure_utc(self.end_at)

    def confirm(self) -> None:
        self.status = BookingStatus.CONFIRMED.value
        self.confirmed_at = utc_now()

    def cancel(self, cancelled_by_user_id: str, reason: Optional[str] = None) -> None:
        """Cancel this booking."""
        self.status = BookingStatus.CANCELLED.value
        self.cancelled_at = utc_now()
        self.cancelled_by_id = cancelled_by_user_id
        self.cancellation_reason = reason
        logger.info(f"Booking {self.id} cancelled by user {cancelled_by_user_id}")

    def complete(self) -> None:
        """Mark booking as completed."""
        self.status = BookingStatus.COMPLETED.value
        self.completed_at = utc_now()
        logger.info(f"Booking {self.id} marked as completed")

    def mark_no_show(self) -> None:
        """Mark booking as no-show."""
        self.status = BookingStatus.NO_SHOW.value
        logger.info(f"Booking {self.id} marked as no-show")

    def move_to(self, start: datetime, time_slot: str) -> None:
        """Place the booking on a new interval of the same length."""
        self.scheduled_at = start
        self.end_at = self.compute_end(start, self.duration_minutes)
        self.time_slot = time_slot
        self.status = BookingStatus.RESCHEDULED.value

    def record_feedback(self, rating: int, feedback: Optional[str]) -> None:
        self.rating = rating
        self.feedback = feedback
        self.feedback_provided = True
        self.feedback_at = utc_now()


# Store-level backstop against double booking: two live bookings of one
# consultant can never share a start instant.
Index(
    "uq_bookings_consultant_start_live",
    Booking.consultant_id,
    Booking.scheduled_at,
    unique=True,
    postgresql_where=Booking.status.in_(_NON_TERMINAL_VALUES),
    sqlite_where=Booking.status.in_(_NON_TERMINAL_VALUES),
)

Index(
    "ix_bookings_consultant_window",
    Booking.consultant_id,
    Booking.status,
    Booking.scheduled_at,
    Booking.end_at,
)
