# backend/app/services/booking_service.py
"""
Booking Service for SkillBridge

Handles the booking lifecycle for consultations and service bookings:
- Creating bookings on a consultant's calendar without double booking
- Rescheduling with an append-only history
- Status changes validated against the transition table
- One-time client feedback feeding the rating aggregates
- Participant-scoped reads and listings, and the free-slot listing

Both booking kinds go through the same code; the kind only changes the
labels in messages and the listing filter.
"""

from datetime import date
import logging
from typing import Any, Dict, NoReturn, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.booking_policy import (
    RESCHEDULABLE_STATUSES,
    actors_for_target,
    is_legal_booking_transition,
)
from ..core.config import settings
from ..core.constants import DEFAULT_RESCHEDULE_REASON
from ..core.enums import BookingActor, BookingKind, BookingStatus
from ..core.exceptions import (
    BookingConflictException,
    BusinessRuleException,
    ForbiddenException,
    InvalidStatusTransitionException,
    NotFoundException,
    RepositoryException,
)
from ..models.booking import Booking
from ..models.booking_reschedule import BookingReschedule
from ..models.consultant import Consultant
from ..models.service import Service
from ..models.user import User
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from ..repositories.listing import ListingParams, Page
from ..schemas.booking import BookingCreate, BookingRescheduleRequest, BookingStatusUpdate
from .base import BaseService
from .conflict_checker import ConflictChecker
from .rating_service import RatingService

logger = logging.getLogger(__name__)


class BookingService(BaseService):
    """
    Service layer for booking operations.

    Writers that touch a consultant's calendar lock the consultant row
    first, so the conflict check and the insert/move are serialized per
    consultant. The partial unique index on (consultant_id, scheduled_at)
    backs this up; its IntegrityError surfaces as the same conflict.
    """

    def __init__(
        self,
        db: Session,
        conflict_checker: Optional[ConflictChecker] = None,
        rating_service: Optional[RatingService] = None,
    ):
        """
        Initialize booking service.

        Args:
            db: Database session
            conflict_checker: Optional conflict checker (built from db when omitted)
            rating_service: Optional rating aggregator (built from db when omitted)
        """
        super().__init__(db)
        self.repository = RepositoryFactory.create_booking_repository(db)
        self.service_repository = RepositoryFactory.create_service_repository(db)
        self.consultant_repository = RepositoryFactory.create_consultant_repository(db)
        self.reschedule_repository = RepositoryFactory.create_base_repository(
            db, BookingReschedule
        )
        self.conflict_checker = conflict_checker or ConflictChecker(db)
        self.rating_service = rating_service or RatingService(db)

    # Helpers

    @staticmethod
    def _noun(kind: Optional[BookingKind]) -> str:
        return (kind or BookingKind.CONSULTATION).label.lower()

    def _load_booking(self, booking_id: str, kind: Optional[BookingKind]) -> Booking:
        booking = self.repository.get_by_id(booking_id)
        if booking is None or (kind is not None and booking.kind != kind.value):
            raise NotFoundException(
                f"{(kind or BookingKind.CONSULTATION).label} not found",
                code="BOOKING_NOT_FOUND",
            )
        return booking

    def _actor_for(self, booking: Booking, user: User) -> Optional[BookingActor]:
        """The part ``user`` plays for this booking, admin taking precedence."""
        if user.is_admin:
            return BookingActor.ADMIN
        if booking.client_id == user.id:
            return BookingActor.CLIENT
        consultant = booking.consultant
        if consultant is not None and consultant.user_id == user.id:
            return BookingActor.CONSULTANT
        return None

    def _lock_consultant(self, consultant_id: str) -> Optional[Consultant]:
        return self.consultant_repository.get_for_update(consultant_id)

    @staticmethod
    def _raise_if_slot_taken(exc: RepositoryException, kind: str) -> NoReturn:
        """Translate a unique-index violation on the calendar into a conflict."""
        if isinstance(exc.__cause__, IntegrityError):
            prometheus_metrics.record_booking_event(kind, "conflict")
            raise BookingConflictException() from exc
        raise exc

    def _validate_booking_prerequisites(
        self, booking_data: BookingCreate
    ) -> tuple[Service, Consultant]:
        service = self.service_repository.get_by_id(booking_data.service_id, load_relationships=False)
        if service is None or not service.is_active:
            raise NotFoundException("Service not found or inactive", code="SERVICE_NOT_FOUND")

        consultant = self._lock_consultant(booking_data.consultant_id)
        if consultant is None or not consultant.is_bookable:
            raise NotFoundException(
                "Consultant not found or inactive", code="CONSULTANT_NOT_FOUND"
            )

        if service.consultant_id != consultant.id:
            raise BusinessRuleException(
                "Consultant does not offer this service", code="SERVICE_CONSULTANT_MISMATCH"
            )
        return service, consultant

    # Lifecycle operations

    @BaseService.measure_operation("create_booking")
    def create_booking(
        self, client: User, booking_data: BookingCreate, kind: Optional[BookingKind] = None
    ) -> Booking:
        """
        Create a booking at status ``scheduled``.

        Validation runs in a fixed order: service, consultant, ownership,
        future date, free slot. The amount is the service price at booking
        time and the service's ``total_bookings`` is incremented atomically.

        Args:
            client: The user booking the session
            booking_data: Validated request body
            kind: Booking kind; falls back to the body's ``type``, then consultation

        Returns:
            Created booking with service, consultant and client loaded

        Raises:
            NotFoundException: Service or consultant missing or not bookable
            BusinessRuleException: Service mismatch or start not in the future
            BookingConflictException: Slot overlaps a live booking
        """
        kind = kind or BookingKind(booking_data.type or BookingKind.CONSULTATION)
        start = booking_data.scheduled_date
        self.log_operation(
            "create_booking",
            client_id=client.id,
            consultant_id=booking_data.consultant_id,
            scheduled_at=start.isoformat(),
            kind=kind.value,
        )

        with self.transaction():
            service, consultant = self._validate_booking_prerequisites(booking_data)
            self.conflict_checker.validate_future(start)
            duration = booking_data.duration or service.duration

            conflict = self.conflict_checker.find_conflict(consultant.id, start, duration)
            if conflict is not None:
                prometheus_metrics.record_booking_event(kind.value, "conflict")
                raise BookingConflictException(conflicting_booking_id=conflict.id)

            try:
                booking = self.repository.create(
                    kind=kind.value,
                    client_id=client.id,
                    consultant_id=consultant.id,
                    service_id=service.id,
                    scheduled_at=start,
                    end_at=Booking.compute_end(start, duration),
                    duration_minutes=duration,
                    time_slot=booking_data.time_slot,
                    amount=service.price,
                    status=BookingStatus.SCHEDULED.value,
                    notes=booking_data.notes,
                    special_requirements=booking_data.special_requirements,
                )
            except RepositoryException as exc:
                self._raise_if_slot_taken(exc, kind.value)

            self.service_repository.increment(service.id, "total_bookings")

        prometheus_metrics.record_booking_event(kind.value, "created")
        self.logger.info(
            f"Created {kind.value} {booking.id} for client {client.id} "
            f"with consultant {consultant.id} at {start.isoformat()}"
        )
        return self.repository.get_by_id(booking.id)

    @BaseService.measure_operation("reschedule_booking")
    def reschedule_booking(
        self,
        user: User,
        booking_id: str,
        reschedule_data: BookingRescheduleRequest,
        kind: Optional[BookingKind] = None,
    ) -> Booking:
        """
        Move a live booking to a new start, keeping its duration.

        Appends exactly one history entry and sets status ``rescheduled``.

        Raises:
            NotFoundException: Booking missing
            ForbiddenException: Caller is not the client or an admin
            BusinessRuleException: Terminal status or start not in the future
            BookingConflictException: New interval overlaps another live booking
        """
        new_start = reschedule_data.scheduled_date

        with self.transaction():
            booking = self._load_booking(booking_id, kind)
            noun = self._noun(BookingKind(booking.kind))

            actor = self._actor_for(booking, user)
            if actor not in actors_for_target(BookingStatus.RESCHEDULED):
                raise ForbiddenException(f"Not authorized to reschedule this {noun}")

            if BookingStatus(booking.status) not in RESCHEDULABLE_STATUSES:
                raise BusinessRuleException(
                    f"Cannot reschedule a booking with status {booking.status}",
                    code="BOOKING_NOT_RESCHEDULABLE",
                )

            self.conflict_checker.validate_future(new_start)
            self._lock_consultant(booking.consultant_id)

            conflict = self.conflict_checker.find_conflict(
                booking.consultant_id,
                new_start,
                booking.duration_minutes,
                exclude_booking_id=booking.id,
            )
            if conflict is not None:
                prometheus_metrics.record_booking_event(booking.kind, "conflict")
                raise BookingConflictException(conflicting_booking_id=conflict.id)

            previous_start = booking.starts_at
            previous_slot = booking.time_slot
            self.reschedule_repository.create(
                booking_id=booking.id,
                previous_date=previous_start,
                new_date=new_start,
                previous_time_slot=previous_slot,
                new_time_slot=reschedule_data.time_slot,
                reason=reschedule_data.reason or DEFAULT_RESCHEDULE_REASON,
                rescheduled_by_id=user.id,
            )
            booking.move_to(new_start, reschedule_data.time_slot)
            try:
                self.repository.flush()
            except RepositoryException as exc:
                self._raise_if_slot_taken(exc, booking.kind)

        prometheus_metrics.record_booking_event(booking.kind, "rescheduled")
        self.logger.info(
            f"Booking {booking.id} moved from {previous_start.isoformat()} "
            f"to {new_start.isoformat()} by user {user.id}"
        )
        # Pick up the history row added through its own repository
        self.db.refresh(booking)
        return booking

    @BaseService.measure_operation("update_booking_status")
    def update_status(
        self,
        user: User,
        booking_id: str,
        status_data: BookingStatusUpdate,
        kind: Optional[BookingKind] = None,
    ) -> Booking:
        """
        Apply a status change after checking who may request it.

        The actor is checked against the target first (403), then the
        transition against the table for the current status (400). A
        rejected change leaves the stored status untouched.
        """
        target = BookingStatus(status_data.status)

        with self.transaction():
            booking = self._load_booking(booking_id, kind)
            noun = self._noun(BookingKind(booking.kind))

            actor = self._actor_for(booking, user)
            if actor is None:
                raise ForbiddenException(f"Not authorized to access this {noun}")
            if actor not in actors_for_target(target):
                raise ForbiddenException(
                    f"Not authorized to mark this {noun} as {target.value}",
                    code="STATUS_CHANGE_FORBIDDEN",
                )

            current = BookingStatus(booking.status)
            if not is_legal_booking_transition(current, target):
                raise InvalidStatusTransitionException(current.value, target.value)

            if target is BookingStatus.CONFIRMED:
                booking.confirm()
            elif target is BookingStatus.CANCELLED:
                booking.cancel(user.id, status_data.cancellation_reason)
            elif target is BookingStatus.COMPLETED:
                booking.complete()
                self.service_repository.increment(booking.service_id, "completed_bookings")
            elif target is BookingStatus.NO_SHOW:
                booking.mark_no_show()
            self.repository.flush()

        prometheus_metrics.record_booking_event(booking.kind, f"status:{target.value}")
        return booking

    @BaseService.measure_operation("submit_booking_feedback")
    def submit_feedback(
        self,
        user: User,
        booking_id: str,
        rating: int,
        feedback: Optional[str] = None,
        kind: Optional[BookingKind] = None,
    ) -> Booking:
        """
        Record the client's rating once a session is completed.

        The consultant and service aggregates are recomputed after the
        feedback is committed; that step is best-effort.
        """
        with self.transaction():
            booking = self._load_booking(booking_id, kind)
            noun = self._noun(BookingKind(booking.kind))

            if booking.client_id != user.id:
                raise ForbiddenException(f"Not authorized to provide feedback for this {noun}")
            if booking.status != BookingStatus.COMPLETED.value:
                raise BusinessRuleException(
                    f"Feedback can only be provided for completed {noun}s",
                    code="FEEDBACK_NOT_ALLOWED",
                )
            if booking.feedback_provided:
                raise BusinessRuleException(
                    f"Feedback already provided for this {noun}", code="FEEDBACK_ALREADY_PROVIDED"
                )

            booking.record_feedback(rating, feedback)
            self.repository.flush()

        prometheus_metrics.record_booking_event(booking.kind, "feedback")
        self.rating_service.refresh_after_feedback(booking)
        return booking

    # Reads

    @BaseService.measure_operation("get_booking")
    def get_booking(self, user: User, booking_id: str, kind: Optional[BookingKind] = None) -> Booking:
        booking = self._load_booking(booking_id, kind)
        if self._actor_for(booking, user) is None:
            raise ForbiddenException(
                f"Not authorized to access this {self._noun(BookingKind(booking.kind))}"
            )
        return booking

    @BaseService.measure_operation("list_bookings")
    def list_bookings(
        self, user: User, params: ListingParams, kind: Optional[BookingKind] = None
    ) -> Page[Booking]:
        """The caller's bookings as client, plus as consultant when they hold a profile."""
        if kind is not None:
            params.filters["type"] = kind.value
        profile = self.consultant_repository.get_by_user_id(user.id)
        return self.repository.list_for_participant(
            user.id, profile.id if profile else None, params
        )

    @BaseService.measure_operation("get_availability")
    def get_availability(
        self,
        consultant_id: str,
        day: date,
        duration: Optional[int] = None,
        service_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Free slots of a consultant on ``day``.

        With a service, its duration, weekday flags and time windows apply.
        """
        consultant = self.consultant_repository.get_by_id(consultant_id, load_relationships=False)
        if consultant is None or not consultant.is_bookable:
            raise NotFoundException("Consultant not found or inactive", code="CONSULTANT_NOT_FOUND")

        service = None
        if service_id:
            service = self.service_repository.get_by_id(service_id, load_relationships=False)
            if service is None or not service.is_active:
                raise NotFoundException("Service not found or inactive", code="SERVICE_NOT_FOUND")
            if service.consultant_id != consultant.id:
                raise BusinessRuleException(
                    "Consultant does not offer this service", code="SERVICE_CONSULTANT_MISMATCH"
                )
            duration = service.duration

        return self.conflict_checker.get_available_slots(
            consultant.id,
            day,
            duration or settings.slot_step_minutes,
            service=service,
        )
