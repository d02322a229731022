# backend/app/schemas/booking.py
"""
Booking schemas for SkillBridge.

Consultations and service bookings share these DTOs; the ``type`` field
carries the booking kind. Request bodies use the client-facing names
(``service``, ``consultant``) for the referenced identifiers.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import AliasChoices, Field, field_validator

from ..core.constants import (
    MAX_BOOKING_DURATION,
    MAX_FEEDBACK_LENGTH,
    MAX_NOTES_LENGTH,
    MAX_RATING,
    MAX_REASON_LENGTH,
    MAX_SPECIAL_REQUIREMENTS_LENGTH,
    MAX_TIME_SLOT_LENGTH,
    MIN_BOOKING_DURATION,
    MIN_RATING,
)
from ..core.enums import BookingKind, BookingStatus
from ..core.timezone_utils import ensure_utc
from .base import CamelModel, CamelRequestModel, Money
from .base_responses import ConsultationPagination, ServiceBookingPagination


class BookingCreate(CamelRequestModel):
    """Book a consultant's service at a specific start."""

    service_id: str = Field(..., alias="service", min_length=1, description="Service to book")
    consultant_id: str = Field(
        ..., alias="consultant", min_length=1, description="Consultant providing it"
    )
    scheduled_date: datetime = Field(..., description="Start of the session (ISO-8601)")
    duration: Optional[int] = Field(
        None,
        ge=MIN_BOOKING_DURATION,
        le=MAX_BOOKING_DURATION,
        description="Length in minutes; defaults to the service duration",
    )
    time_slot: str = Field(..., min_length=1, max_length=MAX_TIME_SLOT_LENGTH)
    notes: Optional[str] = Field(None, max_length=MAX_NOTES_LENGTH)
    special_requirements: Optional[str] = Field(None, max_length=MAX_SPECIAL_REQUIREMENTS_LENGTH)
    type: Optional[BookingKind] = Field(None, description="consultation or service-booking")

    @field_validator("scheduled_date")
    @classmethod
    def _normalize_start(cls, v: datetime) -> datetime:
        # Naive input is taken as UTC
        return ensure_utc(v)


class BookingRescheduleRequest(CamelRequestModel):
    scheduled_date: datetime
    time_slot: str = Field(..., min_length=1, max_length=MAX_TIME_SLOT_LENGTH)
    reason: Optional[str] = Field(None, max_length=MAX_REASON_LENGTH)

    @field_validator("scheduled_date")
    @classmethod
    def _normalize_start(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class BookingStatusUpdate(CamelRequestModel):
    """
    Status change request.

    Rescheduling has its own endpoint, so ``rescheduled`` and ``scheduled``
    are rejected here.
    """

    status: BookingStatus
    cancellation_reason: Optional[str] = Field(None, max_length=MAX_REASON_LENGTH)

    @field_validator("status")
    @classmethod
    def _only_update_targets(cls, v: BookingStatus) -> BookingStatus:
        if BookingStatus(v) in (BookingStatus.SCHEDULED, BookingStatus.RESCHEDULED):
            raise ValueError("Status must be one of: confirmed, cancelled, completed, no-show")
        return v


class BookingFeedbackRequest(CamelRequestModel):
    rating: int = Field(..., ge=MIN_RATING, le=MAX_RATING)
    feedback: Optional[str] = Field(None, max_length=MAX_FEEDBACK_LENGTH)


class BookingServiceInfo(CamelModel):
    id: str
    title: str
    price: Money
    duration: int


class BookingConsultantInfo(CamelModel):
    id: str
    name: str
    specialization: Optional[str] = None


class BookingClientInfo(CamelModel):
    id: str
    full_name: str
    email: str


class RescheduleEntry(CamelModel):
    previous_date: datetime
    new_date: datetime
    previous_time_slot: Optional[str] = None
    new_time_slot: Optional[str] = None
    reason: str
    rescheduled_by_id: str
    rescheduled_at: datetime

    @field_validator("previous_date", "new_date", "rescheduled_at")
    @classmethod
    def _as_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class BookingResponse(CamelModel):
    """A consultation or service booking as returned by the API."""

    id: str
    type: str = Field(validation_alias=AliasChoices("kind", "type"))
    status: str
    scheduled_date: datetime = Field(validation_alias=AliasChoices("scheduled_at", "scheduledDate"))
    end_date: datetime = Field(validation_alias=AliasChoices("end_at", "endDate"))
    duration: int = Field(validation_alias=AliasChoices("duration_minutes", "duration"))
    time_slot: str
    amount: Money
    notes: Optional[str] = None
    special_requirements: Optional[str] = None

    service: Optional[BookingServiceInfo] = None
    consultant: Optional[BookingConsultantInfo] = None
    client: Optional[BookingClientInfo] = None

    cancellation_reason: Optional[str] = None
    cancelled_by_id: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    rating: Optional[int] = None
    feedback: Optional[str] = None
    feedback_provided: bool = False
    feedback_at: Optional[datetime] = None

    reschedule_history: List[RescheduleEntry] = Field(
        default_factory=list, validation_alias=AliasChoices("reschedules", "rescheduleHistory")
    )
    created_at: datetime
    updated_at: Optional[datetime] = None

    @field_validator(
        "scheduled_date",
        "end_date",
        "cancelled_at",
        "confirmed_at",
        "completed_at",
        "feedback_at",
        "created_at",
        "updated_at",
    )
    @classmethod
    def _as_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)


class ConsultationListData(CamelModel):
    consultations: List[BookingResponse]
    pagination: ConsultationPagination


class ServiceBookingListData(CamelModel):
    service_bookings: List[BookingResponse]
    pagination: ServiceBookingPagination


class BookedInterval(CamelModel):
    time: str
    duration: int


class AvailabilityResponse(CamelModel):
    date: date
    available_slots: List[str]
    booked_consultations: List[BookedInterval]
