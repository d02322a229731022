# backend/app/routes/v1/bookings.py
"""
Booking routes - API v1

Consultations and service bookings share one lifecycle, so both routers
are built by ``build_booking_router``; the kind only changes labels,
the list key and the listing filter. All business logic is delegated to
BookingService.

Endpoints (per kind):
    GET /consultant/availability - Free slots for a consultant on a day
    GET / - Caller's bookings with filters and pagination
    POST / - Book a session
    GET /{booking_id} - One booking (participant or admin)
    PUT /{booking_id}/reschedule - Move a booking
    PUT /{booking_id}/status - Confirm, cancel, complete or mark no-show
    POST /{booking_id}/feedback - Client rating after completion
"""

import asyncio
from datetime import date
import logging
from typing import Optional, Type

from fastapi import APIRouter, Body, Depends, Path, Query, status

from ...api.dependencies import get_booking_service, get_current_user
from ...core.constants import MAX_BOOKING_DURATION, MIN_BOOKING_DURATION
from ...core.enums import BookingKind, BookingStatus
from ...core.exceptions import DomainException
from ...models.user import User
from ...repositories.listing import ListingParams
from ...schemas.base import CamelModel
from ...schemas.base_responses import (
    ApiResponse,
    ConsultationPagination,
    PaginationMeta,
    ServiceBookingPagination,
)
from ...schemas.booking import (
    AvailabilityResponse,
    BookingCreate,
    BookingFeedbackRequest,
    BookingRescheduleRequest,
    BookingResponse,
    BookingStatusUpdate,
    ConsultationListData,
    ServiceBookingListData,
)
from ...services.booking_service import BookingService
from .common import ULID_PATH_PATTERN, handle_domain_exception, listing_params

logger = logging.getLogger(__name__)


def build_booking_router(
    kind: Optional[BookingKind],
    *,
    list_model: Type[CamelModel],
    list_key: str,
    pagination_model: Type[PaginationMeta],
    tag: str,
) -> APIRouter:
    """
    Build the booking router for one kind.

    ``kind=None`` serves both kinds, narrowed by the ``type`` query
    parameter on the list endpoint.
    """
    router = APIRouter(tags=[tag])

    # Static paths first so they are not captured by /{booking_id}

    @router.get(
        "/consultant/availability",
        response_model=ApiResponse[AvailabilityResponse],
    )
    async def get_consultant_availability(
        consultant_id: str = Query(..., alias="consultantId"),
        day: date = Query(..., alias="date"),
        duration: Optional[int] = Query(None, ge=MIN_BOOKING_DURATION, le=MAX_BOOKING_DURATION),
        service_id: Optional[str] = Query(None, alias="serviceId"),
        current_user: User = Depends(get_current_user),
        booking_service: BookingService = Depends(get_booking_service),
    ) -> ApiResponse[AvailabilityResponse]:
        """Free start times for a consultant on one day."""
        try:
            result = await asyncio.to_thread(
                booking_service.get_availability, consultant_id, day, duration, service_id
            )
            return ApiResponse(data=AvailabilityResponse.model_validate(result))
        except DomainException as e:
            handle_domain_exception(e)

    @router.get("", response_model=ApiResponse[list_model])  # type: ignore[valid-type]
    async def list_bookings(
        status_filter: Optional[BookingStatus] = Query(None, alias="status"),
        type_filter: Optional[BookingKind] = Query(None, alias="type"),
        params: ListingParams = Depends(listing_params),
        current_user: User = Depends(get_current_user),
        booking_service: BookingService = Depends(get_booking_service),
    ) -> ApiResponse:
        """Bookings the caller made or, as a consultant, provides."""
        try:
            params.filters["status"] = status_filter
            if kind is None:
                params.filters["type"] = type_filter
            page = await asyncio.to_thread(booking_service.list_bookings, current_user, params, kind)
            data = list_model.model_validate(
                {
                    list_key: [BookingResponse.model_validate(item) for item in page.items],
                    "pagination": pagination_model.from_page(page),
                }
            )
            return ApiResponse(data=data)
        except DomainException as e:
            handle_domain_exception(e)

    @router.post(
        "",
        response_model=ApiResponse[BookingResponse],
        status_code=status.HTTP_201_CREATED,
    )
    async def create_booking(
        booking_data: BookingCreate = Body(...),
        current_user: User = Depends(get_current_user),
        booking_service: BookingService = Depends(get_booking_service),
    ) -> ApiResponse[BookingResponse]:
        """
        Book a session with a consultant.

        Rejected with 409 when the interval overlaps a live booking.
        """
        try:
            booking = await asyncio.to_thread(
                booking_service.create_booking, current_user, booking_data, kind
            )
            return ApiResponse(
                message=f"{BookingKind(booking.kind).label} booked successfully",
                data=BookingResponse.model_validate(booking),
            )
        except DomainException as e:
            handle_domain_exception(e)

    @router.get("/{booking_id}", response_model=ApiResponse[BookingResponse])
    async def get_booking(
        booking_id: str = Path(..., pattern=ULID_PATH_PATTERN),
        current_user: User = Depends(get_current_user),
        booking_service: BookingService = Depends(get_booking_service),
    ) -> ApiResponse[BookingResponse]:
        try:
            booking = await asyncio.to_thread(
                booking_service.get_booking, current_user, booking_id, kind
            )
            return ApiResponse(data=BookingResponse.model_validate(booking))
        except DomainException as e:
            handle_domain_exception(e)

    @router.put("/{booking_id}/reschedule", response_model=ApiResponse[BookingResponse])
    async def reschedule_booking(
        booking_id: str = Path(..., pattern=ULID_PATH_PATTERN),
        reschedule_data: BookingRescheduleRequest = Body(...),
        current_user: User = Depends(get_current_user),
        booking_service: BookingService = Depends(get_booking_service),
    ) -> ApiResponse[BookingResponse]:
        try:
            booking = await asyncio.to_thread(
                booking_service.reschedule_booking, current_user, booking_id, reschedule_data, kind
            )
            return ApiResponse(
                message=f"{BookingKind(booking.kind).label} rescheduled successfully",
                data=BookingResponse.model_validate(booking),
            )
        except DomainException as e:
            handle_domain_exception(e)

    @router.put("/{booking_id}/status", response_model=ApiResponse[BookingResponse])
    async def update_booking_status(
        booking_id: str = Path(..., pattern=ULID_PATH_PATTERN),
        status_data: BookingStatusUpdate = Body(...),
        current_user: User = Depends(get_current_user),
        booking_service: BookingService = Depends(get_booking_service),
    ) -> ApiResponse[BookingResponse]:
        try:
            booking = await asyncio.to_thread(
                booking_service.update_status, current_user, booking_id, status_data, kind
            )
            return ApiResponse(
                message=f"{BookingKind(booking.kind).label} {booking.status} successfully",
                data=BookingResponse.model_validate(booking),
            )
        except DomainException as e:
            handle_domain_exception(e)

    @router.post("/{booking_id}/feedback", response_model=ApiResponse[BookingResponse])
    async def submit_feedback(
        booking_id: str = Path(..., pattern=ULID_PATH_PATTERN),
        feedback_data: BookingFeedbackRequest = Body(...),
        current_user: User = Depends(get_current_user),
        booking_service: BookingService = Depends(get_booking_service),
    ) -> ApiResponse[BookingResponse]:
        try:
            booking = await asyncio.to_thread(
                booking_service.submit_feedback,
                current_user,
                booking_id,
                feedback_data.rating,
                feedback_data.feedback,
                kind,
            )
            return ApiResponse(
                message="Feedback submitted successfully",
                data=BookingResponse.model_validate(booking),
            )
        except DomainException as e:
            handle_domain_exception(e)

    return router


consultations_router = build_booking_router(
    None,
    list_model=ConsultationListData,
    list_key="consultations",
    pagination_model=ConsultationPagination,
    tag="consultations-v1",
)

service_bookings_router = build_booking_router(
    BookingKind.SERVICE_BOOKING,
    list_model=ServiceBookingListData,
    list_key="service_bookings",
    pagination_model=ServiceBookingPagination,
    tag="service-bookings-v1",
)
