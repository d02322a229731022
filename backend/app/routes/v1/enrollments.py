# backend/app/routes/v1/enrollments.py
"""
Enrollment routes - API v1

Endpoints:
    GET / - Caller's enrollments (admins see their own too)
    GET /{enrollment_id} - One enrollment (owner or admin)
    PUT /{enrollment_id}/progress - Mark a lesson completed
    PUT /{enrollment_id}/status - Pause, resume, cancel (admins: any legal change)
    POST /{enrollment_id}/rating - Rate the course once
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Path, Query

from ...api.dependencies import get_current_user, get_enrollment_service
from ...core.enums import EnrollmentStatus
from ...core.exceptions import DomainException
from ...models.user import User
from ...repositories.listing import ListingParams
from ...schemas.base_responses import ApiResponse, EnrollmentPagination
from ...schemas.enrollment import (
    EnrollmentListData,
    EnrollmentProgressUpdate,
    EnrollmentRatingRequest,
    EnrollmentResponse,
    EnrollmentStatusUpdate,
)
from ...services.enrollment_service import EnrollmentService
from .common import ULID_PATH_PATTERN, handle_domain_exception, listing_params

logger = logging.getLogger(__name__)

router = APIRouter(tags=["enrollments-v1"])


@router.get("", response_model=ApiResponse[EnrollmentListData])
async def list_enrollments(
    status_filter: Optional[EnrollmentStatus] = Query(None, alias="status"),
    params: ListingParams = Depends(listing_params),
    current_user: User = Depends(get_current_user),
    enrollment_service: EnrollmentService = Depends(get_enrollment_service),
) -> ApiResponse[EnrollmentListData]:
    try:
        params.filters["status"] = status_filter
        page = await asyncio.to_thread(enrollment_service.list_enrollments, current_user, params)
        return ApiResponse(
            data=EnrollmentListData(
                enrollments=[EnrollmentResponse.model_validate(item) for item in page.items],
                pagination=EnrollmentPagination.from_page(page),
            )
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{enrollment_id}", response_model=ApiResponse[EnrollmentResponse])
async def get_enrollment(
    enrollment_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: User = Depends(get_current_user),
    enrollment_service: EnrollmentService = Depends(get_enrollment_service),
) -> ApiResponse[EnrollmentResponse]:
    try:
        enrollment = await asyncio.to_thread(
            enrollment_service.get_enrollment, current_user, enrollment_id
        )
        return ApiResponse(data=EnrollmentResponse.model_validate(enrollment))
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/{enrollment_id}/progress", response_model=ApiResponse[EnrollmentResponse])
async def update_progress(
    enrollment_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    progress_data: EnrollmentProgressUpdate = Body(...),
    current_user: User = Depends(get_current_user),
    enrollment_service: EnrollmentService = Depends(get_enrollment_service),
) -> ApiResponse[EnrollmentResponse]:
    try:
        enrollment = await asyncio.to_thread(
            enrollment_service.update_progress, current_user, enrollment_id, progress_data
        )
        message = (
            "Course completed"
            if enrollment.status == EnrollmentStatus.COMPLETED.value
            else "Progress updated successfully"
        )
        return ApiResponse(message=message, data=EnrollmentResponse.model_validate(enrollment))
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/{enrollment_id}/status", response_model=ApiResponse[EnrollmentResponse])
async def update_enrollment_status(
    enrollment_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    status_data: EnrollmentStatusUpdate = Body(...),
    current_user: User = Depends(get_current_user),
    enrollment_service: EnrollmentService = Depends(get_enrollment_service),
) -> ApiResponse[EnrollmentResponse]:
    try:
        enrollment = await asyncio.to_thread(
            enrollment_service.change_status,
            current_user,
            enrollment_id,
            EnrollmentStatus(status_data.status),
        )
        return ApiResponse(
            message=f"Enrollment {enrollment.status} successfully",
            data=EnrollmentResponse.model_validate(enrollment),
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/{enrollment_id}/rating", response_model=ApiResponse[EnrollmentResponse])
async def rate_course(
    enrollment_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    rating_data: EnrollmentRatingRequest = Body(...),
    current_user: User = Depends(get_current_user),
    enrollment_service: EnrollmentService = Depends(get_enrollment_service),
) -> ApiResponse[EnrollmentResponse]:
    try:
        enrollment = await asyncio.to_thread(
            enrollment_service.rate,
            current_user,
            enrollment_id,
            rating_data.score,
            rating_data.review,
        )
        return ApiResponse(
            message="Course rated successfully",
            data=EnrollmentResponse.model_validate(enrollment),
        )
    except DomainException as e:
        handle_domain_exception(e)
