# backend/app/routes/v1/consultants.py
"""
Consultant routes - API v1

Endpoints:
    GET / - Approved, active consultants
    POST /apply - Submit a consultant application
    GET /me - Caller's consultant profile
    GET /{consultant_id} - One approved consultant
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Path, Query, status

from ...api.dependencies import get_consultant_service, get_current_user
from ...core.exceptions import DomainException
from ...models.user import User
from ...repositories.listing import ListingParams
from ...schemas.base_responses import ApiResponse, ConsultantPagination
from ...schemas.consultant import ConsultantApplication, ConsultantListData, ConsultantResponse
from ...services.consultant_service import ConsultantService
from .common import ULID_PATH_PATTERN, handle_domain_exception, listing_params

logger = logging.getLogger(__name__)

router = APIRouter(tags=["consultants-v1"])


@router.get("", response_model=ApiResponse[ConsultantListData])
async def list_consultants(
    specialization: Optional[str] = Query(None, max_length=100),
    params: ListingParams = Depends(listing_params),
    consultant_service: ConsultantService = Depends(get_consultant_service),
) -> ApiResponse[ConsultantListData]:
    try:
        params.filters["specialization"] = specialization
        page = await asyncio.to_thread(consultant_service.list_consultants, params)
        return ApiResponse(
            data=ConsultantListData(
                consultants=[ConsultantResponse.model_validate(item) for item in page.items],
                pagination=ConsultantPagination.from_page(page),
            )
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.post(
    "/apply",
    response_model=ApiResponse[ConsultantResponse],
    status_code=status.HTTP_201_CREATED,
)
async def apply_as_consultant(
    application: ConsultantApplication = Body(...),
    current_user: User = Depends(get_current_user),
    consultant_service: ConsultantService = Depends(get_consultant_service),
) -> ApiResponse[ConsultantResponse]:
    try:
        profile = await asyncio.to_thread(consultant_service.apply, current_user, application)
        return ApiResponse(
            message="Consultant application submitted successfully",
            data=ConsultantResponse.model_validate(profile),
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/me", response_model=ApiResponse[ConsultantResponse])
async def get_my_consultant_profile(
    current_user: User = Depends(get_current_user),
    consultant_service: ConsultantService = Depends(get_consultant_service),
) -> ApiResponse[ConsultantResponse]:
    try:
        profile = await asyncio.to_thread(consultant_service.get_my_profile, current_user)
        return ApiResponse(data=ConsultantResponse.model_validate(profile))
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{consultant_id}", response_model=ApiResponse[ConsultantResponse])
async def get_consultant(
    consultant_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    consultant_service: ConsultantService = Depends(get_consultant_service),
) -> ApiResponse[ConsultantResponse]:
    try:
        profile = await asyncio.to_thread(consultant_service.get_consultant, consultant_id)
        return ApiResponse(data=ConsultantResponse.model_validate(profile))
    except DomainException as e:
        handle_domain_exception(e)
