# backend/app/routes/v1/partners.py
"""
Partner routes - API v1

Endpoints:
    GET / - Active partners (admins may include inactive)
    GET /{partner_id} - One partner
    POST / - Create (admin)
    PUT /{partner_id} - Update (admin)
    DELETE /{partner_id} - Deactivate (admin)
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Path, Query, status

from ...api.dependencies import get_optional_user, get_partner_service, require_admin
from ...core.enums import PartnershipLevel, PartnerType
from ...core.exceptions import DomainException
from ...models.user import User
from ...repositories.listing import ListingParams
from ...schemas.base_responses import ApiResponse, PartnerPagination
from ...schemas.partner import PartnerCreate, PartnerListData, PartnerResponse, PartnerUpdate
from ...services.partner_service import PartnerService
from .common import ULID_PATH_PATTERN, handle_domain_exception, listing_params

logger = logging.getLogger(__name__)

router = APIRouter(tags=["partners-v1"])


def _is_admin(user: Optional[User]) -> bool:
    return user is not None and user.is_admin


@router.get("", response_model=ApiResponse[PartnerListData])
async def list_partners(
    partner_type: Optional[PartnerType] = Query(None, alias="type"),
    level: Optional[PartnershipLevel] = Query(None),
    include_inactive: bool = Query(False, alias="includeInactive"),
    params: ListingParams = Depends(listing_params),
    current_user: Optional[User] = Depends(get_optional_user),
    partner_service: PartnerService = Depends(get_partner_service),
) -> ApiResponse[PartnerListData]:
    try:
        params.filters.update({"type": partner_type, "level": level})
        page = await asyncio.to_thread(
            partner_service.list_partners, params, include_inactive and _is_admin(current_user)
        )
        return ApiResponse(
            data=PartnerListData(
                partners=[PartnerResponse.model_validate(item) for item in page.items],
                pagination=PartnerPagination.from_page(page),
            )
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{partner_id}", response_model=ApiResponse[PartnerResponse])
async def get_partner(
    partner_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: Optional[User] = Depends(get_optional_user),
    partner_service: PartnerService = Depends(get_partner_service),
) -> ApiResponse[PartnerResponse]:
    try:
        partner = await asyncio.to_thread(
            partner_service.get_partner, partner_id, _is_admin(current_user)
        )
        return ApiResponse(data=PartnerResponse.model_validate(partner))
    except DomainException as e:
        handle_domain_exception(e)


@router.post(
    "",
    response_model=ApiResponse[PartnerResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_partner(
    partner_data: PartnerCreate = Body(...),
    partner_service: PartnerService = Depends(get_partner_service),
) -> ApiResponse[PartnerResponse]:
    try:
        partner = await asyncio.to_thread(partner_service.create_partner, partner_data)
        return ApiResponse(
            message="Partner created successfully", data=PartnerResponse.model_validate(partner)
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.put(
    "/{partner_id}",
    response_model=ApiResponse[PartnerResponse],
    dependencies=[Depends(require_admin)],
)
async def update_partner(
    partner_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    partner_data: PartnerUpdate = Body(...),
    partner_service: PartnerService = Depends(get_partner_service),
) -> ApiResponse[PartnerResponse]:
    try:
        partner = await asyncio.to_thread(partner_service.update_partner, partner_id, partner_data)
        return ApiResponse(
            message="Partner updated successfully", data=PartnerResponse.model_validate(partner)
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.delete(
    "/{partner_id}",
    response_model=ApiResponse[PartnerResponse],
    dependencies=[Depends(require_admin)],
)
async def delete_partner(
    partner_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    partner_service: PartnerService = Depends(get_partner_service),
) -> ApiResponse[PartnerResponse]:
    try:
        partner = await asyncio.to_thread(partner_service.delete_partner, partner_id)
        return ApiResponse(
            message="Partner deleted successfully", data=PartnerResponse.model_validate(partner)
        )
    except DomainException as e:
        handle_domain_exception(e)
