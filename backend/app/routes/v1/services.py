# backend/app/routes/v1/services.py
"""
Marketplace service routes - API v1

Endpoints:
    GET / - Active services with filters and pagination
    GET /consultant/my-services - Caller's services by status (consultant)
    GET /consultant/{consultant_id} - A consultant's active services
    GET /{service_id} - One service
    POST / - Create a service (approved consultant)
    PUT /{service_id} - Update (owner or admin)
    DELETE /{service_id} - Deactivate (owner or admin)
    POST /{service_id}/toggle-active - Flip the active flag (owner or admin)
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Path, Query, status

from ...api.dependencies import get_catalog_service, get_current_user, get_optional_user
from ...core.constants import MAX_BOOKING_DURATION, MIN_BOOKING_DURATION
from ...core.exceptions import DomainException
from ...models.user import User
from ...repositories.listing import ListingParams
from ...schemas.base_responses import ApiResponse, ServicePagination
from ...schemas.service import ServiceCreate, ServiceListData, ServiceResponse, ServiceUpdate
from ...services.catalog_service import CatalogService
from .common import ULID_PATH_PATTERN, handle_domain_exception, priced_listing_params

logger = logging.getLogger(__name__)

router = APIRouter(tags=["services-v1"])


def _service_list(page) -> ServiceListData:
    return ServiceListData(
        services=[ServiceResponse.model_validate(item) for item in page.items],
        pagination=ServicePagination.from_page(page),
    )


@router.get("", response_model=ApiResponse[ServiceListData])
async def list_services(
    category: Optional[str] = Query(None),
    duration: Optional[int] = Query(None, ge=MIN_BOOKING_DURATION, le=MAX_BOOKING_DURATION),
    params: ListingParams = Depends(priced_listing_params),
    catalog_service: CatalogService = Depends(get_catalog_service),
) -> ApiResponse[ServiceListData]:
    try:
        params.filters.update({"category": category, "duration": duration})
        page = await asyncio.to_thread(catalog_service.list_services, params)
        return ApiResponse(data=_service_list(page))
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/consultant/my-services", response_model=ApiResponse[ServiceListData])
async def list_my_services(
    status_filter: str = Query("all", alias="status"),
    params: ListingParams = Depends(priced_listing_params),
    current_user: User = Depends(get_current_user),
    catalog_service: CatalogService = Depends(get_catalog_service),
) -> ApiResponse[ServiceListData]:
    try:
        page = await asyncio.to_thread(
            catalog_service.list_my_services, current_user, status_filter, params
        )
        return ApiResponse(data=_service_list(page))
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/consultant/{consultant_id}", response_model=ApiResponse[ServiceListData])
async def list_consultant_services(
    consultant_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    params: ListingParams = Depends(priced_listing_params),
    catalog_service: CatalogService = Depends(get_catalog_service),
) -> ApiResponse[ServiceListData]:
    try:
        page = await asyncio.to_thread(
            catalog_service.list_consultant_services, consultant_id, params
        )
        return ApiResponse(data=_service_list(page))
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{service_id}", response_model=ApiResponse[ServiceResponse])
async def get_service(
    service_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: Optional[User] = Depends(get_optional_user),
    catalog_service: CatalogService = Depends(get_catalog_service),
) -> ApiResponse[ServiceResponse]:
    try:
        service = await asyncio.to_thread(catalog_service.get_service, service_id, current_user)
        return ApiResponse(data=ServiceResponse.model_validate(service))
    except DomainException as e:
        handle_domain_exception(e)


@router.post("", response_model=ApiResponse[ServiceResponse], status_code=status.HTTP_201_CREATED)
async def create_service(
    service_data: ServiceCreate = Body(...),
    current_user: User = Depends(get_current_user),
    catalog_service: CatalogService = Depends(get_catalog_service),
) -> ApiResponse[ServiceResponse]:
    try:
        service = await asyncio.to_thread(catalog_service.create_service, current_user, service_data)
        return ApiResponse(
            message="Service created successfully", data=ServiceResponse.model_validate(service)
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/{service_id}", response_model=ApiResponse[ServiceResponse])
async def update_service(
    service_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    service_data: ServiceUpdate = Body(...),
    current_user: User = Depends(get_current_user),
    catalog_service: CatalogService = Depends(get_catalog_service),
) -> ApiResponse[ServiceResponse]:
    try:
        service = await asyncio.to_thread(
            catalog_service.update_service, current_user, service_id, service_data
        )
        return ApiResponse(
            message="Service updated successfully", data=ServiceResponse.model_validate(service)
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.delete("/{service_id}", response_model=ApiResponse[ServiceResponse])
async def delete_service(
    service_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: User = Depends(get_current_user),
    catalog_service: CatalogService = Depends(get_catalog_service),
) -> ApiResponse[ServiceResponse]:
    """Soft delete; existing bookings keep their service."""
    try:
        service = await asyncio.to_thread(catalog_service.delete_service, current_user, service_id)
        return ApiResponse(
            message="Service deleted successfully", data=ServiceResponse.model_validate(service)
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/{service_id}/toggle-active", response_model=ApiResponse[ServiceResponse])
async def toggle_service_active(
    service_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: User = Depends(get_current_user),
    catalog_service: CatalogService = Depends(get_catalog_service),
) -> ApiResponse[ServiceResponse]:
    try:
        service = await asyncio.to_thread(catalog_service.toggle_active, current_user, service_id)
        state = "activated" if service.is_active else "deactivated"
        return ApiResponse(
            message=f"Service {state} successfully", data=ServiceResponse.model_validate(service)
        )
    except DomainException as e:
        handle_domain_exception(e)
