# backend/app/routes/v1/categories.py
"""
Category routes - API v1

Endpoints:
    GET / - Active categories, optionally by type (admins may include inactive)
    GET /{category_id} - One category
    POST / - Create (admin)
    PUT /{category_id} - Update (admin)
    DELETE /{category_id} - Deactivate (admin)
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Path, Query, status

from ...api.dependencies import get_category_service, get_optional_user, require_admin
from ...core.enums import CategoryType
from ...core.exceptions import DomainException
from ...models.user import User
from ...schemas.base_responses import ApiResponse
from ...schemas.category import (
    CategoryCreate,
    CategoryListData,
    CategoryResponse,
    CategoryUpdate,
)
from ...services.category_service import CategoryService
from .common import ULID_PATH_PATTERN, handle_domain_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["categories-v1"])


@router.get("", response_model=ApiResponse[CategoryListData])
async def list_categories(
    category_type: Optional[CategoryType] = Query(None, alias="type"),
    include_inactive: bool = Query(False, alias="includeInactive"),
    current_user: Optional[User] = Depends(get_optional_user),
    category_service: CategoryService = Depends(get_category_service),
) -> ApiResponse[CategoryListData]:
    try:
        show_inactive = include_inactive and current_user is not None and current_user.is_admin
        categories = await asyncio.to_thread(
            category_service.list_categories,
            category_type.value if category_type else None,
            show_inactive,
        )
        return ApiResponse(
            data=CategoryListData(
                categories=[CategoryResponse.model_validate(item) for item in categories]
            )
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{category_id}", response_model=ApiResponse[CategoryResponse])
async def get_category(
    category_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    category_service: CategoryService = Depends(get_category_service),
) -> ApiResponse[CategoryResponse]:
    try:
        category = await asyncio.to_thread(category_service.get_category, category_id)
        return ApiResponse(data=CategoryResponse.model_validate(category))
    except DomainException as e:
        handle_domain_exception(e)


@router.post(
    "",
    response_model=ApiResponse[CategoryResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_category(
    category_data: CategoryCreate = Body(...),
    category_service: CategoryService = Depends(get_category_service),
) -> ApiResponse[CategoryResponse]:
    try:
        category = await asyncio.to_thread(category_service.create_category, category_data)
        return ApiResponse(
            message="Category created successfully",
            data=CategoryResponse.model_validate(category),
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.put(
    "/{category_id}",
    response_model=ApiResponse[CategoryResponse],
    dependencies=[Depends(require_admin)],
)
async def update_category(
    category_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    category_data: CategoryUpdate = Body(...),
    category_service: CategoryService = Depends(get_category_service),
) -> ApiResponse[CategoryResponse]:
    try:
        category = await asyncio.to_thread(
            category_service.update_category, category_id, category_data
        )
        return ApiResponse(
            message="Category updated successfully",
            data=CategoryResponse.model_validate(category),
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.delete(
    "/{category_id}",
    response_model=ApiResponse[CategoryResponse],
    dependencies=[Depends(require_admin)],
)
async def delete_category(
    category_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    category_service: CategoryService = Depends(get_category_service),
) -> ApiResponse[CategoryResponse]:
    try:
        category = await asyncio.to_thread(category_service.delete_category, category_id)
        return ApiResponse(
            message="Category deleted successfully",
            data=CategoryResponse.model_validate(category),
        )
    except DomainException as e:
        handle_domain_exception(e)
