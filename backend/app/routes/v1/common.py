# backend/app/routes/v1/common.py
"""
Helpers shared by the v1 routers: domain error conversion and the common
listing query parameters.
"""

from typing import NoReturn, Optional

from fastapi import HTTPException, Query, status

from ...core.constants import DEFAULT_PAGE, MAX_PAGE_SIZE
from ...core.enums import SortOrder
from ...core.exceptions import DomainException
from ...repositories.listing import ListingParams

ULID_PATH_PATTERN = r"^[0-9A-HJKMNP-TV-Z]{26}$"


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


def listing_params(
    page: int = Query(DEFAULT_PAGE, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=MAX_PAGE_SIZE),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[SortOrder] = Query(None, alias="sortOrder"),
    search: Optional[str] = Query(None, max_length=100),
) -> ListingParams:
    """Page, page size, sort and search shared by every list endpoint."""
    return ListingParams(
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
        search=search.strip() if search and search.strip() else None,
    )


def priced_listing_params(
    page: int = Query(DEFAULT_PAGE, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=MAX_PAGE_SIZE),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[SortOrder] = Query(None, alias="sortOrder"),
    search: Optional[str] = Query(None, max_length=100),
    min_price: Optional[float] = Query(None, ge=0, alias="minPrice"),
    max_price: Optional[float] = Query(None, ge=0, alias="maxPrice"),
) -> ListingParams:
    """``listing_params`` plus the inclusive price range used by the catalogues."""
    params = listing_params(page, limit, sort_by, sort_order, search)
    params.min_price = min_price
    params.max_price = max_price
    return params
