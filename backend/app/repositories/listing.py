# backend/app/repositories/listing.py
"""
Listing/filter query builder.

Translates catalogue-style query-string options into a SQLAlchemy query:
equality filters, an inclusive price range, case-insensitive substring
search over a few text columns, a single sort column with direction, and
offset pagination with the total taken from a separate count query.
"""

from dataclasses import dataclass, field
import logging
import math
from typing import Any, Dict, Generic, List, Mapping, Optional, Sequence, TypeVar

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query

from ..core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ..core.enums import SortOrder
from ..core.exceptions import RepositoryException, ValidationException

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass
class ListingParams:
    """Caller-supplied listing options, already parsed from the query string."""

    filters: Dict[str, Any] = field(default_factory=dict)
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    search: Optional[str] = None
    page: int = DEFAULT_PAGE
    limit: Optional[int] = None
    sort_by: Optional[str] = None
    sort_order: Optional[SortOrder] = None


@dataclass
class Page(Generic[T]):
    items: List[T]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so user input matches literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ListingQueryBuilder(Generic[T]):
    """
    Per-entity listing configuration.

    Args:
        model: Mapped class being listed
        filterable: query key -> mapped column for equality filters
        search_columns: text columns searched with ILIKE
        sortable: public sort key (camelCase, as clients send it) -> column
        default_sort: key into ``sortable`` used when none is given
        default_order: direction used when none is given
        default_limit: page size used when none is given
        price_column: column for min/max price, if the entity has one
    """

    def __init__(
        self,
        model: Any,
        *,
        filterable: Optional[Mapping[str, Any]] = None,
        search_columns: Sequence[Any] = (),
        sortable: Mapping[str, Any],
        default_sort: str,
        default_order: SortOrder = SortOrder.DESC,
        default_limit: int = DEFAULT_PAGE_SIZE,
        price_column: Any = None,
    ) -> None:
        if default_sort not in sortable:
            raise ValueError(f"default_sort {default_sort!r} is not sortable")
        self.model = model
        self.filterable = dict(filterable or {})
        self.search_columns = tuple(search_columns)
        self.sortable = dict(sortable)
        self.default_sort = default_sort
        self.default_order = default_order
        self.default_limit = default_limit
        self.price_column = price_column

    def apply_filters(self, query: Query, params: ListingParams) -> Query:
        for key, value in params.filters.items():
            if value is None:
                continue
            column = self.filterable.get(key)
            if column is None:
                raise ValueError(f"{key!r} is not a filterable field for {self.model.__name__}")
            query = query.filter(column == getattr(value, "value", value))

        if self.price_column is not None:
            if params.min_price is not None:
                query = query.filter(self.price_column >= params.min_price)
            if params.max_price is not None:
                query = query.filter(self.price_column <= params.max_price)

        term = (params.search or "").strip()
        if term and self.search_columns:
            pattern = f"%{escape_like(term)}%"
            query = query.filter(
                or_(*(column.ilike(pattern, escape="\\") for column in self.search_columns))
            )
        return query

    def apply_sort(self, query: Query, params: ListingParams) -> Query:
        sort_key = params.sort_by or self.default_sort
        column = self.sortable.get(sort_key)
        if column is None:
            raise ValidationException(
                f"Invalid sort field: {sort_key}",
                code="INVALID_SORT_FIELD",
                details={"allowed": sorted(self.sortable)},
                field="sortBy",
            )
        order = SortOrder(params.sort_order or self.default_order)
        primary = column.asc() if order is SortOrder.ASC else column.desc()
        # Tie-break on id so pages never overlap
        return query.order_by(primary, self.model.id.asc())

    def resolve_limit(self, params: ListingParams) -> int:
        limit = params.limit or self.default_limit
        return max(1, min(limit, MAX_PAGE_SIZE))

    def paginate(self, query: Query, params: ListingParams) -> Page[T]:
        """Filter, count, sort and slice ``query`` into one page."""
        if params.min_price is not None and params.max_price is not None:
            if params.min_price > params.max_price:
                raise ValidationException(
                    "minPrice cannot be greater than maxPrice",
                    code="INVALID_PRICE_RANGE",
                    field="minPrice",
                )

        page = max(params.page or DEFAULT_PAGE, 1)
        limit = self.resolve_limit(params)

        filtered = self.apply_filters(query, params)
        ordered = self.apply_sort(filtered, params)
        try:
            total = filtered.order_by(None).count()
            items = (
                ordered.offset((page - 1) * limit)
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Listing query failed for {self.model.__name__}: {str(e)}")
            raise RepositoryException(f"Failed to list {self.model.__name__}: {str(e)}")

        return Page(items=items, total=total, page=page, limit=limit)
