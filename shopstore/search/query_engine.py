"""
Catalog query engine.

Pure derivation of a result page from a product snapshot and caller
criteria: filter, then sort, then paginate. Nothing here holds state,
so identical inputs always produce identical pages.
"""

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, List, Optional, Sequence, Union

from ..domain.entities import Product

ALL = "all"
DEFAULT_PAGE_SIZE = 20

PriceInput = Union[str, int, float, None]


class SortOrder(str, Enum):
    """Supported sort keys."""

    RATING_HIGH = "rating-high"
    RATING_LOW = "rating-low"


@dataclass(frozen=True)
class QueryCriteria:
    """
    Filter, sort and page parameters supplied by the caller.

    Category, brand and status use the ``"all"`` sentinel for "no filter";
    search and the price bounds use the empty string. Price bounds may be
    given as raw form strings.
    """

    search: str = ""
    category: str = ALL
    brand: str = ALL
    status: str = ALL
    min_price: PriceInput = ""
    max_price: PriceInput = ""
    sort: str = SortOrder.RATING_HIGH.value
    page: int = 1

    def with_changes(self, **changes: Any) -> "QueryCriteria":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)


@dataclass(frozen=True)
class QueryResult:
    """
    One materialized page of the catalog.

    An empty ``items`` list with ``filtered_count > 0`` means the requested
    page is out of range, not that nothing matched.
    """

    items: List[Product] = field(default_factory=list)
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    filtered_count: int = 0
    total_count: int = 0
    total_pages: int = 1

    @property
    def has_results(self) -> bool:
        """Check if any product matched the filters."""
        return self.filtered_count > 0

    @property
    def is_empty_page(self) -> bool:
        """Check if this page holds no items."""
        return not self.items


def parse_price(value: PriceInput) -> Optional[float]:
    """
    Parse a price criterion.

    Args:
        value: Raw criterion (form string or number)

    Returns:
        Finite float, or None when the criterion is empty or unparseable
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    return parsed if math.isfinite(parsed) else None


def _is_active(value: Optional[str]) -> bool:
    return bool(value) and value != ALL


def filter_products(
    products: Sequence[Product], criteria: QueryCriteria
) -> List[Product]:
    """
    Apply every active predicate as a logical AND.

    Filtering never reorders: the output keeps the snapshot's order.

    Args:
        products: Snapshot in natural order
        criteria: Caller criteria

    Returns:
        Matching products
    """
    filtered = list(products)

    if criteria.search:
        needle = criteria.search.lower()
        filtered = [p for p in filtered if needle in p.name.lower()]

    if _is_active(criteria.category):
        filtered = [p for p in filtered if p.category == criteria.category]

    if _is_active(criteria.brand):
        filtered = [p for p in filtered if p.brand == criteria.brand]

    if _is_active(criteria.status):
        filtered = [p for p in filtered if p.status.value == criteria.status]

    min_price = parse_price(criteria.min_price)
    if min_price is not None:
        filtered = [p for p in filtered if p.price >= min_price]

    max_price = parse_price(criteria.max_price)
    if max_price is not None:
        filtered = [p for p in filtered if p.price <= max_price]

    return filtered


def sort_products(products: Sequence[Product], sort: str) -> List[Product]:
    """
    Sort by rating.

    ``sorted`` is stable in both directions, so products with equal
    ratings keep their natural order. Unknown sort keys leave the order
    untouched.

    Args:
        products: Filtered products in natural order
        sort: Sort key

    Returns:
        Sorted copy
    """
    if sort == SortOrder.RATING_HIGH.value:
        return sorted(products, key=lambda p: p.rating, reverse=True)
    if sort == SortOrder.RATING_LOW.value:
        return sorted(products, key=lambda p: p.rating)
    return list(products)


def count_pages(filtered_count: int, page_size: int = DEFAULT_PAGE_SIZE) -> int:
    """Number of pages, never less than one."""
    return max(1, math.ceil(filtered_count / page_size))


def clamp_page(page: int, total_pages: int) -> int:
    """
    Clamp a requested page into ``[1, total_pages]``.

    The engine does not clamp; this is for callers driving navigation.
    """
    return min(max(1, page), max(1, total_pages))


def run_query(
    products: Sequence[Product],
    criteria: QueryCriteria,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> QueryResult:
    """
    Compute one page of the catalog.

    Args:
        products: Repository snapshot in natural order
        criteria: Caller criteria
        page_size: Items per page

    Returns:
        QueryResult for ``criteria.page``; an out-of-range page yields
        an empty ``items`` list
    """
    if page_size < 1:
        raise ValueError("page_size must be at least 1")

    ordered = sort_products(filter_products(products, criteria), criteria.sort)

    page = criteria.page
    if isinstance(page, int) and not isinstance(page, bool) and page >= 1:
        start = (page - 1) * page_size
        items = ordered[start : start + page_size]
    else:
        items = []

    return QueryResult(
        items=items,
        page=page,
        page_size=page_size,
        filtered_count=len(ordered),
        total_count=len(products),
        total_pages=count_pages(len(ordered), page_size),
    )
