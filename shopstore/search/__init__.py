"""
Search module for the product catalog.

Provides the pure query engine and the reactive view built on it.
"""

from .catalog_view import CatalogView
from .query_engine import (
    ALL,
    DEFAULT_PAGE_SIZE,
    QueryCriteria,
    QueryResult,
    SortOrder,
    clamp_page,
    count_pages,
    parse_price,
    run_query,
)

__all__ = [
    "ALL",
    "DEFAULT_PAGE_SIZE",
    "CatalogView",
    "QueryCriteria",
    "QueryResult",
    "SortOrder",
    "clamp_page",
    "count_pages",
    "parse_price",
    "run_query",
]
