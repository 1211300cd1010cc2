"""
Reactive catalog view.

Binds a set of criteria to a repository and keeps the derived page
current: the page is recomputed lazily after either the repository or
the criteria change, and served from memory otherwise.
"""

import threading
from typing import Any, List, Optional

from ..events import Subscription
from ..logging_config import get_logger
from ..repositories.product_repository import ProductRepository
from .query_engine import (
    DEFAULT_PAGE_SIZE,
    QueryCriteria,
    QueryResult,
    clamp_page,
    run_query,
)

logger = get_logger(__name__)


class CatalogView:
    """
    Memoized query over a live repository.

    Attributes:
        repository: Product source
        page_size: Items per page
        recomputations: Number of times the page has been derived
    """

    def __init__(
        self,
        repository: ProductRepository,
        criteria: Optional[QueryCriteria] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        self.repository = repository
        self.page_size = page_size
        self.recomputations = 0

        self._criteria = criteria or QueryCriteria()
        self._result: Optional[QueryResult] = None
        self._lock = threading.Lock()
        self._subscription: Optional[Subscription] = repository.subscribe(
            self._on_catalog_changed
        )

    @property
    def criteria(self) -> QueryCriteria:
        """Current criteria."""
        return self._criteria

    @property
    def result(self) -> QueryResult:
        """Current page, recomputed only when an input has changed."""
        with self._lock:
            if self._result is None:
                self._result = run_query(
                    self.repository.list(), self._criteria, self.page_size
                )
                self.recomputations += 1
                logger.debug(
                    "catalog_page_computed",
                    page=self._result.page,
                    filtered=self._result.filtered_count,
                    total=self._result.total_count,
                )
            return self._result

    def update(self, **changes: Any) -> QueryResult:
        """
        Change one or more criteria fields.

        Args:
            **changes: QueryCriteria fields to replace

        Returns:
            The recomputed page
        """
        new_criteria = self._criteria.with_changes(**changes)
        if new_criteria != self._criteria:
            with self._lock:
                self._criteria = new_criteria
                self._result = None
        return self.result

    def go_to_page(self, page: int) -> QueryResult:
        """
        Navigate to a page, clamped into the valid range.

        Args:
            page: Requested page number

        Returns:
            The page actually shown
        """
        return self.update(page=clamp_page(page, self.result.total_pages))

    def next_page(self) -> QueryResult:
        """Advance one page, stopping at the last."""
        return self.go_to_page(self._criteria.page + 1)

    def previous_page(self) -> QueryResult:
        """Go back one page, stopping at the first."""
        return self.go_to_page(self._criteria.page - 1)

    def categories(self) -> List[str]:
        """Category options for the filter selector."""
        return self.repository.categories()

    def brands(self) -> List[str]:
        """Brand options for the filter selector."""
        return self.repository.brands()

    def close(self) -> None:
        """Stop following the repository."""
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def _on_catalog_changed(self, _product) -> None:
        with self._lock:
            self._result = None
