"""
In-memory product repository.

Authoritative store of products for the lifetime of the process.
Insertion order is the catalog's natural order and is preserved by
every read.
"""

import threading
import uuid
from typing import Callable, Dict, Iterable, List, Optional

from ..domain.entities import Product, ProductDraft, normalize_sku
from ..domain.exceptions import DuplicateSkuError
from ..events import EventChannel, Subscription
from ..logging_config import get_logger

logger = get_logger(__name__)


class ProductRepository:
    """
    Thread-safe in-memory product store.

    SKU uniqueness is the repository's correctness contract: the lookup
    and the insert in ``add`` run inside one critical section, so two
    concurrent adds for the same SKU cannot both succeed.

    Attributes:
        id_factory: Callable producing fresh product ids
    """

    def __init__(self, id_factory: Optional[Callable[[], str]] = None):
        """
        Initialize an empty repository.

        Args:
            id_factory: Optional id generator (default: uuid4 hex)
        """
        self.id_factory = id_factory or (lambda: uuid.uuid4().hex)
        self._products: List[Product] = []
        self._by_sku: Dict[str, Product] = {}
        self._lock = threading.Lock()
        self._changes: EventChannel[Product] = EventChannel("products")

    def __len__(self) -> int:
        with self._lock:
            return len(self._products)

    def add(self, draft: ProductDraft) -> Product:
        """
        Store a validated product.

        Args:
            draft: Validated product input

        Returns:
            The stored product, including its assigned id

        Raises:
            DuplicateSkuError: If a product with the same SKU exists
        """
        sku = normalize_sku(draft.sku)

        with self._lock:
            if sku in self._by_sku:
                logger.info("duplicate_sku_rejected", sku=sku)
                raise DuplicateSkuError(sku)

            product = Product.from_draft(self.id_factory(), draft)
            self._products.append(product)
            self._by_sku[sku] = product
            count = len(self._products)

        logger.info("product_added", product_id=product.id, sku=sku, count=count)
        self._changes.publish(product)
        return product

    def get_by_sku(self, sku: str) -> Optional[Product]:
        """
        Look up a product by SKU, ignoring case and surrounding whitespace.

        Args:
            sku: SKU to look up

        Returns:
            Matching product or None
        """
        with self._lock:
            return self._by_sku.get(normalize_sku(sku))

    def list(self) -> List[Product]:
        """
        Get the current snapshot.

        Returns:
            Copy of all products in insertion order
        """
        with self._lock:
            return list(self._products)

    def subscribe(self, listener: Callable[[Product], None]) -> Subscription:
        """
        Register a mutation listener.

        The listener is called once per successful ``add`` with the stored
        product, after the repository lock has been released.

        Args:
            listener: Callable receiving the added product

        Returns:
            Subscription handle
        """
        return self._changes.subscribe(listener)

    def categories(self) -> List[str]:
        """Sorted distinct categories present in the catalog."""
        with self._lock:
            return sorted({p.category for p in self._products})

    def brands(self) -> List[str]:
        """Sorted distinct brands present in the catalog."""
        with self._lock:
            return sorted({p.brand for p in self._products})

    def load(self, drafts: Iterable[ProductDraft]) -> int:
        """
        Seed the repository through ``add``.

        Args:
            drafts: Validated products to add

        Returns:
            Number of products added

        Raises:
            DuplicateSkuError: On the first colliding SKU; earlier drafts
                stay stored
        """
        count = 0
        for draft in drafts:
            self.add(draft)
            count += 1

        logger.info("catalog_loaded", count=count)
        return count
