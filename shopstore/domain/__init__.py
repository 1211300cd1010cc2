"""
Domain layer - Core business entities and rules.
"""

from .entities import (
    Identity,
    ImageAttachment,
    Product,
    ProductDraft,
    ProductStatus,
    SessionPhase,
    SessionState,
    normalize_sku,
)
from .exceptions import (
    AuthError,
    DuplicateSkuError,
    ProductValidationError,
    ProviderNotConfiguredError,
    ShopStoreError,
    UploadError,
)

__all__ = [
    "Identity",
    "ImageAttachment",
    "Product",
    "ProductDraft",
    "ProductStatus",
    "SessionPhase",
    "SessionState",
    "normalize_sku",
    "AuthError",
    "DuplicateSkuError",
    "ProductValidationError",
    "ProviderNotConfiguredError",
    "ShopStoreError",
    "UploadError",
]
