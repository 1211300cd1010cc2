"""
Custom exceptions for the ShopStore domain.

These exceptions represent domain-level errors and are independent
of infrastructure concerns (HTTP, Supabase, etc.). All of them are
recoverable by the caller correcting input or retrying.
"""

from typing import Any, Dict, Optional


class ShopStoreError(Exception):
    """Base exception for all ShopStore errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ProductValidationError(ShopStoreError):
    """Raised when product input fails validation.

    Carries one human-readable message per offending field.
    """

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        fields = ", ".join(sorted(self.errors))
        super().__init__(
            message=f"Product validation failed for: {fields}",
            details={"errors": self.errors},
        )


class DuplicateSkuError(ShopStoreError):
    """Raised when a product with the same normalized SKU already exists."""

    def __init__(self, sku: str):
        self.sku = sku
        super().__init__(message=f"SKU already exists: {sku}", details={"sku": sku})


class AuthError(ShopStoreError):
    """Raised when the identity provider rejects or fails a request."""

    INVALID_CREDENTIAL = "invalid_credential"
    NETWORK = "network"
    UNKNOWN = "unknown"

    def __init__(self, message: str, code: str = UNKNOWN):
        self.code = code
        super().__init__(message=message, details={"code": code})

    @property
    def is_transient(self) -> bool:
        """Check if a plain retry may succeed."""
        return self.code == self.NETWORK


class UploadError(ShopStoreError):
    """Raised when an image upload to blob storage fails."""

    def __init__(self, filename: str, reason: Optional[str] = None):
        self.filename = filename
        message = f"Image upload failed: {filename}"
        if reason:
            message += f" ({reason})"
        super().__init__(
            message=message, details={"filename": filename, "reason": reason}
        )


class ProviderNotConfiguredError(ShopStoreError):
    """Raised when an external provider is needed but has no configuration."""

    def __init__(self, provider: str, message: Optional[str] = None):
        self.provider = provider
        super().__init__(
            message=message or f"{provider} not configured",
            details={"provider": provider},
        )
