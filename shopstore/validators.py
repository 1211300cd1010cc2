"""
Input validation for product creation.

This module gates product-form input before it can reach the repository.
Raw form values (strings included) are sanitized the same way the form
does it: text fields trimmed, SKU upper-cased, price and quantity parsed
from their string forms. Validation is pure: no repository access, no I/O.
"""

import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, ValidationInfo, field_validator

from .config import settings
from .domain.entities import ImageAttachment, ProductDraft, ProductStatus
from .domain.exceptions import ProductValidationError

# Validation patterns
NAME_PATTERN = re.compile(r"^[a-zA-Z0-9\s\-']+$")
NAME_MAX_LENGTH = 100


def _require_text(value: Any, message: str) -> str:
    if value is None:
        raise ValueError(message)
    text = str(value).strip()
    if not text:
        raise ValueError(message)
    return text


class ProductForm(BaseModel):
    """
    Product creation form.

    Every rule raises a single message, so each invalid field reports
    exactly one error.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        validate_default=True,
        extra="ignore",
    )

    name: str = ""
    price: float = math.nan
    quantity: Optional[int] = None
    sku: str = ""
    category: str = ""
    brand: str = ""
    color: str = ""
    status: ProductStatus = ProductStatus.AVAILABLE
    image_file: Optional[ImageAttachment] = None
    image: Optional[str] = None
    in_stock: bool = True

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v: Any) -> str:
        """Name: required, at most 100 characters, restricted character set."""
        v = "" if v is None else str(v).strip()
        if not v:
            raise ValueError("Name is required")
        if len(v) > NAME_MAX_LENGTH:
            raise ValueError("Name must be less than 100 characters")
        if not NAME_PATTERN.match(v):
            raise ValueError(
                "Name can only contain letters, numbers, spaces, hyphens, and apostrophes"
            )
        return v

    @field_validator("price", mode="before")
    @classmethod
    def validate_price(cls, v: Any) -> float:
        """Price: a finite number strictly greater than zero."""
        if v is None or isinstance(v, bool):
            raise ValueError("Price must be a number")
        try:
            price = float(v.strip() if isinstance(v, str) else v)
        except (TypeError, ValueError):
            raise ValueError("Price must be a number")
        if not math.isfinite(price):
            raise ValueError("Price must be a number")
        if price <= 0:
            raise ValueError("Price must be positive")
        return price

    @field_validator("quantity", mode="before")
    @classmethod
    def validate_quantity(cls, v: Any) -> int:
        """Quantity: a whole number, zero or more."""
        if v is None or isinstance(v, bool):
            raise ValueError("Quantity must be a whole number")
        if isinstance(v, str):
            try:
                v = int(v.strip())
            except ValueError:
                raise ValueError("Quantity must be a whole number")
        elif isinstance(v, float):
            if not v.is_integer():
                raise ValueError("Quantity must be a whole number")
            v = int(v)
        elif not isinstance(v, int):
            raise ValueError("Quantity must be a whole number")
        if v < 0:
            raise ValueError("Quantity must be a non-negative integer")
        return v

    @field_validator("sku", mode="before")
    @classmethod
    def validate_sku(cls, v: Any) -> str:
        """SKU: required, normalized to upper case."""
        return _require_text(v, "SKU is required").upper()

    @field_validator("category", mode="before")
    @classmethod
    def validate_category(cls, v: Any) -> str:
        """Category, brand and color are free-form but required."""
        return _require_text(v, "Category is required")

    @field_validator("brand", mode="before")
    @classmethod
    def validate_brand(cls, v: Any) -> str:
        return _require_text(v, "Brand is required")

    @field_validator("color", mode="before")
    @classmethod
    def validate_color(cls, v: Any) -> str:
        return _require_text(v, "Color is required")

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v: Any) -> ProductStatus:
        """Status: one of the three display values."""
        try:
            return ProductStatus(v)
        except ValueError:
            raise ValueError(
                "Status must be one of: " + ", ".join(ProductStatus.values())
            )

    @field_validator("image_file", mode="before")
    @classmethod
    def validate_image_file(
        cls, v: Any, info: ValidationInfo
    ) -> Optional[ImageAttachment]:
        """Image attachment: optional, image media type, size limit."""
        if v is None:
            return None
        if not isinstance(v, ImageAttachment) or not v.is_image:
            raise ValueError("Only image files are allowed.")

        context = info.context or {}
        max_bytes = context.get("max_image_bytes", settings.MAX_IMAGE_BYTES)
        if v.size > max_bytes:
            raise ValueError("Image size must be less than 5MB.")
        return v

    @field_validator("image", mode="before")
    @classmethod
    def blank_image_is_none(cls, v: Any) -> Optional[str]:
        if v is None or not str(v).strip():
            return None
        return str(v).strip()


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of validating a product form.

    Exactly one of ``product`` and ``errors`` is populated.
    """

    product: Optional[ProductDraft] = None
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Check if the input was valid."""
        return self.product is not None and not self.errors

    def unwrap(self) -> ProductDraft:
        """
        Get the validated product.

        Raises:
            ProductValidationError: If validation failed
        """
        if self.product is None:
            raise ProductValidationError(self.errors)
        return self.product


def _message_for(error: Dict[str, Any]) -> str:
    """Extract the rule's own message from a pydantic error entry."""
    ctx = error.get("ctx") or {}
    if error.get("type") == "value_error" and "error" in ctx:
        return str(ctx["error"])
    return error.get("msg", "Invalid value")


def collect_field_errors(exc: ValidationError) -> Dict[str, str]:
    """
    Map a pydantic ValidationError to one message per field.

    Args:
        exc: Validation error raised by ProductForm

    Returns:
        Field name to message; the first violation wins per field
    """
    errors: Dict[str, str] = {}
    for error in exc.errors():
        loc = error.get("loc") or ("form",)
        errors.setdefault(str(loc[0]), _message_for(error))
    return errors


def validate_product(
    raw: Mapping[str, Any],
    max_image_bytes: Optional[int] = None,
    rating: Optional[float] = None,
) -> ValidationResult:
    """
    Validate product-form input.

    Args:
        raw: Form values keyed by field name
        max_image_bytes: Image size limit (default: settings.MAX_IMAGE_BYTES)
        rating: Rating for the new product (default: settings.DEFAULT_RATING)

    Returns:
        ValidationResult holding either the draft or the field errors
    """
    context = {
        "max_image_bytes": (
            max_image_bytes if max_image_bytes is not None else settings.MAX_IMAGE_BYTES
        )
    }

    try:
        form = ProductForm.model_validate(dict(raw), context=context)
    except ValidationError as e:
        return ValidationResult(errors=collect_field_errors(e))

    draft = ProductDraft(
        sku=form.sku,
        name=form.name,
        price=form.price,
        quantity=form.quantity,
        category=form.category,
        brand=form.brand,
        color=form.color,
        status=form.status,
        rating=rating if rating is not None else settings.DEFAULT_RATING,
        image=form.image,
        in_stock=form.in_stock,
        image_file=form.image_file,
    )
    return ValidationResult(product=draft)
