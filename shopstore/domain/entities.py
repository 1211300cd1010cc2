"""
Domain entities for the product catalog and session.

Core business objects representing products, identities and session state.
These entities are framework-agnostic and contain only business logic.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ProductStatus(str, Enum):
    """Availability status shown for a product."""

    AVAILABLE = "Available"
    OUT_OF_STOCK = "Out of Stock"
    COMING_SOON = "Coming Soon"

    @classmethod
    def values(cls) -> list[str]:
        """Display values in declaration order."""
        return [member.value for member in cls]


class SessionPhase(str, Enum):
    """Lifecycle phase of the process-wide session."""

    UNINITIALIZED = "uninitialized"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


def normalize_sku(sku: str) -> str:
    """
    Normalize a SKU for storage and comparison.

    Args:
        sku: Raw SKU as entered

    Returns:
        Stripped, upper-cased SKU
    """
    return sku.strip().upper()


@dataclass(frozen=True)
class ImageAttachment:
    """
    Value object for an image file attached to a product form.

    Only the uploaded URL ends up on the product; the bytes never reach
    the repository.
    """

    filename: str
    content_type: str
    data: bytes = field(repr=False)

    @property
    def size(self) -> int:
        """Size of the attachment in bytes."""
        return len(self.data)

    @property
    def is_image(self) -> bool:
        """Check if the declared media type is an image type."""
        return self.content_type.lower().startswith("image/")


@dataclass(frozen=True)
class ProductDraft:
    """
    Validated product input, ready to be added to the repository.

    Carries every product field except the repository-assigned id.
    """

    sku: str
    name: str
    price: float
    quantity: int
    category: str
    brand: str
    color: str
    status: ProductStatus
    rating: float = 4.0
    image: Optional[str] = None
    in_stock: bool = True
    image_file: Optional[ImageAttachment] = None

    def __post_init__(self):
        """Keep the SKU in its normalized form."""
        object.__setattr__(self, "sku", normalize_sku(self.sku))


@dataclass(frozen=True)
class Product:
    """
    Aggregate root for a sellable item.

    Immutable once stored. ``in_stock`` and ``status`` are independent
    fields and are never reconciled with each other.
    """

    id: str
    sku: str
    name: str
    price: float
    quantity: int
    category: str
    brand: str
    color: str
    status: ProductStatus
    rating: float
    image: Optional[str] = None
    in_stock: bool = True

    @classmethod
    def from_draft(cls, product_id: str, draft: ProductDraft) -> "Product":
        """
        Build a stored product from a validated draft.

        Args:
            product_id: Identifier assigned by the repository
            draft: Validated input

        Returns:
            New product record
        """
        return cls(
            id=product_id,
            sku=draft.sku,
            name=draft.name,
            price=draft.price,
            quantity=draft.quantity,
            category=draft.category,
            brand=draft.brand,
            color=draft.color,
            status=draft.status,
            rating=draft.rating,
            image=draft.image,
            in_stock=draft.in_stock,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "id": self.id,
            "sku": self.sku,
            "name": self.name,
            "price": self.price,
            "quantity": self.quantity,
            "category": self.category,
            "brand": self.brand,
            "color": self.color,
            "status": self.status.value,
            "rating": self.rating,
            "image": self.image,
            "in_stock": self.in_stock,
        }


@dataclass(frozen=True)
class Identity:
    """Signed-in user as reported by the identity provider."""

    uid: str
    email: str
    display_name: Optional[str] = None


@dataclass(frozen=True)
class SessionState:
    """
    Snapshot of the process-wide session.

    ``identity`` is set only in the AUTHENTICATED phase.
    """

    phase: SessionPhase = SessionPhase.UNINITIALIZED
    identity: Optional[Identity] = None

    @classmethod
    def from_identity(cls, identity: Optional[Identity]) -> "SessionState":
        """
        Build the state a provider event maps to.

        Args:
            identity: Identity delivered by the provider, or None

        Returns:
            AUTHENTICATED state for an identity, ANONYMOUS otherwise
        """
        if identity is None:
            return cls(phase=SessionPhase.ANONYMOUS)
        return cls(phase=SessionPhase.AUTHENTICATED, identity=identity)

    @property
    def is_authenticated(self) -> bool:
        """Check if someone is signed in."""
        return self.phase == SessionPhase.AUTHENTICATED
