"""
API request and response models.

Pydantic models for the HTTP surface of the state layer.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .domain.entities import Product, SessionState
from .search.query_engine import QueryResult


class ProductResponse(BaseModel):
    """Single product as exposed over HTTP."""

    id: str = Field(..., description="Repository-assigned identifier")
    sku: str = Field(..., description="Upper-case SKU", examples=["PROD-001"])
    name: str = Field(..., description="Product name")
    price: float = Field(..., gt=0, description="Unit price")
    quantity: int = Field(..., ge=0, description="Units held")
    category: str = Field(..., description="Category", examples=["Electronics"])
    brand: str = Field(..., description="Brand")
    color: str = Field(..., description="Color", examples=["Black"])
    status: str = Field(..., description="Availability status", examples=["Available"])
    rating: float = Field(..., description="Display rating")
    image: Optional[str] = Field(None, description="Image URL")
    in_stock: bool = Field(..., description="In-stock flag (independent of status)")

    @classmethod
    def from_product(cls, product: Product) -> "ProductResponse":
        return cls(**product.to_dict())


class ProductPageResponse(BaseModel):
    """
    One page of the catalog.

    ``items`` may be empty while ``filtered_count`` is positive when the
    requested page lies beyond ``total_pages``.
    """

    items: List[ProductResponse] = Field(..., description="Products on this page")
    page: int = Field(..., description="Requested page number")
    page_size: int = Field(..., description="Items per page")
    filtered_count: int = Field(..., description="Products matching the filters")
    total_count: int = Field(..., description="Products in the catalog")
    total_pages: int = Field(..., ge=1, description="Number of pages (at least 1)")

    @classmethod
    def from_result(cls, result: QueryResult) -> "ProductPageResponse":
        return cls(
            items=[ProductResponse.from_product(p) for p in result.items],
            page=result.page,
            page_size=result.page_size,
            filtered_count=result.filtered_count,
            total_count=result.total_count,
            total_pages=result.total_pages,
        )


class FacetsResponse(BaseModel):
    """Filter options derived from the catalog."""

    categories: List[str] = Field(default_factory=list)
    brands: List[str] = Field(default_factory=list)
    statuses: List[str] = Field(default_factory=list)


class Credentials(BaseModel):
    """Email and password pair for sign in and sign up."""

    email: str = Field(..., min_length=3, max_length=320, examples=["you@example.com"])
    password: str = Field(..., min_length=1, max_length=256)


class SessionStateResponse(BaseModel):
    """Current session snapshot."""

    phase: str = Field(..., description="uninitialized, authenticated or anonymous")
    uid: Optional[str] = Field(None, description="Signed-in user id")
    email: Optional[str] = Field(None, description="Signed-in user email")

    @classmethod
    def from_state(cls, state: SessionState) -> "SessionStateResponse":
        identity = state.identity
        return cls(
            phase=state.phase.value,
            uid=identity.uid if identity else None,
            email=identity.email if identity else None,
        )


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Human-readable error message")
    details: Dict[str, str] = Field(default_factory=dict)
