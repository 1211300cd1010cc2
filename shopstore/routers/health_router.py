"""
Health check router.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from .. import __version__
from ..config import settings
from ..dependencies import get_product_repository
from ..repositories.product_repository import ProductRepository

router = APIRouter(prefix="/api/v1", tags=["health"])


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    timestamp: str
    service: str = "shopstore"
    version: str = __version__
    products: int
    supabase_configured: bool


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
)
async def health_check(
    repository: ProductRepository = Depends(get_product_repository),
) -> HealthResponse:
    """Always returns 200 OK while the process is running."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        products=len(repository),
        supabase_configured=settings.supabase_configured,
    )
