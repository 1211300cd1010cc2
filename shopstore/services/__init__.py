"""
Service layer - Business logic orchestration.
"""

from .catalog_service import CatalogService, CreateProductResult

__all__ = [
    "CatalogService",
    "CreateProductResult",
]
