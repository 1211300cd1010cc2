"""
Repository layer - Data access abstractions.
"""

from .product_repository import ProductRepository

__all__ = [
    "ProductRepository",
]
