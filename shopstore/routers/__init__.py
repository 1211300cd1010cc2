"""
API routers.
"""

from . import auth_router, health_router, products_router

__all__ = ["auth_router", "health_router", "products_router"]
