"""
ShopStore client state layer.

Holds the in-memory product catalog, mirrors the identity provider's
session, and derives filtered, sorted and paginated catalog pages.
"""

__version__ = "1.0.0"
__author__ = "ShopStore Team"
__description__ = "Client-side catalog and session state for ShopStore"

from .config import settings

__all__ = [
    "settings",
    "__version__",
]
