"""
Shared process-wide instances.

The repository and the session store exist once per process: they are
created on first use and live until teardown. Everything reaches them
through the getters below, so tests (and the app lifespan) can install a
fresh instance with the setters or drop them all with
``reset_dependencies``.
"""

from typing import Optional

from .config import settings
from .logging_config import get_logger
from .repositories.product_repository import ProductRepository
from .services.catalog_service import CatalogService
from .session.identity_provider import SupabaseIdentityProvider
from .session.session_store import SessionStore
from .storage.image_storage import ImageStorage, SupabaseImageStorage
from .supabase_client import get_supabase_client, reset_supabase_client

logger = get_logger(__name__)

# Global instances (created lazily)
_product_repository: Optional[ProductRepository] = None
_session_store: Optional[SessionStore] = None
_image_storage: Optional[ImageStorage] = None


def get_product_repository() -> ProductRepository:
    """Get or create the process-wide product repository."""
    global _product_repository

    if _product_repository is None:
        _product_repository = ProductRepository()
        logger.info("product_repository_created")

    return _product_repository


def set_product_repository(repository: ProductRepository) -> None:
    """Install a product repository instance."""
    global _product_repository
    _product_repository = repository


def get_session_store() -> SessionStore:
    """
    Get or create the process-wide session store.

    The default store mirrors Supabase Auth.

    Raises:
        ProviderNotConfiguredError: If no store was installed and Supabase
            is not configured
    """
    global _session_store

    if _session_store is None:
        provider = SupabaseIdentityProvider(get_supabase_client())
        _session_store = SessionStore(provider)
        logger.info("session_store_created")

    return _session_store


def has_session_store() -> bool:
    """Check if a session store has been created or installed."""
    return _session_store is not None


def set_session_store(store: SessionStore) -> None:
    """Install a session store instance."""
    global _session_store
    _session_store = store


def get_image_storage() -> Optional[ImageStorage]:
    """
    Get the image storage, if one is available.

    Returns:
        Installed storage, a Supabase storage when configured, or None
    """
    global _image_storage

    if _image_storage is None and settings.supabase_configured:
        _image_storage = SupabaseImageStorage(get_supabase_client())

    return _image_storage


def set_image_storage(storage: Optional[ImageStorage]) -> None:
    """Install an image storage instance."""
    global _image_storage
    _image_storage = storage


def get_catalog_service() -> CatalogService:
    """Build the catalog service over the shared instances."""
    return CatalogService(get_product_repository(), get_image_storage())


def reset_dependencies() -> None:
    """Tear down every shared instance."""
    global _product_repository, _session_store, _image_storage

    if _session_store is not None:
        _session_store.close()

    _product_repository = None
    _session_store = None
    _image_storage = None
    reset_supabase_client()
