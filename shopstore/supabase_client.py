"""
Supabase client configuration.

Provides the single Supabase client shared by the identity provider and
the image storage adapters. The client is created with the public anon
key: this is the browser-equivalent side of the application.
"""

from typing import Optional

from supabase import Client, create_client

from .config import settings
from .domain.exceptions import ProviderNotConfiguredError
from .logging_config import get_logger

logger = get_logger(__name__)

# Global Supabase client instance
_supabase_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """
    Get or create the Supabase client instance.

    Returns:
        Configured Supabase client

    Raises:
        ProviderNotConfiguredError: If Supabase is not configured
    """
    global _supabase_client

    if not settings.supabase_configured:
        raise ProviderNotConfiguredError(
            "Supabase", "Supabase not configured. Set SUPABASE_URL and SUPABASE_ANON_KEY"
        )

    if _supabase_client is None:
        logger.info("Initializing Supabase client...")
        _supabase_client = create_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
        logger.info("Supabase client initialized successfully")

    return _supabase_client


def reset_supabase_client() -> None:
    """Forget the cached client (used on teardown and in tests)."""
    global _supabase_client
    _supabase_client = None
