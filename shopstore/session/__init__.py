"""
Session module - identity provider bridge.
"""

from .identity_provider import (
    IdentityProvider,
    SupabaseIdentityProvider,
    identity_from_session,
    identity_from_user,
    map_auth_exception,
)
from .session_store import SessionStore

__all__ = [
    "IdentityProvider",
    "SessionStore",
    "SupabaseIdentityProvider",
    "identity_from_session",
    "identity_from_user",
    "map_auth_exception",
]
