"""
Identity provider contract and its Supabase Auth implementation.

The session store only talks to the abstract IdentityProvider. The
Supabase adapter turns Supabase users into Identity values, emits the
initial auth state on registration, and maps every failure onto AuthError
codes.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

import httpx
from supabase import AuthApiError, AuthRetryableError
from supabase import Client as SupabaseClient

from ..domain.entities import Identity
from ..domain.exceptions import AuthError
from ..logging_config import get_logger

logger = get_logger(__name__)

StateCallback = Callable[[Optional[Identity]], None]
Unsubscribe = Callable[[], None]

# Supabase auth events that change who is signed in
AUTH_STATE_EVENTS = frozenset({"SIGNED_IN", "SIGNED_OUT", "USER_DELETED"})

# Supabase error codes meaning the credentials themselves were rejected
INVALID_CREDENTIAL_CODES = frozenset(
    {"invalid_credentials", "invalid_grant", "user_not_found", "email_not_confirmed"}
)


class IdentityProvider(ABC):
    """Abstract base class for external identity providers."""

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> None:
        """
        Exchange credentials with the provider.

        Raises:
            AuthError: If the provider rejects the request or is unreachable
        """
        pass

    @abstractmethod
    async def sign_out(self) -> None:
        """
        End the current session.

        Raises:
            AuthError: If the provider fails the request
        """
        pass

    @abstractmethod
    async def sign_up(self, email: str, password: str) -> None:
        """
        Register a new account.

        Raises:
            AuthError: If registration fails
        """
        pass

    @abstractmethod
    def on_state_change(self, callback: StateCallback) -> Unsubscribe:
        """
        Register for auth state changes.

        The callback receives the signed-in Identity, or None, on every
        transition including the initial state.

        Returns:
            Callable removing the registration
        """
        pass


def identity_from_user(user: Any) -> Identity:
    """
    Build an Identity from a Supabase user object.

    Args:
        user: Supabase user (``id``, ``email``, ``user_metadata``)

    Returns:
        Identity value
    """
    metadata = getattr(user, "user_metadata", None) or {}
    return Identity(
        uid=str(user.id),
        email=user.email or "",
        display_name=metadata.get("full_name"),
    )


def identity_from_session(session: Any) -> Optional[Identity]:
    """Identity carried by a Supabase session, or None without one."""
    if session is None or getattr(session, "user", None) is None:
        return None
    return identity_from_user(session.user)


def map_auth_exception(exc: Exception, action: str) -> AuthError:
    """
    Translate a Supabase or transport failure into an AuthError.

    Args:
        exc: Exception raised by the Supabase client
        action: Operation name for the message (e.g. "Sign in")

    Returns:
        AuthError with an invalid_credential, network or unknown code
    """
    if isinstance(exc, AuthError):
        return exc

    if isinstance(exc, AuthRetryableError) or isinstance(exc, httpx.TransportError):
        return AuthError(f"{action} failed: network error", AuthError.NETWORK)

    if isinstance(exc, AuthApiError):
        code = (getattr(exc, "code", None) or "").lower()
        message = (exc.message or "").lower()
        if (
            code in INVALID_CREDENTIAL_CODES
            or "invalid" in message
            or "credentials" in message
        ):
            return AuthError("Invalid email or password", AuthError.INVALID_CREDENTIAL)
        return AuthError(f"{action} failed: {exc.message}", AuthError.UNKNOWN)

    return AuthError(f"{action} failed: {exc}", AuthError.UNKNOWN)


class SupabaseIdentityProvider(IdentityProvider):
    """
    Identity provider backed by Supabase Auth.

    The Supabase client is synchronous; calls run in a worker thread so
    they never block the event loop. State-change callbacks therefore
    arrive on that worker thread.
    """

    def __init__(self, client: SupabaseClient):
        """
        Initialize the provider.

        Args:
            client: Supabase client
        """
        self.client = client

    async def sign_in(self, email: str, password: str) -> None:
        try:
            logger.info("sign_in_attempt", email=email)
            response = await asyncio.to_thread(
                self.client.auth.sign_in_with_password,
                {"email": email.lower(), "password": password},
            )
        except Exception as e:
            error = map_auth_exception(e, "Sign in")
            logger.warning("sign_in_failed", email=email, code=error.code)
            raise error from e

        if not response.user or not response.session:
            raise AuthError("Invalid email or password", AuthError.INVALID_CREDENTIAL)

        logger.info("sign_in_accepted", uid=response.user.id)

    async def sign_out(self) -> None:
        try:
            await asyncio.to_thread(self.client.auth.sign_out)
        except Exception as e:
            error = map_auth_exception(e, "Sign out")
            logger.warning("sign_out_failed", code=error.code)
            raise error from e

        logger.info("sign_out_accepted")

    async def sign_up(self, email: str, password: str) -> None:
        try:
            logger.info("sign_up_attempt", email=email)
            response = await asyncio.to_thread(
                self.client.auth.sign_up,
                {"email": email.lower(), "password": password},
            )
        except Exception as e:
            error = map_auth_exception(e, "Registration")
            logger.warning("sign_up_failed", email=email, code=error.code)
            raise error from e

        if not response.user:
            raise AuthError("User registration failed", AuthError.UNKNOWN)

        logger.info("sign_up_accepted", uid=response.user.id)

    def on_state_change(self, callback: StateCallback) -> Unsubscribe:
        def handle(event: Any, session: Any) -> None:
            event_name = getattr(event, "value", event)
            if event_name not in AUTH_STATE_EVENTS:
                return
            callback(identity_from_session(session))

        subscription = self.client.auth.on_auth_state_change(handle)

        try:
            initial = identity_from_session(self.client.auth.get_session())
        except Exception as e:
            logger.warning("initial_session_unavailable", error=str(e))
            initial = None
        callback(initial)

        return subscription.unsubscribe
