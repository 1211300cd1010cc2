"""
Process-wide session store.

Bridges the asynchronous identity provider into a snapshot that can be
read synchronously at any time.

Two completion signals exist and are kept apart:

* ``login``/``logout`` resolving means the provider accepted (or
  rejected) the request.
* A subscription notification means the session snapshot changed.

The provider's state-change event may reach the store before or after
the ``login`` call resolves. Callers that need the updated snapshot must
wait for a notification (``next_change``/``login_and_wait``), not merely
for the call to return. Concurrent logins are not serialized; the last
event delivered wins.
"""

import asyncio
import threading
from typing import Callable, Optional

from ..domain.entities import Identity, SessionPhase, SessionState
from ..domain.exceptions import AuthError
from ..events import EventChannel, Subscription
from ..logging_config import bind_session_uid, get_logger
from .identity_provider import IdentityProvider, Unsubscribe

logger = get_logger(__name__)


class SessionStore:
    """
    Single source of truth for who is signed in.

    Starts UNINITIALIZED. ``initialize`` registers exactly one upstream
    subscription with the provider; each provider event then overwrites
    the snapshot and is fanned out to listeners in registration order.

    Attributes:
        provider: External identity provider
    """

    def __init__(self, provider: IdentityProvider):
        """
        Initialize the store.

        Args:
            provider: Identity provider to mirror
        """
        self.provider = provider
        self._state = SessionState()
        self._lock = threading.Lock()
        self._initialized = False
        self._upstream: Optional[Unsubscribe] = None
        self._changes: EventChannel[SessionState] = EventChannel("session")

    @property
    def state(self) -> SessionState:
        """Latest session snapshot."""
        with self._lock:
            return self._state

    @property
    def phase(self) -> SessionPhase:
        """Phase of the latest snapshot."""
        return self.state.phase

    @property
    def is_loading(self) -> bool:
        """True until the provider has reported its initial state."""
        return self.phase == SessionPhase.UNINITIALIZED

    @property
    def initialized(self) -> bool:
        """Check if the upstream subscription has been registered."""
        with self._lock:
            return self._initialized

    def current_user(self) -> Optional[Identity]:
        """
        Get the signed-in identity.

        Returns:
            Identity, or None when anonymous or not yet initialized
        """
        return self.state.identity

    def initialize(self) -> bool:
        """
        Start mirroring the provider.

        Safe to call any number of times: only the first successful call
        registers the upstream subscription. If registration raises, the
        store stays uninitialized and a later call retries.

        Returns:
            True if this call registered the subscription
        """
        with self._lock:
            if self._initialized:
                logger.debug("session_already_initialized")
                return False
            self._initialized = True

        logger.info("session_initializing")
        try:
            upstream = self.provider.on_state_change(self._on_provider_event)
        except Exception as e:
            with self._lock:
                self._initialized = False
            logger.error("session_initialize_failed", error=str(e))
            raise
        with self._lock:
            self._upstream = upstream
        return True

    def subscribe(self, listener: Callable[[SessionState], None]) -> Subscription:
        """
        Register a session listener.

        Args:
            listener: Callable receiving the new SessionState once per
                provider event

        Returns:
            Subscription handle
        """
        return self._changes.subscribe(listener)

    async def login(self, email: str, password: str) -> None:
        """
        Sign in through the provider.

        Does not touch the snapshot; the provider's own event does.

        Raises:
            AuthError: invalid_credential, network or unknown
        """
        await self._delegate("Sign in", self.provider.sign_in, email, password)

    async def logout(self) -> None:
        """
        Sign out through the provider.

        Raises:
            AuthError: If the provider fails the request
        """
        await self._delegate("Sign out", self.provider.sign_out)

    async def signup(self, email: str, password: str) -> None:
        """
        Register a new account through the provider.

        Raises:
            AuthError: If registration fails
        """
        await self._delegate("Registration", self.provider.sign_up, email, password)

    def next_change(self) -> "asyncio.Future[SessionState]":
        """
        Future resolved by the next session notification.

        Must be called from a running event loop. Create the future
        before issuing the request it should observe.

        Returns:
            Future resolving to the new SessionState
        """
        loop = asyncio.get_running_loop()
        future: asyncio.Future[SessionState] = loop.create_future()

        def resolve(state: SessionState) -> None:
            if not future.done():
                future.set_result(state)

        subscription = self.subscribe(
            lambda state: loop.call_soon_threadsafe(resolve, state)
        )
        future.add_done_callback(lambda _f: subscription.unsubscribe())
        return future

    async def login_and_wait(
        self, email: str, password: str, timeout: Optional[float] = None
    ) -> SessionState:
        """
        Sign in and wait until the snapshot reflects it.

        Args:
            email: Account email
            password: Account password
            timeout: Seconds to wait for the notification (None: no limit)

        Returns:
            The session state delivered after sign-in

        Raises:
            AuthError: If the provider rejects the request
            asyncio.TimeoutError: If no notification arrives in time
        """
        change = self.next_change()
        try:
            await self.login(email, password)
        except AuthError:
            change.cancel()
            raise
        return await asyncio.wait_for(change, timeout)

    def close(self) -> None:
        """Drop the upstream subscription and all listeners."""
        with self._lock:
            upstream = self._upstream
            self._upstream = None
        if upstream is not None:
            upstream()
        self._changes.clear()
        logger.info("session_closed")

    async def _delegate(self, action: str, call, *args) -> None:
        try:
            await call(*args)
        except AuthError as e:
            logger.warning("auth_request_rejected", action=action, code=e.code)
            raise
        except Exception as e:
            logger.error("auth_request_failed", action=action, error=str(e))
            raise AuthError(f"{action} failed: {e}", AuthError.UNKNOWN) from e

    def _on_provider_event(self, identity: Optional[Identity]) -> None:
        new_state = SessionState.from_identity(identity)
        with self._lock:
            previous = self._state
            self._state = new_state

        bind_session_uid(identity.uid if identity else None)
        logger.info(
            "session_changed",
            previous=previous.phase.value,
            phase=new_state.phase.value,
            uid=identity.uid if identity else None,
        )
        self._changes.publish(new_state)
