"""
Publish/subscribe channel shared by the stateful stores.

Listeners are called synchronously, in registration order, once per
published event. Each registration returns a Subscription handle that
removes exactly that registration, so the same callable may be
registered twice and removed independently.
"""

import itertools
import threading
from typing import Callable, Dict, Generic, TypeVar

from .logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

Listener = Callable[[T], None]


class Subscription:
    """Handle returned by EventChannel.subscribe."""

    def __init__(self, channel: "EventChannel", token: int):
        self._channel = channel
        self._token = token
        self._active = True

    @property
    def active(self) -> bool:
        """Check if the listener is still registered."""
        return self._active

    def unsubscribe(self) -> None:
        """Remove the listener. Calling it again is a no-op."""
        if self._active:
            self._channel._remove(self._token)
            self._active = False

    def __call__(self) -> None:
        self.unsubscribe()


class EventChannel(Generic[T]):
    """
    Synchronous fan-out channel.

    Attributes:
        name: Channel name used in log events
    """

    def __init__(self, name: str):
        self.name = name
        self._listeners: Dict[int, Listener] = {}
        self._tokens = itertools.count()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)

    def subscribe(self, listener: Listener) -> Subscription:
        """
        Register a listener.

        Args:
            listener: Callable invoked with each published event

        Returns:
            Subscription handle
        """
        with self._lock:
            token = next(self._tokens)
            self._listeners[token] = listener
        logger.debug("listener_registered", channel=self.name, token=token)
        return Subscription(self, token)

    def publish(self, event: T) -> int:
        """
        Deliver an event to every registered listener.

        The listener list is snapshotted first, so listeners may subscribe
        or unsubscribe while being notified. A listener that raises is
        logged and skipped; the remaining listeners still run.

        Args:
            event: Event payload

        Returns:
            Number of listeners notified
        """
        with self._lock:
            listeners = list(self._listeners.items())

        for token, listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("listener_failed", channel=self.name, token=token)

        return len(listeners)

    def clear(self) -> None:
        """Drop all listeners."""
        with self._lock:
            self._listeners.clear()

    def _remove(self, token: int) -> None:
        with self._lock:
            self._listeners.pop(token, None)
        logger.debug("listener_removed", channel=self.name, token=token)
