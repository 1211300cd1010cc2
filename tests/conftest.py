# Test configuration
import asyncio
import os
from typing import Callable, List, Optional

# Set test environment variables BEFORE importing shopstore modules
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["SUPABASE_URL"] = ""
os.environ["SUPABASE_ANON_KEY"] = ""

import pytest

from shopstore import dependencies
from shopstore.domain.entities import Identity, ProductDraft, ProductStatus
from shopstore.domain.exceptions import AuthError
from shopstore.repositories.product_repository import ProductRepository
from shopstore.session.identity_provider import IdentityProvider
from shopstore.session.session_store import SessionStore


class FakeIdentityProvider(IdentityProvider):
    """
    In-process identity provider.

    Delivers the initial state synchronously on registration, like the
    Supabase adapter. Sign-in and sign-out events are scheduled on the
    event loop, so they reach listeners after the request has resolved.
    """

    def __init__(
        self,
        users: Optional[dict] = None,
        initial: Optional[Identity] = None,
        emit_events: bool = True,
    ):
        self.users = users if users is not None else {"alice@example.com": "secret"}
        self.initial = initial
        self.emit_events = emit_events
        self.callbacks: List[Callable] = []
        self.registrations = 0
        self.sign_in_calls: List[str] = []
        self.fail_with: Optional[Exception] = None

    async def sign_in(self, email: str, password: str) -> None:
        self.sign_in_calls.append(email)
        if self.fail_with is not None:
            raise self.fail_with
        if self.users.get(email) != password:
            raise AuthError("Invalid email or password", AuthError.INVALID_CREDENTIAL)
        if self.emit_events:
            identity = Identity(uid=f"uid-{email}", email=email)
            asyncio.get_running_loop().call_soon(self.emit, identity)

    async def sign_out(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        if self.emit_events:
            asyncio.get_running_loop().call_soon(self.emit, None)

    async def sign_up(self, email: str, password: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        if email in self.users:
            raise AuthError("User already registered", AuthError.UNKNOWN)
        self.users[email] = password

    def on_state_change(self, callback):
        self.registrations += 1
        self.callbacks.append(callback)
        callback(self.initial)
        return lambda: self.callbacks.remove(callback)

    def emit(self, identity: Optional[Identity]) -> None:
        for callback in list(self.callbacks):
            callback(identity)


def make_draft(sku: str = "SKU-1", **overrides) -> ProductDraft:
    """Build a valid product draft."""
    values = {
        "sku": sku,
        "name": f"Product {sku}",
        "price": 10.0,
        "quantity": 5,
        "category": "Electronics",
        "brand": "Acme",
        "color": "Black",
        "status": ProductStatus.AVAILABLE,
        "rating": 4.0,
    }
    values.update(overrides)
    return ProductDraft(**values)


@pytest.fixture
def draft_factory():
    """Factory for valid product drafts."""
    return make_draft


@pytest.fixture
def repository():
    """Fresh product repository with sequential ids."""
    counter = iter(range(1, 1_000_000))
    return ProductRepository(id_factory=lambda: f"p{next(counter)}")


@pytest.fixture
def fake_provider():
    """Identity provider with a single known account."""
    return FakeIdentityProvider()


@pytest.fixture
def session_store(fake_provider):
    """Session store over the fake provider, not yet initialized."""
    store = SessionStore(fake_provider)
    yield store
    store.close()


@pytest.fixture
def valid_form():
    """Raw product form values that pass validation."""
    return {
        "name": "Wireless Mouse",
        "sku": "mouse-01",
        "price": "19.99",
        "quantity": "3",
        "category": "Electronics",
        "brand": "Acme",
        "color": "Black",
        "status": "Available",
    }


@pytest.fixture(autouse=True)
def reset_shared_state():
    """Drop process-wide instances between tests."""
    dependencies.reset_dependencies()
    yield
    dependencies.reset_dependencies()
