"""
Pytest fixtures for account service tests
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

from account_service.adapters.memory import InMemoryAuthProvider, InMemoryDocumentStore
from account_service.services.account_service import AccountService

TEST_EMAIL = "ada@example.com"
TEST_PASSWORD = "Secr3t!pass"


@pytest.fixture
def auth() -> InMemoryAuthProvider:
    """In-memory auth provider with one registered account"""
    provider = InMemoryAuthProvider()
    provider.register(TEST_EMAIL, TEST_PASSWORD)
    return provider


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def service(auth, store) -> AccountService:
    return AccountService(auth, store)


@pytest_asyncio.fixture
async def signed_in_service(service, auth) -> AccountService:
    """Service with the registered account signed in, no profile stored yet"""
    await auth.sign_in_with_password(TEST_EMAIL, TEST_PASSWORD)
    return service


@pytest_asyncio.fixture
async def anonymous_service(service, auth) -> AccountService:
    await auth.sign_in_anonymously()
    return service


def make_gotrue_user(uid: str = "uid-1", email: str = TEST_EMAIL, is_anonymous: bool = False):
    """Stand-in for a GoTrue User object"""
    return SimpleNamespace(id=uid, email=email, is_anonymous=is_anonymous)


def make_auth_response(user):
    return SimpleNamespace(user=user, session=SimpleNamespace(user=user) if user else None)


@pytest.fixture
def mock_supabase_client():
    """Mock Supabase AsyncClient; auth subscriptions are recorded on the mock"""
    client = MagicMock()
    client.subscriptions = []

    def on_auth_state_change(callback):
        subscription = MagicMock()
        subscription.callback = callback
        client.subscriptions.append(subscription)
        return subscription

    client.auth.on_auth_state_change = MagicMock(side_effect=on_auth_state_change)
    client.auth.sign_in_with_password = AsyncMock(return_value=make_auth_response(make_gotrue_user()))
    client.auth.sign_in_anonymously = AsyncMock(
        return_value=make_auth_response(make_gotrue_user(uid="anon-1", email=None, is_anonymous=True))
    )
    client.auth.update_user = AsyncMock(return_value=SimpleNamespace(user=make_gotrue_user(uid="anon-1")))
    client.auth.reset_password_for_email = AsyncMock(return_value=None)
    client.auth.sign_out = AsyncMock(return_value=None)
    return client


@pytest.fixture
def mock_supabase_admin_client():
    client = MagicMock()
    client.auth.on_auth_state_change = MagicMock(return_value=MagicMock())
    client.auth.admin.delete_user = AsyncMock(return_value=None)
    return client


@pytest.fixture
def gotrue_user():
    """Factory for GoTrue user stand-ins"""
    return make_gotrue_user


@pytest.fixture
def auth_response():
    """Factory for GoTrue AuthResponse stand-ins"""
    return make_auth_response
