"""
Pytest configuration and shared fixtures for backend tests.
"""

import sys
from pathlib import Path

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from collections.abc import AsyncGenerator, Callable
from unittest.mock import AsyncMock

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

# Import after path is set
from adapters.backend import BackendClient
from core.domain import User, UserProfile, UserRole
from services.store import AdminStore

TEST_BACKEND_URL = "https://backend.test"
TEST_ANON_KEY = "test-anon-key"

ADMIN_AUTH_USER = {"id": "user-admin", "email": "admin@example.com"}


@pytest.fixture
def make_backend_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], BackendClient]:
    """
    Build a BackendClient whose HTTP traffic goes to *handler*.

    The handler receives each httpx.Request and returns the httpx.Response.
    """

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> BackendClient:
        return BackendClient(
            base_url=TEST_BACKEND_URL,
            anon_key=TEST_ANON_KEY,
            timeout=5.0,
            transport=httpx.MockTransport(handler),
        )

    return factory


@pytest.fixture
def mock_client() -> AsyncMock:
    """Backend client double with a signed-in admin and empty tables."""
    client = AsyncMock(spec=BackendClient)
    client.is_authenticated = True
    client.get_user.return_value = ADMIN_AUTH_USER
    client.require_user.return_value = ADMIN_AUTH_USER
    client.select.return_value = []
    client.rpc.return_value = None
    client.insert.return_value = {"id": "row-1"}
    client.update.return_value = None
    return client


@pytest.fixture
def admin_user() -> User:
    return User(
        id=ADMIN_AUTH_USER["id"],
        email=ADMIN_AUTH_USER["email"],
        profile=UserProfile(full_name="Ada Admin", role=UserRole.ADMIN, tenant_id="tenant-1"),
    )


@pytest.fixture
def member_user() -> User:
    return User(
        id="user-member",
        email="member@example.com",
        profile=UserProfile(full_name="Max Member", role=UserRole.USER, tenant_id="tenant-1"),
    )


@pytest.fixture
async def async_client(mock_client: AsyncMock, admin_user: User) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTP client for the console API.

    The backend session is the mock_client fixture and the signed-in user is
    admin_user.
    """
    # Import app here so sys.path is set first
    from api.dependencies import get_current_user
    from main import app

    app.state.backend_client = mock_client
    app.state.store = AdminStore(mock_client)

    async def override_get_current_user() -> User:
        return admin_user

    app.dependency_overrides[get_current_user] = override_get_current_user

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
