"""
API dependencies for the backend session and the signed-in user.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from adapters.backend import BackendClient
from core.domain import User
from services.auth import get_current_user as fetch_current_user
from services.store import AdminStore
from services.webhook_simulator import WebhookSimulator


def get_backend_client(request: Request) -> BackendClient:
    """The console's backend session, created at startup."""
    return request.app.state.backend_client


def get_store(request: Request) -> AdminStore:
    return request.app.state.store


async def get_current_user(
    client: Annotated[BackendClient, Depends(get_backend_client)],
) -> User:
    """
    Dependency to get the signed-in user.

    Raises 401 when there is no session or the profile cannot be loaded.
    """
    user = await fetch_current_user(client)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return user


async def get_current_admin_user(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Ensures the signed-in user has the admin role."""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


BackendDep = Annotated[BackendClient, Depends(get_backend_client)]
StoreDep = Annotated[AdminStore, Depends(get_store)]
CurrentUser = Annotated[User, Depends(get_current_user)]
AdminUser = Annotated[User, Depends(get_current_admin_user)]


def get_webhook_simulator(client: BackendDep) -> WebhookSimulator:
    """Simulator configured from settings for the console's session."""
    return WebhookSimulator(client)


SimulatorDep = Annotated[WebhookSimulator, Depends(get_webhook_simulator)]
