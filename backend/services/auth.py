"""
Authentication and user profile operations.
"""

import asyncio
import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from adapters.backend import BackendClient, BackendError, eq, in_
from core.domain import User, UserActivity, UserProfile, UserRole, UserStatus
from core.filters import group_by
from infrastructure.config.settings import settings

logger = logging.getLogger(__name__)


async def sign_in(client: BackendClient, email: str, password: str) -> dict[str, Any]:
    """Sign in with email and password and keep the session on *client*."""
    return await client.sign_in_with_password(email, password)


async def sign_up(
    client: BackendClient,
    email: str,
    password: str,
    full_name: str,
) -> dict[str, Any]:
    """
    Register an account and create its profile with the ``user`` role.

    Returns:
        Auth data with ``user`` and ``session`` keys
    """
    auth_data = await client.sign_up(email, password)
    user = auth_data.get("user")

    if user:
        await client.insert(
            "user_profiles",
            {"id": user["id"], "full_name": full_name, "role": UserRole.USER.value},
        )
        logger.info("Created profile for new user %s", user["id"], extra={"user_id": user["id"]})

    return auth_data


async def sign_out(client: BackendClient) -> None:
    await client.sign_out()


async def reset_password(client: BackendClient, email: str) -> None:
    """Send a recovery email that redirects to the console's reset page."""
    redirect_to = f"{settings.frontend_url.rstrip('/')}/reset-password"
    await client.reset_password_for_email(email, redirect_to=redirect_to)


async def get_current_user(client: BackendClient) -> User | None:
    """
    Return the signed-in user with profile, or None.

    Profile lookup failures are logged and reported as "no user" so the
    console falls back to the sign-in screen.
    """
    auth_user = await client.get_user()
    if not auth_user:
        return None

    try:
        profile = await client.rpc("get_accessible_users", {"viewer_id": auth_user["id"]})
        rows = profile if isinstance(profile, list) else [profile] if profile else []
        own = next((row for row in rows if row.get("id") == auth_user["id"]), None)

        return User(
            id=auth_user["id"],
            email=auth_user.get("email", ""),
            profile=UserProfile.from_row(own) if own else None,
        )
    except BackendError as e:
        logger.error(f"Error fetching user profile: {e}")
        return None


async def get_current_tenant_id(client: BackendClient) -> str:
    """
    Tenant of the signed-in user.

    Raises:
        BackendAuthError: Without a session
        BackendError: When the user's profile has no tenant
    """
    auth_user = await client.require_user()
    profile = await client.select(
        "user_profiles",
        columns="tenant_id",
        filters={"id": eq(auth_user["id"])},
        single=True,
    )
    tenant_id = (profile or {}).get("tenant_id")
    if not tenant_id:
        raise BackendError("No tenant ID found")
    return tenant_id


async def log_user_activity(
    client: BackendClient,
    user_id: str,
    action: str,
    details: dict[str, Any] | None = None,
) -> None:
    await client.rpc(
        "log_user_activity",
        {"p_user_id": user_id, "p_action": action, "p_details": details or {}},
    )


async def update_user_profile(
    client: BackendClient,
    user_id: str,
    data: dict[str, Any],
) -> None:
    """Update profile columns, then record a ``profile_updated`` activity."""
    await client.update("user_profiles", data, {"id": eq(user_id)})
    await log_user_activity(client, user_id, "profile_updated", data)


async def bulk_update_user_status(
    client: BackendClient,
    user_ids: Iterable[str],
    status: UserStatus,
) -> None:
    """Set the same status on several users concurrently."""
    await asyncio.gather(
        *(update_user_profile(client, user_id, {"status": status.value}) for user_id in user_ids)
    )


async def request_password_reset(client: BackendClient, user: User) -> None:
    """Send a reset email for *user* and record the request in their activity log."""
    await reset_password(client, user.email)
    await log_user_activity(
        client,
        user.id,
        "password_reset_requested",
        {"requested_at": datetime.now(UTC).isoformat()},
    )


async def get_user_activity(client: BackendClient, user_id: str) -> list[UserActivity]:
    """Activity entries for a user, newest first."""
    rows = await client.select(
        "user_activity",
        filters={"user_id": eq(user_id)},
        order="created_at",
        ascending=False,
    )
    return [UserActivity.from_row(row) for row in rows]


async def delete_user(client: BackendClient, user_id: str) -> None:
    await client.rpc("delete_user", {"target_user_id": user_id})


async def get_user_email(client: BackendClient, user_id: str) -> str:
    email = await client.rpc("get_user_email", {"user_id": user_id})
    return email or ""


async def get_accessible_users(
    client: BackendClient,
) -> tuple[list[User], dict[str, list[UserActivity]]]:
    """
    Users visible to the signed-in viewer, plus their activity grouped by user.

    Returns:
        (users, activities keyed by user id, newest first)
    """
    viewer = await client.require_user()

    profiles = await client.rpc("get_accessible_users", {"viewer_id": viewer["id"]})
    if profiles is None:
        raise BackendError("No profiles returned")

    activities: dict[str, list[UserActivity]] = {}
    if profiles:
        rows = await client.select(
            "user_activity",
            filters={"user_id": in_(p["id"] for p in profiles)},
            order="created_at",
            ascending=False,
        )
        activities = group_by((UserActivity.from_row(row) for row in rows), lambda a: a.user_id)

    users = [
        User(
            id=profile["id"],
            email=viewer.get("email", "") if profile["id"] == viewer["id"] else profile.get("email") or "",
            profile=UserProfile.from_row(profile),
        )
        for profile in profiles
    ]
    return users, activities
