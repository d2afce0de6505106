"""
User management API routes.
"""

from fastapi import APIRouter, Query, status

from api.dependencies import BackendDep, CurrentUser
from api.schemas.users import BulkUserStatusRequest, UserUpdateRequest
from core.domain import User
from core.filters import filter_records
from services import auth

router = APIRouter(prefix="/users", tags=["Users"])

USER_SEARCH_FIELDS = ("email", "profile.full_name")


@router.get("")
async def list_users(
    client: BackendDep,
    current_user: CurrentUser,
    q: str | None = Query(None, description="Search by name or email"),
    user_status: str | None = Query(None, alias="status"),
):
    """Users the caller may see, each with their recent activity."""
    users, activities = await auth.get_accessible_users(client)
    users = filter_records(
        users,
        query=q,
        fields=USER_SEARCH_FIELDS,
        status=user_status,
        status_field="profile.status",
    )
    return [{"user": user, "activity": activities.get(user.id, [])} for user in users]


@router.post("/bulk-status", status_code=status.HTTP_204_NO_CONTENT)
async def bulk_update_status(
    body: BulkUserStatusRequest,
    client: BackendDep,
    current_user: CurrentUser,
):
    await auth.bulk_update_user_status(client, body.user_ids, body.status)


@router.get("/{user_id}/activity")
async def user_activity(user_id: str, client: BackendDep, current_user: CurrentUser):
    return await auth.get_user_activity(client, user_id)


@router.get("/{user_id}/email")
async def user_email(user_id: str, client: BackendDep, current_user: CurrentUser):
    return {"email": await auth.get_user_email(client, user_id)}


@router.patch("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_user(
    user_id: str,
    body: UserUpdateRequest,
    client: BackendDep,
    current_user: CurrentUser,
):
    data = body.model_dump(mode="json", exclude_none=True)
    if not data:
        raise ValueError("No fields to update")
    await auth.update_user_profile(client, user_id, data)


@router.post("/{user_id}/password-reset", status_code=status.HTTP_202_ACCEPTED)
async def send_password_reset(user_id: str, client: BackendDep, current_user: CurrentUser):
    """Email the user a reset link and record it in their activity."""
    email = await auth.get_user_email(client, user_id)
    if not email:
        raise ValueError(f"User {user_id} has no email address")
    await auth.request_password_reset(client, User(id=user_id, email=email))
    return {"message": "Password reset instructions sent"}


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: str, client: BackendDep, current_user: CurrentUser):
    await auth.delete_user(client, user_id)
