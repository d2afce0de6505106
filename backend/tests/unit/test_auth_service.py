"""
Unit tests for authentication and user profile operations.
"""

import pytest

from adapters.backend import BackendAPIError, BackendError
from core.domain import User, UserRole, UserStatus
from services import auth


@pytest.mark.asyncio
async def test_sign_up_creates_user_profile(mock_client):
    mock_client.sign_up.return_value = {"user": {"id": "u-new"}, "session": None}

    data = await auth.sign_up(mock_client, "new@example.com", "Secret123!", "New Person")

    assert data["user"]["id"] == "u-new"
    mock_client.insert.assert_awaited_once_with(
        "user_profiles",
        {"id": "u-new", "full_name": "New Person", "role": UserRole.USER.value},
    )


@pytest.mark.asyncio
async def test_sign_up_without_user_skips_profile(mock_client):
    mock_client.sign_up.return_value = {"user": None, "session": None}

    await auth.sign_up(mock_client, "new@example.com", "Secret123!", "New Person")

    mock_client.insert.assert_not_awaited()


@pytest.mark.asyncio
async def test_reset_password_redirects_to_console(mock_client):
    await auth.reset_password(mock_client, "a@example.com")

    mock_client.reset_password_for_email.assert_awaited_once_with(
        "a@example.com", redirect_to="http://localhost:3000/reset-password"
    )


@pytest.mark.asyncio
async def test_get_current_user_signed_out(mock_client):
    mock_client.get_user.return_value = None

    assert await auth.get_current_user(mock_client) is None
    mock_client.rpc.assert_not_awaited()


@pytest.mark.asyncio
async def test_get_current_user_with_profile(mock_client):
    mock_client.rpc.return_value = [
        {"id": "someone-else", "full_name": "Other", "role": "user"},
        {"id": "user-admin", "full_name": "Ada Admin", "role": "admin", "tenant_id": "tenant-1"},
    ]

    user = await auth.get_current_user(mock_client)

    assert user.email == "admin@example.com"
    assert user.full_name == "Ada Admin"
    assert user.tenant_id == "tenant-1"
    mock_client.rpc.assert_awaited_once_with("get_accessible_users", {"viewer_id": "user-admin"})


@pytest.mark.asyncio
async def test_get_current_user_profile_error_returns_none(mock_client):
    mock_client.rpc.side_effect = BackendAPIError("permission denied", status_code=400)

    assert await auth.get_current_user(mock_client) is None


@pytest.mark.asyncio
async def test_get_current_tenant_id(mock_client):
    mock_client.select.return_value = {"tenant_id": "tenant-9"}

    assert await auth.get_current_tenant_id(mock_client) == "tenant-9"


@pytest.mark.asyncio
async def test_get_current_tenant_id_missing(mock_client):
    mock_client.select.return_value = {"tenant_id": None}

    with pytest.raises(BackendError, match="No tenant ID found"):
        await auth.get_current_tenant_id(mock_client)


@pytest.mark.asyncio
async def test_update_user_profile_logs_activity(mock_client):
    await auth.update_user_profile(mock_client, "u1", {"full_name": "Renamed"})

    mock_client.update.assert_awaited_once_with("user_profiles", {"full_name": "Renamed"}, {"id": "eq.u1"})
    mock_client.rpc.assert_awaited_once_with(
        "log_user_activity",
        {"p_user_id": "u1", "p_action": "profile_updated", "p_details": {"full_name": "Renamed"}},
    )


@pytest.mark.asyncio
async def test_bulk_update_user_status_updates_each_user(mock_client):
    await auth.bulk_update_user_status(mock_client, ["u1", "u2", "u3"], UserStatus.SUSPENDED)

    assert mock_client.update.await_count == 3
    updated_ids = {call.args[2]["id"] for call in mock_client.update.await_args_list}
    assert updated_ids == {"eq.u1", "eq.u2", "eq.u3"}
    assert all(call.args[1] == {"status": "suspended"} for call in mock_client.update.await_args_list)


@pytest.mark.asyncio
async def test_request_password_reset_records_activity(mock_client):
    await auth.request_password_reset(mock_client, User(id="u1", email="u1@example.com"))

    mock_client.reset_password_for_email.assert_awaited_once()
    name, params = mock_client.rpc.await_args.args
    assert name == "log_user_activity"
    assert params["p_action"] == "password_reset_requested"
    assert "requested_at" in params["p_details"]


@pytest.mark.asyncio
async def test_delete_user_and_email_lookup(mock_client):
    await auth.delete_user(mock_client, "u1")
    mock_client.rpc.assert_awaited_with("delete_user", {"target_user_id": "u1"})

    mock_client.rpc.return_value = None
    assert await auth.get_user_email(mock_client, "u1") == ""


@pytest.mark.asyncio
async def test_get_user_activity_newest_first(mock_client):
    mock_client.select.return_value = [
        {"id": "a2", "user_id": "u1", "action": "profile_updated", "created_at": "2024-01-02T00:00:00Z"},
        {"id": "a1", "user_id": "u1", "action": "signed_in", "created_at": "2024-01-01T00:00:00Z"},
    ]

    activity = await auth.get_user_activity(mock_client, "u1")

    assert [a.id for a in activity] == ["a2", "a1"]
    kwargs = mock_client.select.await_args.kwargs
    assert kwargs["order"] == "created_at"
    assert kwargs["ascending"] is False


@pytest.mark.asyncio
async def test_get_accessible_users_groups_activity(mock_client):
    mock_client.rpc.return_value = [
        {"id": "user-admin", "full_name": "Ada Admin", "role": "admin"},
        {"id": "u2", "full_name": "Bo", "role": "user", "email": "bo@example.com"},
    ]
    mock_client.select.return_value = [
        {"id": "a1", "user_id": "u2", "action": "signed_in"},
        {"id": "a2", "user_id": "user-admin", "action": "profile_updated"},
        {"id": "a3", "user_id": "u2", "action": "profile_updated"},
    ]

    users, activities = await auth.get_accessible_users(mock_client)

    assert [u.id for u in users] == ["user-admin", "u2"]
    assert users[0].email == "admin@example.com"
    assert users[1].email == "bo@example.com"
    assert [a.id for a in activities["u2"]] == ["a1", "a3"]
    assert mock_client.select.await_args.kwargs["filters"] == {"user_id": "in.(user-admin,u2)"}


@pytest.mark.asyncio
async def test_get_accessible_users_none_is_error(mock_client):
    mock_client.rpc.return_value = None

    with pytest.raises(BackendError, match="No profiles returned"):
        await auth.get_accessible_users(mock_client)
