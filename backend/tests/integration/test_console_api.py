"""
Integration tests for the console API routes.

The backend session is a mock; these tests check request shaping, list
filtering, and the mapping of backend errors to HTTP responses.
"""

import pytest

from adapters.backend import BackendAPIError, BackendAuthError, BackendConnectionError
from core.domain import User


# ============================================================================
# Health and errors
# ============================================================================


@pytest.mark.asyncio
async def test_health(async_client):
    response = await async_client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_backend_api_error_maps_to_400(async_client, mock_client):
    mock_client.rpc.side_effect = BackendAPIError("Tenant name already taken", status_code=409)

    response = await async_client.post("/api/v1/tenants", json={"name": "Acme"})

    assert response.status_code == 400
    assert response.json() == {"detail": "Tenant name already taken"}


@pytest.mark.asyncio
async def test_backend_auth_error_maps_to_401(async_client, mock_client):
    mock_client.rpc.side_effect = BackendAuthError("JWT expired")

    response = await async_client.get("/api/v1/dashboard/stats")

    assert response.status_code == 401
    assert response.json() == {"detail": "JWT expired"}


@pytest.mark.asyncio
async def test_backend_connection_error_maps_to_502(async_client, mock_client):
    mock_client.rpc.side_effect = BackendConnectionError("Cannot reach backend")

    response = await async_client.get("/api/v1/tenants")

    assert response.status_code == 502


# ============================================================================
# Auth
# ============================================================================


@pytest.mark.asyncio
async def test_sign_in_loads_current_user(async_client, mock_client):
    mock_client.sign_in_with_password.return_value = {"access_token": "jwt"}
    mock_client.rpc.return_value = [
        {"id": "user-admin", "full_name": "Ada Admin", "role": "admin", "tenant_id": "tenant-1"}
    ]

    response = await async_client.post(
        "/api/v1/auth/sign-in", json={"email": "admin@example.com", "password": "pw"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == "user-admin"
    assert body["profile"]["role"] == "admin"


@pytest.mark.asyncio
async def test_sign_up_rejects_weak_password(async_client, mock_client):
    response = await async_client.post(
        "/api/v1/auth/sign-up",
        json={"email": "new@example.com", "password": "password", "full_name": "New"},
    )

    assert response.status_code == 422
    mock_client.sign_up.assert_not_awaited()


@pytest.mark.asyncio
async def test_password_strength(async_client):
    response = await async_client.post(
        "/api/v1/auth/password-strength", json={"password": "Str0ng!Pass"}
    )

    assert response.json() == {"is_valid": True, "score": 5, "feedback": []}


# ============================================================================
# Users and tenants
# ============================================================================


@pytest.mark.asyncio
async def test_list_users_filters_by_search_and_status(async_client, mock_client):
    mock_client.rpc.return_value = [
        {"id": "u1", "full_name": "Bo Smith", "role": "user", "status": "active"},
        {"id": "u2", "full_name": "Cy Smith", "role": "user", "status": "suspended"},
        {"id": "u3", "full_name": "Di Jones", "role": "user", "status": "active"},
    ]
    mock_client.select.return_value = [{"id": "a1", "user_id": "u1", "action": "signed_in"}]

    response = await async_client.get("/api/v1/users", params={"q": "smith", "status": "active"})

    assert response.status_code == 200
    body = response.json()
    assert [item["user"]["id"] for item in body] == ["u1"]
    assert body[0]["activity"][0]["action"] == "signed_in"


@pytest.mark.asyncio
async def test_update_user_without_fields_is_422(async_client):
    response = await async_client.patch("/api/v1/users/u1", json={})

    assert response.status_code == 422
    assert response.json() == {"detail": "No fields to update"}


@pytest.mark.asyncio
async def test_list_tenants_status_filter(async_client, mock_client):
    mock_client.rpc.return_value = [
        {"id": "t1", "name": "Acme", "status": "active"},
        {"id": "t2", "name": "Globex", "status": "inactive"},
    ]

    response = await async_client.get("/api/v1/tenants", params={"status": "inactive"})

    assert [t["id"] for t in response.json()] == ["t2"]


@pytest.mark.asyncio
async def test_tenant_stats(async_client, mock_client):
    mock_client.rpc.return_value = {"total_users": 4, "active_plans": 2, "total_revenue": "99.5"}

    response = await async_client.get("/api/v1/tenants/t1/stats")

    assert response.json() == {"total_users": 4, "active_plans": 2, "total_revenue": 99.5}
    mock_client.rpc.assert_awaited_once_with("get_tenant_stats", {"p_tenant_id": "t1"})


# ============================================================================
# Plans, subscriptions and content
# ============================================================================


@pytest.mark.asyncio
async def test_create_plan(async_client, mock_client):
    mock_client.rpc.return_value = "plan-1"

    response = await async_client.post(
        "/api/v1/plans",
        json={"name": "Pro", "price": 19.99, "interval": "yearly", "features": ["Videos"]},
    )

    assert response.status_code == 201
    assert response.json() == {"id": "plan-1"}
    name, params = mock_client.rpc.await_args.args
    assert name == "create_membership_plan"
    assert params["p_interval"] == "yearly"
    assert params["p_trial_days"] == 0


@pytest.mark.asyncio
async def test_list_plans_uses_store(async_client, mock_client):
    mock_client.select.return_value = [
        {"id": "p2", "tenant_id": "t1", "name": "Gold", "description": "Everything"},
        {"id": "p1", "tenant_id": "t1", "name": "Basic", "description": None},
    ]

    response = await async_client.get("/api/v1/plans", params={"q": "every"})

    assert [p["id"] for p in response.json()] == ["p2"]


@pytest.mark.asyncio
async def test_bulk_cancel_returns_operation_id(async_client, mock_client):
    mock_client.rpc.return_value = {"operation_id": "op-7"}

    response = await async_client.post(
        "/api/v1/subscriptions/bulk/cancel",
        json={"subscription_ids": ["s1", "s2"], "immediate": True},
    )

    assert response.status_code == 202
    assert response.json() == {"operation_id": "op-7"}


@pytest.mark.asyncio
async def test_bulk_operation_status(async_client, mock_client):
    mock_client.rpc.return_value = {
        "operation_type": "bulk_cancel",
        "total_items": 2,
        "processed_items": 1,
        "failed_items": 1,
        "details": [{"id": "s2", "error": "not found"}],
    }

    response = await async_client.get("/api/v1/subscriptions/bulk/op-7")

    body = response.json()
    assert body["is_complete"] is True
    assert body["errors"] == [{"id": "s2", "error": "not found"}]


@pytest.mark.asyncio
async def test_unknown_bulk_operation_is_404(async_client, mock_client):
    mock_client.rpc.return_value = None

    response = await async_client.get("/api/v1/subscriptions/bulk/missing")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_create_trial_subscription(async_client, mock_client):
    mock_client.rpc.return_value = "sub-1"

    response = await async_client.post(
        "/api/v1/subscriptions", json={"user_id": "u1", "plan_id": "p1", "trial": True}
    )

    assert response.status_code == 201
    mock_client.rpc.assert_awaited_once_with(
        "create_trial_subscription", {"p_user_id": "u1", "p_plan_id": "p1"}
    )


@pytest.mark.asyncio
async def test_verify_access_defaults_to_current_user(async_client, mock_client):
    mock_client.select.side_effect = [[{"plan_id": "p1"}], [{"access_type": "full"}]]

    response = await async_client.get("/api/v1/content/c1/verify-access")

    assert response.json() == {"has_access": True, "access_type": "full"}
    first_filters = mock_client.select.await_args_list[0].kwargs["filters"]
    assert first_filters["user_id"] == "eq.user-admin"


# ============================================================================
# Payments and webhooks
# ============================================================================


@pytest.mark.asyncio
async def test_webhook_event_catalog(async_client):
    response = await async_client.get("/api/v1/payments/webhooks/events")

    types = [event["type"] for event in response.json()]
    assert types == ["payment_intent.succeeded", "payment_intent.failed", "charge.refunded"]


@pytest.mark.asyncio
async def test_deliver_unknown_webhook_is_422(async_client, mock_client):
    response = await async_client.post(
        "/api/v1/payments/webhooks", json={"event_type": "invoice.paid"}
    )

    assert response.status_code == 422
    mock_client.insert.assert_not_awaited()


@pytest.mark.asyncio
async def test_deliver_webhook(async_client, mock_client):
    from api.dependencies import get_webhook_simulator
    from main import app
    from services.webhook_simulator import WebhookSimulator

    async def delivered():
        return None

    async def no_sleep(delay):
        return None

    mock_client.select.return_value = {"tenant_id": "tenant-1"}
    mock_client.insert.return_value = {"id": "wh-9"}
    app.dependency_overrides[get_webhook_simulator] = lambda: WebhookSimulator(
        mock_client, sleep=no_sleep, network=delivered
    )

    response = await async_client.post(
        "/api/v1/payments/webhooks", json={"event_type": "payment_intent.succeeded"}
    )

    assert response.status_code == 200
    assert response.json() == {"webhook_id": "wh-9", "status": "delivered"}


@pytest.mark.asyncio
async def test_webhook_for_user_without_tenant_is_400(async_client, mock_client):
    mock_client.select.return_value = {"tenant_id": None}

    response = await async_client.post(
        "/api/v1/payments/webhooks", json={"event_type": "payment_intent.succeeded"}
    )

    assert response.status_code == 400
    assert response.json() == {"detail": "No tenant ID found"}
    mock_client.insert.assert_not_awaited()


@pytest.mark.asyncio
async def test_unknown_webhook_job_is_404(async_client):
    response = await async_client.get("/api/v1/payments/webhooks/jobs/nope")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_test_cards(async_client):
    response = await async_client.get("/api/v1/payments/test-cards")

    cards = {card["name"]: card for card in response.json()}
    assert cards["success"]["number"] == "4242424242424242"
    assert cards["decline"]["description"] == "Always declined"


@pytest.mark.asyncio
async def test_background_webhook_job_can_be_polled(async_client, mock_client):
    from api.dependencies import get_webhook_simulator
    from main import app
    from services.delivery_queue import delivery_queue
    from services.webhook_simulator import WebhookSimulator

    async def delivered():
        return None

    async def no_sleep(delay):
        return None

    mock_client.select.return_value = {"tenant_id": "tenant-1"}
    app.dependency_overrides[get_webhook_simulator] = lambda: WebhookSimulator(
        mock_client, sleep=no_sleep, network=delivered
    )

    response = await async_client.post(
        "/api/v1/payments/webhooks",
        json={"event_type": "charge.refunded", "background": True},
    )
    assert response.json()["status"] == "running"
    job_id = response.json()["job_id"]

    await delivery_queue.wait(job_id)
    job = await async_client.get(f"/api/v1/payments/webhooks/jobs/{job_id}")

    assert job.status_code == 200
    assert job.json()["status"] == "delivered"
    assert job.json()["event_type"] == "charge.refunded"


@pytest.mark.asyncio
async def test_tenant_changes_require_admin(async_client, mock_client, member_user):
    from api.dependencies import get_current_user
    from main import app

    async def override_member() -> User:
        return member_user

    app.dependency_overrides[get_current_user] = override_member

    response = await async_client.delete("/api/v1/tenants/t1")

    assert response.status_code == 403
    mock_client.rpc.assert_not_awaited()
