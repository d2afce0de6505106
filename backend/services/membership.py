"""
Membership plan operations.
"""

from typing import Any

from adapters.backend import BackendClient
from core.domain import BillingInterval, MembershipPlan, SubscriptionAction


async def create_membership_plan(
    client: BackendClient,
    name: str,
    description: str | None,
    price: float,
    interval: BillingInterval,
    trial_days: int,
    features: list[str],
) -> str:
    """Create a plan for the caller's tenant and return its id."""
    return await client.rpc(
        "create_membership_plan",
        {
            "p_name": name,
            "p_description": description,
            "p_price": price,
            "p_interval": BillingInterval(interval).value,
            "p_trial_days": trial_days,
            "p_features": features,
        },
    )


async def update_membership_plan(
    client: BackendClient,
    plan_id: str,
    updates: dict[str, Any],
) -> bool:
    """
    Update a plan. Keys missing from *updates* are sent as null, which the
    procedure treats as "leave unchanged".
    """
    interval = updates.get("interval")
    return bool(
        await client.rpc(
            "update_membership_plan",
            {
                "p_plan_id": plan_id,
                "p_name": updates.get("name"),
                "p_description": updates.get("description"),
                "p_price": updates.get("price"),
                "p_interval": BillingInterval(interval).value if interval else None,
                "p_features": updates.get("features"),
                "p_is_active": updates.get("is_active"),
            },
        )
    )


async def get_tenant_plans(client: BackendClient, tenant_id: str) -> list[MembershipPlan]:
    rows = await client.rpc("get_tenant_plans", {"p_tenant_id": tenant_id})
    return [MembershipPlan.from_row(row) for row in rows or []]


async def get_active_tenant_plans(client: BackendClient, tenant_id: str) -> list[MembershipPlan]:
    """Plans a new subscription may be created on or moved to."""
    return [plan for plan in await get_tenant_plans(client, tenant_id) if plan.is_active]


async def get_plan_subscriptions(client: BackendClient, plan_id: str) -> list[dict[str, Any]]:
    return await client.rpc("get_plan_subscriptions", {"p_plan_id": plan_id}) or []


async def manage_subscription(
    client: BackendClient,
    subscription_id: str,
    action: SubscriptionAction,
) -> bool:
    return bool(
        await client.rpc(
            "manage_subscription",
            {"p_subscription_id": subscription_id, "p_action": SubscriptionAction(action).value},
        )
    )
