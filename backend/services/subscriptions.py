"""
Member subscription lifecycle and bulk operations.

Every status transition is decided by the backend; these functions only
shape parameters. Bulk operations are started with one call and then
polled until the backend reports every item as processed or failed.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from adapters.backend import BackendClient
from core.domain import (
    BulkOperationStatus,
    MemberSubscription,
    SubscriptionStatus,
    TenantSubscription,
)
from infrastructure.config.settings import settings

logger = logging.getLogger(__name__)


async def create_subscription(
    client: BackendClient,
    user_id: str,
    plan_id: str,
    stripe_subscription_id: str | None = None,
) -> Any:
    return await client.rpc(
        "create_subscription",
        {
            "p_user_id": user_id,
            "p_plan_id": plan_id,
            "p_stripe_subscription_id": stripe_subscription_id,
        },
    )


async def create_trial_subscription(client: BackendClient, user_id: str, plan_id: str) -> Any:
    """Start a subscription in its trial period (length comes from the plan)."""
    return await client.rpc(
        "create_trial_subscription",
        {"p_user_id": user_id, "p_plan_id": plan_id},
    )


async def update_subscription_status(
    client: BackendClient,
    subscription_id: str,
    status: SubscriptionStatus,
    cancel_at_period_end: bool = False,
) -> Any:
    return await client.rpc(
        "update_subscription_status",
        {
            "p_subscription_id": subscription_id,
            "p_status": SubscriptionStatus(status).value,
            "p_cancel_at_period_end": cancel_at_period_end,
        },
    )


async def get_user_subscriptions(client: BackendClient, user_id: str) -> list[MemberSubscription]:
    rows = await client.rpc("get_user_subscriptions", {"p_user_id": user_id})
    return [MemberSubscription.from_row(row) for row in rows or []]


async def get_tenant_subscriptions(
    client: BackendClient,
    tenant_id: str,
) -> list[TenantSubscription]:
    rows = await client.rpc("get_tenant_subscriptions", {"p_tenant_id": tenant_id})
    return [TenantSubscription.from_row(row) for row in rows or []]


async def process_subscription_renewal(client: BackendClient, subscription_id: str) -> Any:
    return await client.rpc(
        "process_subscription_renewal",
        {"p_subscription_id": subscription_id},
    )


async def cancel_subscription(
    client: BackendClient,
    subscription_id: str,
    immediate: bool = False,
) -> Any:
    """Cancel now, or at the end of the current period when not *immediate*."""
    return await client.rpc(
        "cancel_subscription",
        {"p_subscription_id": subscription_id, "p_immediate": immediate},
    )


async def reactivate_subscription(client: BackendClient, subscription_id: str) -> Any:
    return await client.rpc("reactivate_subscription", {"p_subscription_id": subscription_id})


async def retry_subscription_payment(client: BackendClient, subscription_id: str) -> Any:
    """Retry the failed charge of a past-due subscription."""
    return await client.rpc("retry_subscription_payment", {"p_subscription_id": subscription_id})


async def upgrade_subscription(
    client: BackendClient,
    subscription_id: str,
    new_plan_id: str,
    immediate: bool = True,
) -> Any:
    return await client.rpc(
        "upgrade_subscription",
        {
            "p_subscription_id": subscription_id,
            "p_new_plan_id": new_plan_id,
            "p_immediate": immediate,
        },
    )


async def downgrade_subscription(
    client: BackendClient,
    subscription_id: str,
    new_plan_id: str,
) -> Any:
    """Move to a cheaper plan; takes effect at the end of the period."""
    return await client.rpc(
        "downgrade_subscription",
        {"p_subscription_id": subscription_id, "p_new_plan_id": new_plan_id},
    )


async def process_trial_expiration(
    client: BackendClient,
    subscription_id: str,
    convert_to_paid: bool,
) -> Any:
    """End a trial, either converting it to a paid subscription or canceling it."""
    return await client.rpc(
        "process_trial_expiration",
        {"p_subscription_id": subscription_id, "p_convert_to_paid": convert_to_paid},
    )


# ── Bulk operations ──────────────────────────────────────────────────────────


def _operation_id(result: Any) -> str:
    if isinstance(result, dict) and result.get("operation_id"):
        return str(result["operation_id"])
    if isinstance(result, str) and result:
        return result
    raise ValueError(f"Bulk operation did not return an operation id: {result!r}")


async def bulk_update_subscription_status(
    client: BackendClient,
    subscription_ids: Sequence[str],
    status: SubscriptionStatus,
) -> str:
    """Start a bulk status change and return the operation id."""
    result = await client.rpc(
        "bulk_update_subscription_status",
        {
            "p_subscription_ids": list(subscription_ids),
            "p_status": SubscriptionStatus(status).value,
        },
    )
    return _operation_id(result)


async def bulk_cancel_subscriptions(
    client: BackendClient,
    subscription_ids: Sequence[str],
    immediate: bool = False,
) -> str:
    result = await client.rpc(
        "bulk_cancel_subscriptions",
        {"p_subscription_ids": list(subscription_ids), "p_immediate": immediate},
    )
    return _operation_id(result)


async def bulk_convert_trials(client: BackendClient, subscription_ids: Sequence[str]) -> str:
    result = await client.rpc(
        "bulk_convert_trials",
        {"p_subscription_ids": list(subscription_ids)},
    )
    return _operation_id(result)


async def get_bulk_operation_status(
    client: BackendClient,
    operation_id: str,
) -> BulkOperationStatus | None:
    row = await client.rpc("get_bulk_operation_status", {"p_operation_id": operation_id})
    if not row:
        return None
    if isinstance(row, list):
        row = row[0]
    return BulkOperationStatus.from_row(row)


async def wait_for_bulk_operation(
    client: BackendClient,
    operation_id: str,
    poll_interval: float | None = None,
    on_progress: Callable[[BulkOperationStatus], Awaitable[None] | None] | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> BulkOperationStatus:
    """
    Poll a bulk operation until processed + failed items reach the total.

    Args:
        client: Backend client
        operation_id: Id returned when the operation was started
        poll_interval: Seconds between polls (defaults to settings)
        on_progress: Called with every status snapshot
        sleep: Awaitable sleep, replaceable in tests

    Returns:
        The final status snapshot
    """
    interval = settings.bulk_poll_interval if poll_interval is None else poll_interval

    while True:
        status = await get_bulk_operation_status(client, operation_id)

        if status is not None:
            if on_progress is not None:
                maybe = on_progress(status)
                if asyncio.iscoroutine(maybe):
                    await maybe
            if status.is_complete:
                logger.info(
                    "Bulk operation %s finished: %d processed, %d failed",
                    operation_id,
                    status.processed_items,
                    status.failed_items,
                )
                return status

        await sleep(interval)
