"""
Content gating: access rules linking plans to content items.
"""

import logging
from typing import Any

from adapters.backend import BackendClient, eq, in_
from core.domain import AccessDecision, AccessRule, AccessType, ContentItem, SubscriptionStatus

logger = logging.getLogger(__name__)

ACCESS_RULE_COLUMNS = "id,content_id,plan_id,access_type,created_at"


async def create_access_rule(
    client: BackendClient,
    content_id: str,
    plan_id: str,
    access_type: AccessType = AccessType.FULL,
) -> AccessRule:
    row = await client.insert(
        "content_access",
        {
            "content_id": content_id,
            "plan_id": plan_id,
            "access_type": AccessType(access_type).value,
        },
    )
    return AccessRule.from_row(row)


async def get_content_access(client: BackendClient, content_id: str) -> list[AccessRule]:
    rows = await client.select(
        "content_access",
        columns=ACCESS_RULE_COLUMNS,
        filters={"content_id": eq(content_id)},
    )
    return [AccessRule.from_row(row) for row in rows]


async def update_access_rule(
    client: BackendClient,
    rule_id: str,
    updates: dict[str, Any],
) -> AccessRule:
    row = await client.update("content_access", updates, {"id": eq(rule_id)}, single=True)
    return AccessRule.from_row(row)


async def delete_access_rule(client: BackendClient, rule_id: str) -> None:
    await client.delete("content_access", {"id": eq(rule_id)})


async def verify_access(client: BackendClient, content_id: str, user_id: str) -> AccessDecision:
    """
    Decide a user's access to a content item.

    The user needs an active subscription on at least one plan with a rule
    for the item. Full access wins over preview when several plans apply.
    """
    subscriptions = await client.select(
        "member_subscriptions",
        columns="plan_id",
        filters={"user_id": eq(user_id), "status": eq(SubscriptionStatus.ACTIVE.value)},
    )
    if not subscriptions:
        return AccessDecision.denied()

    rules = await client.select(
        "content_access",
        columns="access_type",
        filters={
            "content_id": eq(content_id),
            "plan_id": in_(s["plan_id"] for s in subscriptions),
        },
    )
    if not rules:
        return AccessDecision.denied()

    has_full_access = any(rule["access_type"] == AccessType.FULL.value for rule in rules)
    return AccessDecision(
        has_access=True,
        access_type=AccessType.FULL if has_full_access else AccessType.PREVIEW,
    )


async def get_content_preview(client: BackendClient, content_id: str) -> str | None:
    row = await client.select(
        "content_items",
        columns="preview_content",
        filters={"id": eq(content_id)},
        single=True,
    )
    return (row or {}).get("preview_content") or None


async def update_content_preview(client: BackendClient, content_id: str, content: str) -> None:
    await client.update("content_items", {"preview_content": content}, {"id": eq(content_id)})


async def get_content_items(
    client: BackendClient,
    tenant_id: str | None = None,
) -> list[ContentItem]:
    """Content items, newest first, optionally limited to one tenant."""
    filters = {"tenant_id": eq(tenant_id)} if tenant_id else None
    rows = await client.select(
        "content_items",
        filters=filters,
        order="created_at",
        ascending=False,
    )
    return [ContentItem.from_row(row) for row in rows]
