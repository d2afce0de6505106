"""
Listener for newly created mock webhooks.

Polls the mock_webhooks table for the caller's tenant and hands every new
row to a callback as ``{"type": event_type, "data": data}``. Rows that
existed before the listener started are not delivered.
"""

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import Any

from adapters.backend import BackendClient, BackendError, eq, gte
from core.webhook_events import PAYMENT_FAILED, PAYMENT_SUCCEEDED
from infrastructure.config.settings import settings
from services.auth import get_current_tenant_id

logger = logging.getLogger(__name__)

WebhookCallback = Callable[[dict[str, Any]], Any]


class WebhookListener:
    """Background poller for one tenant's mock webhooks."""

    def __init__(
        self,
        client: BackendClient,
        tenant_id: str,
        callback: WebhookCallback,
        poll_interval: float | None = None,
        sleep=asyncio.sleep,
    ):
        self.client = client
        self.tenant_id = tenant_id
        self.callback = callback
        self.poll_interval = (
            poll_interval if poll_interval is not None else settings.webhook_poll_interval
        )
        self.sleep = sleep
        self.is_running = False
        self._last_seen: str | None = None
        self._seen_ids: set[str] = set()
        self._task: asyncio.Task | None = None

    async def prime(self) -> None:
        """Remember the newest existing webhooks so only later ones are delivered."""
        rows = await self.client.select(
            "mock_webhooks",
            columns="id,created_at",
            filters={"tenant_id": eq(self.tenant_id)},
            order="created_at",
            ascending=False,
            limit=1,
        )
        if not rows:
            return

        newest = rows[0]["created_at"]
        # Every row sharing the newest timestamp already exists
        latest = await self.client.select(
            "mock_webhooks",
            columns="id",
            filters={"tenant_id": eq(self.tenant_id), "created_at": eq(newest)},
        )
        self._last_seen = newest
        self._seen_ids = {str(row["id"]) for row in latest} | {str(rows[0]["id"])}

    async def poll_once(self) -> int:
        """Deliver webhooks created since the last poll. Returns how many were delivered."""
        filters: dict[str, Any] = {"tenant_id": eq(self.tenant_id)}
        if self._last_seen:
            # gte plus the seen-id set covers rows sharing the last timestamp
            filters["created_at"] = gte(self._last_seen)

        rows = await self.client.select(
            "mock_webhooks",
            columns="id,event_type,data,created_at",
            filters=filters,
            order="created_at",
        )

        delivered = 0
        for row in rows:
            webhook_id = str(row["id"])
            if webhook_id in self._seen_ids:
                continue

            if row["created_at"] != self._last_seen:
                self._last_seen = row["created_at"]
                self._seen_ids = set()
            self._seen_ids.add(webhook_id)

            try:
                result = self.callback({"type": row["event_type"], "data": row.get("data") or {}})
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(
                    "Webhook listener callback failed for %s: %s",
                    webhook_id,
                    e,
                    exc_info=True,
                    extra={"webhook_id": webhook_id, "tenant_id": self.tenant_id},
                )
                continue
            delivered += 1

        return delivered

    async def start(self) -> None:
        """Prime the cursor and start polling in the background."""
        if self.is_running:
            logger.warning("Webhook listener is already running")
            return

        await self.prime()
        self.is_running = True
        self._task = asyncio.create_task(self._loop(), name=f"webhook-listener-{self.tenant_id}")
        logger.info(
            "Webhook listener started for tenant %s",
            self.tenant_id,
            extra={"tenant_id": self.tenant_id},
        )

    def stop(self) -> None:
        if not self.is_running:
            return

        self.is_running = False
        if self._task is not None:
            self._task.cancel()
            self._task = None
        logger.info("Webhook listener stopped for tenant %s", self.tenant_id)

    async def _loop(self) -> None:
        while self.is_running:
            try:
                await self.poll_once()
            except BackendError as e:
                logger.error(f"Webhook listener poll failed: {e}")

            await self.sleep(self.poll_interval)


async def setup_mock_webhook_listener(
    client: BackendClient,
    callback: WebhookCallback,
    poll_interval: float | None = None,
) -> Callable[[], None]:
    """
    Start listening for the caller's tenant.

    Returns:
        A function that stops the listener
    """
    tenant_id = await get_current_tenant_id(client)
    listener = WebhookListener(client, tenant_id, callback, poll_interval=poll_interval)
    await listener.start()
    return listener.stop


async def setup_payment_webhooks(
    client: BackendClient,
    on_payment_success: WebhookCallback,
    on_payment_failure: WebhookCallback,
    poll_interval: float | None = None,
) -> Callable[[], None]:
    """Route payment success and failure webhooks to separate callbacks."""

    def route(event: dict[str, Any]) -> Any:
        if event["type"] == PAYMENT_SUCCEEDED:
            return on_payment_success(event["data"])
        if event["type"] == PAYMENT_FAILED:
            return on_payment_failure(event["data"])
        return None

    return await setup_mock_webhook_listener(client, route, poll_interval=poll_interval)
