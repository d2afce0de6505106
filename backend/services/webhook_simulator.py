"""
Mock webhook delivery simulator.

Creates a webhook record for an event from the catalog, then "delivers" it
with simulated network latency and transient failures, retrying with
exponential backoff. Every attempt is written to the backend's delivery log
so the console can show the history.

Usage::

    simulator = WebhookSimulator(client)
    delivered = await simulator.run("payment_intent.succeeded")
"""

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime

from adapters.backend import BackendClient, BackendError, eq
from core.domain import DeliveryStatus
from core.webhook_events import build_event_payload
from infrastructure.config.settings import settings
from services.auth import get_current_tenant_id

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]
Clock = Callable[[], datetime]


class SimulatedTimeoutError(Exception):
    """Raised by the simulated network when an attempt times out."""

    pass


class WebhookDeliveryError(Exception):
    """Raised by deliver_webhook when every attempt failed."""

    def __init__(self, webhook_id: str, attempts: int):
        super().__init__(f"Webhook {webhook_id} was not delivered after {attempts} attempts")
        self.webhook_id = webhook_id
        self.attempts = attempts


def backoff_delay(attempt: int) -> float:
    """Seconds to wait after failed attempt *attempt* (1-based): 2, 4, 8, ..."""
    return float(2 ** attempt)


class WebhookSimulator:
    """Simulates delivery of mock webhooks with retries."""

    def __init__(
        self,
        client: BackendClient,
        max_retries: int | None = None,
        failure_rate: float | None = None,
        min_latency_ms: int | None = None,
        max_latency_ms: int | None = None,
        rng: random.Random | None = None,
        sleep: Sleep = asyncio.sleep,
        clock: Clock | None = None,
        network: Callable[[], Awaitable[None]] | None = None,
    ):
        """
        Args:
            client: Backend client used to store webhooks and attempt logs
            max_retries: Maximum delivery attempts (defaults to settings)
            failure_rate: Probability that an attempt times out
            min_latency_ms: Lower bound of simulated latency
            max_latency_ms: Upper bound of simulated latency
            rng: Random source for latency and failures
            sleep: Awaitable sleep used for latency and backoff
            clock: Returns the current time for attempt timestamps
            network: Replaces the simulated network call; any exception it raises
                fails the attempt
        """
        self.client = client
        self.max_retries = max_retries if max_retries is not None else settings.webhook_max_retries
        self.failure_rate = (
            failure_rate if failure_rate is not None else settings.webhook_failure_rate
        )
        self.min_latency_ms = (
            min_latency_ms if min_latency_ms is not None else settings.webhook_min_latency_ms
        )
        self.max_latency_ms = (
            max_latency_ms if max_latency_ms is not None else settings.webhook_max_latency_ms
        )
        self.rng = rng or random.Random()
        self.sleep = sleep
        self.clock = clock or (lambda: datetime.now(UTC))
        self._network = network or self.simulate_network

        if self.max_retries < 1:
            raise ValueError("max_retries must be at least 1")

    async def simulate_network(self) -> None:
        """Wait a random latency, then fail with probability ``failure_rate``."""
        latency_ms = self.rng.uniform(self.min_latency_ms, self.max_latency_ms)
        await self.sleep(latency_ms / 1000)
        if self.rng.random() < self.failure_rate:
            raise SimulatedTimeoutError("Network timeout")

    async def create_webhook(self, event_type: str) -> str:
        """Store a pending webhook for the caller's tenant and return its id."""
        payload = build_event_payload(event_type)
        tenant_id = await get_current_tenant_id(self.client)

        row = await self.client.insert(
            "mock_webhooks",
            {
                "tenant_id": tenant_id,
                "event_type": event_type,
                "data": payload,
                "delivery_attempts": 0,
            },
        )
        webhook_id = str(row["id"])
        logger.info(
            "Created mock webhook %s (%s)",
            webhook_id,
            event_type,
            extra={"webhook_id": webhook_id, "tenant_id": tenant_id},
        )
        return webhook_id

    async def _log_attempt(
        self,
        webhook_id: str,
        attempt: int,
        status: DeliveryStatus,
        error_message: str | None,
    ) -> None:
        """
        Record one attempt.

        The delivery-log row is the record of the attempt; only a failure to
        insert it raises. A failed counter update on ``mock_webhooks`` is
        logged and the attempt keeps its status.
        """
        now = self.clock().isoformat()
        await self.client.insert(
            "mock_webhook_delivery_logs",
            {
                "webhook_id": webhook_id,
                "attempt_number": attempt,
                "status": status.value,
                "error_message": error_message,
            },
        )
        values = {"delivery_attempts": attempt, "last_attempt_at": now}
        if status == DeliveryStatus.SUCCESS:
            values["delivered_at"] = now
        try:
            await self.client.update("mock_webhooks", values, {"id": eq(webhook_id)})
        except BackendError as e:
            logger.error(
                "Failed to update counters of webhook %s after attempt %d: %s",
                webhook_id,
                attempt,
                e,
                extra={"webhook_id": webhook_id, "attempt": attempt},
            )

    async def _attempt(self, webhook_id: str, attempt: int) -> bool:
        """Run one attempt and log it exactly once. Returns True on success."""
        try:
            await self._network()
        except Exception as e:
            status, error_message = DeliveryStatus.FAILED, str(e) or type(e).__name__
        else:
            status, error_message = DeliveryStatus.SUCCESS, None

        try:
            await self._log_attempt(webhook_id, attempt, status, error_message)
        except BackendError as e:
            # An attempt that cannot be recorded is not a delivery
            logger.error(
                "Failed to log attempt %d of webhook %s: %s",
                attempt,
                webhook_id,
                e,
                extra={"webhook_id": webhook_id, "attempt": attempt},
            )
            return False

        if status == DeliveryStatus.FAILED:
            logger.warning(
                "Webhook %s attempt %d/%d failed: %s",
                webhook_id,
                attempt,
                self.max_retries,
                error_message,
                extra={"webhook_id": webhook_id, "attempt": attempt},
            )
            return False
        return True

    async def deliver(self, webhook_id: str) -> bool:
        """
        Attempt delivery up to ``max_retries`` times.

        Waits ``2**n`` seconds after failed attempt n. Returns False once
        every attempt failed; delivery failures are never raised.
        """
        for attempt in range(1, self.max_retries + 1):
            if await self._attempt(webhook_id, attempt):
                logger.info(
                    "Webhook %s delivered on attempt %d",
                    webhook_id,
                    attempt,
                    extra={"webhook_id": webhook_id, "attempt": attempt},
                )
                return True

            if attempt < self.max_retries:
                await self.sleep(backoff_delay(attempt))

        await self._mark_undelivered(webhook_id)
        return False

    async def _mark_undelivered(self, webhook_id: str) -> None:
        logger.error(
            "Webhook %s not delivered after %d attempts",
            webhook_id,
            self.max_retries,
            extra={"webhook_id": webhook_id},
        )
        try:
            await self.client.update("mock_webhooks", {"delivered_at": None}, {"id": eq(webhook_id)})
        except BackendError as e:
            logger.error("Failed to mark webhook %s undelivered: %s", webhook_id, e)

    async def run(self, event_type: str) -> bool:
        """Create a webhook for *event_type* and deliver it."""
        webhook_id = await self.create_webhook(event_type)
        return await self.deliver(webhook_id)

    async def deliver_webhook(self, event_type: str) -> str:
        """
        Create and deliver a webhook, returning its id.

        Raises:
            WebhookDeliveryError: If every attempt failed
        """
        webhook_id = await self.create_webhook(event_type)
        if not await self.deliver(webhook_id):
            raise WebhookDeliveryError(webhook_id, self.max_retries)
        return webhook_id
