"""
Mock payment processing for the payments testbed.

Payments are settled by the backend's process_mock_payment procedure; the
outcome depends on the card number (see core.webhook_events.TEST_CARDS).
Calls add a random processing delay so the console behaves like it would
against a real provider.
"""

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable, Sequence
from datetime import date, datetime
from typing import Any

from adapters.backend import BackendClient, BackendError, eq, gte, in_, lte
from core.domain import (
    MockPaymentResult,
    MockTransaction,
    PaymentError,
    PaymentResult,
    TransactionStatus,
    WebhookLog,
)
from core.webhook_events import TEST_CARDS
from services.auth import get_current_tenant_id

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]

WEBHOOK_LOG_COLUMNS = (
    "id,event_type,data,delivery_attempts,last_attempt_at,delivered_at,created_at,"
    "mock_webhook_delivery_logs(attempt_number,status,error_message,created_at)"
)


async def process_mock_payment(
    client: BackendClient,
    amount: float,
    card_number: str,
    metadata: dict[str, Any] | None = None,
    sleep: Sleep = asyncio.sleep,
) -> MockPaymentResult:
    """
    Charge *amount* to a test card for the caller's tenant.

    Raises:
        BackendAuthError: Without a session
        BackendError: When the caller has no tenant or the call fails
    """
    await sleep(random.uniform(0.5, 1.5))

    tenant_id = await get_current_tenant_id(client)

    data = await client.rpc(
        "process_mock_payment",
        {
            "p_tenant_id": tenant_id,
            "p_amount": amount,
            "p_card_number": card_number,
            "p_metadata": metadata or {},
        },
    )
    return MockPaymentResult.from_row(data or {})


async def process_payment(
    client: BackendClient,
    amount: float,
    card_number: str = TEST_CARDS["success"],
    metadata: dict[str, Any] | None = None,
    sleep: Sleep = asyncio.sleep,
) -> PaymentResult:
    """
    Run a test payment and report the outcome.

    Never raises: any failure becomes an unsuccessful result with the
    ``processing_error`` code.
    """
    try:
        result = await process_mock_payment(client, amount, card_number, metadata, sleep=sleep)
        return PaymentResult(
            success=result.status == TransactionStatus.COMPLETED,
            transaction_id=result.id,
            error=result.error,
        )
    except Exception as e:
        logger.error(f"Mock payment failed: {e}")
        return PaymentResult(
            success=False,
            transaction_id="",
            error=PaymentError(
                code="processing_error",
                message=str(e) or "Payment processing failed",
            ),
        )


async def get_mock_transactions(
    client: BackendClient,
    status: TransactionStatus | None = None,
) -> list[MockTransaction]:
    """All transactions visible to the caller, newest first."""
    await client.require_user()

    filters = {"status": eq(TransactionStatus(status).value)} if status else None
    rows = await client.select(
        "mock_transactions",
        filters=filters,
        order="created_at",
        ascending=False,
    )
    return [MockTransaction.from_row(row) for row in rows]


async def get_transaction_history(
    client: BackendClient,
    tenant_id: str,
    statuses: Sequence[TransactionStatus] | None = None,
    start_date: date | datetime | None = None,
    end_date: date | datetime | None = None,
) -> list[MockTransaction]:
    """Transactions of one tenant filtered by status set and date range."""
    filters: dict[str, Any] = {"tenant_id": eq(tenant_id)}
    if statuses:
        filters["status"] = in_(TransactionStatus(s).value for s in statuses)

    created_at: list[str] = []
    if start_date:
        created_at.append(gte(start_date.isoformat()))
    if end_date:
        created_at.append(lte(end_date.isoformat()))
    if created_at:
        filters["created_at"] = created_at

    rows = await client.select(
        "mock_transactions",
        filters=filters,
        order="created_at",
        ascending=False,
    )
    return [MockTransaction.from_row(row) for row in rows]


async def refund_mock_transaction(
    client: BackendClient,
    transaction_id: str,
    sleep: Sleep = asyncio.sleep,
) -> MockTransaction:
    await client.require_user()

    await sleep(random.uniform(0.2, 0.7))

    row = await client.update(
        "mock_transactions",
        {"status": TransactionStatus.REFUNDED.value},
        {"id": eq(transaction_id)},
        single=True,
    )
    if not row:
        raise BackendError(f"Transaction {transaction_id} not found")
    return MockTransaction.from_row(row)


async def get_webhook_logs(client: BackendClient, limit: int = 10) -> list[WebhookLog]:
    """Most recent mock webhooks with their delivery attempts."""
    rows = await client.select(
        "mock_webhooks",
        columns=WEBHOOK_LOG_COLUMNS,
        order="created_at",
        ascending=False,
        limit=limit,
    )
    return [WebhookLog.from_row(row) for row in rows]
