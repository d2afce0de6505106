"""
Payments testbed API routes: mock payments, transactions, and webhooks.
"""

import logging

from fastapi import APIRouter, HTTPException, Query, status

from api.dependencies import BackendDep, CurrentUser, SimulatorDep
from api.schemas.payments import PaymentRequest, WebhookDeliveryRequest
from core.domain import TransactionStatus
from core.formatting import format_currency
from core.webhook_events import TEST_CARD_DESCRIPTIONS, TEST_CARDS, WEBHOOK_EVENTS
from services import payments
from services.delivery_queue import delivery_queue, schedule_delivery
from services.webhook_simulator import WebhookDeliveryError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.get("/test-cards")
async def test_cards():
    return [
        {"name": name, "number": number, "description": TEST_CARD_DESCRIPTIONS[number]}
        for name, number in TEST_CARDS.items()
    ]


@router.post("")
async def process_payment(body: PaymentRequest, client: BackendDep, current_user: CurrentUser):
    """Charge a test card. Failures come back as an unsuccessful result, not an error."""
    result = await payments.process_payment(client, body.amount, body.card_number, body.metadata)
    logger.info(
        "Test payment of %s: %s",
        format_currency(body.amount),
        "succeeded" if result.success else "failed",
    )
    return result


@router.get("/transactions")
async def list_transactions(
    client: BackendDep,
    current_user: CurrentUser,
    transaction_status: TransactionStatus | None = Query(None, alias="status"),
):
    return await payments.get_mock_transactions(client, transaction_status)


@router.post("/transactions/{transaction_id}/refund")
async def refund_transaction(transaction_id: str, client: BackendDep, current_user: CurrentUser):
    return await payments.refund_mock_transaction(client, transaction_id)


# ============================================================================
# Webhooks
# ============================================================================


@router.get("/webhooks/events")
async def webhook_events():
    return [
        {"type": event_type, "description": event["description"]}
        for event_type, event in WEBHOOK_EVENTS.items()
    ]


@router.get("/webhooks/logs")
async def webhook_logs(
    client: BackendDep,
    current_user: CurrentUser,
    limit: int = Query(10, ge=1, le=100),
):
    return await payments.get_webhook_logs(client, limit)


@router.post("/webhooks")
async def deliver_webhook(
    body: WebhookDeliveryRequest,
    simulator: SimulatorDep,
    current_user: CurrentUser,
):
    """
    Create and deliver a mock webhook.

    With ``background`` set the delivery runs after the response and the
    returned job id can be polled.
    """
    if body.event_type not in WEBHOOK_EVENTS:
        raise ValueError(f"Unknown webhook event type: {body.event_type}")

    if body.background:
        job_id = schedule_delivery(simulator, body.event_type)
        return {"job_id": job_id, "status": "running"}

    try:
        webhook_id = await simulator.deliver_webhook(body.event_type)
    except WebhookDeliveryError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    return {"webhook_id": webhook_id, "status": "delivered"}


@router.get("/webhooks/jobs/{job_id}")
async def webhook_job(job_id: str, current_user: CurrentUser):
    job = delivery_queue.get_status(job_id)
    if job is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
    return job
