"""
Unit tests for the polling webhook listener.
"""

import pytest

from core.webhook_events import CHARGE_REFUNDED, PAYMENT_FAILED, PAYMENT_SUCCEEDED
from services.webhook_listener import (
    WebhookListener,
    setup_mock_webhook_listener,
    setup_payment_webhooks,
)


def _row(webhook_id: str, event_type: str, created_at: str, data: dict | None = None) -> dict:
    return {
        "id": webhook_id,
        "event_type": event_type,
        "data": data or {"amount": 1000},
        "created_at": created_at,
    }


@pytest.mark.asyncio
async def test_poll_delivers_new_rows_as_events(mock_client):
    events = []
    listener = WebhookListener(mock_client, "tenant-1", events.append)
    mock_client.select.return_value = [
        _row("wh-1", PAYMENT_SUCCEEDED, "2024-01-05T10:00:00+00:00", {"amount": 500}),
        _row("wh-2", PAYMENT_FAILED, "2024-01-05T10:00:01+00:00"),
    ]

    assert await listener.poll_once() == 2
    assert events == [
        {"type": PAYMENT_SUCCEEDED, "data": {"amount": 500}},
        {"type": PAYMENT_FAILED, "data": {"amount": 1000}},
    ]


@pytest.mark.asyncio
async def test_poll_skips_rows_already_seen(mock_client):
    events = []
    listener = WebhookListener(mock_client, "tenant-1", events.append)
    first = _row("wh-1", PAYMENT_SUCCEEDED, "2024-01-05T10:00:00+00:00")
    mock_client.select.return_value = [first]
    await listener.poll_once()

    mock_client.select.return_value = [
        first,
        _row("wh-2", CHARGE_REFUNDED, "2024-01-05T10:00:00+00:00"),
    ]

    assert await listener.poll_once() == 1
    assert [e["type"] for e in events] == [PAYMENT_SUCCEEDED, CHARGE_REFUNDED]
    filters = mock_client.select.call_args.kwargs["filters"]
    assert filters == {"tenant_id": "eq.tenant-1", "created_at": "gte.2024-01-05T10:00:00+00:00"}


@pytest.mark.asyncio
async def test_prime_ignores_existing_rows(mock_client):
    events = []
    listener = WebhookListener(mock_client, "tenant-1", events.append)
    existing = {"id": "wh-old", "created_at": "2024-01-01T00:00:00+00:00"}
    mock_client.select.return_value = [existing]
    await listener.prime()

    mock_client.select.return_value = [
        _row("wh-old", PAYMENT_SUCCEEDED, "2024-01-01T00:00:00+00:00"),
    ]

    assert await listener.poll_once() == 0
    assert events == []


@pytest.mark.asyncio
async def test_prime_ignores_all_rows_sharing_newest_timestamp(mock_client):
    events = []
    listener = WebhookListener(mock_client, "tenant-1", events.append)
    stamp = "2024-01-01T00:00:00+00:00"
    mock_client.select.side_effect = [
        [{"id": "wh-b", "created_at": stamp}],
        [{"id": "wh-a"}, {"id": "wh-b"}],
    ]
    await listener.prime()

    prime_filters = mock_client.select.call_args.kwargs["filters"]
    assert prime_filters == {"tenant_id": "eq.tenant-1", "created_at": f"eq.{stamp}"}

    mock_client.select.side_effect = None
    mock_client.select.return_value = [
        _row("wh-a", PAYMENT_SUCCEEDED, stamp),
        _row("wh-b", PAYMENT_FAILED, stamp),
        _row("wh-c", CHARGE_REFUNDED, "2024-01-01T00:00:05+00:00"),
    ]

    assert await listener.poll_once() == 1
    assert [e["type"] for e in events] == [CHARGE_REFUNDED]


@pytest.mark.asyncio
async def test_failing_callback_does_not_stop_later_deliveries(mock_client):
    received = []

    async def callback(event):
        if not received:
            received.append("raised")
            raise RuntimeError("handler crashed")
        received.append(event["type"])

    listener = WebhookListener(mock_client, "tenant-1", callback)
    mock_client.select.return_value = [
        _row("wh-1", PAYMENT_SUCCEEDED, "2024-01-05T10:00:00+00:00"),
        _row("wh-2", PAYMENT_FAILED, "2024-01-05T10:00:01+00:00"),
    ]

    assert await listener.poll_once() == 1
    assert received == ["raised", PAYMENT_FAILED]


@pytest.mark.asyncio
async def test_loop_keeps_polling_after_callback_error(mock_client):
    polls = []

    def callback(event):
        raise RuntimeError("handler crashed")

    async def sleep(delay):
        polls.append(delay)
        if len(polls) == 2:
            listener.stop()

    listener = WebhookListener(mock_client, "tenant-1", callback, poll_interval=5, sleep=sleep)
    listener.is_running = True
    mock_client.select.return_value = [_row("wh-1", PAYMENT_SUCCEEDED, "2024-01-05T10:00:00+00:00")]

    await listener._loop()

    assert polls == [5, 5]
    assert mock_client.select.await_count == 2


@pytest.mark.asyncio
async def test_async_callback_is_awaited(mock_client):
    received = []

    async def callback(event):
        received.append(event["type"])

    listener = WebhookListener(mock_client, "tenant-1", callback)
    mock_client.select.return_value = [_row("wh-1", PAYMENT_SUCCEEDED, "2024-01-05T10:00:00+00:00")]

    await listener.poll_once()

    assert received == [PAYMENT_SUCCEEDED]


@pytest.mark.asyncio
async def test_setup_returns_unsubscribe(mock_client):
    mock_client.select.side_effect = [
        {"tenant_id": "tenant-1"},  # profile lookup
        [],  # prime
    ]

    unsubscribe = await setup_mock_webhook_listener(mock_client, lambda event: None, poll_interval=60)

    assert callable(unsubscribe)
    unsubscribe()
    # Stopping twice is harmless
    unsubscribe()


@pytest.mark.asyncio
async def test_payment_webhooks_routed_by_type(mock_client, monkeypatch):
    captured = {}

    async def fake_setup(client, callback, poll_interval=None):
        captured["callback"] = callback
        return lambda: None

    monkeypatch.setattr("services.webhook_listener.setup_mock_webhook_listener", fake_setup)
    successes, failures = [], []

    await setup_payment_webhooks(mock_client, successes.append, failures.append)
    route = captured["callback"]
    route({"type": PAYMENT_SUCCEEDED, "data": {"amount": 1}})
    route({"type": PAYMENT_FAILED, "data": {"amount": 2}})
    route({"type": CHARGE_REFUNDED, "data": {"amount": 3}})

    assert successes == [{"amount": 1}]
    assert failures == [{"amount": 2}]
