"""
Catalog of mock webhook events and test card numbers.

This module is the single source of truth for the payloads the webhook
simulator synthesizes and the card numbers the mock payment processor
recognizes. It lives in core/ so both service and API layers can import
from it.
"""

import copy
from typing import Any

PAYMENT_SUCCEEDED = "payment_intent.succeeded"
PAYMENT_FAILED = "payment_intent.failed"
CHARGE_REFUNDED = "charge.refunded"

WEBHOOK_EVENTS: dict[str, dict[str, Any]] = {
    PAYMENT_SUCCEEDED: {
        "description": "Simulate a successful payment",
        "data": {
            "amount": 1000,
            "currency": "usd",
            "status": "succeeded",
        },
    },
    PAYMENT_FAILED: {
        "description": "Simulate a failed payment",
        "data": {
            "amount": 1000,
            "currency": "usd",
            "status": "failed",
            "error": {
                "code": "card_declined",
                "message": "Your card was declined",
            },
        },
    },
    CHARGE_REFUNDED: {
        "description": "Simulate a refund",
        "data": {
            "amount": 1000,
            "currency": "usd",
            "status": "refunded",
        },
    },
}


def build_event_payload(event_type: str) -> dict[str, Any]:
    """
    Return a fresh copy of the payload for *event_type*.

    Raises:
        ValueError: If the event type is not in the catalog
    """
    event = WEBHOOK_EVENTS.get(event_type)
    if event is None:
        raise ValueError(f"Unknown webhook event type: {event_type}")
    return copy.deepcopy(event["data"])


# Card numbers with a fixed outcome in the mock processor
TEST_CARDS: dict[str, str] = {
    "success": "4242424242424242",
    "decline": "4000000000000002",
    "insufficient_funds": "4000000000009995",
    "expired": "4000000000000069",
    "incorrect_cvc": "4000000000000127",
    "processing_error": "4000000000000119",
}

TEST_CARD_DESCRIPTIONS: dict[str, str] = {
    TEST_CARDS["success"]: "Always succeeds",
    TEST_CARDS["decline"]: "Always declined",
    TEST_CARDS["insufficient_funds"]: "Insufficient funds error",
    TEST_CARDS["expired"]: "Expired card error",
    TEST_CARDS["incorrect_cvc"]: "Incorrect CVC error",
    TEST_CARDS["processing_error"]: "Processing error",
}
