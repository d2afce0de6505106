"""
Unit tests for display formatting, password strength and the webhook catalog.
"""

from datetime import date, datetime

import pytest

from core.formatting import format_currency, format_date
from core.security import validate_password_strength
from core.webhook_events import (
    CHARGE_REFUNDED,
    PAYMENT_FAILED,
    TEST_CARD_DESCRIPTIONS,
    TEST_CARDS,
    WEBHOOK_EVENTS,
    build_event_payload,
)


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def test_format_date():
    assert format_date(date(2024, 1, 5)) == "January 5, 2024"
    assert format_date(datetime(2023, 12, 25, 18, 30)) == "December 25, 2023"


@pytest.mark.parametrize(
    "amount, expected",
    [(1234.5, "$1,234.50"), (0, "$0.00"), (-3, "-$3.00"), (1000000, "$1,000,000.00")],
)
def test_format_currency(amount, expected):
    assert format_currency(amount) == expected


# ---------------------------------------------------------------------------
# Password strength
# ---------------------------------------------------------------------------


def test_strong_password():
    result = validate_password_strength("Str0ng!Pass")
    assert result.is_valid
    assert result.score == 5
    assert result.feedback == []


def test_four_checks_is_still_valid():
    result = validate_password_strength("Str0ngPass")
    assert result.is_valid
    assert result.score == 4
    assert result.feedback == ["Include at least one special character"]


def test_weak_password_feedback():
    result = validate_password_strength("abc")
    assert not result.is_valid
    assert result.score == 1
    assert result.feedback == [
        "Password must be at least 8 characters long",
        "Include at least one uppercase letter",
        "Include at least one number",
        "Include at least one special character",
    ]


# ---------------------------------------------------------------------------
# Webhook catalog
# ---------------------------------------------------------------------------


def test_build_event_payload_returns_copy():
    payload = build_event_payload(PAYMENT_FAILED)
    payload["error"]["code"] = "changed"

    assert WEBHOOK_EVENTS[PAYMENT_FAILED]["data"]["error"]["code"] == "card_declined"
    assert build_event_payload(CHARGE_REFUNDED)["status"] == "refunded"


def test_unknown_event_payload():
    with pytest.raises(ValueError):
        build_event_payload("customer.created")


def test_every_test_card_is_described():
    assert set(TEST_CARD_DESCRIPTIONS) == set(TEST_CARDS.values())
