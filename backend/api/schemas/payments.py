"""
Mock payment and webhook request schemas.
"""

from typing import Any

from pydantic import BaseModel, Field

from core.webhook_events import TEST_CARDS


class PaymentRequest(BaseModel):
    """Test payment against one of the mock card numbers."""

    amount: float = Field(..., gt=0)
    card_number: str = Field(TEST_CARDS["success"], min_length=12, max_length=19)
    metadata: dict[str, Any] = Field(default_factory=dict)


class WebhookDeliveryRequest(BaseModel):
    event_type: str
    background: bool = False
