"""
Membership plan request schemas.
"""

from pydantic import BaseModel, Field

from core.domain import BillingInterval, SubscriptionAction


class PlanCreateRequest(BaseModel):
    """Membership plan creation schema."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    price: float = Field(..., ge=0)
    interval: BillingInterval = BillingInterval.MONTHLY
    trial_days: int = Field(0, ge=0)
    features: list[str] = Field(default_factory=list)


class PlanUpdateRequest(BaseModel):
    """Partial plan update; omitted fields are left unchanged."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    price: float | None = Field(None, ge=0)
    interval: BillingInterval | None = None
    features: list[str] | None = None
    is_active: bool | None = None


class SubscriptionActionRequest(BaseModel):
    action: SubscriptionAction
