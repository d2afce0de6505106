"""
Subscription lifecycle and bulk operation request schemas.
"""

from pydantic import BaseModel, Field

from core.domain import SubscriptionStatus


class SubscriptionCreateRequest(BaseModel):
    """Create a subscription, optionally starting with the plan's trial."""

    user_id: str
    plan_id: str
    trial: bool = False
    stripe_subscription_id: str | None = None


class SubscriptionStatusRequest(BaseModel):
    status: SubscriptionStatus
    cancel_at_period_end: bool = False


class CancelSubscriptionRequest(BaseModel):
    immediate: bool = False


class ChangePlanRequest(BaseModel):
    new_plan_id: str
    immediate: bool = True


class TrialExpirationRequest(BaseModel):
    convert_to_paid: bool


class BulkStatusRequest(BaseModel):
    subscription_ids: list[str] = Field(..., min_length=1)
    status: SubscriptionStatus


class BulkCancelRequest(BaseModel):
    subscription_ids: list[str] = Field(..., min_length=1)
    immediate: bool = False


class BulkConvertRequest(BaseModel):
    subscription_ids: list[str] = Field(..., min_length=1)
