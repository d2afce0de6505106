"""Membership plan and subscription domain entities."""
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

from .base import parse_timestamp, row_kwargs


class BillingInterval(StrEnum):
    """Billing interval options."""
    MONTHLY = "monthly"
    YEARLY = "yearly"


class SubscriptionStatus(StrEnum):
    """Lifecycle states a member subscription can be in."""
    ACTIVE = "active"
    CANCELED = "canceled"
    PAST_DUE = "past_due"
    INCOMPLETE = "incomplete"
    TRIALING = "trialing"


class SubscriptionAction(StrEnum):
    """Actions accepted by the manage_subscription procedure."""
    CANCEL = "cancel"
    REACTIVATE = "reactivate"


@dataclass
class MembershipPlan:
    """Priced recurring offering with a feature list."""

    id: str
    tenant_id: str
    name: str
    description: str | None = None
    price: float = 0.0
    interval: BillingInterval = BillingInterval.MONTHLY
    trial_days: int = 0
    features: list[str] = field(default_factory=list)
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self):
        if isinstance(self.interval, str):
            self.interval = BillingInterval(self.interval)
        self.price = float(self.price or 0)
        self.trial_days = int(self.trial_days or 0)
        self.features = list(self.features or [])
        self.created_at = parse_timestamp(self.created_at)
        self.updated_at = parse_timestamp(self.updated_at)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "MembershipPlan":
        return cls(**row_kwargs(cls, row))


@dataclass
class MemberSubscription:
    """A user's subscription to a membership plan."""

    id: str
    user_id: str
    plan_id: str
    status: SubscriptionStatus = SubscriptionStatus.INCOMPLETE
    current_period_start: datetime | None = None
    current_period_end: datetime | None = None
    cancel_at_period_end: bool = False
    stripe_subscription_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self):
        if isinstance(self.status, str):
            self.status = SubscriptionStatus(self.status)
        self.current_period_start = parse_timestamp(self.current_period_start)
        self.current_period_end = parse_timestamp(self.current_period_end)
        self.created_at = parse_timestamp(self.created_at)
        self.updated_at = parse_timestamp(self.updated_at)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "MemberSubscription":
        return cls(**row_kwargs(cls, row))


@dataclass
class TenantSubscription:
    """Denormalized subscription row returned by get_tenant_subscriptions."""

    subscription_id: str
    user_name: str = ""
    plan_id: str | None = None
    plan_name: str = ""
    status: SubscriptionStatus = SubscriptionStatus.INCOMPLETE
    amount: float = 0.0
    is_trial: bool = False
    trial_ends_at: datetime | None = None
    current_period_end: datetime | None = None

    def __post_init__(self):
        if isinstance(self.status, str):
            self.status = SubscriptionStatus(self.status)
        self.user_name = self.user_name or ""
        self.plan_name = self.plan_name or ""
        self.amount = float(self.amount or 0)
        self.trial_ends_at = parse_timestamp(self.trial_ends_at)
        self.current_period_end = parse_timestamp(self.current_period_end)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "TenantSubscription":
        return cls(**row_kwargs(cls, row))


@dataclass
class BulkOperationStatus:
    """Progress of a server-side bulk operation, polled until complete."""

    operation_type: str
    total_items: int = 0
    processed_items: int = 0
    failed_items: int = 0
    details: list[dict[str, Any]] = field(default_factory=list)
    created_at: datetime | None = None

    def __post_init__(self):
        self.details = list(self.details or [])
        self.created_at = parse_timestamp(self.created_at)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "BulkOperationStatus":
        return cls(**row_kwargs(cls, row))

    @property
    def is_complete(self) -> bool:
        return self.processed_items + self.failed_items >= self.total_items

    @property
    def errors(self) -> list[dict[str, Any]]:
        """Per-item details that carry an error message."""
        return [detail for detail in self.details if detail.get("error")]
