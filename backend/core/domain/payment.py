"""Mock payment and webhook domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

from .base import parse_timestamp, row_kwargs


class TransactionStatus(StrEnum):
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class DeliveryStatus(StrEnum):
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class PaymentError:
    code: str
    message: str

    @classmethod
    def from_row(cls, row: dict[str, Any] | None) -> "PaymentError | None":
        if not row:
            return None
        return cls(code=str(row.get("code", "")), message=str(row.get("message", "")))


@dataclass
class MockPaymentResult:
    """Raw result of the process_mock_payment procedure."""

    id: str
    status: TransactionStatus
    error: PaymentError | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "MockPaymentResult":
        return cls(
            id=str(row.get("id", "")),
            status=TransactionStatus(row.get("status", TransactionStatus.FAILED)),
            error=PaymentError.from_row(row.get("error")),
        )


@dataclass
class PaymentResult:
    """Outcome shown to the operator after a test payment."""

    success: bool
    transaction_id: str
    error: PaymentError | None = None


@dataclass
class MockTransaction:
    id: str
    tenant_id: str | None = None
    amount: float = 0.0
    status: TransactionStatus = TransactionStatus.COMPLETED
    card_number: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None

    def __post_init__(self):
        if isinstance(self.status, str):
            self.status = TransactionStatus(self.status)
        self.amount = float(self.amount or 0)
        self.metadata = dict(self.metadata or {})
        self.created_at = parse_timestamp(self.created_at)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "MockTransaction":
        return cls(**row_kwargs(cls, row))


@dataclass
class WebhookDeliveryLog:
    """One delivery attempt of a mock webhook."""

    attempt_number: int
    status: DeliveryStatus
    error_message: str | None = None
    created_at: datetime | None = None

    def __post_init__(self):
        if isinstance(self.status, str):
            self.status = DeliveryStatus(self.status)
        self.created_at = parse_timestamp(self.created_at)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "WebhookDeliveryLog":
        return cls(**row_kwargs(cls, row))


@dataclass
class WebhookLog:
    """A mock webhook together with its delivery attempts."""

    id: str
    event_type: str
    data: dict[str, Any] = field(default_factory=dict)
    delivery_attempts: int = 0
    last_attempt_at: datetime | None = None
    delivered_at: datetime | None = None
    created_at: datetime | None = None
    logs: list[WebhookDeliveryLog] = field(default_factory=list)

    def __post_init__(self):
        self.data = dict(self.data or {})
        self.delivery_attempts = int(self.delivery_attempts or 0)
        self.last_attempt_at = parse_timestamp(self.last_attempt_at)
        self.delivered_at = parse_timestamp(self.delivered_at)
        self.created_at = parse_timestamp(self.created_at)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "WebhookLog":
        data = row_kwargs(cls, row)
        raw_logs = row.get("mock_webhook_delivery_logs") or row.get("logs") or []
        data["logs"] = sorted(
            (WebhookDeliveryLog.from_row(log) for log in raw_logs),
            key=lambda log: log.attempt_number,
        )
        return cls(**data)

    @property
    def is_delivered(self) -> bool:
        return self.delivered_at is not None
