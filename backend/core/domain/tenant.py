"""Tenant domain entities."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any

from .base import parse_timestamp, row_kwargs


class TenantStatus(StrEnum):
    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass
class Tenant:
    """Customer organization owning users, plans, and content."""

    id: str
    name: str
    status: TenantStatus = TenantStatus.ACTIVE
    subscription_status: str | None = None
    created_at: datetime | None = None

    def __post_init__(self):
        if isinstance(self.status, str):
            self.status = TenantStatus(self.status)
        self.created_at = parse_timestamp(self.created_at)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Tenant":
        return cls(**row_kwargs(cls, row))


@dataclass
class TenantStats:
    """Per-tenant aggregates returned by get_tenant_stats."""

    total_users: int = 0
    active_plans: int = 0
    total_revenue: float = 0.0

    @classmethod
    def from_row(cls, row: dict[str, Any] | None) -> "TenantStats":
        row = row or {}
        return cls(
            total_users=int(row.get("total_users") or 0),
            active_plans=int(row.get("active_plans") or 0),
            total_revenue=float(row.get("total_revenue") or 0),
        )
