"""Dashboard aggregate records."""

from dataclasses import dataclass, field
from typing import Any

REVENUE_BAR_COLOR = "#3B82F6"


@dataclass
class DashboardMetrics:
    total_users: int = 0
    active_tenants: int = 0
    monthly_revenue: float = 0.0
    active_subscriptions: int = 0

    @classmethod
    def from_row(cls, row: dict[str, Any] | None) -> "DashboardMetrics":
        row = row or {}
        return cls(
            total_users=int(row.get("total_users") or 0),
            active_tenants=int(row.get("active_tenants") or 0),
            monthly_revenue=float(row.get("monthly_revenue") or 0),
            active_subscriptions=int(row.get("active_subscriptions") or 0),
        )


@dataclass
class ChartDataset:
    label: str
    data: list[float] = field(default_factory=list)
    background_color: list[str] = field(default_factory=list)


@dataclass
class ChartData:
    labels: list[str] = field(default_factory=list)
    datasets: list[ChartDataset] = field(default_factory=list)

    @classmethod
    def revenue(cls, rows: list[dict[str, Any]]) -> "ChartData":
        """Build the single-series revenue bar chart from monthly rows."""
        return cls(
            labels=[row["month"] for row in rows],
            datasets=[
                ChartDataset(
                    label="Revenue",
                    data=[row["amount"] for row in rows],
                    background_color=[REVENUE_BAR_COLOR] * len(rows),
                )
            ],
        )


@dataclass
class SubscriptionDistribution:
    active: int = 0
    canceled: int = 0
    past_due: int = 0

    @classmethod
    def from_row(cls, row: dict[str, Any] | None) -> "SubscriptionDistribution":
        row = row or {}
        return cls(
            active=row.get("active") or 0,
            canceled=row.get("canceled") or 0,
            past_due=row.get("past_due") or 0,
        )
