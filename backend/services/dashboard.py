"""
Dashboard aggregates, all computed by backend procedures.
"""

from adapters.backend import BackendClient
from core.domain import ChartData, DashboardMetrics, SubscriptionDistribution


async def get_dashboard_stats(client: BackendClient) -> DashboardMetrics:
    return DashboardMetrics.from_row(await client.rpc("get_dashboard_stats"))


async def get_revenue_data(client: BackendClient) -> ChartData:
    """Monthly revenue shaped for a single-series bar chart."""
    rows = await client.rpc("get_revenue_data")
    return ChartData.revenue(rows or [])


async def get_subscription_distribution(client: BackendClient) -> SubscriptionDistribution:
    return SubscriptionDistribution.from_row(await client.rpc("get_subscription_distribution"))
