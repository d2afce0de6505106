"""
Dashboard API routes.
"""

from fastapi import APIRouter

from api.dependencies import BackendDep, CurrentUser
from services import dashboard

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/stats")
async def stats(client: BackendDep, current_user: CurrentUser):
    return await dashboard.get_dashboard_stats(client)


@router.get("/revenue")
async def revenue(client: BackendDep, current_user: CurrentUser):
    """Monthly revenue as bar chart data."""
    return await dashboard.get_revenue_data(client)


@router.get("/subscriptions")
async def subscription_distribution(client: BackendDep, current_user: CurrentUser):
    return await dashboard.get_subscription_distribution(client)
