"""
Membership plan API routes.
"""

from fastapi import APIRouter, HTTPException, Query, status

from api.dependencies import BackendDep, CurrentUser, StoreDep
from api.schemas.membership import PlanCreateRequest, PlanUpdateRequest
from core.filters import filter_records
from services import membership

router = APIRouter(prefix="/plans", tags=["Membership Plans"])


@router.get("")
async def list_plans(
    store: StoreDep,
    current_user: CurrentUser,
    q: str | None = Query(None, description="Search by plan name or description"),
    refresh: bool = True,
):
    """Plans newest first, from the console cache unless *refresh* is set."""
    plans = await store.fetch_membership_plans() if refresh else store.membership_plans
    return filter_records(plans, query=q, fields=("name", "description"))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_plan(body: PlanCreateRequest, client: BackendDep, current_user: CurrentUser):
    plan_id = await membership.create_membership_plan(
        client,
        name=body.name,
        description=body.description,
        price=body.price,
        interval=body.interval,
        trial_days=body.trial_days,
        features=body.features,
    )
    return {"id": plan_id}


@router.patch("/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_plan(
    plan_id: str,
    body: PlanUpdateRequest,
    client: BackendDep,
    current_user: CurrentUser,
):
    updates = body.model_dump(exclude_unset=True)
    if not updates:
        raise ValueError("No fields to update")
    if not await membership.update_membership_plan(client, plan_id, updates):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Plan not found")


@router.get("/{plan_id}/subscriptions")
async def plan_subscriptions(plan_id: str, client: BackendDep, current_user: CurrentUser):
    return await membership.get_plan_subscriptions(client, plan_id)
