"""
Subscription lifecycle and bulk operation API routes.

Bulk operations return an operation id straight away; clients poll
GET /subscriptions/bulk/{operation_id} for progress.
"""

from fastapi import APIRouter, HTTPException, status

from api.dependencies import BackendDep, CurrentUser
from api.schemas.membership import SubscriptionActionRequest
from api.schemas.subscriptions import (
    BulkCancelRequest,
    BulkConvertRequest,
    BulkStatusRequest,
    CancelSubscriptionRequest,
    ChangePlanRequest,
    SubscriptionCreateRequest,
    SubscriptionStatusRequest,
    TrialExpirationRequest,
)
from services import membership, subscriptions

router = APIRouter(prefix="/subscriptions", tags=["Subscriptions"])


# ============================================================================
# Bulk operations
# ============================================================================


@router.post("/bulk/status", status_code=status.HTTP_202_ACCEPTED)
async def bulk_update_status(body: BulkStatusRequest, client: BackendDep, current_user: CurrentUser):
    operation_id = await subscriptions.bulk_update_subscription_status(
        client, body.subscription_ids, body.status
    )
    return {"operation_id": operation_id}


@router.post("/bulk/cancel", status_code=status.HTTP_202_ACCEPTED)
async def bulk_cancel(body: BulkCancelRequest, client: BackendDep, current_user: CurrentUser):
    operation_id = await subscriptions.bulk_cancel_subscriptions(
        client, body.subscription_ids, immediate=body.immediate
    )
    return {"operation_id": operation_id}


@router.post("/bulk/convert-trials", status_code=status.HTTP_202_ACCEPTED)
async def bulk_convert_trials(body: BulkConvertRequest, client: BackendDep, current_user: CurrentUser):
    operation_id = await subscriptions.bulk_convert_trials(client, body.subscription_ids)
    return {"operation_id": operation_id}


@router.get("/bulk/{operation_id}")
async def bulk_operation_status(operation_id: str, client: BackendDep, current_user: CurrentUser):
    operation = await subscriptions.get_bulk_operation_status(client, operation_id)
    if operation is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Operation not found")
    return {
        "operation": operation,
        "is_complete": operation.is_complete,
        "errors": operation.errors,
    }


# ============================================================================
# Single subscriptions
# ============================================================================


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_subscription(
    body: SubscriptionCreateRequest,
    client: BackendDep,
    current_user: CurrentUser,
):
    if body.trial:
        result = await subscriptions.create_trial_subscription(client, body.user_id, body.plan_id)
    else:
        result = await subscriptions.create_subscription(
            client, body.user_id, body.plan_id, body.stripe_subscription_id
        )
    return {"result": result}


@router.get("/users/{user_id}")
async def user_subscriptions(user_id: str, client: BackendDep, current_user: CurrentUser):
    return await subscriptions.get_user_subscriptions(client, user_id)


@router.patch("/{subscription_id}/status")
async def update_status(
    subscription_id: str,
    body: SubscriptionStatusRequest,
    client: BackendDep,
    current_user: CurrentUser,
):
    result = await subscriptions.update_subscription_status(
        client, subscription_id, body.status, body.cancel_at_period_end
    )
    return {"result": result}


@router.post("/{subscription_id}/manage")
async def manage(
    subscription_id: str,
    body: SubscriptionActionRequest,
    client: BackendDep,
    current_user: CurrentUser,
):
    return {"success": await membership.manage_subscription(client, subscription_id, body.action)}


@router.post("/{subscription_id}/renew")
async def renew(subscription_id: str, client: BackendDep, current_user: CurrentUser):
    return {"result": await subscriptions.process_subscription_renewal(client, subscription_id)}


@router.post("/{subscription_id}/cancel")
async def cancel(
    subscription_id: str,
    body: CancelSubscriptionRequest,
    client: BackendDep,
    current_user: CurrentUser,
):
    result = await subscriptions.cancel_subscription(client, subscription_id, body.immediate)
    return {"result": result}


@router.post("/{subscription_id}/reactivate")
async def reactivate(subscription_id: str, client: BackendDep, current_user: CurrentUser):
    return {"result": await subscriptions.reactivate_subscription(client, subscription_id)}


@router.post("/{subscription_id}/retry-payment")
async def retry_payment(subscription_id: str, client: BackendDep, current_user: CurrentUser):
    return {"result": await subscriptions.retry_subscription_payment(client, subscription_id)}


@router.post("/{subscription_id}/upgrade")
async def upgrade(
    subscription_id: str,
    body: ChangePlanRequest,
    client: BackendDep,
    current_user: CurrentUser,
):
    result = await subscriptions.upgrade_subscription(
        client, subscription_id, body.new_plan_id, body.immediate
    )
    return {"result": result}


@router.post("/{subscription_id}/downgrade")
async def downgrade(
    subscription_id: str,
    body: ChangePlanRequest,
    client: BackendDep,
    current_user: CurrentUser,
):
    result = await subscriptions.downgrade_subscription(client, subscription_id, body.new_plan_id)
    return {"result": result}


@router.post("/{subscription_id}/trial-expiration")
async def trial_expiration(
    subscription_id: str,
    body: TrialExpirationRequest,
    client: BackendDep,
    current_user: CurrentUser,
):
    result = await subscriptions.process_trial_expiration(
        client, subscription_id, body.convert_to_paid
    )
    return {"result": result}
