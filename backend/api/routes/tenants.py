"""
Tenant API routes.
"""

from datetime import date

from fastapi import APIRouter, HTTPException, Query, status

from api.dependencies import AdminUser, BackendDep, CurrentUser
from api.schemas.tenants import TenantCreateRequest, TenantUpdateRequest
from core.domain import TransactionStatus
from core.filters import filter_records
from services import access_control, membership, payments, subscriptions, tenants

router = APIRouter(prefix="/tenants", tags=["Tenants"])


@router.get("")
async def list_tenants(
    client: BackendDep,
    current_user: CurrentUser,
    q: str | None = Query(None, description="Search by tenant name"),
    tenant_status: str | None = Query(None, alias="status"),
):
    return filter_records(await tenants.get_tenants(client), query=q, status=tenant_status)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_tenant(body: TenantCreateRequest, client: BackendDep, admin: AdminUser):
    return {"id": await tenants.create_tenant(client, body.name)}


@router.patch("/{tenant_id}")
async def update_tenant(
    tenant_id: str,
    body: TenantUpdateRequest,
    client: BackendDep,
    admin: AdminUser,
):
    if body.name is None and body.status is None:
        raise ValueError("No fields to update")
    updated = await tenants.update_tenant(client, tenant_id, name=body.name, status=body.status)
    return {"updated": updated}


@router.delete("/{tenant_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tenant(tenant_id: str, client: BackendDep, admin: AdminUser):
    if not await tenants.delete_tenant(client, tenant_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tenant not found")


@router.get("/{tenant_id}/stats")
async def tenant_stats(tenant_id: str, client: BackendDep, current_user: CurrentUser):
    return await tenants.get_tenant_stats(client, tenant_id)


@router.get("/{tenant_id}/plans")
async def tenant_plans(
    tenant_id: str,
    client: BackendDep,
    current_user: CurrentUser,
    active_only: bool = False,
):
    if active_only:
        return await membership.get_active_tenant_plans(client, tenant_id)
    return await membership.get_tenant_plans(client, tenant_id)


@router.get("/{tenant_id}/subscriptions")
async def tenant_subscriptions(
    tenant_id: str,
    client: BackendDep,
    current_user: CurrentUser,
    q: str | None = Query(None, description="Search by member or plan name"),
    subscription_status: str | None = Query(None, alias="status"),
):
    return filter_records(
        await subscriptions.get_tenant_subscriptions(client, tenant_id),
        query=q,
        fields=("user_name", "plan_name"),
        status=subscription_status,
    )


@router.get("/{tenant_id}/content")
async def tenant_content(tenant_id: str, client: BackendDep, current_user: CurrentUser):
    return await access_control.get_content_items(client, tenant_id)


@router.get("/{tenant_id}/transactions")
async def tenant_transactions(
    tenant_id: str,
    client: BackendDep,
    current_user: CurrentUser,
    statuses: list[TransactionStatus] | None = Query(None, alias="status"),
    start_date: date | None = None,
    end_date: date | None = None,
):
    return await payments.get_transaction_history(
        client,
        tenant_id,
        statuses=statuses,
        start_date=start_date,
        end_date=end_date,
    )
