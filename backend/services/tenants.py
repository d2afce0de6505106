"""
Tenant operations.
"""

from adapters.backend import BackendClient
from core.domain import Tenant, TenantStats, TenantStatus


async def get_tenants(client: BackendClient) -> list[Tenant]:
    rows = await client.rpc("get_accessible_tenants")
    return [Tenant.from_row(row) for row in rows or []]


async def create_tenant(client: BackendClient, name: str) -> str:
    """Create a tenant and return its id."""
    return await client.rpc("create_tenant", {"p_name": name})


async def delete_tenant(client: BackendClient, tenant_id: str) -> bool:
    return bool(await client.rpc("delete_tenant", {"p_tenant_id": tenant_id}))


async def update_tenant(
    client: BackendClient,
    tenant_id: str,
    name: str | None = None,
    status: TenantStatus | None = None,
) -> bool:
    """Rename and/or (de)activate a tenant; omitted fields are left unchanged."""
    return bool(
        await client.rpc(
            "update_tenant",
            {
                "p_tenant_id": tenant_id,
                "p_name": name,
                "p_status": status.value if status else None,
            },
        )
    )


async def get_tenant_stats(client: BackendClient, tenant_id: str) -> TenantStats:
    return TenantStats.from_row(await client.rpc("get_tenant_stats", {"p_tenant_id": tenant_id}))
