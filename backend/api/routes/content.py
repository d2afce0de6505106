"""
Content access API routes.
"""

from fastapi import APIRouter, HTTPException, Query, status

from api.dependencies import BackendDep, CurrentUser, StoreDep
from api.schemas.content import (
    AccessRuleCreateRequest,
    AccessRuleUpdateRequest,
    PreviewUpdateRequest,
)
from core.filters import filter_records
from services import access_control

router = APIRouter(prefix="/content", tags=["Content Access"])


@router.get("")
async def list_content(
    store: StoreDep,
    current_user: CurrentUser,
    q: str | None = Query(None, description="Search by title or description"),
    refresh: bool = True,
):
    items = await store.fetch_content_items() if refresh else store.content_items
    return filter_records(items, query=q, fields=("title", "description"))


@router.post("/access-rules", status_code=status.HTTP_201_CREATED)
async def create_access_rule(
    body: AccessRuleCreateRequest,
    client: BackendDep,
    current_user: CurrentUser,
):
    return await access_control.create_access_rule(
        client, body.content_id, body.plan_id, body.access_type
    )


@router.patch("/access-rules/{rule_id}")
async def update_access_rule(
    rule_id: str,
    body: AccessRuleUpdateRequest,
    client: BackendDep,
    current_user: CurrentUser,
):
    updates = body.model_dump(mode="json", exclude_none=True)
    if not updates:
        raise ValueError("No fields to update")
    return await access_control.update_access_rule(client, rule_id, updates)


@router.delete("/access-rules/{rule_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_access_rule(rule_id: str, client: BackendDep, current_user: CurrentUser):
    await access_control.delete_access_rule(client, rule_id)


@router.get("/{content_id}/access")
async def content_access(content_id: str, client: BackendDep, current_user: CurrentUser):
    return await access_control.get_content_access(client, content_id)


@router.get("/{content_id}/verify-access")
async def verify_access(
    content_id: str,
    client: BackendDep,
    current_user: CurrentUser,
    user_id: str | None = Query(None, description="Defaults to the signed-in user"),
):
    return await access_control.verify_access(client, content_id, user_id or current_user.id)


@router.get("/{content_id}/preview")
async def get_preview(content_id: str, client: BackendDep, current_user: CurrentUser):
    preview = await access_control.get_content_preview(client, content_id)
    if preview is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No preview set")
    return {"content_id": content_id, "preview_content": preview}


@router.put("/{content_id}/preview", status_code=status.HTTP_204_NO_CONTENT)
async def update_preview(
    content_id: str,
    body: PreviewUpdateRequest,
    client: BackendDep,
    current_user: CurrentUser,
):
    await access_control.update_content_preview(client, content_id, body.content)
