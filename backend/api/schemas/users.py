"""
User management request schemas.
"""

from pydantic import BaseModel, Field

from core.domain import UserRole, UserStatus


class UserUpdateRequest(BaseModel):
    """Profile fields an admin may change; omitted fields are left as they are."""

    full_name: str | None = Field(None, min_length=1, max_length=255)
    role: UserRole | None = None
    tenant_id: str | None = None
    status: UserStatus | None = None


class BulkUserStatusRequest(BaseModel):
    user_ids: list[str] = Field(..., min_length=1)
    status: UserStatus
