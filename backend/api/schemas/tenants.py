"""
Tenant request schemas.
"""

from pydantic import BaseModel, Field

from core.domain import TenantStatus


class TenantCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)


class TenantUpdateRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    status: TenantStatus | None = None
