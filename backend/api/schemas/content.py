"""
Content access request schemas.
"""

from pydantic import BaseModel

from core.domain import AccessType


class AccessRuleCreateRequest(BaseModel):
    content_id: str
    plan_id: str
    access_type: AccessType = AccessType.FULL


class AccessRuleUpdateRequest(BaseModel):
    plan_id: str | None = None
    access_type: AccessType | None = None


class PreviewUpdateRequest(BaseModel):
    content: str
