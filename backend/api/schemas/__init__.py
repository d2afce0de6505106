"""
API request and response schemas.
"""

from .auth import (
    PasswordResetRequest,
    PasswordStrengthRequest,
    SignInRequest,
    SignUpRequest,
)
from .content import AccessRuleCreateRequest, AccessRuleUpdateRequest, PreviewUpdateRequest
from .membership import PlanCreateRequest, PlanUpdateRequest, SubscriptionActionRequest
from .payments import PaymentRequest, WebhookDeliveryRequest
from .subscriptions import (
    BulkCancelRequest,
    BulkConvertRequest,
    BulkStatusRequest,
    CancelSubscriptionRequest,
    ChangePlanRequest,
    SubscriptionCreateRequest,
    SubscriptionStatusRequest,
    TrialExpirationRequest,
)
from .tenants import TenantCreateRequest, TenantUpdateRequest
from .users import BulkUserStatusRequest, UserUpdateRequest

__all__ = [
    "AccessRuleCreateRequest",
    "AccessRuleUpdateRequest",
    "BulkCancelRequest",
    "BulkConvertRequest",
    "BulkStatusRequest",
    "BulkUserStatusRequest",
    "CancelSubscriptionRequest",
    "ChangePlanRequest",
    "PasswordResetRequest",
    "PasswordStrengthRequest",
    "PaymentRequest",
    "PlanCreateRequest",
    "PlanUpdateRequest",
    "PreviewUpdateRequest",
    "SignInRequest",
    "SignUpRequest",
    "SubscriptionActionRequest",
    "SubscriptionCreateRequest",
    "SubscriptionStatusRequest",
    "TenantCreateRequest",
    "TenantUpdateRequest",
    "TrialExpirationRequest",
    "UserUpdateRequest",
    "WebhookDeliveryRequest",
]
