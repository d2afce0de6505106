# Domain Entities
# Plain records mirrored from backend rows
from .content import AccessDecision, AccessRule, AccessType, ContentItem, ContentType
from .dashboard import ChartData, ChartDataset, DashboardMetrics, SubscriptionDistribution
from .payment import (
    DeliveryStatus,
    MockPaymentResult,
    MockTransaction,
    PaymentError,
    PaymentResult,
    TransactionStatus,
    WebhookDeliveryLog,
    WebhookLog,
)
from .subscription import (
    BillingInterval,
    BulkOperationStatus,
    MemberSubscription,
    MembershipPlan,
    SubscriptionAction,
    SubscriptionStatus,
    TenantSubscription,
)
from .tenant import Tenant, TenantStats, TenantStatus
from .user import User, UserActivity, UserProfile, UserRole, UserStatus

__all__ = [
    "AccessDecision",
    "AccessRule",
    "AccessType",
    "BillingInterval",
    "BulkOperationStatus",
    "ChartData",
    "ChartDataset",
    "ContentItem",
    "ContentType",
    "DashboardMetrics",
    "DeliveryStatus",
    "MemberSubscription",
    "MembershipPlan",
    "MockPaymentResult",
    "MockTransaction",
    "PaymentError",
    "PaymentResult",
    "SubscriptionAction",
    "SubscriptionDistribution",
    "SubscriptionStatus",
    "Tenant",
    "TenantStats",
    "TenantStatus",
    "TenantSubscription",
    "TransactionStatus",
    "User",
    "UserActivity",
    "UserProfile",
    "UserRole",
    "UserStatus",
    "WebhookDeliveryLog",
    "WebhookLog",
]
