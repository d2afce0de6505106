"""User domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

from .base import parse_timestamp, row_kwargs


class UserRole(StrEnum):
    """User roles in the console."""

    ADMIN = "admin"
    TENANT_ADMIN = "tenant_admin"
    USER = "user"


class UserStatus(StrEnum):
    """Account status of a user profile."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


@dataclass
class UserProfile:
    """Profile row kept alongside the auth user."""

    full_name: str = ""
    role: UserRole = UserRole.USER
    tenant_id: str | None = None
    status: UserStatus = UserStatus.ACTIVE
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self):
        if isinstance(self.role, str):
            self.role = UserRole(self.role)
        if isinstance(self.status, str):
            self.status = UserStatus(self.status)
        self.created_at = parse_timestamp(self.created_at)
        self.updated_at = parse_timestamp(self.updated_at)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "UserProfile":
        data = row_kwargs(cls, row)
        data["full_name"] = data.get("full_name") or ""
        return cls(**data)


@dataclass
class User:
    """Signed-in or listed user: auth identity plus optional profile."""

    id: str
    email: str = ""
    profile: UserProfile | None = None

    @property
    def is_admin(self) -> bool:
        return self.profile is not None and self.profile.role == UserRole.ADMIN

    @property
    def tenant_id(self) -> str | None:
        return self.profile.tenant_id if self.profile else None

    @property
    def full_name(self) -> str:
        return self.profile.full_name if self.profile else ""

    @property
    def status(self) -> UserStatus | None:
        return self.profile.status if self.profile else None


@dataclass
class UserActivity:
    """Audit entry recorded by the log_user_activity procedure."""

    id: str
    user_id: str
    action: str
    details: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None

    def __post_init__(self):
        self.created_at = parse_timestamp(self.created_at)
        if self.details is None:
            self.details = {}

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "UserActivity":
        return cls(**row_kwargs(cls, row))

    def describe(self) -> str:
        """Render details as "key name: value" pairs, as shown in the activity log."""
        return ", ".join(
            f"{key.replace('_', ' ')}: {value}" for key, value in self.details.items()
        )
