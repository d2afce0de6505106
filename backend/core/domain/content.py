"""Content item and access rule domain entities."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any

from .base import parse_timestamp, row_kwargs


class ContentType(StrEnum):
    HTML = "html"
    TEXT = "text"
    URL = "url"


class AccessType(StrEnum):
    """Level of access a plan grants to a content item."""

    FULL = "full"
    PREVIEW = "preview"


@dataclass
class ContentItem:
    """Gated content owned by a tenant."""

    id: str
    tenant_id: str
    title: str
    description: str | None = None
    content_type: ContentType = ContentType.TEXT
    content: str = ""
    preview_content: str | None = None
    is_published: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self):
        if isinstance(self.content_type, str):
            self.content_type = ContentType(self.content_type)
        self.created_at = parse_timestamp(self.created_at)
        self.updated_at = parse_timestamp(self.updated_at)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "ContentItem":
        return cls(**row_kwargs(cls, row))


@dataclass
class AccessRule:
    """Maps a membership plan to a content item's access level."""

    id: str
    content_id: str
    plan_id: str
    access_type: AccessType = AccessType.FULL
    created_at: datetime | None = None

    def __post_init__(self):
        if isinstance(self.access_type, str):
            self.access_type = AccessType(self.access_type)
        self.created_at = parse_timestamp(self.created_at)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "AccessRule":
        return cls(**row_kwargs(cls, row))


@dataclass
class AccessDecision:
    """Result of checking a user's access to a content item."""

    has_access: bool
    access_type: AccessType | None = None

    @classmethod
    def denied(cls) -> "AccessDecision":
        return cls(has_access=False, access_type=None)
