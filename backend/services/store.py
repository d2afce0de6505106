"""
Console state shared across requests.

Holds the signed-in user and cached reference lists (membership plans and
content items). Lists are refilled on demand; a refill that fails keeps the
previous contents.
"""

import logging

from adapters.backend import BackendClient, BackendError
from core.domain import ContentItem, MembershipPlan, User
from services.auth import get_current_user

logger = logging.getLogger(__name__)


class AdminStore:
    """Cached console state backed by one BackendClient."""

    def __init__(self, client: BackendClient):
        self.client = client
        self.current_user: User | None = None
        self.is_loading = False
        self.membership_plans: list[MembershipPlan] = []
        self.content_items: list[ContentItem] = []

    def set_current_user(self, user: User | None) -> None:
        self.current_user = user

    def set_is_loading(self, loading: bool) -> None:
        self.is_loading = loading

    async def refresh_current_user(self) -> User | None:
        """Reload the signed-in user; None when signed out."""
        self.set_is_loading(True)
        try:
            self.current_user = await get_current_user(self.client)
        finally:
            self.set_is_loading(False)
        return self.current_user

    async def fetch_membership_plans(self) -> list[MembershipPlan]:
        """Refill plans, newest first."""
        try:
            rows = await self.client.select(
                "membership_plans", order="created_at", ascending=False
            )
        except BackendError as e:
            logger.error(f"Failed to fetch membership plans: {e}")
            return self.membership_plans

        self.membership_plans = [MembershipPlan.from_row(row) for row in rows]
        return self.membership_plans

    async def fetch_content_items(self) -> list[ContentItem]:
        """Refill content items, newest first."""
        try:
            rows = await self.client.select(
                "content_items", order="created_at", ascending=False
            )
        except BackendError as e:
            logger.error(f"Failed to fetch content items: {e}")
            return self.content_items

        self.content_items = [ContentItem.from_row(row) for row in rows]
        return self.content_items

    def clear(self) -> None:
        """Forget everything cached for the previous session."""
        self.current_user = None
        self.membership_plans = []
        self.content_items = []
