"""
Unit tests for content access rules and access verification.
"""

import pytest

from core.domain import AccessType
from services import access_control


@pytest.mark.asyncio
async def test_no_active_subscription_denies_access(mock_client):
    mock_client.select.return_value = []

    decision = await access_control.verify_access(mock_client, "content-1", "u1")

    assert decision.has_access is False
    assert decision.access_type is None
    assert mock_client.select.await_count == 1


@pytest.mark.asyncio
async def test_subscription_without_rule_denies_access(mock_client):
    mock_client.select.side_effect = [[{"plan_id": "plan-1"}], []]

    decision = await access_control.verify_access(mock_client, "content-1", "u1")

    assert decision.has_access is False


@pytest.mark.asyncio
async def test_full_access_wins_over_preview(mock_client):
    mock_client.select.side_effect = [
        [{"plan_id": "plan-1"}, {"plan_id": "plan-2"}],
        [{"access_type": "preview"}, {"access_type": "full"}],
    ]

    decision = await access_control.verify_access(mock_client, "content-1", "u1")

    assert decision.has_access is True
    assert decision.access_type == AccessType.FULL
    rules_filters = mock_client.select.await_args_list[1].kwargs["filters"]
    assert rules_filters == {"content_id": "eq.content-1", "plan_id": "in.(plan-1,plan-2)"}


@pytest.mark.asyncio
async def test_preview_only_access(mock_client):
    mock_client.select.side_effect = [[{"plan_id": "plan-1"}], [{"access_type": "preview"}]]

    decision = await access_control.verify_access(mock_client, "content-1", "u1")

    assert decision.access_type == AccessType.PREVIEW


@pytest.mark.asyncio
async def test_create_access_rule(mock_client):
    mock_client.insert.return_value = {
        "id": "rule-1",
        "content_id": "content-1",
        "plan_id": "plan-1",
        "access_type": "preview",
    }

    rule = await access_control.create_access_rule(
        mock_client, "content-1", "plan-1", AccessType.PREVIEW
    )

    assert rule.access_type == AccessType.PREVIEW
    mock_client.insert.assert_awaited_once_with(
        "content_access",
        {"content_id": "content-1", "plan_id": "plan-1", "access_type": "preview"},
    )


@pytest.mark.asyncio
async def test_empty_preview_is_none(mock_client):
    mock_client.select.return_value = {"preview_content": ""}

    assert await access_control.get_content_preview(mock_client, "content-1") is None


@pytest.mark.asyncio
async def test_content_items_for_tenant(mock_client):
    mock_client.select.return_value = [{"id": "c1", "tenant_id": "t1", "title": "Intro"}]

    items = await access_control.get_content_items(mock_client, "t1")

    assert items[0].title == "Intro"
    assert mock_client.select.await_args.kwargs["filters"] == {"tenant_id": "eq.t1"}
