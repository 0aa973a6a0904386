"""Tests for TeamMemberRepository."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from blocker_insights.db.contentstack import ContentstackClient
from blocker_insights.repositories.mappers import team_member_to_entry
from blocker_insights.repositories.team_member_repo import TeamMemberRepository


@pytest.fixture
def mock_client():
    """Create mock ContentstackClient."""
    client = MagicMock(spec=ContentstackClient)
    client.get_entries = AsyncMock(return_value=[])
    client.get_entry = AsyncMock(return_value=None)
    return client


@pytest.fixture
def repo(mock_client):
    return TeamMemberRepository(mock_client)


@pytest.mark.asyncio
async def test_get_missing_member(repo):
    assert await repo.get("m-404") is None


@pytest.mark.asyncio
async def test_get_member(repo, mock_client, alice):
    mock_client.get_entry.return_value = team_member_to_entry(alice)
    assert await repo.get("m-alice") == alice


@pytest.mark.asyncio
async def test_member_ids_for_team(repo, mock_client, alice, bob):
    mock_client.get_entries.return_value = [
        team_member_to_entry(alice),
        team_member_to_entry(bob),
    ]

    ids = await repo.member_ids_for_team("Platform")

    assert ids == ["m-alice", "m-bob"]
    assert mock_client.get_entries.await_args.kwargs["where"] == {"team": "Platform"}


@pytest.mark.asyncio
async def test_list_teams_distinct_sorted(repo, mock_client):
    mock_client.get_entries.return_value = [
        {"uid": "1", "team": "Platform"},
        {"uid": "2", "team": "Mobile"},
        {"uid": "3", "team": "Platform"},
        {"uid": "4", "team": ""},
        {"uid": "5"},
    ]

    assert await repo.list_teams() == ["Mobile", "Platform"]
