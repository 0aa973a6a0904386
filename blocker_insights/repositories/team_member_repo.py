"""Repository for the team member directory (read-only)."""

from blocker_insights.db.contentstack import ContentstackClient
from blocker_insights.models.team_member import TeamMember
from blocker_insights.repositories.mappers import (
    TEAM_MEMBER_CONTENT_TYPE,
    team_member_from_entry,
)

# Upper bound for directory scans
DIRECTORY_LIMIT = 1000


class TeamMemberRepository:
    """Resolves member ids and team membership from the content platform."""

    def __init__(self, client: ContentstackClient):
        """Initialize repository with content platform client.

        Args:
            client: ContentstackClient instance for entry operations
        """
        self._client = client

    async def get(self, member_id: str) -> TeamMember | None:
        """Get a member by uid, or None if it does not resolve."""
        entry = await self._client.get_entry(TEAM_MEMBER_CONTENT_TYPE, member_id)
        return team_member_from_entry(entry) if entry else None

    async def list_by_team(self, team: str) -> list[TeamMember]:
        """Get all members whose primary team is ``team``."""
        entries = await self._client.get_entries(
            TEAM_MEMBER_CONTENT_TYPE,
            where={"team": team},
            limit=DIRECTORY_LIMIT,
        )
        return [team_member_from_entry(e) for e in entries]

    async def member_ids_for_team(self, team: str) -> list[str]:
        """Get the uids of a team's members."""
        return [m.id for m in await self.list_by_team(team)]

    async def list_teams(self) -> list[str]:
        """Get distinct team names present in the directory, sorted."""
        entries = await self._client.get_entries(
            TEAM_MEMBER_CONTENT_TYPE,
            limit=DIRECTORY_LIMIT,
        )
        return sorted({e["team"] for e in entries if e.get("team")})
