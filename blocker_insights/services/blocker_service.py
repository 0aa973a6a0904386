"""Blocker service: reporting, authorized updates and statistics.

Only the blocker's owner or a manager may update a blocker; only a manager
may set manager notes.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from typing import Any

import structlog

from blocker_insights.errors import AuthorizationError, NotFoundError
from blocker_insights.models.blocker import (
    Blocker,
    BlockerCategory,
    BlockerCreate,
    BlockerSeverity,
    BlockerStatus,
    BlockerUpdate,
)
from blocker_insights.models.team_member import Actor
from blocker_insights.repositories.blocker_repo import BlockerRepository
from blocker_insights.repositories.mappers import (
    blocker_title,
    format_timestamp,
    reference,
)
from blocker_insights.repositories.team_member_repo import TeamMemberRepository

logger = structlog.get_logger()

TREND_WEEKS = 12


@dataclass
class WeeklyCount:
    """Blockers reported in the week starting on ``week`` (a Sunday)."""

    week: date
    count: int


@dataclass
class BlockerStats:
    """Counts over a member's or team's blockers."""

    total: int
    by_category: dict[str, int] = field(default_factory=dict)
    by_severity: dict[str, int] = field(default_factory=dict)
    by_status: dict[str, int] = field(default_factory=dict)
    weekly_trend: list[WeeklyCount] = field(default_factory=list)


def week_start(moment: datetime) -> date:
    """Sunday on or before the given instant's date."""
    day = moment.date()
    return day - timedelta(days=(day.weekday() + 1) % 7)


def calculate_stats(blockers: list[Blocker]) -> BlockerStats:
    """Aggregate blockers by category, severity, status and week.

    Every known category, severity and status is present with a zero
    default. Values outside the enums are counted under their own key.
    """
    by_category = {c.value: 0 for c in BlockerCategory}
    by_severity = {s.value: 0 for s in BlockerSeverity}
    by_status = {s.value: 0 for s in BlockerStatus}
    weeks: Counter[date] = Counter()

    for blocker in blockers:
        by_category[blocker.category] = by_category.get(blocker.category, 0) + 1
        by_severity[blocker.severity] = by_severity.get(blocker.severity, 0) + 1
        by_status[blocker.status] = by_status.get(blocker.status, 0) + 1
        weeks[week_start(blocker.timestamp)] += 1

    trend = [WeeklyCount(week=w, count=weeks[w]) for w in sorted(weeks)]
    return BlockerStats(
        total=len(blockers),
        by_category=by_category,
        by_severity=by_severity,
        by_status=by_status,
        weekly_trend=trend[-TREND_WEEKS:],
    )


class BlockerService:
    """Creates, updates and summarizes blockers."""

    def __init__(
        self,
        blocker_repo: BlockerRepository,
        member_repo: TeamMemberRepository,
        stats_limit: int = 1000,
    ):
        """Initialize with repositories.

        Args:
            blocker_repo: Blocker store
            member_repo: Member/team resolver
            stats_limit: Max blockers read per member for statistics
        """
        self._blockers = blocker_repo
        self._members = member_repo
        self._stats_limit = stats_limit

    async def create(self, data: BlockerCreate) -> Blocker:
        """Report a new blocker; it starts Open.

        Raises:
            NotFoundError: If the owner does not resolve
        """
        owner = await self._members.get(data.owner_id)
        if owner is None:
            raise NotFoundError(f"Team member not found: {data.owner_id}")

        fields: dict[str, Any] = {
            "title": blocker_title(data.category, data.description),
            "team_member": reference(data.owner_id),
            "description": data.description,
            "category": data.category,
            "severity": data.severity,
            "status": BlockerStatus.OPEN.value,
            "reported_via": data.reported_via or "Web",
            "timestamp": format_timestamp(data.timestamp or datetime.now(UTC)),
        }
        if data.external_message_ref:
            fields["slack_message_id"] = data.external_message_ref

        blocker = await self._blockers.create(fields)
        logger.info(
            "blocker reported",
            blocker_id=blocker.id,
            owner_id=data.owner_id,
            severity=data.severity,
            reported_via=fields["reported_via"],
        )
        return blocker

    async def update(
        self, blocker_id: str, changes: BlockerUpdate, actor: Actor
    ) -> Blocker:
        """Apply a partial update on behalf of an actor.

        Raises:
            NotFoundError: If the blocker does not exist
            AuthorizationError: If the actor is neither owner nor manager,
                or a non-manager sets manager notes
        """
        existing = await self._blockers.get(blocker_id)
        if existing is None:
            raise NotFoundError(f"Blocker not found: {blocker_id}")

        is_owner = existing.owner_id == actor.member_id
        if not is_owner and not actor.is_manager:
            raise AuthorizationError(
                "You do not have permission to update this blocker"
            )
        if changes.manager_notes is not None and not actor.is_manager:
            raise AuthorizationError("Only managers can add manager notes")

        updates = changes.model_dump(exclude_unset=True, exclude_none=True)
        merged = existing.model_copy(update=updates)
        # The management API replaces the entry, so send every field
        fields: dict[str, Any] = {
            "title": blocker_title(merged.category, merged.description),
            "team_member": reference(merged.owner_id),
            "description": merged.description,
            "category": merged.category,
            "severity": merged.severity,
            "status": merged.status,
            "reported_via": merged.reported_via,
            "timestamp": format_timestamp(merged.timestamp),
            "manager_notes": merged.manager_notes,
            "slack_message_id": merged.external_message_ref,
        }

        blocker = await self._blockers.update(blocker_id, fields)
        logger.info(
            "blocker updated",
            blocker_id=blocker_id,
            actor=actor.member_id,
            fields=sorted(updates),
        )
        return blocker

    async def stats_for_member(self, member_id: str) -> BlockerStats:
        """Statistics over a member's blockers."""
        blockers = await self._blockers.list_by_owner(
            member_id, limit=self._stats_limit
        )
        return calculate_stats(blockers)

    async def stats_for_team(self, team: str) -> BlockerStats:
        """Statistics over the blockers of every member of a team."""
        member_ids = await self._members.member_ids_for_team(team)
        blockers = await self._blockers.list_by_owner_set(
            member_ids, limit=self._stats_limit
        )
        return calculate_stats(blockers)
