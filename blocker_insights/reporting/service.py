"""Report service orchestrating blocker report synthesis.

Provides unified interface for:
- Individual reports (one member's blockers)
- Team reports (blockers of every member of a team)
- Report lookup by target or id

Generation is idempotent within a period window: unless forced, a report
already generated for the same target and period since the window start is
returned instead of a new one.
"""

import asyncio
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime

import structlog

from blocker_insights.errors import NotFoundError
from blocker_insights.models.report import (
    Report,
    ReportDraft,
    ReportPeriod,
    ReportType,
)
from blocker_insights.reporting.insights import InsightGenerator
from blocker_insights.reporting.periods import period_cutoff
from blocker_insights.reporting.schemas import Analysis
from blocker_insights.repositories.blocker_repo import BlockerRepository
from blocker_insights.repositories.report_repo import ReportRepository
from blocker_insights.repositories.team_member_repo import TeamMemberRepository

logger = structlog.get_logger()

LockKey = tuple[ReportType, str, ReportPeriod]


@dataclass
class _KeyLock:
    """Lock plus the number of callers holding or waiting on it."""

    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    users: int = 0


def _utc_now() -> datetime:
    return datetime.now(UTC)


class ReportService:
    """Orchestrates report generation.

    Resolves the target, checks the re-use window, fetches blockers,
    runs the insight generator and persists the result. Generation for a
    given (report type, target, period) is serialized so concurrent calls
    cannot both miss the existing report and write duplicates.
    """

    def __init__(
        self,
        blocker_repo: BlockerRepository,
        report_repo: ReportRepository,
        member_repo: TeamMemberRepository,
        insight_generator: InsightGenerator,
        *,
        individual_blocker_limit: int = 100,
        team_blocker_limit: int = 500,
        recent_report_limit: int = 10,
        clock: Callable[[], datetime] = _utc_now,
    ):
        """Initialize the report service.

        Args:
            blocker_repo: Blocker store
            report_repo: Report store
            member_repo: Member/team resolver
            insight_generator: Generator for summary, action items, insights
            individual_blocker_limit: Max blockers fetched for a member
            team_blocker_limit: Max blockers fetched per member of a team
            recent_report_limit: Max prior reports checked for re-use
            clock: Source of the current time (UTC)
        """
        self._blockers = blocker_repo
        self._reports = report_repo
        self._members = member_repo
        self._insights = insight_generator
        self._individual_limit = individual_blocker_limit
        self._team_limit = team_blocker_limit
        self._recent_limit = recent_report_limit
        self._clock = clock
        self._locks: dict[LockKey, _KeyLock] = {}

    async def generate_individual_report(
        self,
        member_id: str,
        period: ReportPeriod | str = ReportPeriod.WEEKLY,
        force: bool = False,
    ) -> Report:
        """Generate (or re-use) a report on one member's blockers.

        Args:
            member_id: Team member uid
            period: weekly or monthly
            force: Generate a new report even if one exists for the window

        Returns:
            Report; ``is_existing`` is True when a prior report was re-used

        Raises:
            NotFoundError: If the member does not resolve
        """
        period = ReportPeriod(period)
        member = await self._members.get(member_id)
        if member is None:
            raise NotFoundError(f"Team member not found: {member_id}")

        async with self._generation_lock((ReportType.INDIVIDUAL, member_id, period)):
            now = self._clock()
            if not force:
                existing = await self.find_existing(
                    ReportType.INDIVIDUAL, member_id, period, now=now
                )
                if existing is not None:
                    logger.info(
                        "returning existing report",
                        report_type="individual",
                        member_id=member_id,
                        period=period.value,
                        report_id=existing.id,
                    )
                    return existing.model_copy(update={"is_existing": True})

            blockers = await self._blockers.list_by_owner(
                member_id,
                since=period_cutoff(period, now),
                limit=self._individual_limit,
            )
            logger.info(
                "generating individual report",
                member_id=member_id,
                period=period.value,
                blocker_count=len(blockers),
            )

            analysis = await self._insights.analyze(
                blockers, ReportType.INDIVIDUAL, member.first_name
            )
            draft = self._draft(
                ReportType.INDIVIDUAL, member_id, period, analysis, generated_at=now
            )
            report = await self._reports.create(
                draft,
                title=f"{period.value} Report - {member.full_name}",
            )

        logger.info(
            "individual report generated",
            member_id=member_id,
            report_id=report.id,
            action_items=len(report.action_items),
        )
        return report

    async def generate_team_report(
        self,
        team: str,
        period: ReportPeriod | str = ReportPeriod.WEEKLY,
        force: bool = False,
    ) -> Report:
        """Generate (or re-use) a report on a team's blockers.

        Blockers are fetched per member in parallel and merged newest first.

        Args:
            team: Team name
            period: weekly or monthly
            force: Generate a new report even if one exists for the window

        Returns:
            Report; ``is_existing`` is True when a prior report was re-used

        Raises:
            NotFoundError: If the team has no members
        """
        period = ReportPeriod(period)
        member_ids = await self._members.member_ids_for_team(team)
        if not member_ids:
            raise NotFoundError(f"Team not found or has no members: {team}")

        async with self._generation_lock((ReportType.TEAM, team, period)):
            now = self._clock()
            if not force:
                existing = await self.find_existing(
                    ReportType.TEAM, team, period, now=now
                )
                if existing is not None:
                    logger.info(
                        "returning existing report",
                        report_type="team",
                        team=team,
                        period=period.value,
                        report_id=existing.id,
                    )
                    return existing.model_copy(update={"is_existing": True})

            blockers = await self._blockers.list_by_owner_set(
                member_ids,
                since=period_cutoff(period, now),
                limit=self._team_limit,
            )
            logger.info(
                "generating team report",
                team=team,
                period=period.value,
                member_count=len(member_ids),
                blocker_count=len(blockers),
            )

            analysis = await self._insights.analyze(blockers, ReportType.TEAM, team)
            draft = self._draft(ReportType.TEAM, team, period, analysis, generated_at=now)
            report = await self._reports.create(
                draft, title=f"{period.value} Team Report - {team}"
            )

        logger.info(
            "team report generated",
            team=team,
            report_id=report.id,
            action_items=len(report.action_items),
        )
        return report

    @asynccontextmanager
    async def _generation_lock(self, key: LockKey) -> AsyncIterator[None]:
        """Serialize generation per key; the entry is dropped once unused."""
        entry = self._locks.setdefault(key, _KeyLock())
        entry.users += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.users -= 1
            if entry.users == 0:
                del self._locks[key]

    async def find_existing(
        self,
        report_type: ReportType,
        target_id: str,
        period: ReportPeriod,
        now: datetime | None = None,
    ) -> Report | None:
        """Most recent report for the target generated within the period window.

        Args:
            report_type: individual or team
            target_id: Member uid or team name
            period: weekly or monthly
            now: Reference instant (default: service clock)

        Returns:
            The newest matching report, or None
        """
        cutoff = period_cutoff(period, now or self._clock())
        reports = await self._reports.list_recent(
            report_type, target_id, limit=self._recent_limit
        )
        candidates = [
            r for r in reports if r.period == period and r.generated_at >= cutoff
        ]
        if not candidates:
            return None
        return max(candidates, key=lambda r: r.generated_at)

    async def get_reports_for(
        self, report_type: ReportType | str, target_id: str
    ) -> list[Report]:
        """Recent reports for a member or team, newest first."""
        return await self._reports.list_recent(
            ReportType(report_type), target_id, limit=self._recent_limit
        )

    async def get_report_by_id(self, report_id: str) -> Report | None:
        """A single report by id, or None."""
        return await self._reports.get(report_id)

    @staticmethod
    def _draft(
        report_type: ReportType,
        target_id: str,
        period: ReportPeriod,
        analysis: Analysis,
        generated_at: datetime,
    ) -> ReportDraft:
        target = (
            {"target_member_id": target_id}
            if report_type == ReportType.INDIVIDUAL
            else {"target_team": target_id}
        )
        return ReportDraft(
            report_type=report_type,
            period=period,
            summary=analysis.summary,
            action_items=analysis.action_items,
            insights=analysis.insights,
            generated_at=generated_at,
            **target,
        )
