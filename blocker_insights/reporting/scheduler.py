"""APScheduler integration for weekly team reports.

Provides scheduler setup and a lifespan context manager that registers
the cron job generating every team's weekly report.
"""

from contextlib import asynccontextmanager
from datetime import UTC
from typing import TYPE_CHECKING

import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from blocker_insights.models.report import ReportPeriod

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from blocker_insights.config import Settings
    from blocker_insights.integration.notification_service import ReportNotifier
    from blocker_insights.reporting.service import ReportService
    from blocker_insights.repositories.team_member_repo import TeamMemberRepository

logger = structlog.get_logger()

TEAM_REPORT_JOB_ID = "weekly_team_reports"

# Module-level scheduler instance
_scheduler: AsyncIOScheduler | None = None


def get_scheduler() -> AsyncIOScheduler:
    """Get or create the scheduler instance."""
    global _scheduler
    if _scheduler is None:
        _scheduler = AsyncIOScheduler(timezone=UTC)
    return _scheduler


def reset_scheduler() -> None:
    """Reset the scheduler instance (for testing)."""
    global _scheduler
    if _scheduler is not None and _scheduler.running:
        _scheduler.shutdown(wait=False)
    _scheduler = None


@asynccontextmanager
async def report_scheduler_lifespan(
    report_service: "ReportService",
    member_repo: "TeamMemberRepository",
    notifier: "ReportNotifier",
    settings: "Settings",
) -> "AsyncGenerator[None, None]":
    """Run the team report job while the context is open.

    Usage:
        async with report_scheduler_lifespan(service, members, notifier, settings):
            # Scheduler is running
            ...
        # Scheduler stopped
    """
    scheduler = get_scheduler()

    scheduler.add_job(
        generate_scheduled_team_reports,
        "cron",
        day_of_week=settings.report_schedule_day_of_week,
        hour=settings.report_schedule_hour,
        minute=0,
        args=[report_service, member_repo, notifier],
        id=TEAM_REPORT_JOB_ID,
        replace_existing=True,
        max_instances=1,  # Prevent overlap if job runs long
    )

    logger.info(
        "Starting report scheduler",
        day_of_week=settings.report_schedule_day_of_week,
        hour=settings.report_schedule_hour,
    )
    scheduler.start()

    try:
        yield
    finally:
        logger.info("Shutting down report scheduler")
        scheduler.shutdown(wait=False)


async def generate_scheduled_team_reports(
    report_service: "ReportService",
    member_repo: "TeamMemberRepository",
    notifier: "ReportNotifier",
) -> int:
    """Scheduled job: generate each team's weekly report.

    Managers are notified only for newly generated reports. A failure for
    one team is logged and the job moves on.

    Returns:
        Number of teams whose report was generated or already existed
    """
    teams = await member_repo.list_teams()
    completed = 0

    for team in teams:
        try:
            report = await report_service.generate_team_report(
                team, ReportPeriod.WEEKLY
            )
            completed += 1
            if report.is_existing:
                logger.info("Team report already exists", team=team, report_id=report.id)
                continue

            members = await member_repo.list_by_team(team)
            managers = [m for m in members if m.is_manager]
            if managers:
                await notifier.notify_managers(report, team, managers)
        except Exception as e:
            logger.error("Scheduled team report failed", team=team, error=str(e))

    logger.info("Scheduled team reports finished", teams=len(teams), completed=completed)
    return completed
