"""Tests for the team report scheduler."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from blocker_insights.integration.notification_service import ReportNotifier
from blocker_insights.models.report import Report, ReportPeriod, ReportType
from blocker_insights.reporting.scheduler import (
    TEAM_REPORT_JOB_ID,
    generate_scheduled_team_reports,
    get_scheduler,
    report_scheduler_lifespan,
    reset_scheduler,
)
from blocker_insights.reporting.service import ReportService
from blocker_insights.repositories.team_member_repo import TeamMemberRepository


def _team_report(team: str, is_existing: bool = False) -> Report:
    return Report(
        id=f"r-{team}",
        report_type=ReportType.TEAM,
        target_team=team,
        period=ReportPeriod.WEEKLY,
        summary="s",
        generated_at=datetime(2026, 3, 9, 8, 0, tzinfo=UTC),
        is_existing=is_existing,
    )


@pytest.fixture
def mock_report_service():
    service = MagicMock(spec=ReportService)
    service.generate_team_report = AsyncMock(
        side_effect=lambda team, period: _team_report(team)
    )
    return service


@pytest.fixture
def mock_member_repo(alice, manager):
    repo = MagicMock(spec=TeamMemberRepository)
    repo.list_teams = AsyncMock(return_value=["Mobile", "Platform"])
    repo.list_by_team = AsyncMock(return_value=[alice, manager])
    return repo


@pytest.fixture
def mock_notifier():
    notifier = MagicMock(spec=ReportNotifier)
    notifier.notify_managers = AsyncMock(return_value=[])
    return notifier


class TestGetScheduler:
    def setup_method(self):
        reset_scheduler()

    def teardown_method(self):
        reset_scheduler()

    def test_returns_same_instance(self):
        assert get_scheduler() is get_scheduler()

    def test_reset_clears_instance(self):
        first = get_scheduler()
        reset_scheduler()
        assert get_scheduler() is not first


class TestReportSchedulerLifespan:
    def setup_method(self):
        reset_scheduler()

    def teardown_method(self):
        reset_scheduler()

    @pytest.mark.asyncio
    async def test_adds_cron_job(
        self, settings, mock_report_service, mock_member_repo, mock_notifier
    ):
        async with report_scheduler_lifespan(
            mock_report_service, mock_member_repo, mock_notifier, settings
        ):
            scheduler = get_scheduler()
            assert scheduler.running is True
            job = scheduler.get_job(TEAM_REPORT_JOB_ID)
            assert job is not None
            assert job.max_instances == 1
            assert job.args == (mock_report_service, mock_member_repo, mock_notifier)
            fields = {f.name: str(f) for f in job.trigger.fields}
            assert fields["day_of_week"] == "mon"
            assert fields["hour"] == "8"

    @pytest.mark.asyncio
    async def test_calls_shutdown_on_exit(
        self, settings, mock_report_service, mock_member_repo, mock_notifier
    ):
        with patch(
            "blocker_insights.reporting.scheduler.AsyncIOScheduler"
        ) as mock_scheduler_class:
            mock_scheduler = MagicMock()
            mock_scheduler_class.return_value = mock_scheduler
            reset_scheduler()

            async with report_scheduler_lifespan(
                mock_report_service, mock_member_repo, mock_notifier, settings
            ):
                pass

            mock_scheduler.shutdown.assert_called_once_with(wait=False)


class TestGenerateScheduledTeamReports:
    @pytest.mark.asyncio
    async def test_generates_weekly_report_per_team(
        self, mock_report_service, mock_member_repo, mock_notifier
    ):
        completed = await generate_scheduled_team_reports(
            mock_report_service, mock_member_repo, mock_notifier
        )

        assert completed == 2
        teams = [c.args[0] for c in mock_report_service.generate_team_report.await_args_list]
        assert teams == ["Mobile", "Platform"]
        for call in mock_report_service.generate_team_report.await_args_list:
            assert call.args[1] == ReportPeriod.WEEKLY

    @pytest.mark.asyncio
    async def test_notifies_only_managers(
        self, mock_report_service, mock_member_repo, mock_notifier, manager
    ):
        await generate_scheduled_team_reports(
            mock_report_service, mock_member_repo, mock_notifier
        )

        report, team, managers = mock_notifier.notify_managers.await_args_list[0].args
        assert team == "Mobile"
        assert managers == [manager]

    @pytest.mark.asyncio
    async def test_existing_report_not_notified(
        self, mock_report_service, mock_member_repo, mock_notifier
    ):
        mock_report_service.generate_team_report.side_effect = (
            lambda team, period: _team_report(team, is_existing=True)
        )

        await generate_scheduled_team_reports(
            mock_report_service, mock_member_repo, mock_notifier
        )

        mock_notifier.notify_managers.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failure_for_one_team_continues(
        self, mock_report_service, mock_member_repo, mock_notifier
    ):
        def generate(team, period):
            if team == "Mobile":
                raise RuntimeError("store unavailable")
            return _team_report(team)

        mock_report_service.generate_team_report.side_effect = generate

        completed = await generate_scheduled_team_reports(
            mock_report_service, mock_member_repo, mock_notifier
        )

        assert completed == 1
        assert mock_notifier.notify_managers.await_count == 1
