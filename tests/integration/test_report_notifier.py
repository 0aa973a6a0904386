"""Tests for ReportNotifier."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from blocker_insights.integration.notification_service import ReportNotifier
from blocker_insights.integration.slack_adapter import SlackAdapter
from blocker_insights.models.report import (
    ActionItem,
    Report,
    ReportPeriod,
    ReportType,
)


@pytest.fixture
def mock_slack_adapter():
    """Create mock SlackAdapter."""
    adapter = MagicMock(spec=SlackAdapter)
    adapter.send_dm = AsyncMock(return_value={"success": True, "ts": "1710.1"})
    return adapter


@pytest.fixture
def notifier(mock_slack_adapter):
    return ReportNotifier(mock_slack_adapter)


@pytest.fixture
def report() -> Report:
    return Report(
        id="r-7",
        report_type=ReportType.TEAM,
        target_team="Platform",
        period=ReportPeriod.WEEKLY,
        summary="Platform reported 5 blockers during this period.",
        action_items=[
            ActionItem(
                title=f"Action {n}",
                description="d",
                priority="high",
                estimated_effort="quick-win",
            )
            for n in range(1, 6)
        ],
        insights=["Total blockers: 5", "Open blockers: 3 (60% unresolved)"],
        generated_at=datetime(2026, 3, 9, 8, 0, tzinfo=UTC),
    )


class TestFormatMessage:
    def test_contains_summary_top_items_and_insights(self, notifier, report):
        message = notifier.format_message(report, "Platform")

        assert message.startswith("*Weekly blocker report for Platform*")
        assert "> Platform reported 5 blockers" in message
        assert "• *Action 1* (high, quick-win)" in message
        assert "Action 3" in message
        assert "Action 4" not in message
        assert "_...and 2 more_" in message
        assert "• Open blockers: 3 (60% unresolved)" in message

    def test_no_action_items_section_when_empty(self, notifier, report):
        empty = report.model_copy(update={"action_items": []})
        message = notifier.format_message(empty, "Platform")
        assert "Top action items" not in message
        assert "more_" not in message


class TestNotifyManagers:
    @pytest.mark.asyncio
    async def test_sends_to_each_manager(
        self, notifier, mock_slack_adapter, report, manager
    ):
        results = await notifier.notify_managers(report, "Platform", [manager])

        assert len(results) == 1
        assert results[0].success is True
        assert results[0].recipient_slack_id == "U-CAROL"
        assert results[0].message_ts == "1710.1"
        slack_id, message = mock_slack_adapter.send_dm.await_args.args
        assert slack_id == "U-CAROL"
        assert "Platform" in message

    @pytest.mark.asyncio
    async def test_skips_manager_without_slack_id(
        self, notifier, mock_slack_adapter, report, bob
    ):
        results = await notifier.notify_managers(report, "Platform", [bob])

        assert results[0].success is False
        assert results[0].error == "no_slack_id"
        mock_slack_adapter.send_dm.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_slack_failure_reported(
        self, notifier, mock_slack_adapter, report, manager
    ):
        mock_slack_adapter.send_dm.return_value = {
            "success": False,
            "error": "channel_not_found",
        }

        results = await notifier.notify_managers(report, "Platform", [manager])

        assert results[0].success is False
        assert results[0].error == "channel_not_found"

    @pytest.mark.asyncio
    async def test_audit_log(self, notifier, report, manager, bob):
        await notifier.notify_managers(report, "Platform", [manager, bob])

        log = notifier.get_audit_log()
        assert [(r.recipient_id, r.success) for r in log] == [
            ("m-carol", True),
            ("m-bob", False),
        ]
        assert all(r.report_id == "r-7" for r in log)

        notifier.clear_audit_log()
        assert notifier.get_audit_log() == []
