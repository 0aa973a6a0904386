"""Tests for report period windows."""

from datetime import UTC, datetime, timedelta

import pytest

from blocker_insights.models.report import ReportPeriod
from blocker_insights.reporting.periods import period_cutoff

NOW = datetime(2026, 3, 31, 12, 0, tzinfo=UTC)


def test_weekly_is_seven_days():
    assert period_cutoff(ReportPeriod.WEEKLY, NOW) == NOW - timedelta(days=7)


def test_monthly_is_thirty_days_not_calendar_month():
    assert period_cutoff("monthly", NOW) == datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def test_defaults_to_current_time():
    cutoff = period_cutoff(ReportPeriod.WEEKLY)
    expected = datetime.now(UTC) - timedelta(days=7)
    assert abs((expected - cutoff).total_seconds()) < 5


def test_unknown_period_rejected():
    with pytest.raises(ValueError):
        period_cutoff("quarterly", NOW)
