"""Report period windows."""

from datetime import UTC, datetime, timedelta

from blocker_insights.models.report import ReportPeriod

PERIOD_LENGTHS: dict[ReportPeriod, timedelta] = {
    ReportPeriod.WEEKLY: timedelta(days=7),
    ReportPeriod.MONTHLY: timedelta(days=30),
}


def period_cutoff(period: ReportPeriod | str, now: datetime | None = None) -> datetime:
    """Start of the lookback window for a period.

    Fixed-length windows: 7 days for weekly, 30 days for monthly, with no
    calendar-month adjustment.

    Args:
        period: weekly or monthly
        now: Reference instant (default: current UTC time)

    Returns:
        now minus the period length
    """
    now = now or datetime.now(UTC)
    return now - PERIOD_LENGTHS[ReportPeriod(period)]
