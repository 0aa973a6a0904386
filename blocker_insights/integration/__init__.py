"""Outbound integrations.

- SlackAdapter: Slack direct messages
- ReportNotifier: Manager notifications for new team reports
"""

from blocker_insights.integration.notification_service import ReportNotifier
from blocker_insights.integration.slack_adapter import SlackAdapter

__all__ = [
    "ReportNotifier",
    "SlackAdapter",
]
