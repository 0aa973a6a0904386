"""Notification service for generated reports.

Sends Slack DMs to a team's managers when a new team report is generated,
with an in-memory audit trail.
"""

from datetime import UTC, datetime

import structlog
from jinja2 import Environment

from blocker_insights.integration.schemas import NotificationRecord, NotificationResult
from blocker_insights.integration.slack_adapter import SlackAdapter
from blocker_insights.models.report import Report
from blocker_insights.models.team_member import TeamMember

logger = structlog.get_logger()

# Action items shown in the DM; the full list lives in the stored report
MAX_ACTION_ITEMS = 3

REPORT_MESSAGE_TEMPLATE = """\
*{{ period | capitalize }} blocker report for {{ team }}*
> {{ summary }}
{% if action_items %}

*Top action items:*
{% for item in action_items %}
• *{{ item.title }}* ({{ item.priority }}{% if item.estimated_effort %}, {{ item.estimated_effort }}{% endif %})
{% endfor %}
{% if remaining > 0 %}
_...and {{ remaining }} more_
{% endif %}
{% endif %}
{% if insights %}

*Insights:*
{% for insight in insights %}
• {{ insight }}
{% endfor %}
{% endif %}
"""


class ReportNotifier:
    """Sends and audits report notifications."""

    def __init__(self, slack_adapter: SlackAdapter):
        """Initialize with Slack adapter.

        Args:
            slack_adapter: Configured SlackAdapter for sending DMs
        """
        self._slack = slack_adapter
        self._env = Environment(trim_blocks=True, lstrip_blocks=True)
        self._template = self._env.from_string(REPORT_MESSAGE_TEMPLATE)
        self._audit_log: list[NotificationRecord] = []

    def format_message(self, report: Report, team_name: str) -> str:
        """Render the report as a Slack mrkdwn message."""
        return self._template.render(
            period=report.period.value,
            team=team_name,
            summary=report.summary,
            action_items=report.action_items[:MAX_ACTION_ITEMS],
            remaining=len(report.action_items) - MAX_ACTION_ITEMS,
            insights=report.insights,
        ).strip()

    async def notify_managers(
        self,
        report: Report,
        team_name: str,
        managers: list[TeamMember],
    ) -> list[NotificationResult]:
        """DM each manager a digest of the report.

        Managers without a Slack id are skipped with a failed result.

        Args:
            report: Newly generated report
            team_name: Team the report is about
            managers: Recipients

        Returns:
            One NotificationResult per manager
        """
        message = self.format_message(report, team_name)
        results = []
        for manager in managers:
            if not manager.slack_id:
                result = NotificationResult(
                    success=False,
                    recipient_id=manager.id,
                    error="no_slack_id",
                )
            else:
                dm_result = await self._slack.send_dm(manager.slack_id, message)
                result = NotificationResult(
                    success=dm_result.get("success", False),
                    recipient_id=manager.id,
                    recipient_slack_id=manager.slack_id,
                    message_ts=dm_result.get("ts"),
                    error=dm_result.get("error"),
                )
            self._record_audit(manager.id, report.id, result)
            results.append(result)
        return results

    def _record_audit(
        self,
        recipient_id: str,
        report_id: str,
        result: NotificationResult,
    ) -> None:
        """Record notification in audit log."""
        record = NotificationRecord(
            recipient_id=recipient_id,
            report_id=report_id,
            sent_at=datetime.now(UTC),
            success=result.success,
            error=result.error,
        )
        self._audit_log.append(record)
        logger.info(
            "notification recorded",
            recipient_id=recipient_id,
            report_id=report_id,
            success=result.success,
        )

    def get_audit_log(self) -> list[NotificationRecord]:
        """Return copy of audit log."""
        return list(self._audit_log)

    def clear_audit_log(self) -> None:
        """Clear audit log (for testing)."""
        self._audit_log.clear()
