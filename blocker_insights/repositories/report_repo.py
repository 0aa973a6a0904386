"""Repository for synthesized report entries."""

import logging
from typing import Any

from blocker_insights.db.contentstack import ContentstackClient
from blocker_insights.models.report import Report, ReportDraft, ReportType
from blocker_insights.repositories.mappers import (
    REPORT_CONTENT_TYPE,
    report_fields,
    report_from_entry,
)

logger = logging.getLogger(__name__)


class ReportRepository:
    """Report store backed by the content platform.

    Reports are append-only: the repository creates and reads entries but
    never updates them.
    """

    def __init__(self, client: ContentstackClient):
        """Initialize repository with content platform client.

        Args:
            client: ContentstackClient instance for entry operations
        """
        self._client = client

    async def create(self, draft: ReportDraft, title: str) -> Report:
        """Write a report and return the stored record.

        Store errors propagate unchanged; there is no retry.

        Args:
            draft: Report content to persist
            title: Entry title shown in the content platform

        Returns:
            Report with store-assigned id and timestamps
        """
        fields = report_fields(draft)
        fields["title"] = title

        entry = await self._client.create_entry(REPORT_CONTENT_TYPE, fields)
        report = report_from_entry(entry)
        logger.info(
            f"Stored {report.report_type.value} report {report.id} "
            f"for {report.target_id} ({report.period.value})"
        )
        return report

    async def list_recent(
        self,
        report_type: ReportType,
        target_id: str,
        limit: int = 10,
    ) -> list[Report]:
        """Get a target's most recent reports, newest first.

        Args:
            report_type: individual or team
            target_id: Member uid (individual) or team name (team)
            limit: Maximum reports to return

        Returns:
            Reports sorted by generated_at descending
        """
        where: dict[str, Any] = {"report_type": report_type.value}
        include_reference: list[str] = []
        if report_type == ReportType.INDIVIDUAL:
            where["target_member.uid"] = target_id
            include_reference.append("target_member")
        else:
            where["target_team"] = target_id

        entries = await self._client.get_entries(
            REPORT_CONTENT_TYPE,
            where=where,
            limit=limit,
            include_reference=include_reference,
            order_desc="generated_at",
        )
        reports = [report_from_entry(e) for e in entries]
        # Reference queries are not honoured by every stack; filter locally too
        reports = [r for r in reports if r.target_id == target_id]
        return sorted(reports, key=lambda r: r.generated_at, reverse=True)

    async def get(self, report_id: str) -> Report | None:
        """Get a report by uid."""
        entry = await self._client.get_entry(
            REPORT_CONTENT_TYPE, report_id, include_reference=["target_member"]
        )
        return report_from_entry(entry) if entry else None
