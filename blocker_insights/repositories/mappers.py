"""Translation between domain models and content platform entries.

Entries are snake_case dicts; references are stored as lists of
``{"uid", "_content_type_uid"}`` objects and may come back expanded into
full entries. Report action items and insights are stored as JSON text.
"""

import json
import logging
from datetime import datetime
from typing import Any

from pydantic import TypeAdapter, ValidationError

from blocker_insights.models.base import ensure_utc
from blocker_insights.models.blocker import Blocker
from blocker_insights.models.report import ActionItem, Report, ReportDraft
from blocker_insights.models.team_member import TeamMember

logger = logging.getLogger(__name__)

TEAM_MEMBER_CONTENT_TYPE = "team_member"
BLOCKER_CONTENT_TYPE = "blocker"
REPORT_CONTENT_TYPE = "ai_report"

_action_items_adapter = TypeAdapter(list[ActionItem])
_insights_adapter = TypeAdapter(list[str])


def format_timestamp(value: datetime) -> str:
    """Render a datetime as ISO-8601 UTC with a Z suffix."""
    value = ensure_utc(value)
    return value.isoformat().replace("+00:00", "Z")


def reference(uid: str, content_type: str = TEAM_MEMBER_CONTENT_TYPE) -> list[dict]:
    """Build a single-entry reference field value."""
    return [{"uid": uid, "_content_type_uid": content_type}]


def reference_uid(value: Any) -> str | None:
    """Extract the first referenced uid from a reference field value.

    Handles unexpanded references, expanded entries and bare uid strings.
    """
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, dict):
        return value.get("uid")
    if isinstance(value, str):
        return value
    return None


def _optional_timestamp(value: datetime | None) -> str | None:
    return format_timestamp(value) if value is not None else None


def _decode_list(raw: Any, adapter: TypeAdapter, field: str) -> list:
    """Decode a JSON-text (or already decoded) list field.

    Malformed payloads decode to an empty list.
    """
    if raw is None or raw == "":
        return []
    try:
        if isinstance(raw, str):
            return adapter.validate_json(raw)
        return adapter.validate_python(raw)
    except ValidationError as e:
        logger.warning(f"Discarding malformed report field {field}: {e.error_count()} errors")
        return []


# Blockers


def blocker_from_entry(entry: dict[str, Any]) -> Blocker:
    """Convert a blocker entry into a Blocker."""
    return Blocker(
        id=entry["uid"],
        owner_id=reference_uid(entry.get("team_member")) or "",
        description=entry.get("description", ""),
        category=entry.get("category", ""),
        severity=entry.get("severity", ""),
        status=entry.get("status") or "Open",
        reported_via=entry.get("reported_via") or "Web",
        timestamp=entry.get("timestamp") or entry.get("created_at"),
        manager_notes=entry.get("manager_notes"),
        external_message_ref=entry.get("slack_message_id"),
        created_at=entry.get("created_at"),
        updated_at=entry.get("updated_at"),
    )


def blocker_to_entry(blocker: Blocker) -> dict[str, Any]:
    """Convert a Blocker into entry fields (uid and timestamps included)."""
    return {
        "uid": blocker.id,
        "team_member": reference(blocker.owner_id),
        "description": blocker.description,
        "category": blocker.category,
        "severity": blocker.severity,
        "status": blocker.status,
        "reported_via": blocker.reported_via,
        "timestamp": format_timestamp(blocker.timestamp),
        "manager_notes": blocker.manager_notes,
        "slack_message_id": blocker.external_message_ref,
        "created_at": _optional_timestamp(blocker.created_at),
        "updated_at": _optional_timestamp(blocker.updated_at),
    }


def blocker_title(category: str, description: str) -> str:
    """Entry title shown in the content platform."""
    return f"{category} - {description[:30]}"


# Reports


def report_from_entry(entry: dict[str, Any]) -> Report:
    """Convert a report entry into a Report."""
    return Report(
        id=entry["uid"],
        report_type=entry["report_type"],
        target_member_id=reference_uid(entry.get("target_member")),
        target_team=entry.get("target_team") or None,
        period=entry["report_period"],
        summary=entry.get("summary") or "",
        action_items=_decode_list(
            entry.get("action_items"), _action_items_adapter, "action_items"
        ),
        insights=_decode_list(entry.get("insights"), _insights_adapter, "insights"),
        generated_at=entry.get("generated_at") or entry.get("created_at"),
        created_at=entry.get("created_at"),
        updated_at=entry.get("updated_at"),
    )


def report_fields(report: ReportDraft) -> dict[str, Any]:
    """Convert report content into writable entry fields.

    Store-owned fields (uid, created_at, updated_at) are not included.
    """
    fields: dict[str, Any] = {
        "report_type": report.report_type.value,
        "report_period": report.period.value,
        "summary": report.summary,
        "action_items": json.dumps(
            [
                item.model_dump(mode="json", by_alias=True, exclude_none=True)
                for item in report.action_items
            ]
        ),
        "insights": json.dumps(report.insights),
        "generated_at": format_timestamp(report.generated_at),
    }
    if report.target_member_id is not None:
        fields["target_member"] = reference(report.target_member_id)
    else:
        fields["target_team"] = report.target_team
    return fields


def report_to_entry(report: Report) -> dict[str, Any]:
    """Convert a Report into a full entry dict, as the store returns it."""
    entry = report_fields(report)
    entry["uid"] = report.id
    entry["created_at"] = _optional_timestamp(report.created_at)
    entry["updated_at"] = _optional_timestamp(report.updated_at)
    return entry


# Team members


def team_member_from_entry(entry: dict[str, Any]) -> TeamMember:
    """Convert a team_member entry into a TeamMember."""
    return TeamMember(
        id=entry["uid"],
        first_name=entry.get("first_name", ""),
        last_name=entry.get("last_name", ""),
        email=entry.get("email", ""),
        slack_id=entry.get("slack_id") or None,
        designation=entry.get("designation"),
        team=entry.get("team") or None,
        is_manager=bool(entry.get("is_manager", False)),
        status=entry.get("status"),
        created_at=entry.get("created_at"),
        updated_at=entry.get("updated_at"),
    )


def team_member_to_entry(member: TeamMember) -> dict[str, Any]:
    """Convert a TeamMember into an entry dict."""
    return {
        "uid": member.id,
        "first_name": member.first_name,
        "last_name": member.last_name,
        "email": member.email,
        "slack_id": member.slack_id,
        "designation": member.designation,
        "team": member.team,
        "is_manager": member.is_manager,
        "status": member.status,
        "created_at": _optional_timestamp(member.created_at),
        "updated_at": _optional_timestamp(member.updated_at),
    }
