"""Report model for synthesized blocker summaries."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from blocker_insights.models.base import StoredEntity, ensure_utc


class ReportType(str, Enum):
    """Whom a report is about."""

    INDIVIDUAL = "individual"
    TEAM = "team"


class ReportPeriod(str, Enum):
    """Lookback window of a report."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"


class ActionPriority(str, Enum):
    """Priority of a recommended action."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class EstimatedEffort(str, Enum):
    """Rough effort bucket for an action item."""

    QUICK_WIN = "quick-win"
    SHORT_TERM = "short-term"
    LONG_TERM = "long-term"


class ActionItem(BaseModel):
    """A recommended action produced by report synthesis.

    Serialized with camelCase keys, both in the model's JSON contract and
    in the stored report payload.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )

    title: str = Field(description="Brief action title")
    description: str = Field(description="What to do and why")
    priority: ActionPriority = Field(description="high, medium or low")
    severity: str | None = Field(
        default=None, description="Severity of the blockers addressed"
    )
    category: str | None = Field(
        default=None, description="Blocker category this addresses"
    )
    blocker_ref: str | None = Field(
        default=None, description="Reference id of the main blocker, e.g. B2"
    )
    related_blockers: list[str] = Field(
        default_factory=list,
        description="Short descriptions or reference ids of related blockers",
    )
    suggested_solution: str | None = Field(
        default=None, description="Concrete step-by-step approach"
    )
    team_to_involve: str | None = Field(
        default=None, description="Team or role that should help"
    )
    estimated_effort: EstimatedEffort | None = Field(
        default=None, description="quick-win, short-term or long-term"
    )


class ReportDraft(BaseModel):
    """Report content before the store has assigned an id.

    Exactly one of ``target_member_id`` / ``target_team`` is set, matching
    ``report_type``.
    """

    report_type: ReportType
    target_member_id: str | None = Field(default=None)
    target_team: str | None = Field(default=None)
    period: ReportPeriod
    summary: str
    action_items: list[ActionItem] = Field(default_factory=list)
    insights: list[str] = Field(default_factory=list)
    generated_at: datetime

    @field_validator("generated_at")
    @classmethod
    def _normalize_generated_at(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @model_validator(mode="after")
    def _check_target(self) -> "ReportDraft":
        has_member = self.target_member_id is not None
        has_team = self.target_team is not None
        if has_member == has_team:
            raise ValueError("exactly one of target_member_id/target_team must be set")
        if self.report_type == ReportType.INDIVIDUAL and not has_member:
            raise ValueError("individual report requires target_member_id")
        if self.report_type == ReportType.TEAM and not has_team:
            raise ValueError("team report requires target_team")
        return self

    @property
    def target_id(self) -> str:
        """Member id or team name the report is about."""
        return self.target_member_id or self.target_team or ""


class Report(StoredEntity, ReportDraft):
    """A point-in-time summary of a member's or team's blockers.

    Reports are never mutated after creation; each regeneration stores a
    new record. ``is_existing`` is set on a report handed back from the
    re-use window and is never persisted.
    """

    is_existing: bool = Field(default=False, exclude=True)
