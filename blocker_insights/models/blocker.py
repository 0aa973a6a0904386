"""Blocker model for impediments reported by team members."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from blocker_insights.models.base import StoredEntity, ensure_utc


class BlockerCategory(str, Enum):
    """Category of a blocker."""

    PROCESS = "Process"
    TECHNICAL = "Technical"
    DEPENDENCY = "Dependency"
    INFRASTRUCTURE = "Infrastructure"
    COMMUNICATION = "Communication"
    RESOURCE = "Resource"
    KNOWLEDGE = "Knowledge"
    ACCESS = "Access"
    EXTERNAL = "External"
    REVIEW = "Review"
    CUSTOMER_ESCALATION = "Customer Escalation"
    OTHER = "Other"


class BlockerSeverity(str, Enum):
    """Severity level of a blocker."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class BlockerStatus(str, Enum):
    """Lifecycle status of a blocker."""

    OPEN = "Open"
    RESOLVED = "Resolved"
    IGNORED = "Ignored"


class Blocker(StoredEntity):
    """A blocker as read back from the store.

    Category, severity and status are kept as plain strings here: entries
    written before validation existed may carry values outside the enums,
    and reads must not fail on them. New blockers are validated through
    BlockerCreate / BlockerUpdate.
    """

    owner_id: str = Field(description="Team member who reported the blocker")
    description: str = Field(description="What is blocking the work")
    category: str = Field(description="BlockerCategory value")
    severity: str = Field(description="BlockerSeverity value")
    status: str = Field(default=BlockerStatus.OPEN.value)
    reported_via: str = Field(default="Web", description="Web, Slack, ...")
    timestamp: datetime = Field(description="When the blocker was reported")
    manager_notes: str | None = Field(default=None)
    external_message_ref: str | None = Field(
        default=None,
        description="Message id in the chat tool the blocker came from",
    )

    @field_validator("timestamp")
    @classmethod
    def _normalize_timestamp(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @property
    def is_open(self) -> bool:
        """Check if the blocker is still open."""
        return self.status == BlockerStatus.OPEN.value


class BlockerCreate(BaseModel):
    """Input for reporting a new blocker."""

    model_config = ConfigDict(str_strip_whitespace=True, use_enum_values=True)

    owner_id: str = Field(min_length=1)
    description: str = Field(min_length=1, max_length=5000)
    category: BlockerCategory
    severity: BlockerSeverity
    reported_via: str | None = Field(default=None)
    timestamp: datetime | None = Field(default=None)
    external_message_ref: str | None = Field(default=None)


class BlockerUpdate(BaseModel):
    """Partial update of a blocker; unset fields are left untouched."""

    model_config = ConfigDict(str_strip_whitespace=True, use_enum_values=True)

    description: str | None = Field(default=None, min_length=1, max_length=5000)
    category: BlockerCategory | None = None
    severity: BlockerSeverity | None = None
    status: BlockerStatus | None = None
    manager_notes: str | None = None
