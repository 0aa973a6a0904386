"""Domain models for Blocker Insights.

This module exports all domain models used throughout the application:
- StoredEntity: Base class with store id, timestamps
- Blocker: Reported impediments plus create/update inputs
- Report, ActionItem: Synthesized blocker reports
- TeamMember, Actor: Member directory entries and caller identity
"""

from blocker_insights.models.base import StoredEntity
from blocker_insights.models.blocker import (
    Blocker,
    BlockerCategory,
    BlockerCreate,
    BlockerSeverity,
    BlockerStatus,
    BlockerUpdate,
)
from blocker_insights.models.report import (
    ActionItem,
    ActionPriority,
    EstimatedEffort,
    Report,
    ReportDraft,
    ReportPeriod,
    ReportType,
)
from blocker_insights.models.team_member import Actor, TeamMember

__all__ = [
    # Base
    "StoredEntity",
    # Blocker
    "Blocker",
    "BlockerCategory",
    "BlockerCreate",
    "BlockerSeverity",
    "BlockerStatus",
    "BlockerUpdate",
    # Report
    "ActionItem",
    "ActionPriority",
    "EstimatedEffort",
    "Report",
    "ReportDraft",
    "ReportPeriod",
    "ReportType",
    # Members
    "Actor",
    "TeamMember",
]
