"""Content platform repositories and entry mappers."""

from blocker_insights.repositories.blocker_repo import BlockerRepository
from blocker_insights.repositories.report_repo import ReportRepository
from blocker_insights.repositories.team_member_repo import TeamMemberRepository

__all__ = [
    "BlockerRepository",
    "ReportRepository",
    "TeamMemberRepository",
]
