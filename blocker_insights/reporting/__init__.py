"""Report synthesis for individual members and teams."""

from blocker_insights.reporting.fallback import build_fallback_analysis
from blocker_insights.reporting.insights import InsightGenerator
from blocker_insights.reporting.schemas import Analysis
from blocker_insights.reporting.service import ReportService

__all__ = [
    "Analysis",
    "InsightGenerator",
    "ReportService",
    "build_fallback_analysis",
]
