"""Insight generator: LLM analysis with a deterministic fallback."""

import structlog

from blocker_insights.models.blocker import Blocker
from blocker_insights.models.report import ReportType
from blocker_insights.reporting.fallback import build_fallback_analysis, empty_analysis
from blocker_insights.reporting.grouping import group_by_severity, summarize
from blocker_insights.reporting.prompts import SYSTEM_INSTRUCTION, build_report_prompt
from blocker_insights.reporting.schemas import Analysis
from blocker_insights.services.llm_client import (
    Generated,
    GenerationFailed,
    LLMClient,
)

logger = structlog.get_logger()


class InsightGenerator:
    """Turns a blocker list into summary, action items and insights.

    Generation failures never reach the caller: a failed or timed-out
    model call yields the rule-based analysis instead.
    """

    def __init__(
        self,
        llm_client: LLMClient,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ):
        """Initialize generator with LLM client.

        Args:
            llm_client: LLM client for structured output
            temperature: Sampling temperature (default from LLM settings)
            max_tokens: Output token cap (default from LLM settings)
        """
        self._llm = llm_client
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def analyze(
        self,
        blockers: list[Blocker],
        report_type: ReportType,
        target_name: str,
    ) -> Analysis:
        """Analyze blockers for a member or team.

        Args:
            blockers: Blockers in the report window
            report_type: individual or team
            target_name: Member first name or team name

        Returns:
            Model-generated Analysis, or the fallback analysis on failure
        """
        if not blockers:
            return empty_analysis(target_name)

        groups = group_by_severity(blockers)
        if groups.unrecognized:
            logger.warning(
                "blockers with unrecognized severity",
                target=target_name,
                count=len(groups.unrecognized),
                severities=sorted({b.severity for b in groups.unrecognized}),
            )

        prompt = build_report_prompt(
            groups, summarize(blockers), report_type, target_name
        )
        outcome = await self._llm.generate(
            SYSTEM_INSTRUCTION,
            prompt,
            Analysis,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )

        match outcome:
            case Generated(output=analysis):
                logger.info(
                    "analysis generated",
                    target=target_name,
                    action_items=len(analysis.action_items),
                )
                return analysis
            case GenerationFailed(error=error):
                logger.warning(
                    "generation failed, using fallback analysis",
                    target=target_name,
                    error=str(error),
                )
                return build_fallback_analysis(blockers, target_name)
