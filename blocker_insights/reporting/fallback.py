"""Rule-based analysis used when text generation is unavailable.

Everything here is a pure function of the blocker list and target name:
no clock, no I/O. Same input, same output.
"""

from blocker_insights.models.blocker import Blocker
from blocker_insights.models.report import (
    ActionItem,
    ActionPriority,
    EstimatedEffort,
)
from blocker_insights.reporting.grouping import (
    BlockerSummary,
    assign_refs,
    group_by_severity,
    summarize,
)
from blocker_insights.reporting.schemas import Analysis

# Representative blockers named per action item
REPRESENTATIVES_PER_ITEM = 2
DESCRIPTION_PREVIEW_LENGTH = 50
RECURRING_CATEGORY_THRESHOLD = 2

CATEGORY_SUGGESTIONS: dict[str, str] = {
    "Technical": (
        "1. Review technical architecture\n"
        "2. Consider pair programming sessions\n"
        "3. Set up knowledge sharing sessions\n"
        "4. Create technical documentation"
    ),
    "Dependency": (
        "1. Map all external dependencies\n"
        "2. Set up regular sync meetings with dependent teams\n"
        "3. Create escalation procedures\n"
        "4. Consider building abstractions to reduce coupling"
    ),
    "Resource": (
        "1. Review resource allocation with management\n"
        "2. Prioritize tasks by impact\n"
        "3. Consider temporary resource augmentation\n"
        "4. Identify tasks that can be deferred"
    ),
    "Process": (
        "1. Document current processes\n"
        "2. Identify bottlenecks\n"
        "3. Streamline approval workflows\n"
        "4. Implement automation where possible"
    ),
    "Communication": (
        "1. Set up regular sync meetings\n"
        "2. Create shared communication channels\n"
        "3. Document decisions and rationale\n"
        "4. Establish clear escalation paths"
    ),
    "Other": (
        "1. Categorize blockers more specifically\n"
        "2. Identify root causes\n"
        "3. Create action plans for each\n"
        "4. Set up regular review meetings"
    ),
}

# (severity, title, description template, priority, effort, solution)
SEVERITY_RULES = (
    (
        "High",
        "Immediate: Address High Severity Blockers",
        "There are {count} high severity blockers requiring immediate attention. "
        "These are blocking critical work.",
        ActionPriority.HIGH,
        EstimatedEffort.QUICK_WIN,
        "1. Schedule an urgent meeting to discuss the blockers\n"
        "2. Identify owners for each blocker\n"
        "3. Set a 24-hour resolution target\n"
        "4. Escalate to management if external dependencies are involved",
    ),
    (
        "Medium",
        "This Sprint: Resolve Medium Priority Issues",
        "{count} medium severity blockers should be addressed within this sprint "
        "to prevent escalation.",
        ActionPriority.MEDIUM,
        EstimatedEffort.SHORT_TERM,
        "1. Add blockers to the sprint backlog\n"
        "2. Assign clear ownership\n"
        "3. Set realistic deadlines\n"
        "4. Create follow-up tasks if needed",
    ),
    (
        "Low",
        "Backlog: Schedule Low Priority Items",
        "{count} low severity blockers can be scheduled for future sprints.",
        ActionPriority.LOW,
        EstimatedEffort.LONG_TERM,
        "1. Add to the backlog with proper labels\n"
        "2. Review during sprint planning\n"
        "3. Consider batching similar issues\n"
        "4. Document workarounds if available",
    ),
)

NO_BLOCKERS_INSIGHT = "No blockers to analyze for this period."


def category_suggestion(category: str) -> str:
    """Canned solution steps for a category; unknown categories get Other."""
    return CATEGORY_SUGGESTIONS.get(category, CATEGORY_SUGGESTIONS["Other"])


def percent(part: int, whole: int) -> int:
    """Integer percentage rounded half up."""
    return (part * 200 + whole) // (whole * 2)


def empty_analysis(target_name: str) -> Analysis:
    """Analysis for a period with no blockers."""
    return Analysis(
        summary=(
            f"No blockers were reported for {target_name} during this period. "
            "Great job maintaining productivity!"
        ),
        action_items=[],
        insights=[NO_BLOCKERS_INSIGHT],
    )


def build_fallback_analysis(blockers: list[Blocker], target_name: str) -> Analysis:
    """Derive an analysis from counts alone.

    Args:
        blockers: Blockers in the report window
        target_name: Member first name or team name

    Returns:
        Analysis with one action item per non-empty severity bucket, an
        optional recurring-category item, a templated summary and insights
    """
    if not blockers:
        return empty_analysis(target_name)

    groups = group_by_severity(blockers)
    refs = assign_refs(groups)
    stats = summarize(blockers)
    buckets = {"High": groups.high, "Medium": groups.medium, "Low": groups.low}

    action_items: list[ActionItem] = []
    for severity, title, description, priority, effort, solution in SEVERITY_RULES:
        bucket = buckets[severity]
        if not bucket:
            continue
        representatives = bucket[:REPRESENTATIVES_PER_ITEM]
        action_items.append(
            ActionItem(
                title=title,
                description=description.format(count=len(bucket)),
                priority=priority,
                severity=severity,
                category=representatives[0].category,
                blocker_ref=refs[representatives[0].id],
                related_blockers=[
                    b.description[:DESCRIPTION_PREVIEW_LENGTH] for b in representatives
                ],
                suggested_solution=solution,
                estimated_effort=effort,
            )
        )

    top = stats.top_category
    if top is not None and top[1] >= RECURRING_CATEGORY_THRESHOLD:
        category, count = top
        action_items.append(
            ActionItem(
                title=f"Pattern: Address Recurring {category} Issues",
                description=(
                    f"{category} blockers appear {count} times. "
                    "Consider a systematic approach to prevent recurrence."
                ),
                priority=ActionPriority.MEDIUM,
                category=category,
                suggested_solution=category_suggestion(category),
                estimated_effort=EstimatedEffort.SHORT_TERM,
            )
        )

    return Analysis(
        summary=_summary_sentence(stats, target_name),
        action_items=action_items,
        insights=_insights(stats),
    )


def _summary_sentence(stats: BlockerSummary, target_name: str) -> str:
    top_name, top_count = stats.top_category or ("Other", 0)
    parts = [f"{target_name} reported {stats.total} blockers during this period."]
    if stats.high_count > 0:
        parts.append(f"{stats.high_count} require immediate attention.")
    parts.append(
        f"The most common category was {top_name} with {top_count} occurrences."
    )
    parts.append(f"Currently, {stats.open_count} blockers remain open.")
    return " ".join(parts)


def _insights(stats: BlockerSummary) -> list[str]:
    insights = [
        f"Total blockers: {stats.total}",
        (
            f"High severity: {stats.high_count}, Medium: {stats.medium_count}, "
            f"Low: {stats.low_count}"
        ),
        (
            f"Open blockers: {stats.open_count} "
            f"({percent(stats.open_count, stats.total)}% unresolved)"
        ),
    ]
    top = stats.top_category
    if top is not None:
        insights.append(
            f"Most frequent category: {top[0]} "
            f"({percent(top[1], stats.total)}% of all blockers)"
        )
    return insights
