"""LLM prompts for blocker report synthesis.

Prompts follow "context first, instructions after" pattern
to avoid lost-in-middle issues with long context.

Every blocker is listed with a per-report reference id (B1, B2, ...) so
action items can point back at the blocker they address.
"""

from blocker_insights.models.blocker import Blocker
from blocker_insights.models.report import ReportType
from blocker_insights.reporting.grouping import BlockerSummary, SeverityGroups, assign_refs

SYSTEM_INSTRUCTION = """\
You are an expert productivity analyst who provides specific, actionable \
recommendations. Always be concrete and avoid generic advice. Reference \
specific blockers by their id (B1, B2, ...) in your recommendations."""

REPORT_PROMPT = """\
You are an expert productivity analyst and engineering manager. Analyze the \
blockers reported by {subject} named "{target_name}".

BLOCKERS BY SEVERITY:

HIGH SEVERITY ({high_count}) - immediate attention required:
{high_blockers}

MEDIUM SEVERITY ({medium_count}) - should be addressed this sprint:
{medium_blockers}

LOW SEVERITY ({low_count}) - can be scheduled for later:
{low_blockers}
{unrecognized_section}
STATISTICS:
- Total blockers: {total}
- Open blockers: {open_count}
- Categories affected: {categories}

---

Provide a comprehensive analysis with SPECIFIC, ACTIONABLE recommendations \
for EACH severity level that has blockers.

Respond with a JSON object with these fields:
- summary: A 2-3 sentence executive summary of the main productivity \
challenges and overall health
- actionItems: list of action items, each with:
  - title: brief action title
  - description: what to do and why
  - priority: "high", "medium" or "low"
  - severity: "High", "Medium" or "Low" (severity of the blockers addressed)
  - category: blocker category this addresses
  - blockerRef: id of the main blocker addressed (e.g. "B1")
  - relatedBlockers: ids of any other blockers addressed
  - suggestedSolution: specific step-by-step solution or approach
  - teamToInvolve: team or role that should help, if any
  - estimatedEffort: "quick-win" (<1 day), "short-term" (1-5 days) or \
"long-term" (>5 days)
- insights: list of pattern or trend observations and process improvement \
recommendations

GUIDELINES:
- Generate 2-3 action items for HIGH severity blockers (if any exist)
- Generate 1-2 action items for MEDIUM severity blockers (if any exist)
- Generate 1 action item for LOW severity blockers (if any exist)
- Make suggestions specific to the blocker descriptions, not generic advice
- For technical blockers, suggest specific tools, processes, or architectural changes
- For dependency blockers, suggest communication strategies or escalation paths
- For resource blockers, suggest prioritization frameworks or resource allocation strategies
"""

UNRECOGNIZED_SECTION = """
UNCLASSIFIED SEVERITY ({count}) - severity missing or not High/Medium/Low:
{blockers}
"""


def format_blockers(
    blockers: list[Blocker],
    refs: dict[str, str],
    show_severity: bool = False,
) -> str:
    """Format blockers for prompt context, one per line with its reference.

    With ``show_severity`` each line also carries the raw severity value.

    Returns:
        Formatted lines, or "None" if empty
    """
    if not blockers:
        return "None"
    lines = []
    for b in blockers:
        details = f"Status: {b.status}"
        if show_severity:
            details = f"Severity: {b.severity or 'missing'}, {details}"
        lines.append(f"  {refs[b.id]}. [{b.category}] {b.description} ({details})")
    return "\n".join(lines)


def build_report_prompt(
    groups: SeverityGroups,
    summary: BlockerSummary,
    report_type: ReportType,
    target_name: str,
) -> str:
    """Render the report prompt for a non-empty blocker list.

    Args:
        groups: Blockers grouped by severity
        summary: Aggregate counts over the same blockers
        report_type: individual or team
        target_name: Member first name or team name

    Returns:
        Prompt text; identical inputs always give identical text
    """
    refs = assign_refs(groups)
    subject = (
        "an individual team member"
        if report_type == ReportType.INDIVIDUAL
        else "a team"
    )

    unrecognized_section = ""
    if groups.unrecognized:
        unrecognized_section = UNRECOGNIZED_SECTION.format(
            count=len(groups.unrecognized),
            blockers=format_blockers(groups.unrecognized, refs, show_severity=True),
        )

    return REPORT_PROMPT.format(
        subject=subject,
        target_name=target_name,
        high_count=summary.high_count,
        high_blockers=format_blockers(groups.high, refs),
        medium_count=summary.medium_count,
        medium_blockers=format_blockers(groups.medium, refs),
        low_count=summary.low_count,
        low_blockers=format_blockers(groups.low, refs),
        unrecognized_section=unrecognized_section,
        total=summary.total,
        open_count=summary.open_count,
        categories=", ".join(summary.category_counts) or "None",
    )
