"""Severity grouping and aggregate counts for blocker lists."""

from dataclasses import dataclass, field

from blocker_insights.models.blocker import Blocker, BlockerSeverity


@dataclass
class SeverityGroups:
    """Blockers partitioned by severity.

    Severity is matched exactly. Blockers whose severity is not one of
    High/Medium/Low land in ``unrecognized`` instead of any bucket.
    """

    high: list[Blocker] = field(default_factory=list)
    medium: list[Blocker] = field(default_factory=list)
    low: list[Blocker] = field(default_factory=list)
    unrecognized: list[Blocker] = field(default_factory=list)

    def ordered(self) -> list[Blocker]:
        """All blockers in presentation order: high, medium, low, unrecognized."""
        return [*self.high, *self.medium, *self.low, *self.unrecognized]


@dataclass
class BlockerSummary:
    """Aggregate counts over a blocker list."""

    total: int
    open_count: int
    high_count: int
    medium_count: int
    low_count: int
    category_counts: dict[str, int]

    @property
    def top_category(self) -> tuple[str, int] | None:
        """Most frequent category and its count; ties go to the first seen."""
        if not self.category_counts:
            return None
        return max(self.category_counts.items(), key=lambda item: item[1])


def group_by_severity(blockers: list[Blocker]) -> SeverityGroups:
    """Partition blockers into severity buckets, preserving input order."""
    groups = SeverityGroups()
    buckets = {
        BlockerSeverity.HIGH.value: groups.high,
        BlockerSeverity.MEDIUM.value: groups.medium,
        BlockerSeverity.LOW.value: groups.low,
    }
    for blocker in blockers:
        buckets.get(blocker.severity, groups.unrecognized).append(blocker)
    return groups


def summarize(blockers: list[Blocker]) -> BlockerSummary:
    """Compute totals, severity counts, open count and category histogram."""
    groups = group_by_severity(blockers)
    # dict preserves first-seen order, which decides ties for top_category
    category_counts: dict[str, int] = {}
    for blocker in blockers:
        category_counts[blocker.category] = category_counts.get(blocker.category, 0) + 1

    return BlockerSummary(
        total=len(blockers),
        open_count=sum(1 for b in blockers if b.is_open),
        high_count=len(groups.high),
        medium_count=len(groups.medium),
        low_count=len(groups.low),
        category_counts=category_counts,
    )


def assign_refs(groups: SeverityGroups) -> dict[str, str]:
    """Map blocker id to a per-report reference (B1, B2, ...).

    References follow presentation order so the prompt, the model's answer
    and the fallback analysis all name blockers the same way.
    """
    return {
        blocker.id: f"B{index}"
        for index, blocker in enumerate(groups.ordered(), start=1)
    }
