"""Tests for severity grouping and counts."""

from blocker_insights.reporting.grouping import assign_refs, group_by_severity, summarize


class TestGroupBySeverity:
    def test_buckets_preserve_order(self, make_blocker):
        h1 = make_blocker(severity="High")
        low = make_blocker(severity="Low")
        h2 = make_blocker(severity="High")
        med = make_blocker(severity="Medium")

        groups = group_by_severity([h1, low, h2, med])

        assert groups.high == [h1, h2]
        assert groups.medium == [med]
        assert groups.low == [low]
        assert groups.unrecognized == []

    def test_severity_matched_exactly(self, make_blocker):
        lower = make_blocker(severity="high")
        critical = make_blocker(severity="Critical")
        blank = make_blocker(severity="")

        groups = group_by_severity([lower, critical, blank])

        assert groups.high == []
        assert groups.unrecognized == [lower, critical, blank]

    def test_ordered_puts_unrecognized_last(self, make_blocker):
        odd = make_blocker(severity="Urgent")
        low = make_blocker(severity="Low")
        high = make_blocker(severity="High")

        assert group_by_severity([odd, low, high]).ordered() == [high, low, odd]


class TestSummarize:
    def test_counts(self, make_blocker):
        blockers = [
            make_blocker(severity="High", category="Technical"),
            make_blocker(severity="High", category="Dependency", status="Resolved"),
            make_blocker(severity="Low", category="Technical"),
        ]

        summary = summarize(blockers)

        assert summary.total == 3
        assert summary.open_count == 2
        assert (summary.high_count, summary.medium_count, summary.low_count) == (2, 0, 1)
        assert summary.category_counts == {"Technical": 2, "Dependency": 1}
        assert summary.top_category == ("Technical", 2)

    def test_bucket_counts_sum_to_total_when_all_recognized(self, make_blocker):
        blockers = [make_blocker(severity=s) for s in ("High", "Medium", "Low", "Low")]
        summary = summarize(blockers)
        assert summary.high_count + summary.medium_count + summary.low_count == summary.total

    def test_unrecognized_excluded_from_buckets(self, make_blocker):
        blockers = [make_blocker(severity="High"), make_blocker(severity="Blocker")]
        summary = summarize(blockers)
        assert summary.total == 2
        assert summary.high_count + summary.medium_count + summary.low_count == 1

    def test_top_category_tie_goes_to_first_seen(self, make_blocker):
        blockers = [
            make_blocker(category="Process"),
            make_blocker(category="Technical"),
        ]
        assert summarize(blockers).top_category == ("Process", 1)

    def test_empty(self):
        summary = summarize([])
        assert summary.total == 0
        assert summary.top_category is None


def test_assign_refs_follow_presentation_order(make_blocker):
    low = make_blocker(severity="Low")
    high = make_blocker(severity="High")
    medium = make_blocker(severity="Medium")

    refs = assign_refs(group_by_severity([low, high, medium]))

    assert refs == {high.id: "B1", medium.id: "B2", low.id: "B3"}


def test_all_buckets_cover_input(make_blocker):
    blockers = [
        make_blocker(severity=s) for s in ("High", "medium", "Low", "", "Medium")
    ]
    groups = group_by_severity(blockers)
    sizes = [len(groups.high), len(groups.medium), len(groups.low), len(groups.unrecognized)]
    assert sum(sizes) == len(blockers)
    assert sorted(b.id for b in groups.ordered()) == sorted(b.id for b in blockers)
