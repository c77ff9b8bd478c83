"""Tests for result aggregation."""

from lws_conformance.aggregator import RunSummary, group_by_category, summarize
from lws_conformance.testing.factories import TestCaseFactory, TestResultFactory


def test_summarize_empty_results() -> None:
    """An empty run has a zero pass rate rather than a division error."""
    assert summarize([]) == RunSummary(
        total=0, passed=0, failed=0, skipped=0, pass_rate=0.0
    )


def test_summarize_counts_outcomes() -> None:
    """Counts each outcome and computes the pass rate."""
    results = [
        TestResultFactory.build(outcome="passed"),
        TestResultFactory.build(outcome="passed"),
        TestResultFactory.build(outcome="failed", error="boom"),
        TestResultFactory.build(outcome="inapplicable"),
    ]

    summary = summarize(results)

    assert summary.total == 4
    assert summary.passed == 2
    assert summary.failed == 1
    assert summary.skipped == 1
    assert summary.pass_rate == 0.5


def test_summarize_is_idempotent() -> None:
    """Summarizing the same results twice gives the same summary."""
    results = [
        TestResultFactory.build(outcome="passed"),
        TestResultFactory.build(outcome="failed"),
    ]

    assert summarize(results) == summarize(results)


def test_pass_rate_bounds() -> None:
    """Pass rate stays within [0, 1]."""
    all_failed = [TestResultFactory.build(outcome="failed") for _ in range(3)]
    all_passed = [TestResultFactory.build(outcome="passed") for _ in range(3)]

    assert summarize(all_failed).pass_rate == 0.0
    assert summarize(all_passed).pass_rate == 1.0


def test_group_by_category_preserves_first_seen_order() -> None:
    """Groups appear in the order their first result appeared."""
    results = [
        TestResultFactory.build(test=TestCaseFactory.build(category="Headers")),
        TestResultFactory.build(test=TestCaseFactory.build(category="ETags")),
        TestResultFactory.build(test=TestCaseFactory.build(category="Headers")),
        TestResultFactory.build(test=TestCaseFactory.build(category="Containers")),
    ]

    groups = group_by_category(results)

    assert list(groups) == ["Headers", "ETags", "Containers"]
    assert groups["Headers"] == [results[0], results[2]]


def test_group_by_category_partitions_every_result() -> None:
    """Every result lands in exactly one bucket."""
    results = [
        TestResultFactory.build(test=TestCaseFactory.build(category=category))
        for category in ["A", "B", "A", "C", "B"]
    ]

    groups = group_by_category(results)

    flattened = [r for bucket in groups.values() for r in bucket]
    assert len(flattened) == len(results)
    assert all(flattened.count(r) == 1 for r in results)


def test_group_by_category_defaults_empty_category() -> None:
    """Results without a category are grouped under General."""
    result = TestResultFactory.build(test=TestCaseFactory.build(category=""))

    assert group_by_category([result]) == {"General": [result]}
