"""Reduce test results into summary statistics and report groupings."""

from collections.abc import Sequence
from dataclasses import dataclass

from lws_conformance.models.result import TestResult
from lws_conformance.models.test_case import DEFAULT_CATEGORY


@dataclass(frozen=True, kw_only=True)
class RunSummary:
    """Aggregate counts for a sequence of results."""

    total: int
    passed: int
    failed: int
    skipped: int
    pass_rate: float


def summarize(results: Sequence[TestResult]) -> RunSummary:
    """Count results by outcome.

    ``pass_rate`` is ``passed / total`` and ``0.0`` for an empty run.
    """
    total = len(results)
    passed = sum(1 for r in results if r.outcome == "passed")
    failed = sum(1 for r in results if r.outcome == "failed")
    skipped = sum(1 for r in results if r.outcome == "inapplicable")

    return RunSummary(
        total=total,
        passed=passed,
        failed=failed,
        skipped=skipped,
        pass_rate=passed / total if total else 0.0,
    )


def group_by_category(results: Sequence[TestResult]) -> dict[str, list[TestResult]]:
    """Partition results by test category in first-seen order."""
    groups: dict[str, list[TestResult]] = {}
    for result in results:
        category = result.test.category or DEFAULT_CATEGORY
        groups.setdefault(category, []).append(result)
    return groups
