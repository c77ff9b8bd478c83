"""Models for test execution results."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal

from lws_conformance.models.test_case import TestCase

type Outcome = Literal["passed", "failed", "inapplicable"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, kw_only=True)
class TestResult:
    """Result of a single test execution."""

    __test__ = False

    test: TestCase
    outcome: Outcome
    duration_ms: int
    error: str | None = None
    timestamp: datetime = field(default_factory=_utcnow)
