"""Sequential execution of conformance tests against one subject."""

import logging
import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from lws_conformance.assertions.catalog import AssertionFn
from lws_conformance.client import TestClient
from lws_conformance.context import RunContext
from lws_conformance.errors import ImplementationNotFound, Inapplicable
from lws_conformance.models.result import Outcome, TestResult
from lws_conformance.models.test_case import TestCase

log = logging.getLogger(__name__)

OUTCOME_SYMBOLS: Mapping[Outcome, str] = {
    "passed": "✓",
    "failed": "✗",
    "inapplicable": "○",
}


@dataclass(frozen=True, kw_only=True)
class TestExecutor:
    """Runs tests one after another, isolating each test's failure.

    Tests share a single subject instance, so they are never run concurrently.
    """

    __test__ = False

    registry: Mapping[str, AssertionFn]
    context: RunContext

    async def execute_all(
        self, tests: Sequence[TestCase], client: TestClient
    ) -> Sequence[TestResult]:
        """Execute tests in order and return one result per test, in order."""
        results: list[TestResult] = []
        total = len(tests)

        for index, test in enumerate(tests, start=1):
            result = await self.execute_one(test, client)
            results.append(result)
            self._log_progress(index, total, result)

        return results

    async def execute_one(self, test: TestCase, client: TestClient) -> TestResult:
        """Execute a single test.

        Any exception raised while resolving or running the assertion becomes
        a failed result carrying the exception message. Cancellation is not
        intercepted.
        """
        start = time.perf_counter()
        outcome: Outcome = "passed"
        error: str | None = None

        try:
            fn = self.registry.get(test.id)
            if fn is None:
                raise ImplementationNotFound(
                    f"Test implementation {test.implementation} not found"
                )
            await fn(client)
        except Inapplicable as e:
            outcome = "inapplicable"
            error = str(e) or None
        except Exception as e:
            outcome = "failed"
            error = _message(e)
            log.debug("Test %s failed", test.id, exc_info=e)

        return TestResult(
            test=test,
            outcome=outcome,
            duration_ms=round((time.perf_counter() - start) * 1000),
            error=error,
        )

    def _log_progress(self, index: int, total: int, result: TestResult) -> None:
        log.info(
            "[%d/%d] %s %s (%dms)",
            index,
            total,
            OUTCOME_SYMBOLS[result.outcome],
            result.test.name,
            result.duration_ms,
        )
        if result.error and self.context.verbose:
            log.info("  %s", result.error)


def _message(error: BaseException) -> str:
    return str(error) or type(error).__name__
