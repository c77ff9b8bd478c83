"""Interface shared by report sinks."""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from lws_conformance.models.result import Outcome, TestResult
from lws_conformance.models.test_case import TestCase


@dataclass(kw_only=True)
class ReportSink(ABC):
    """Accumulates results and renders them into one durable report."""

    results: list[TestResult] = field(default_factory=list, init=False)

    def add_result(
        self,
        test: TestCase,
        outcome: Outcome,
        duration_ms: int,
        error: str | None = None,
    ) -> None:
        """Record the outcome of one test."""
        self.results.append(
            TestResult(test=test, outcome=outcome, duration_ms=duration_ms, error=error)
        )

    @abstractmethod
    def render(self) -> str:
        """Render the accumulated results."""

    async def generate_report(self, output_path: Path) -> Path:
        """Render the report and write it to ``output_path``.

        Returns:
            The path that was written

        """
        content = self.render()
        await asyncio.to_thread(_write_text, output_path, content)
        return output_path


def _write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
