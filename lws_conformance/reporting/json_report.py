"""Machine-readable JSON conformance reports."""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from lws_conformance.reporting.base import ReportSink


@dataclass(kw_only=True)
class JsonReporter(ReportSink):
    """Writes subject identity and one record per result."""

    subject_name: str
    version: str | None = None
    homepage: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "subject": {
                "name": self.subject_name,
                "version": self.version,
                "homepage": self.homepage,
            },
            "testDate": datetime.now(timezone.utc).isoformat(),
            "results": [
                {
                    "testId": r.test.id,
                    "name": r.test.name,
                    "category": r.test.category,
                    "level": r.test.conformance_level,
                    "outcome": r.outcome,
                    "duration": r.duration_ms,
                    "error": r.error,
                }
                for r in self.results
            ],
        }

    def render(self) -> str:
        return json.dumps(self.to_dict(), indent=2)
