"""Tests for the JSON report sink."""

import json
from pathlib import Path

from lws_conformance.reporting.json_report import JsonReporter
from lws_conformance.testing.factories import TestCaseFactory


def test_records_subject_and_results() -> None:
    reporter = JsonReporter(
        subject_name="jss", version="0.0.1", homepage="https://example.com/jss"
    )
    test = TestCaseFactory.build(
        id="test-etag-generation",
        name="ETag generation",
        category="ETags",
        conformance_level="MUST",
    )
    reporter.add_result(test, "failed", 42, "Should have ETag header")

    data = json.loads(reporter.render())

    assert data["subject"] == {
        "name": "jss",
        "version": "0.0.1",
        "homepage": "https://example.com/jss",
    }
    assert data["testDate"]
    assert data["results"] == [
        {
            "testId": "test-etag-generation",
            "name": "ETag generation",
            "category": "ETags",
            "level": "MUST",
            "outcome": "failed",
            "duration": 42,
            "error": "Should have ETag header",
        }
    ]


async def test_generate_report_creates_parent_directories(tmp_path: Path) -> None:
    reporter = JsonReporter(subject_name="jss")
    path = tmp_path / "json" / "nested" / "jss.json"

    written = await reporter.generate_report(path)

    assert written == path
    assert json.loads(path.read_text())["results"] == []
