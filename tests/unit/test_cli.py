"""Tests for CLI module."""

import asyncio
import logging
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from lws_conformance.aggregator import summarize
from lws_conformance.cli import log_results_summary, main, parse_args, run
from lws_conformance.context import RunContext
from lws_conformance.runner import RunOptions, RunOutcome
from lws_conformance.testing.factories import TestCaseFactory, TestResultFactory


def test_log_results_summary_counts(caplog: pytest.LogCaptureFixture) -> None:
    """Logs totals and the pass rate."""
    results = [
        TestResultFactory.build(outcome="passed"),
        TestResultFactory.build(outcome="passed"),
        TestResultFactory.build(outcome="inapplicable"),
        TestResultFactory.build(outcome="failed", error="boom"),
    ]

    with caplog.at_level(logging.INFO):
        log_results_summary(logging.getLogger(), results, summarize(results))

    assert "TEST SUMMARY" in caplog.text
    assert "Total:      4" in caplog.text
    assert "Passed:     2" in caplog.text
    assert "Failed:     1" in caplog.text
    assert "Skipped:    1" in caplog.text
    assert "Pass Rate:  50.0%" in caplog.text


def test_log_results_summary_lists_failures(caplog: pytest.LogCaptureFixture) -> None:
    """Logs each failed test with its error."""
    results = [
        TestResultFactory.build(
            test=TestCaseFactory.build(name="If-Match mismatch"),
            outcome="failed",
            error="Should return 412 Precondition Failed",
        ),
        TestResultFactory.build(test=TestCaseFactory.build(name="GET 404")),
    ]

    with caplog.at_level(logging.INFO):
        log_results_summary(logging.getLogger(), results, summarize(results))

    assert "Failed tests:" in caplog.text
    assert (
        "✗ If-Match mismatch: Should return 412 Precondition Failed" in caplog.text
    )
    assert "GET 404:" not in caplog.text


def test_log_results_summary_no_failures(caplog: pytest.LogCaptureFixture) -> None:
    """Omits the failure section when nothing failed."""
    results = [TestResultFactory.build()]

    with caplog.at_level(logging.INFO):
        log_results_summary(logging.getLogger(), results, summarize(results))

    assert "Failed tests:" not in caplog.text


class TestParseArgs:
    """Tests for argument parsing."""

    def test_defaults(self) -> None:
        args = parse_args([])

        assert args.subject == "lws-server"
        assert args.config is None
        assert args.level is None
        assert args.report == "all"
        assert args.verbose is False
        assert args.manifest == Path("manifests/manifest.ttl")
        assert args.output_dir == Path("reports")

    def test_all_flags(self) -> None:
        args = parse_args(
            [
                "--subject",
                "jss",
                "--config",
                "custom.json",
                "--level",
                "SHOULD",
                "--report",
                "earl",
                "--verbose",
            ]
        )

        assert args.subject == "jss"
        assert args.config == Path("custom.json")
        assert args.level == "SHOULD"
        assert args.report == "earl"
        assert args.verbose is True

    def test_rejects_unknown_level(self) -> None:
        with pytest.raises(SystemExit):
            parse_args(["--level", "OPTIONAL"])

    def test_rejects_unknown_report(self) -> None:
        with pytest.raises(SystemExit):
            parse_args(["--report", "pdf"])


class TestRun:
    """Tests for run function."""

    async def test_returns_outcome_exit_code(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Returns the runner's exit code and logs the summary."""
        results = [TestResultFactory.build(outcome="failed", error="boom")]
        outcome = RunOutcome(results=results, summary=summarize(results))

        with (
            patch("lws_conformance.cli.ConformanceRunner") as runner_cls,
            caplog.at_level(logging.INFO),
        ):
            runner_cls.return_value.run = AsyncMock(return_value=outcome)
            exit_code = await run(RunOptions(), RunContext())

        assert exit_code == 1
        assert "TEST SUMMARY" in caplog.text

    async def test_fatal_error_skips_summary(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Returns 1 without a summary when the run aborted early."""
        with (
            patch("lws_conformance.cli.ConformanceRunner") as runner_cls,
            caplog.at_level(logging.INFO),
        ):
            runner_cls.return_value.run = AsyncMock(
                return_value=RunOutcome(error="Config file not found")
            )
            exit_code = await run(RunOptions(), RunContext())

        assert exit_code == 1
        assert "TEST SUMMARY" not in caplog.text

    async def test_cancellation_returns_one(self) -> None:
        """Returns 1 when the run is interrupted."""
        with patch("lws_conformance.cli.ConformanceRunner") as runner_cls:
            runner_cls.return_value.run = AsyncMock(
                side_effect=asyncio.CancelledError
            )
            exit_code = await run(RunOptions(), RunContext())

        assert exit_code == 1


class TestMain:
    """Tests for main entry point."""

    def test_exits_with_run_result(self, tmp_path: Path) -> None:
        """Builds options from arguments and exits with the run's code."""
        argv = [
            "lws-test",
            "--subject",
            "jss",
            "--report",
            "json",
            "--level",
            "MUST",
            "--root",
            str(tmp_path),
        ]
        with (
            patch("sys.argv", argv),
            patch("lws_conformance.cli.run", new_callable=AsyncMock) as mock_run,
        ):
            mock_run.return_value = 0
            with pytest.raises(SystemExit) as exc_info:
                main()

        assert exc_info.value.code == 0
        options, context = mock_run.call_args.args
        assert options.subject == "jss"
        assert options.formats == ("json",)
        assert options.level == "MUST"
        assert context.root == tmp_path
        assert context.verbose is False
