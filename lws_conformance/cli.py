"""CLI entry point for the LWS conformance test suite."""

import argparse
import asyncio
import contextlib
import logging
import signal
import sys
from collections.abc import Sequence
from pathlib import Path

from lws_conformance.aggregator import RunSummary
from lws_conformance.context import RunContext
from lws_conformance.executor import OUTCOME_SYMBOLS
from lws_conformance.models.result import TestResult
from lws_conformance.models.test_case import LEVELS
from lws_conformance.reporting.dispatch import REPORT_FORMATS, resolve_formats
from lws_conformance.runner import (
    DEFAULT_MANIFEST,
    DEFAULT_OUTPUT_DIR,
    ConformanceRunner,
    RunOptions,
)


def log_results_summary(
    log: logging.Logger, results: Sequence[TestResult], summary: RunSummary
) -> None:
    """Log the aggregate counts followed by every failing test."""
    log.info("=" * 50)
    log.info("TEST SUMMARY")
    log.info("=" * 50)
    log.info("Total:      %d", summary.total)
    log.info("Passed:     %d", summary.passed)
    log.info("Failed:     %d", summary.failed)
    log.info("Skipped:    %d", summary.skipped)
    log.info("Pass Rate:  %.1f%%", summary.pass_rate * 100)
    log.info("=" * 50)

    failed = [r for r in results if r.outcome == "failed"]
    if failed:
        log.info("Failed tests:")
        for result in failed:
            log.info(
                "  %s %s: %s",
                OUTCOME_SYMBOLS[result.outcome],
                result.test.name,
                result.error,
            )


async def run(options: RunOptions, context: RunContext) -> int:
    """Run the conformance suite and return the exit code."""
    log = logging.getLogger("lws_conformance")
    log.info("LWS Protocol Conformance Test Suite")

    loop = asyncio.get_running_loop()
    task = asyncio.current_task()
    with contextlib.suppress(NotImplementedError):
        if task is not None:
            loop.add_signal_handler(signal.SIGTERM, task.cancel)

    try:
        outcome = await ConformanceRunner(options=options, context=context).run()
    except asyncio.CancelledError:
        log.error("Run interrupted, cleanup completed")
        return 1
    finally:
        with contextlib.suppress(NotImplementedError):
            loop.remove_signal_handler(signal.SIGTERM)

    if outcome.summary is not None:
        log_results_summary(log, outcome.results, outcome.summary)

    return outcome.exit_code


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="lws-test",
        description="W3C Linked Web Storage Protocol Conformance Test Suite",
    )
    parser.add_argument(
        "--subject",
        default="lws-server",
        help="Test subject, selects config/<subject>.config.json",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Custom config file path",
    )
    parser.add_argument(
        "--level",
        choices=LEVELS,
        default=None,
        help="Conformance level filter, inclusive of stricter levels",
    )
    parser.add_argument(
        "--report",
        choices=[*REPORT_FORMATS, "all"],
        default="all",
        help="Report format",
    )
    parser.add_argument(
        "--manifest",
        type=Path,
        default=DEFAULT_MANIFEST,
        help="Root test manifest (Turtle)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=DEFAULT_OUTPUT_DIR,
        help="Directory receiving the reports",
    )
    parser.add_argument(
        "--root",
        type=Path,
        default=Path.cwd(),
        help="Directory that relative paths are resolved against",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Verbose output with detailed test results",
    )
    return parser.parse_args(argv)


def main() -> None:
    """CLI entry point."""
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    options = RunOptions(
        subject=args.subject,
        config_path=args.config,
        level=args.level,
        formats=resolve_formats(args.report),
        manifest_path=args.manifest,
        output_dir=args.output_dir,
    )
    context = RunContext(verbose=args.verbose, root=args.root)

    exit_code = asyncio.run(run(options, context))
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
