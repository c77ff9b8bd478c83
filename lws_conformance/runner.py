"""Orchestration of a complete conformance run."""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from lws_conformance.aggregator import RunSummary, summarize
from lws_conformance.assertions import AssertionFn, build_registry
from lws_conformance.assertions import catalog as default_catalog
from lws_conformance.cleanup import CleanupCoordinator
from lws_conformance.client import TestClient
from lws_conformance.config_loader import load_run_config
from lws_conformance.context import RunContext
from lws_conformance.errors import ConformanceError, ReporterError
from lws_conformance.executor import TestExecutor
from lws_conformance.manifest import ManifestParser
from lws_conformance.models.config import RunConfig
from lws_conformance.models.result import TestResult
from lws_conformance.models.test_case import ConformanceLevel, filter_by_level
from lws_conformance.reporting.dispatch import (
    DEFAULT_SINKS,
    REPORT_FORMATS,
    ReportFormat,
    ReporterDispatch,
    SinkFactory,
)
from lws_conformance.server import SubjectServer

log = logging.getLogger(__name__)

DEFAULT_MANIFEST = Path("manifests/manifest.ttl")
DEFAULT_OUTPUT_DIR = Path("reports")


@dataclass(frozen=True, kw_only=True)
class RunOptions:
    """What to run and where to put the reports."""

    subject: str = "lws-server"
    config_path: Path | None = None
    level: ConformanceLevel | None = None
    formats: Sequence[ReportFormat] = REPORT_FORMATS
    manifest_path: Path = DEFAULT_MANIFEST
    output_dir: Path = DEFAULT_OUTPUT_DIR


@dataclass(frozen=True, kw_only=True)
class RunOutcome:
    """Everything a finished run produced."""

    results: Sequence[TestResult] = ()
    summary: RunSummary | None = None
    reports: Sequence[Path] = ()
    error: str | None = None

    @property
    def exit_code(self) -> int:
        """0 when tests ran and none failed, 1 otherwise."""
        if self.error is not None or self.summary is None:
            return 1
        return 1 if self.summary.failed else 0


@dataclass(frozen=True, kw_only=True)
class ConformanceRunner:
    """Runs the selected tests against one subject and reports on them.

    Cleanup is registered around the whole run and executes on success, on
    any fatal error and on cancellation.
    """

    options: RunOptions
    context: RunContext
    catalog: Mapping[str, AssertionFn] = field(default_factory=lambda: default_catalog)
    sinks: Mapping[ReportFormat, SinkFactory] = field(
        default_factory=lambda: dict(DEFAULT_SINKS)
    )

    async def run(self) -> RunOutcome:
        try:
            config = await load_run_config(
                self.context, self.options.subject, self.options.config_path
            )
        except ConformanceError as e:
            return self._fatal(e)

        server = SubjectServer(config=config, context=self.context)

        async with TestClient.from_config(config, self.context) as client:
            cleanup = CleanupCoordinator(
                client=client,
                server=server,
                data_directory=self._data_directory(config),
            )
            try:
                return await self._run_suite(config, server, client)
            except ConformanceError as e:
                return self._fatal(e)
            finally:
                await cleanup.run()

    async def _run_suite(
        self, config: RunConfig, server: SubjectServer, client: TestClient
    ) -> RunOutcome:
        await server.start()

        parser = ManifestParser(self.context.resolve(self.options.manifest_path))
        tests = await parser.parse()
        log.info("Found %d tests", len(tests))

        selected = filter_by_level(tests, self.options.level)
        log.info("Running %d tests...", len(selected))

        executor = TestExecutor(
            registry=build_registry(selected, self.catalog), context=self.context
        )
        results = await executor.execute_all(selected, client)
        summary = summarize(results)

        dispatch = ReporterDispatch(
            config=config,
            output_dir=self.context.resolve(self.options.output_dir),
            sinks=self.sinks,
        )
        try:
            reports = await dispatch.emit(results, summary, self.options.formats)
        except ReporterError as e:
            return self._fatal(e, results=results, summary=summary)

        return RunOutcome(results=results, summary=summary, reports=reports)

    def _data_directory(self, config: RunConfig) -> Path | None:
        if config.cleanup.data_directory is None:
            return None
        return self.context.resolve(config.cleanup.data_directory)

    def _fatal(
        self,
        error: ConformanceError,
        results: Sequence[TestResult] = (),
        summary: RunSummary | None = None,
    ) -> RunOutcome:
        log.error(
            "Fatal error: %s", error, exc_info=error if self.context.verbose else None
        )
        return RunOutcome(results=results, summary=summary, error=str(error))
