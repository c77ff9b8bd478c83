"""Fan results out to the requested report sinks."""

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, cast

from lws_conformance.aggregator import RunSummary
from lws_conformance.errors import ReporterError
from lws_conformance.models.config import RunConfig
from lws_conformance.models.result import TestResult
from lws_conformance.reporting.base import ReportSink
from lws_conformance.reporting.earl import EarlReporter
from lws_conformance.reporting.html import HtmlReporter
from lws_conformance.reporting.json_report import JsonReporter

log = logging.getLogger(__name__)

type ReportFormat = Literal["earl", "html", "json"]
type SinkFactory = Callable[[RunConfig], ReportSink]

REPORT_FORMATS: Sequence[ReportFormat] = ("earl", "html", "json")

EXTENSIONS: Mapping[ReportFormat, str] = {
    "earl": "ttl",
    "html": "html",
    "json": "json",
}


def _earl_sink(config: RunConfig) -> ReportSink:
    return EarlReporter(
        subject_name=config.subject_name,
        subject_url=config.homepage
        or f"https://github.com/linkedwebstorage/{config.subject_name}",
        version=config.version,
    )


def _html_sink(config: RunConfig) -> ReportSink:
    return HtmlReporter(subject_name=config.subject_name, version=config.version)


def _json_sink(config: RunConfig) -> ReportSink:
    return JsonReporter(
        subject_name=config.subject_name,
        version=config.version,
        homepage=config.homepage,
    )


DEFAULT_SINKS: Mapping[ReportFormat, SinkFactory] = {
    "earl": _earl_sink,
    "html": _html_sink,
    "json": _json_sink,
}


def resolve_formats(selector: str) -> Sequence[ReportFormat]:
    """Expand a CLI report selector into the formats to generate."""
    if selector == "all":
        return REPORT_FORMATS
    if selector not in REPORT_FORMATS:
        raise ValueError(f"Unknown report format: {selector}")
    return (cast(ReportFormat, selector),)


@dataclass(frozen=True, kw_only=True)
class ReporterDispatch:
    """Generates one report per requested format, eagerly and in order.

    A failing sink aborts the remaining formats with ``ReporterError``; files
    already written for earlier formats are left in place.
    """

    config: RunConfig
    output_dir: Path
    sinks: Mapping[ReportFormat, SinkFactory] = field(
        default_factory=lambda: dict(DEFAULT_SINKS)
    )

    def output_path(self, report_format: ReportFormat) -> Path:
        filename = f"{self.config.subject_name}.{EXTENSIONS[report_format]}"
        return self.output_dir / report_format / filename

    async def emit(
        self,
        results: Sequence[TestResult],
        summary: RunSummary,
        formats: Sequence[ReportFormat],
    ) -> Sequence[Path]:
        """Write the reports and return their paths in generation order."""
        log.info(
            "Generating %d report(s) for %d result(s)", len(formats), summary.total
        )
        written: list[Path] = []

        for report_format in formats:
            path = self.output_path(report_format)
            try:
                sink = self.sinks[report_format](self.config)
                for result in results:
                    sink.add_result(
                        result.test, result.outcome, result.duration_ms, result.error
                    )
                written.append(await sink.generate_report(path))
            except Exception as e:
                raise ReporterError(
                    f"Failed to generate {report_format} report at {path}: {e}"
                ) from e
            log.info("%s report: %s", report_format.upper(), path)

        return written
