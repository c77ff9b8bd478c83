"""Human-readable HTML conformance reports."""

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from lws_conformance.aggregator import group_by_category, summarize
from lws_conformance.reporting.base import ReportSink

TEMPLATE_DIR = Path(__file__).parent / "templates"

_environment = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(["html", "html.j2"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


def pass_rate_color(pass_rate: float) -> str:
    if pass_rate >= 0.9:
        return "#28a745"
    if pass_rate >= 0.7:
        return "#ffc107"
    return "#dc3545"


@dataclass(kw_only=True)
class HtmlReporter(ReportSink):
    """Renders a summary and one results table per category."""

    subject_name: str
    version: str | None = None

    def render(self) -> str:
        summary = summarize(self.results)
        template = _environment.get_template("report.html.j2")
        return template.render(
            subject_name=self.subject_name,
            version=self.version,
            test_date=datetime.now(timezone.utc).isoformat(),
            summary=summary,
            pass_rate_color=pass_rate_color(summary.pass_rate),
            groups=group_by_category(self.results),
        )
