"""Reporters that write the final report to disk, and reading a report back."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from pydantic import ValidationError

from pagecheck.errors import ReportSourceError
from pagecheck.reports.render import render_html, render_json, render_markdown
from pagecheck.results.models import RunReport

if TYPE_CHECKING:
    from pagecheck.scenarios.runner import ScenarioOutcome
    from pagecheck.scenarios.scenario import Scenario


logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = "test-results"
DEFAULT_REPORT_NAME = "pagecheck-report"


class FileReporter:
    """Writes ``<output_dir>/<report_name><suffix>`` when the run completes."""

    suffix: ClassVar[str] = ""
    format: ClassVar[str] = ""

    def __init__(
        self,
        output_dir: str | Path = DEFAULT_OUTPUT_DIR,
        report_name: str = DEFAULT_REPORT_NAME,
    ) -> None:
        self.output_dir = Path(output_dir)
        self.report_name = report_name
        self.written: Path | None = None
        self.error: OSError | None = None

    @property
    def path(self) -> Path:
        return self.output_dir / f"{self.report_name}{self.suffix}"

    def render(self, report: RunReport) -> str:
        raise NotImplementedError

    def write(self, report: RunReport) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.path.write_text(self.render(report), encoding="utf-8")
        logger.info("Wrote %s report to %s", self.format, self.path)
        self.written = self.path
        return self.path

    async def on_no_scenarios_found(self) -> None:
        pass

    async def on_collection_complete(self, scenarios: list[Scenario]) -> None:
        pass

    async def on_scenario_complete(self, outcome: ScenarioOutcome) -> None:
        pass

    async def on_run_complete(self, report: RunReport) -> None:
        try:
            self.write(report)
        except OSError as exc:
            logger.error("Could not write %s report to %s: %s", self.format, self.path, exc)
            self.error = exc


class JsonReporter(FileReporter):
    suffix = ".json"
    format = "json"

    def render(self, report: RunReport) -> str:
        return render_json(report)


class MarkdownReporter(FileReporter):
    suffix = ".md"
    format = "markdown"

    def render(self, report: RunReport) -> str:
        return render_markdown(report)


class HtmlReporter(FileReporter):
    suffix = ".html"
    format = "html"

    def render(self, report: RunReport) -> str:
        return render_html(report)


def load_report(path: str | Path) -> RunReport:
    """Read a JSON report written by :class:`JsonReporter`."""
    path = Path(path)
    if not path.is_file():
        raise ReportSourceError(path)
    try:
        return RunReport.model_validate_json(path.read_text(encoding="utf-8"))
    except (OSError, ValidationError) as exc:
        raise ReportSourceError(path, exc) from exc


__all__ = [
    "DEFAULT_OUTPUT_DIR",
    "DEFAULT_REPORT_NAME",
    "FileReporter",
    "HtmlReporter",
    "JsonReporter",
    "MarkdownReporter",
    "load_report",
]
