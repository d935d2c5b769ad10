"""Tests for the console reporter and the file reporters."""

import asyncio
import io
import json

import pytest
from rich.console import Console

from pagecheck.errors import ReportSourceError
from pagecheck.reports import (
    ConsoleReporter,
    HtmlReporter,
    JsonReporter,
    file_reporters_for,
    load_report,
    write_reports,
)
from pagecheck.results import ResultCollector, ResultRecord
from pagecheck.scenarios import ScenarioOutcome, scenario
from pagecheck.scenarios.scenario import get_scenario
from pagecheck.types import VIEWPORTS


@pytest.fixture
def outcome():
    @scenario("CAR-1", "Carousel arrows", category="Navigation")
    def check_arrows(ctx):
        pass

    return ScenarioOutcome(
        get_scenario(check_arrows),
        records=[
            ResultRecord(name="Previous visible", passed=True),
            ResultRecord(name="Next visible", passed=False, details="hidden by overlay"),
        ],
        viewport=VIEWPORTS["mobile"],
        browser="chromium",
    )


@pytest.fixture
def report():
    collector = ResultCollector()
    collector.add(ResultRecord(name="Arrow visibility", passed=True, category="Navigation"))
    collector.add(
        ResultRecord(name="Card ratio", passed=False, details="ratio 0.9", category="Layout")
    )
    collector.mark_skipped()
    return collector.build_report(title="Run", base_url="http://site", duration_ms=1500)


def make_console_reporter(verbosity: int = 0):
    output = io.StringIO()
    console = Console(file=output, width=120, color_system=None)
    return ConsoleReporter(verbosity=verbosity, console=console), output


class TestConsoleReporter:
    def test_scenario_line_lists_failed_checks(self, outcome):
        reporter, output = make_console_reporter()
        asyncio.run(reporter.on_scenario_complete(outcome))

        text = output.getvalue()
        assert "FAIL Carousel arrows (chromium, mobile)" in text
        assert "x Next visible" in text
        assert "hidden by overlay" in text
        assert "Previous visible" not in text

    def test_verbose_prints_every_record(self, outcome):
        reporter, output = make_console_reporter(verbosity=1)
        asyncio.run(reporter.on_scenario_complete(outcome))

        text = output.getvalue()
        assert "PASS Previous visible (chromium, mobile)" in text
        assert "FAIL Next visible (chromium, mobile)" in text

    def test_skip_line(self, outcome):
        outcome.records = []
        outcome.skip_reason = "webhook stub missing"
        reporter, output = make_console_reporter()
        asyncio.run(reporter.on_scenario_complete(outcome))

        assert "SKIP Carousel arrows" in output.getvalue()
        assert "webhook stub missing" in output.getvalue()

    def test_run_summary(self, report):
        reporter, output = make_console_reporter()
        asyncio.run(reporter.on_run_complete(report))

        text = output.getvalue()
        assert "Category breakdown" in text
        assert "Failed checks:" in text
        assert "- Layout: Card ratio" in text
        assert "1 passed, 1 failed, 1 skipped (50.0% success, 1.50s)" in text

    def test_quiet_prints_only_final_line(self, outcome, report):
        reporter, output = make_console_reporter(verbosity=-1)
        asyncio.run(reporter.on_collection_complete([outcome.scenario]))
        asyncio.run(reporter.on_scenario_complete(outcome))
        asyncio.run(reporter.on_run_complete(report))

        lines = [line for line in output.getvalue().splitlines() if line.strip()]
        assert lines == ["1 passed, 1 failed, 1 skipped (50.0% success, 1.50s)"]


class TestFileReporters:
    def test_reporters_for_formats(self, tmp_path):
        reporters = file_reporters_for(["json", "html", "json"], tmp_path, "nightly")
        assert [type(r) for r in reporters] == [JsonReporter, HtmlReporter]
        assert reporters[1].path == tmp_path / "nightly.html"

    def test_unknown_format(self, tmp_path):
        with pytest.raises(ValueError, match="Unknown report format: pdf"):
            file_reporters_for(["pdf"], tmp_path)

    def test_writes_on_run_complete(self, tmp_path, report):
        reporter = JsonReporter(output_dir=tmp_path / "out")
        asyncio.run(reporter.on_run_complete(report))

        assert reporter.written == tmp_path / "out" / "pagecheck-report.json"
        data = json.loads(reporter.written.read_text(encoding="utf-8"))
        assert data["summary"]["failed"] == 1

    def test_write_failure_is_recorded(self, tmp_path, report, caplog):
        blocker = tmp_path / "taken"
        blocker.write_text("not a directory", encoding="utf-8")
        reporter = JsonReporter(output_dir=blocker)

        asyncio.run(reporter.on_run_complete(report))

        assert reporter.written is None
        assert isinstance(reporter.error, OSError)
        assert "Could not write json report" in caplog.text

    def test_write_reports_then_load(self, tmp_path, report):
        paths = write_reports(report, ["json", "markdown", "html"], tmp_path, "run")
        assert [p.name for p in paths] == ["run.json", "run.md", "run.html"]

        loaded = load_report(tmp_path / "run.json")
        assert loaded.summary.skipped == 1
        assert [r.name for r in loaded.failed_records] == ["Card ratio"]


class TestLoadReport:
    def test_missing_file(self, tmp_path):
        with pytest.raises(ReportSourceError, match="file not found. Run 'pagecheck run' first."):
            load_report(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ReportSourceError) as exc_info:
            load_report(path)

        assert exc_info.value.path == path
        assert exc_info.value.cause is not None
