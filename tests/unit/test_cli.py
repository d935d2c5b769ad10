import asyncio
import textwrap
from argparse import Namespace
from unittest.mock import MagicMock

import pytest

from pagecheck.cli import (
    EXIT_FAILED,
    EXIT_OK,
    EXIT_USAGE,
    _build_parser,
    _render_saved_report,
    _resolve_reporters,
    _resolve_run_config,
    _run_checks,
    _write_checklist,
    main,
)
from pagecheck.config import PagecheckConfig
from pagecheck.reports import ConsoleReporter, HtmlReporter, JsonReporter, write_reports
from pagecheck.results import ResultCollector, ResultRecord
from pagecheck.scenarios import runner as runner_module

from conftest import FakeSession


class TestParser:
    def test_run_flags(self):
        args = _build_parser().parse_args(
            [
                "run",
                "checks",
                "-vv",
                "--browser",
                "firefox",
                "--viewport",
                "mobile",
                "--viewport",
                "800x600",
                "--format",
                "markdown",
                "--headed",
            ]
        )
        assert args.command == "run"
        assert args.paths == ["checks"]
        assert args.verbose == 2
        assert args.browsers == ["firefox"]
        assert args.viewports == ["mobile", "800x600"]
        assert args.formats == ["markdown"]
        assert args.headed

    def test_rejects_unknown_format(self):
        with pytest.raises(SystemExit):
            _build_parser().parse_args(["run", "--format", "pdf"])

    def test_run_config_overlay(self):
        args = _build_parser().parse_args(
            ["run", "--base-url", "http://staging", "--settle-ms", "0", "--headed"]
        )
        config = _resolve_run_config(args, PagecheckConfig(settle_ms=900, viewports=["tablet"]))

        assert config.base_url == "http://staging"
        assert config.settle_ms == 0
        assert config.headless is False
        assert config.viewports == ["tablet"]


class TestResolveReporters:
    def _make_args(self, **kwargs) -> Namespace:
        defaults = {"reporters": None}
        defaults.update(kwargs)
        return Namespace(**defaults)

    def test_console_reporter_always_first(self):
        reporters = _resolve_reporters(self._make_args(), PagecheckConfig(), verbosity=1)

        assert len(reporters) == 1
        assert isinstance(reporters[0], ConsoleReporter)
        assert reporters[0].verbosity == 1

    def test_cli_reporters_override_config(self, tmp_path):
        config = PagecheckConfig(
            reporters=["HtmlReporter"],
            reporter_options={"JsonReporter": {"output_dir": str(tmp_path)}},
        )
        args = self._make_args(reporters=["JsonReporter", "ConsoleReporter"])

        reporters = _resolve_reporters(args, config, verbosity=0)

        assert [type(r) for r in reporters] == [ConsoleReporter, JsonReporter]
        assert reporters[1].output_dir == tmp_path

    def test_unknown_reporter_raises(self):
        with pytest.raises(ValueError, match="Unknown reporter"):
            _resolve_reporters(self._make_args(reporters=["Nope"]), PagecheckConfig(), 0)

    def test_format_name_uses_configured_output(self, tmp_path):
        config = PagecheckConfig(output_dir=str(tmp_path), report_name="nightly")

        [_, html] = _resolve_reporters(self._make_args(reporters=["html"]), config, 0)

        assert isinstance(html, HtmlReporter)
        assert html.path == tmp_path / "nightly.html"


class TestRenderSavedReport:
    def make_report(self):
        collector = ResultCollector()
        collector.add(ResultRecord(name="Arrow visibility", passed=True))
        return collector.build_report(title="Saved", base_url="http://site")

    def test_renders_markdown_and_html_next_to_source(self, tmp_path):
        [source] = write_reports(self.make_report(), ["json"], tmp_path, "nightly")
        console = MagicMock()

        code = _render_saved_report(
            Namespace(source=str(source), formats=None, output_dir=None, report_name=None),
            console,
        )

        assert code == EXIT_OK
        assert (tmp_path / "nightly.md").read_text(encoding="utf-8").startswith("# Saved")
        assert (tmp_path / "nightly.html").is_file()
        assert console.print.call_count == 2

    def test_missing_source(self, tmp_path):
        console = MagicMock()

        code = _render_saved_report(
            Namespace(
                source=str(tmp_path / "missing.json"),
                formats=["markdown"],
                output_dir=None,
                report_name=None,
            ),
            console,
        )

        assert code == EXIT_FAILED
        message = console.print.call_args[0][0]
        assert "Run 'pagecheck run' first." in message
        assert not (tmp_path / "missing.md").exists()


def test_checklist_written_to_file(tmp_path):
    check_file = tmp_path / "check_cli_form.py"
    check_file.write_text(
        "from pagecheck import scenario\n"
        "\n"
        "@scenario('FORM-1', 'Email is required', category='Validation')\n"
        "def check_email(ctx):\n"
        "    pass\n",
        encoding="utf-8",
    )
    output = tmp_path / "docs" / "checklist.md"
    args = _build_parser().parse_args(["checklist", str(check_file), "-o", str(output)])

    code = _write_checklist(args, PagecheckConfig(base_url="http://site"), MagicMock())

    assert code == EXIT_OK
    text = output.read_text(encoding="utf-8")
    assert "1. Open http://site in your browser" in text
    assert "### [ ] FORM-1: Email is required" in text


PASSING = """
    from pagecheck import scenario

    @scenario("E2E-1", "Page loads")
    def check_loads(ctx):
        pass
"""

FAILING = """
    from pagecheck import scenario

    @scenario("E2E-2", "Banner hidden")
    def check_banner(ctx):
        ctx.expect("Banner hidden", False, "banner still visible")
"""


class TestRunExitCodes:
    @pytest.fixture
    def checks(self, tmp_path):
        def write(body):
            path = tmp_path / "checks" / "check_cli_run.py"
            path.parent.mkdir(exist_ok=True)
            path.write_text(textwrap.dedent(body), encoding="utf-8")
            return path.parent

        return write

    @pytest.fixture
    def config(self, tmp_path):
        return PagecheckConfig(settle_ms=0, output_dir=str(tmp_path / "out"))

    def run_cli(self, argv, config, session_factory):
        args = _build_parser().parse_args(["run", *argv])
        return asyncio.run(_run_checks(args, config, session_factory=session_factory))

    def test_all_checks_pass(self, checks, config, session_factory, sessions, tmp_path):
        code = self.run_cli([str(checks(PASSING))], config, session_factory)

        assert code == EXIT_OK
        assert sessions[0].page.visited == ["http://localhost:3000/"]
        assert (tmp_path / "out" / "pagecheck-report.json").is_file()

    def test_failing_check(self, checks, config, session_factory):
        assert self.run_cli([str(checks(FAILING))], config, session_factory) == EXIT_FAILED

    def test_report_write_failure(self, checks, session_factory, tmp_path):
        (tmp_path / "blocker").write_text("not a directory", encoding="utf-8")
        config = PagecheckConfig(settle_ms=0, output_dir=str(tmp_path / "blocker" / "out"))

        assert self.run_cli([str(checks(PASSING))], config, session_factory) == EXIT_FAILED

    def test_browser_that_cannot_start(self, checks, config, tmp_path):
        def factory(browser):
            return FakeSession(browser, launch_error=RuntimeError("no such executable"))

        assert self.run_cli([str(checks(PASSING))], config, factory) == EXIT_FAILED
        assert (tmp_path / "out" / "pagecheck-report.json").is_file()

    @pytest.mark.parametrize(
        "argv",
        [
            ["-k", "(unclosed"],
            ["--viewport", "huge"],
            ["--browser", "lynx"],
            ["--reporter", "Nope"],
            ["--reporter", "os.NoSuchReporter"],
            ["--reporter", "nonexistent.module:Reporter"],
        ],
    )
    def test_usage_errors(self, argv, checks, config, session_factory, sessions):
        code = self.run_cli([str(checks(PASSING)), *argv], config, session_factory)

        assert code == EXIT_USAGE
        assert sessions == []

    def test_reporter_by_format_name(self, checks, config, session_factory, tmp_path):
        argv = [str(checks(PASSING)), "--reporter", "html", "--format", "html"]

        assert self.run_cli(argv, config, session_factory) == EXIT_OK
        assert (tmp_path / "out" / "pagecheck-report.html").is_file()

    @pytest.mark.parametrize(
        ("body", "argv", "expected"),
        [
            (PASSING, [], EXIT_OK),
            (FAILING, [], EXIT_FAILED),
            (PASSING, ["--reporter", "os.NoSuchReporter"], EXIT_USAGE),
        ],
    )
    def test_main_exit_code(
        self, body, argv, expected, checks, session_factory, tmp_path, monkeypatch
    ):
        for name in ("PAGECHECK_BASE_URL", "PAGECHECK_HEADLESS", "PAGECHECK_OUTPUT_DIR"):
            monkeypatch.delenv(name, raising=False)
        checks(body)
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(
            runner_module, "BrowserSession", lambda browser, **_: session_factory(browser)
        )

        with pytest.raises(SystemExit) as excinfo:
            main(["run", "checks", "--settle-ms", "0", *argv])
        assert excinfo.value.code == expected
