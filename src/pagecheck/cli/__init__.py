"""CLI module for the pagecheck runner."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence
from dataclasses import replace
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from pagecheck.config import REPORT_FORMATS, PagecheckConfig, load_config
from pagecheck.errors import ConfigError, ReportSourceError, ViewportError
from pagecheck.reports import (
    ConsoleReporter,
    FileReporter,
    Reporter,
    file_reporters_for,
    load_report,
    render_checklist,
    resolve_reporters,
)
from pagecheck.scenarios import Runner, Scenario, collect, select_scenarios
from pagecheck.scenarios.runner import SessionFactory
from pagecheck.version import __version__


EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2

_CONSOLE_REPORTER_NAMES = {
    "ConsoleReporter",
    "pagecheck.reports.console:ConsoleReporter",
    "pagecheck.reports.console.ConsoleReporter",
}


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for the pagecheck CLI."""
    try:
        config = load_config()
    except ConfigError as exc:
        Console(stderr=True).print(f"[red]{escape(str(exc))}[/red]")
        raise SystemExit(EXIT_USAGE) from exc
    parser = _build_parser()
    argv = list(sys.argv[1:] if argv is None else argv)
    if config.addopts:
        argv = [*config.addopts, *argv]
    args = parser.parse_args(argv)

    verbosity = _resolve_verbosity(args, config)
    _configure_logging(verbosity)

    if args.command == "run":
        raise SystemExit(asyncio.run(_run_checks(args, config)))
    if args.command == "list":
        raise SystemExit(_list_scenarios(args, config, Console()))
    if args.command == "report":
        raise SystemExit(_render_saved_report(args, Console()))
    if args.command == "checklist":
        raise SystemExit(_write_checklist(args, config, Console()))

    parser.print_help()
    raise SystemExit(EXIT_OK)


def _add_selection_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("paths", nargs="*", help="Check files or directories")
    parser.add_argument("-k", "--keyword", help="Filter scenarios by keyword expression")
    parser.add_argument(
        "-t", "--tag", dest="include_tags", action="append", help="Run scenarios with given tag"
    )
    parser.add_argument(
        "--skip-tag",
        dest="exclude_tags",
        action="append",
        help="Skip scenarios that match this tag",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pagecheck", description="Scripted UI checklists against a live web page"
    )
    parser.add_argument("--version", action="version", version=f"pagecheck {__version__}")
    subparsers = parser.add_subparsers(dest="command")

    output_args = argparse.ArgumentParser(add_help=False)
    output_args.add_argument("-q", "--quiet", action="count", default=0, help="Reduce CLI output")
    output_args.add_argument(
        "-v", "--verbose", action="count", default=0, help="Increase CLI output"
    )

    run_parser = subparsers.add_parser(
        "run", parents=[output_args], help="Run checks against the site"
    )
    _add_selection_args(run_parser)
    run_parser.add_argument("--base-url", help="Root URL of the site under test")
    run_parser.add_argument(
        "--browser",
        dest="browsers",
        action="append",
        help="Browser engine: chromium, firefox or webkit (repeatable)",
    )
    run_parser.add_argument(
        "--viewport",
        dest="viewports",
        action="append",
        help="Viewport preset name or WIDTHxHEIGHT (repeatable)",
    )
    run_parser.add_argument("--headed", action="store_true", help="Show the browser window")
    run_parser.add_argument("--settle-ms", type=int, help="Wait after navigation in milliseconds")
    run_parser.add_argument("--timeout-ms", type=int, help="Default Playwright action timeout")
    run_parser.add_argument("--output-dir", help="Directory for report files")
    run_parser.add_argument("--report-name", help="Report file name without extension")
    run_parser.add_argument(
        "--format",
        dest="formats",
        action="append",
        choices=REPORT_FORMATS,
        help="Report file format (repeatable)",
    )
    run_parser.add_argument(
        "--reporter",
        dest="reporters",
        action="append",
        help="Extra reporter by registry name or import path (repeatable)",
    )
    run_parser.add_argument(
        "--screenshots", action="store_true", help="Save a screenshot for each failing scenario"
    )
    run_parser.add_argument(
        "--capture-console", action="store_true", help="Log the page's console output"
    )
    run_parser.add_argument(
        "--collect-only", action="store_true", help="List scenarios without running them"
    )

    list_parser = subparsers.add_parser(
        "list", parents=[output_args], help="List collected scenarios"
    )
    _add_selection_args(list_parser)

    report_parser = subparsers.add_parser(
        "report", parents=[output_args], help="Re-render a saved JSON report"
    )
    report_parser.add_argument("source", help="Path to a JSON report written by 'pagecheck run'")
    report_parser.add_argument(
        "--format",
        dest="formats",
        action="append",
        choices=REPORT_FORMATS,
        help="Output format (repeatable, default: markdown and html)",
    )
    report_parser.add_argument("--output-dir", help="Directory for output (default: next to source)")
    report_parser.add_argument("--report-name", help="Output file name without extension")

    checklist_parser = subparsers.add_parser(
        "checklist",
        parents=[output_args],
        help="Write manual-testing instructions for the scenarios",
    )
    _add_selection_args(checklist_parser)
    checklist_parser.add_argument("-o", "--output", help="Write to this file instead of stdout")
    checklist_parser.add_argument("--base-url", help="Root URL shown in the instructions")

    return parser


def _configure_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False, rich_tracebacks=True)],
    )


def _resolve_verbosity(args: argparse.Namespace, config: PagecheckConfig) -> int:
    return config.verbosity + getattr(args, "verbose", 0) - getattr(args, "quiet", 0)


def _resolve_paths(args: argparse.Namespace, config: PagecheckConfig) -> list[str]:
    if args.paths:
        return args.paths
    return config.check_paths


def _resolve_tags(
    args: argparse.Namespace, config: PagecheckConfig
) -> tuple[list[str], list[str]]:
    include = list(config.include_tags)
    exclude = list(config.exclude_tags)
    if args.include_tags:
        include.extend(args.include_tags)
    if args.exclude_tags:
        exclude.extend(args.exclude_tags)
    return include, exclude


def _resolve_keyword(args: argparse.Namespace, config: PagecheckConfig) -> str | None:
    return args.keyword or config.keyword


def _resolve_run_config(args: argparse.Namespace, config: PagecheckConfig) -> PagecheckConfig:
    """Overlay ``run`` flags on top of the loaded configuration."""
    return replace(
        config,
        base_url=args.base_url or config.base_url,
        browsers=list(args.browsers or config.browsers),
        viewports=list(args.viewports or config.viewports),
        headless=False if args.headed else config.headless,
        settle_ms=args.settle_ms if args.settle_ms is not None else config.settle_ms,
        timeout_ms=args.timeout_ms if args.timeout_ms is not None else config.timeout_ms,
        output_dir=args.output_dir or config.output_dir,
        report_name=args.report_name or config.report_name,
        report_formats=list(args.formats or config.report_formats),
        screenshots=args.screenshots or config.screenshots,
        capture_console=args.capture_console or config.capture_console,
    )


def _resolve_reporters(
    args: argparse.Namespace, config: PagecheckConfig, verbosity: int
) -> list[Reporter]:
    """Console reporter first, then any reporters named on the CLI or in config.

    File reporters named here (``html``, ``JsonReporter``, ...) write to the
    configured output directory and report name unless their options say otherwise.
    """
    names = args.reporters or config.reporters
    names = [n for n in names if n not in _CONSOLE_REPORTER_NAMES]
    reporters: list[Reporter] = [ConsoleReporter(verbosity=verbosity)]
    reporters.extend(
        resolve_reporters(
            names,
            config.reporter_options,
            file_defaults={"output_dir": config.output_dir, "report_name": config.report_name},
        )
    )
    return reporters


def _collect_scenarios(paths: Sequence[str]) -> list[Scenario]:
    scenarios: list[Scenario] = []
    seen: set[str] = set()
    for path in paths:
        for scn in collect(path):
            if scn.id not in seen:
                seen.add(scn.id)
                scenarios.append(scn)
    return scenarios


def _select(args: argparse.Namespace, config: PagecheckConfig) -> list[Scenario]:
    """Collect and filter scenarios; raises ValueError for a bad keyword expression."""
    include_tags, exclude_tags = _resolve_tags(args, config)
    scenarios = _collect_scenarios(_resolve_paths(args, config))
    return select_scenarios(scenarios, include_tags, exclude_tags, _resolve_keyword(args, config))


def _print_scenarios(console: Console, scenarios: Sequence[Scenario]) -> None:
    table = Table(title=f"{len(scenarios)} scenario(s)")
    table.add_column("Scenario")
    table.add_column("Requirement")
    table.add_column("Category")
    table.add_column("Tags")
    table.add_column("Viewports")
    for scn in scenarios:
        table.add_row(
            escape(scn.id),
            escape(f"{scn.requirement_id}: {scn.title}"),
            escape(scn.category),
            escape(", ".join(sorted(scn.tags))),
            escape(", ".join(scn.viewports) if scn.viewports else "all"),
        )
    console.print(table)


async def _run_checks(
    args: argparse.Namespace,
    config: PagecheckConfig,
    session_factory: SessionFactory | None = None,
) -> int:
    console = Console()
    config = _resolve_run_config(args, config)
    verbosity = _resolve_verbosity(args, config)

    try:
        scenarios = _select(args, config)
    except ValueError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        return EXIT_USAGE

    if args.collect_only:
        _print_scenarios(console, scenarios)
        return EXIT_OK

    try:
        reporters = _resolve_reporters(args, config, verbosity)
        taken = {r.path for r in reporters if isinstance(r, FileReporter)}
        reporters.extend(
            r
            for r in file_reporters_for(
                config.report_formats, config.output_dir, config.report_name
            )
            if r.path not in taken
        )
        runner = Runner.from_config(config, reporters=reporters, session_factory=session_factory)
    except (ValueError, TypeError, ConfigError, ViewportError) as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        return EXIT_USAGE
    file_reporters = [r for r in reporters if isinstance(r, FileReporter)]

    report = await runner.run(scenarios)

    write_failed = False
    for file_reporter in file_reporters:
        if file_reporter.written is not None:
            console.print(f"[dim]{file_reporter.format} report:[/dim] {file_reporter.written}")
        if file_reporter.error is not None:
            error = escape(str(file_reporter.error))
            console.print(f"[red]Could not write {file_reporter.path}: {error}[/red]")
            write_failed = True

    return EXIT_OK if report.ok and not write_failed else EXIT_FAILED


def _list_scenarios(args: argparse.Namespace, config: PagecheckConfig, console: Console) -> int:
    try:
        scenarios = _select(args, config)
    except ValueError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        return EXIT_USAGE
    if not scenarios:
        console.print("[yellow]No scenarios found.[/yellow]")
        return EXIT_OK
    _print_scenarios(console, scenarios)
    return EXIT_OK


def _render_saved_report(args: argparse.Namespace, console: Console) -> int:
    """Render Markdown/HTML from a JSON report written by an earlier run."""
    source = Path(args.source)
    try:
        report = load_report(source)
    except ReportSourceError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        return EXIT_FAILED

    formats = args.formats or ["markdown", "html"]
    output_dir = Path(args.output_dir) if args.output_dir else source.parent
    report_name = args.report_name or source.stem
    for reporter in file_reporters_for(formats, output_dir, report_name):
        try:
            path = reporter.write(report)
        except OSError as exc:
            console.print(f"[red]Could not write {reporter.path}: {escape(str(exc))}[/red]")
            return EXIT_FAILED
        console.print(f"Wrote {path}")
    return EXIT_OK


def _write_checklist(args: argparse.Namespace, config: PagecheckConfig, console: Console) -> int:
    try:
        scenarios = _select(args, config)
    except ValueError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        return EXIT_USAGE

    text = render_checklist(scenarios, args.base_url or config.base_url)
    if args.output:
        output = Path(args.output)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8")
        console.print(f"Wrote {output}")
    else:
        sys.stdout.write(text)
    return EXIT_OK


__all__ = ["main"]
