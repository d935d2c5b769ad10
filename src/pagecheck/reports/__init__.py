"""Reporting module for pagecheck output."""

from pagecheck.reports.base import Reporter
from pagecheck.reports.console import ConsoleReporter
from pagecheck.reports.files import (
    FileReporter,
    HtmlReporter,
    JsonReporter,
    MarkdownReporter,
    load_report,
)
from pagecheck.reports.registry import (
    file_reporters_for,
    get_reporter_registry,
    lookup_reporter,
    register_builtin,
    report_formats,
    reporter,
    resolve_reporter,
    resolve_reporters,
    write_reports,
)
from pagecheck.reports.render import render_checklist, render_html, render_json, render_markdown


for _cls in (ConsoleReporter, JsonReporter, MarkdownReporter, HtmlReporter):
    register_builtin(_cls)

__all__ = [
    "ConsoleReporter",
    "FileReporter",
    "HtmlReporter",
    "JsonReporter",
    "MarkdownReporter",
    "Reporter",
    "file_reporters_for",
    "get_reporter_registry",
    "load_report",
    "lookup_reporter",
    "render_checklist",
    "render_html",
    "render_json",
    "render_markdown",
    "report_formats",
    "reporter",
    "resolve_reporter",
    "resolve_reporters",
    "write_reports",
]
