"""Render a ``RunReport`` (or the scenario registry) as JSON, Markdown or HTML."""

from __future__ import annotations

import json
from collections.abc import Sequence
from datetime import datetime
from html import escape
from typing import TYPE_CHECKING

from pagecheck.results.models import RequirementCoverage, ResultRecord, RunReport

if TYPE_CHECKING:
    from pagecheck.scenarios.scenario import Scenario


DETAIL_LIMIT = 100


def _truncate(text: str, limit: int = DETAIL_LIMIT) -> str:
    text = " ".join(text.split())
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


def _display_time(timestamp: str) -> str:
    try:
        return datetime.fromisoformat(timestamp).strftime("%Y-%m-%d %H:%M:%S %Z").strip()
    except ValueError:
        return timestamp


def _md_cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


def _icon(passed: bool) -> str:
    return "✅" if passed else "❌"


def render_json(report: RunReport) -> str:
    return json.dumps(report.model_dump(mode="json"), indent=2, ensure_ascii=False) + "\n"


# -- Markdown ---------------------------------------------------------------


def _md_summary(report: RunReport) -> list[str]:
    s = report.summary
    lines = [
        "## Executive Summary",
        "",
        f"- **Total Checks:** {s.total}",
        f"- **Passed:** {s.passed}",
        f"- **Failed:** {s.failed}",
        f"- **Skipped:** {s.skipped}",
        f"- **Success Rate:** {s.success_rate}%",
        "",
    ]
    return lines


def _md_requirements(requirements: Sequence[RequirementCoverage]) -> list[str]:
    if not requirements:
        return []
    lines = [
        "## Requirements Coverage",
        "",
        "| ID | Requirement | Category | Status | Checks |",
        "|---|-------------|----------|--------|--------|",
    ]
    for req in requirements:
        status = f"{_icon(req.status == 'PASS')} {req.status}"
        lines.append(
            f"| {_md_cell(req.id)} | {_md_cell(req.title)} | {_md_cell(req.category)} "
            f"| {status} | {req.check_count} |"
        )
    lines += ["", "## Detailed Requirements Analysis", ""]
    for req in requirements:
        lines += [f"### {req.id}: {req.title}", "", f"**Category:** {req.category}", ""]
        if req.description:
            lines += [f"**Description:** {req.description}", ""]
        passed = req.status == "PASS"
        lines += [f"**Status:** {_icon(passed)} {'PASSED' if passed else 'FAILED'}", ""]
        if req.check_names:
            lines.append("**Related Checks:**")
            lines += [f"- {name}" for name in req.check_names]
            lines.append("")
        else:
            lines += ["**⚠️ No checks found for this requirement**", ""]
    return lines


def _md_record(record: ResultRecord) -> list[str]:
    lines = [f"{_icon(record.passed)} **{record.name}** ({record.duration_ms:.0f}ms)"]
    if record.details and not record.passed:
        lines.append(f"   - Error: {_truncate(record.details)}")
    elif record.details:
        lines.append(f"   - {_truncate(record.details)}")
    lines.append("")
    return lines


def _md_categories(report: RunReport) -> list[str]:
    lines = ["## Check Categories", ""]
    for name, category in report.categories.items():
        lines += [f"### {name} ({category.passed}/{category.total} passed)", ""]
        for record in category.details:
            lines += _md_record(record)
    return lines


def _md_recommendations(report: RunReport) -> list[str]:
    lines = ["## Recommendations", ""]
    failed = [req for req in report.requirements if req.status == "FAIL"]
    if failed:
        lines += ["### Failed Requirements", ""]
        for req in failed:
            action = "Fix the failing checks" if req.check_names else "Add checks"
            lines.append(f"- **{req.id}: {req.title}** - {action} for this requirement")
        lines.append("")

    if report.summary.failed or failed:
        lines += [
            "### General Recommendations",
            "",
            "- Fix failing checks to reach a 100% success rate",
            "- Re-run with `--screenshots` to capture the page state of failures",
            "",
        ]
    else:
        lines += [
            "### ✅ All Requirements Met!",
            "",
            "Every check passed for the configured browsers and viewports.",
            "",
        ]
    return lines


def render_markdown(report: RunReport) -> str:
    env = report.environment
    lines = [
        f"# {report.title}",
        "",
        f"**Generated:** {_display_time(report.timestamp)}",
        "",
    ]
    if report.base_url:
        lines += [f"**Base URL:** {report.base_url}", ""]
    if env.browsers or env.viewports:
        lines += [
            f"**Browsers:** {', '.join(env.browsers) or '-'} | "
            f"**Viewports:** {', '.join(env.viewports) or '-'}",
            "",
        ]
    lines += _md_summary(report)
    lines += _md_requirements(report.requirements)
    lines += _md_categories(report)
    lines += _md_recommendations(report)
    return "\n".join(lines).rstrip() + "\n"


# -- HTML -------------------------------------------------------------------


_HTML_STYLE = """
    body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
           line-height: 1.6; color: #333; max-width: 1200px; margin: 0 auto; padding: 20px;
           background-color: #f5f5f5; }
    .container { background: white; border-radius: 8px; padding: 30px;
                 box-shadow: 0 2px 10px rgba(0,0,0,0.1); }
    h1 { color: #2c3e50; border-bottom: 2px solid #3498db; padding-bottom: 10px; }
    h2 { color: #34495e; margin-top: 30px; }
    .summary { display: grid; grid-template-columns: repeat(auto-fit, minmax(200px, 1fr));
               gap: 20px; margin: 20px 0; }
    .summary-card { background: #f8f9fa; padding: 20px; border-radius: 8px; text-align: center;
                    border-left: 4px solid #3498db; }
    .summary-card.passed { border-left-color: #27ae60; }
    .summary-card.failed { border-left-color: #e74c3c; }
    .summary-card h3 { margin: 0 0 10px 0; font-size: 2em; }
    table { width: 100%; border-collapse: collapse; margin: 20px 0; }
    th, td { padding: 12px 15px; text-align: left; border-bottom: 1px solid #ddd; }
    th { background-color: #f8f9fa; font-weight: 600; }
    .status-pass { color: #27ae60; font-weight: bold; }
    .status-fail { color: #e74c3c; font-weight: bold; }
    .test-item { padding: 10px; margin: 5px 0; border-radius: 4px; background: #f8f9fa; }
    .test-passed { border-left: 4px solid #27ae60; }
    .test-failed { border-left: 4px solid #e74c3c; }
    .error-message { color: #e74c3c; font-size: 0.9em; margin-top: 5px; }
    .details { color: #666; font-size: 0.9em; margin-top: 5px; }
    .success-rate { font-size: 1.2em; font-weight: bold; margin: 10px 0; }
"""


def _html_card(value: object, label: str, css: str = "") -> str:
    cls = f"summary-card {css}".strip()
    return f'<div class="{cls}"><h3>{escape(str(value))}</h3><p>{escape(label)}</p></div>'


def _html_requirements(requirements: Sequence[RequirementCoverage]) -> str:
    if not requirements:
        return ""
    rows = []
    for req in requirements:
        css = "status-pass" if req.status == "PASS" else "status-fail"
        rows.append(
            "<tr>"
            f"<td>{escape(req.id)}</td>"
            f"<td>{escape(req.title)}</td>"
            f"<td>{escape(req.category)}</td>"
            f'<td class="{css}">{req.status}</td>'
            f"<td>{req.check_count}</td>"
            "</tr>"
        )
    return (
        "<h2>Requirements Coverage</h2>\n<table>\n<thead><tr><th>ID</th><th>Requirement</th>"
        "<th>Category</th><th>Status</th><th>Checks</th></tr></thead>\n<tbody>\n"
        + "\n".join(rows)
        + "\n</tbody>\n</table>"
    )


def _html_record(record: ResultRecord) -> str:
    css = "test-passed" if record.passed else "test-failed"
    body = f"{_icon(record.passed)} <strong>{escape(record.name)}</strong> ({record.duration_ms:.0f}ms)"
    if record.details:
        detail_css = "details" if record.passed else "error-message"
        body += f'<div class="{detail_css}">{escape(record.details)}</div>'
    return f'<div class="test-item {css}">{body}</div>'


def _html_categories(report: RunReport) -> str:
    sections = ["<h2>Check Categories</h2>"]
    for name, category in report.categories.items():
        sections.append(
            f"<h3>{escape(name)} ({category.passed}/{category.total} passed)</h3>\n"
            + "\n".join(_html_record(r) for r in category.details)
        )
    return "\n".join(sections)


def render_html(report: RunReport) -> str:
    s = report.summary
    title = escape(report.title)
    cards = "\n".join(
        [
            _html_card(s.total, "Total Checks"),
            _html_card(s.passed, "Passed", "passed"),
            _html_card(s.failed, "Failed", "failed"),
            _html_card(s.skipped, "Skipped"),
        ]
    )
    meta = f"<p><strong>Generated:</strong> {escape(_display_time(report.timestamp))}</p>"
    if report.base_url:
        meta += f"\n<p><strong>Base URL:</strong> {escape(report.base_url)}</p>"
    env = report.environment
    if env.browsers or env.viewports:
        meta += (
            f"\n<p><strong>Browsers:</strong> {escape(', '.join(env.browsers))} "
            f"&middot; <strong>Viewports:</strong> {escape(', '.join(env.viewports))}</p>"
        )
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{title}</title>
<style>{_HTML_STYLE}</style>
</head>
<body>
<div class="container">
<h1>{title}</h1>
{meta}
<h2>Executive Summary</h2>
<div class="summary">
{cards}
</div>
<div class="success-rate">Success Rate: {s.success_rate}%</div>
{_html_requirements(report.requirements)}
{_html_categories(report)}
</div>
</body>
</html>
"""


# -- Manual checklist -------------------------------------------------------


def render_checklist(
    scenarios: Sequence[Scenario],
    base_url: str,
    title: str = "Manual Verification Checklist",
) -> str:
    """Manual-testing instructions for the given scenarios, grouped by category."""
    lines = [
        f"# {title}",
        "",
        f"1. Open {base_url} in your browser",
        "2. Verify each check below and tick it off",
        "",
    ]
    by_category: dict[str, list[Scenario]] = {}
    for scn in scenarios:
        by_category.setdefault(scn.category, []).append(scn)

    for category, items in by_category.items():
        lines += [f"## {category}", ""]
        for scn in items:
            lines += [f"### [ ] {scn.requirement_id}: {scn.title}", ""]
            where = f"Page: `{scn.path}`"
            if scn.viewports:
                where += f" | Viewports: {', '.join(scn.viewports)}"
            lines += [where, ""]
            if scn.skip_reason:
                lines += [f"_Currently skipped: {scn.skip_reason}_", ""]
            if scn.description:
                lines += [scn.description, ""]
            if scn.steps:
                lines.append("**Steps:**")
                lines += [f"{i}. {step}" for i, step in enumerate(scn.steps, start=1)]
                lines.append("")
            if scn.expected:
                lines.append("**Expected:**")
                lines += [f"- {item}" for item in scn.expected]
                lines.append("")

    lines += [
        "## If any issues are found",
        "",
        "- Note the specific behavior that doesn't match expectations",
        "- Check the browser console for errors",
        "- Repeat the check in a different browser",
    ]
    return "\n".join(lines) + "\n"


__all__ = ["render_checklist", "render_html", "render_json", "render_markdown"]
