"""Console reporter built on rich."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from pagecheck.results.models import ResultRecord, RunReport
    from pagecheck.scenarios.runner import ScenarioOutcome
    from pagecheck.scenarios.scenario import Scenario


class ConsoleReporter:
    """Streams PASS/FAIL lines per scenario and prints a summary at the end.

    Verbosity: ``-1`` prints only the final line, ``0`` one line per scenario,
    ``1`` and above one line per recorded check.
    """

    def __init__(self, verbosity: int = 0, console: Console | None = None) -> None:
        self.verbosity = verbosity
        self.console = console or Console()

    async def on_no_scenarios_found(self) -> None:
        self.console.print("[yellow]No scenarios found.[/yellow]")

    async def on_collection_complete(self, scenarios: list[Scenario]) -> None:
        if self.verbosity < 0 or not scenarios:
            return
        self.console.print(f"[bold]Collected {len(scenarios)} scenario(s)[/bold]")

    def _where(self, outcome: ScenarioOutcome) -> str:
        viewport = outcome.viewport.name if outcome.viewport else None
        parts = [p for p in (outcome.browser, viewport) if p]
        return f" [dim]({', '.join(parts)})[/dim]" if parts else ""

    def _print_failure(self, record: ResultRecord) -> None:
        if record.details:
            self.console.print(f"    [red]{escape(record.details)}[/red]")

    async def on_scenario_complete(self, outcome: ScenarioOutcome) -> None:
        if self.verbosity < 0:
            return
        title = escape(outcome.scenario.title)
        where = self._where(outcome)

        if outcome.skipped:
            reason = escape(outcome.skip_reason or "")
            self.console.print(f"[yellow]SKIP[/yellow] {title}{where} [dim]{reason}[/dim]")
            return

        if self.verbosity >= 1:
            for record in outcome.records:
                label = "[green]PASS[/green]" if record.passed else "[red]FAIL[/red]"
                self.console.print(f"{label} {escape(record.name)}{where}")
                if not record.passed:
                    self._print_failure(record)
                elif self.verbosity >= 2 and record.details:
                    self.console.print(f"    [dim]{escape(record.details)}[/dim]")
            return

        label = "[green]PASS[/green]" if outcome.passed else "[red]FAIL[/red]"
        self.console.print(f"{label} {title}{where}")
        for record in outcome.records:
            if not record.passed:
                self.console.print(f"  [red]x[/red] {escape(record.name)}")
                self._print_failure(record)

    async def on_run_complete(self, report: RunReport) -> None:
        s = report.summary
        if self.verbosity >= 0 and report.categories:
            table = Table(title="Category breakdown", show_lines=False)
            table.add_column("Category")
            table.add_column("Passed", justify="right")
            table.add_column("Total", justify="right")
            table.add_column("Rate", justify="right")
            for name, category in report.categories.items():
                rate = category.passed / category.total * 100 if category.total else 0.0
                table.add_row(escape(name), str(category.passed), str(category.total), f"{rate:.1f}%")
            self.console.print()
            self.console.print(table)

        if self.verbosity >= 0 and report.failed_records:
            self.console.print("\n[bold red]Failed checks:[/bold red]")
            for record in report.failed_records:
                self.console.print(f"  - {escape(record.category)}: {escape(record.name)}")
                self._print_failure(record)

        color = "green" if report.ok else "red"
        self.console.print(
            f"\n[bold {color}]{s.passed} passed, {s.failed} failed, {s.skipped} skipped[/bold {color}]"
            f" [dim]({s.success_rate}% success, {report.duration_ms / 1000:.2f}s)[/dim]"
        )
