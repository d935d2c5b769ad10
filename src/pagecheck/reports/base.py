"""Base reporter protocol for pagecheck output."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pagecheck.results.models import RunReport
    from pagecheck.scenarios.runner import ScenarioOutcome
    from pagecheck.scenarios.scenario import Scenario


@runtime_checkable
class Reporter(Protocol):
    """Protocol defining the interface for run reporters.

    All methods are async so file or network reporters can do I/O.
    Sync reporters implement these as coroutines that don't await anything.
    """

    async def on_no_scenarios_found(self) -> None:
        """Called when collection finds no scenarios."""
        ...

    async def on_collection_complete(self, scenarios: list[Scenario]) -> None:
        """Called after collection and filtering complete."""
        ...

    async def on_scenario_complete(self, outcome: ScenarioOutcome) -> None:
        """Called after each scenario runs (or is skipped) on one viewport."""
        ...

    async def on_run_complete(self, report: RunReport) -> None:
        """Called once with the final report."""
        ...
