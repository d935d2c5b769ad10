"""Sequential scenario runner."""

from __future__ import annotations

import inspect
import logging
import re
import time
from collections.abc import Callable, Sequence
from contextlib import AbstractAsyncContextManager, AsyncExitStack
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pagecheck.browser.session import BrowserSession
from pagecheck.results.collector import ResultCollector
from pagecheck.results.models import RequirementCoverage, ResultRecord, RunReport
from pagecheck.scenarios.context import CheckContext, check_context_scope
from pagecheck.scenarios.scenario import Scenario, get_requirement_registry
from pagecheck.types import DEFAULT_VIEWPORT, Viewport, resolve_browser, resolve_viewport

if TYPE_CHECKING:
    from pagecheck.config import PagecheckConfig
    from pagecheck.reports.base import Reporter


logger = logging.getLogger(__name__)

SessionFactory = Callable[[str], AbstractAsyncContextManager[Any]]


@dataclass
class ScenarioOutcome:
    """Records produced by one scenario on one browser/viewport pass."""

    scenario: Scenario
    records: list[ResultRecord] = field(default_factory=list)
    viewport: Viewport | None = None
    browser: str | None = None
    skip_reason: str | None = None
    duration_ms: float = 0
    screenshot: Path | None = None

    @property
    def skipped(self) -> bool:
        return self.skip_reason is not None

    @property
    def passed(self) -> bool:
        return not self.skipped and all(r.passed for r in self.records)


def _error_details(exc: BaseException) -> str:
    return str(exc).strip() or type(exc).__name__


def _slug(text: str) -> str:
    return re.sub(r"[^A-Za-z0-9_.-]+", "-", text).strip("-")


class Runner:
    """Runs scenarios one at a time against a live page."""

    def __init__(
        self,
        *,
        base_url: str,
        browsers: Sequence[str] = ("chromium",),
        viewports: Sequence[Viewport] = (DEFAULT_VIEWPORT,),
        settle_ms: int = 1_000,
        headless: bool = True,
        timeout_ms: int = 10_000,
        capture_console: bool = False,
        screenshot_dir: Path | None = None,
        title: str = "Page Check Report",
        reporters: Sequence[Reporter] | None = None,
        session_factory: SessionFactory | None = None,
    ) -> None:
        self.base_url = base_url
        self.browsers = list(browsers)
        self.viewports = list(viewports) or [DEFAULT_VIEWPORT]
        self.settle_ms = settle_ms
        self.headless = headless
        self.timeout_ms = timeout_ms
        self.capture_console = capture_console
        self.screenshot_dir = screenshot_dir
        self.title = title
        self.reporters = list(reporters or [])
        self.session_factory = session_factory

    @classmethod
    def from_config(
        cls,
        config: PagecheckConfig,
        *,
        reporters: Sequence[Reporter] | None = None,
        session_factory: SessionFactory | None = None,
    ) -> Runner:
        """Build a runner from resolved configuration.

        Raises ConfigError or ViewportError for unknown browser or viewport names.
        """
        screenshot_dir = Path(config.output_dir) / "screenshots" if config.screenshots else None
        return cls(
            base_url=config.base_url,
            browsers=[resolve_browser(b).value for b in config.browsers],
            viewports=[resolve_viewport(v) for v in config.viewports],
            settle_ms=config.settle_ms,
            headless=config.headless,
            timeout_ms=config.timeout_ms,
            capture_console=config.capture_console,
            screenshot_dir=screenshot_dir,
            title=config.report_title,
            reporters=reporters,
            session_factory=session_factory,
        )

    @property
    def prefix_viewport(self) -> bool:
        return len(self.viewports) > 1

    def _make_session(self, browser: str) -> AbstractAsyncContextManager[Any]:
        if self.session_factory is not None:
            return self.session_factory(browser)
        return BrowserSession(
            browser,
            headless=self.headless,
            timeout_ms=self.timeout_ms,
            capture_console=self.capture_console,
        )

    async def _notify(self, hook: str, *args: Any) -> None:
        for reporter in self.reporters:
            await getattr(reporter, hook)(*args)

    async def run(self, scenarios: Sequence[Scenario]) -> RunReport:
        """Run every scenario on every browser and viewport, then build the report."""
        start = time.perf_counter()
        collector = ResultCollector()
        scenarios = list(scenarios)

        await self._notify("on_collection_complete", scenarios)

        if not scenarios:
            await self._notify("on_no_scenarios_found")
        else:
            for browser in self.browsers:
                await self._run_browser(browser, scenarios, collector)

        report = collector.build_report(
            title=self.title,
            base_url=self.base_url,
            requirements=_requirements_for(scenarios),
            browsers=self.browsers,
            viewports=[v.name for v in self.viewports],
            duration_ms=(time.perf_counter() - start) * 1000,
        )
        await self._notify("on_run_complete", report)
        return report

    async def _run_browser(
        self,
        browser: str,
        scenarios: list[Scenario],
        collector: ResultCollector,
    ) -> None:
        async with AsyncExitStack() as stack:
            try:
                session = await stack.enter_async_context(self._make_session(browser))
                page = await session.new_page(self.viewports[0])
            except Exception as exc:
                logger.error("Could not start %s: %s", browser, _error_details(exc))
                await self._fail_browser(browser, scenarios, collector, exc)
                return
            try:
                for viewport in self.viewports:
                    await session.resize(page, viewport)
                    for scn in scenarios:
                        if not scn.runs_on(viewport.name):
                            continue
                        outcome = await self.run_scenario(
                            scn, page, viewport=viewport, browser=browser
                        )
                        if outcome.skipped:
                            collector.mark_skipped()
                        collector.extend(outcome.records)
                        await self._notify("on_scenario_complete", outcome)
            finally:
                await page.close()

    async def _fail_browser(
        self,
        browser: str,
        scenarios: list[Scenario],
        collector: ResultCollector,
        exc: Exception,
    ) -> None:
        """One failed record per scenario that would have run on ``browser``."""
        details = f"{browser} could not be started: {_error_details(exc)}"
        for scn in scenarios:
            passes = sum(1 for v in self.viewports if scn.runs_on(v.name))
            if not passes:
                continue
            if scn.skip_reason:
                outcome = ScenarioOutcome(scn, browser=browser, skip_reason=scn.skip_reason)
                collector.mark_skipped(passes)
            else:
                record = ResultRecord(
                    name=scn.title,
                    passed=False,
                    details=details,
                    scenario=scn.id,
                    requirement_id=scn.requirement_id,
                    category=scn.category,
                    browser=browser,
                )
                outcome = ScenarioOutcome(scn, records=[record], browser=browser)
                collector.add(record)
            await self._notify("on_scenario_complete", outcome)

    async def run_scenario(
        self,
        scn: Scenario,
        page: Any,
        *,
        viewport: Viewport | None = None,
        browser: str | None = None,
    ) -> ScenarioOutcome:
        """Navigate, settle and evaluate one scenario.

        Any exception from navigation or the predicate becomes a failed record
        carrying the error message; records made before the error are kept.
        """
        if scn.skip_reason:
            return ScenarioOutcome(scn, viewport=viewport, browser=browser, skip_reason=scn.skip_reason)

        start = time.perf_counter()
        ctx = CheckContext(
            page=page,
            scenario=scn,
            base_url=self.base_url,
            viewport=viewport,
            browser=browser,
            settle_ms=self.settle_ms if scn.settle_ms is None else scn.settle_ms,
            prefix_viewport=self.prefix_viewport,
        )

        with check_context_scope(ctx):
            try:
                await page.goto(ctx.url(scn.path))
                await ctx.settle()
                result = scn.fn(ctx)
                if inspect.isawaitable(result):
                    result = await result
            except Exception as exc:
                logger.info("Check %s failed: %s", scn.id, _error_details(exc))
                ctx.expect(scn.title, False, _error_details(exc))
            else:
                if result is False:
                    ctx.expect(scn.title, False, "check returned False")
                elif not ctx.records:
                    ctx.expect(scn.title, True)

        duration_ms = (time.perf_counter() - start) * 1000
        for record in ctx.records:
            record.duration_ms = duration_ms

        outcome = ScenarioOutcome(
            scn,
            records=list(ctx.records),
            viewport=viewport,
            browser=browser,
            duration_ms=duration_ms,
        )
        if not outcome.passed and self.screenshot_dir is not None:
            outcome.screenshot = await self._screenshot(
                self.screenshot_dir, page, scn, viewport, browser
            )
        return outcome

    async def _screenshot(
        self,
        directory: Path,
        page: Any,
        scn: Scenario,
        viewport: Viewport | None,
        browser: str | None,
    ) -> Path | None:
        parts = [scn.name or scn.fn.__name__, browser, viewport.name if viewport else None]
        path = directory / (_slug("-".join(p for p in parts if p)) + ".png")
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            await page.screenshot(path=str(path))
        except Exception as exc:
            logger.warning("Could not save screenshot for %s: %s", scn.id, exc)
            return None
        return path


def _requirements_for(scenarios: Sequence[Scenario]) -> list[RequirementCoverage]:
    """Requirements covered by the given scenarios, plus declared ones nothing covers."""
    registry = get_requirement_registry()
    coverage: dict[str, RequirementCoverage] = {}
    for scn in scenarios:
        if scn.requirement_id in coverage:
            continue
        req = registry.get(scn.requirement_id)
        coverage[scn.requirement_id] = (
            req.to_coverage()
            if req is not None
            else RequirementCoverage(id=scn.requirement_id, title=scn.title, category=scn.category)
        )
    for req in registry.values():
        if not req.scenarios and req.id not in coverage:
            coverage[req.id] = req.to_coverage()
    return list(coverage.values())


__all__ = ["Runner", "ScenarioOutcome", "SessionFactory"]
