from __future__ import annotations

import asyncio
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from urllib.parse import urljoin

from pagecheck.results.models import ResultRecord

if TYPE_CHECKING:
    from pagecheck.scenarios.scenario import Scenario
    from pagecheck.types import Viewport


CHECK_CONTEXT: ContextVar[CheckContext | None] = ContextVar("check_context", default=None)


@dataclass
class CheckContext:
    """Execution context handed to a check predicate.

    Attributes
    ----------
    page
        Playwright page, already navigated and settled.
    scenario
        The scenario being executed.
    base_url
        Root URL of the site under test.
    viewport
        Viewport the page is currently sized to.
    browser
        Browser engine name.
    prefix_viewport
        Prefix record names with the viewport name (several viewports in one run).
    records
        Sub-check records made through :meth:`expect`.
    """

    page: Any
    scenario: Scenario
    base_url: str
    viewport: Viewport | None = None
    browser: str | None = None
    settle_ms: int = 0
    prefix_viewport: bool = False
    records: list[ResultRecord] = field(default_factory=list)

    def record_name(self, name: str) -> str:
        if self.prefix_viewport and self.viewport is not None:
            return f"{self.viewport.name} - {name}"
        return name

    def make_record(self, name: str, passed: bool, details: str = "") -> ResultRecord:
        return ResultRecord(
            name=self.record_name(name),
            passed=bool(passed),
            details=details,
            scenario=self.scenario.id,
            requirement_id=self.scenario.requirement_id,
            category=self.scenario.category,
            viewport=self.viewport.name if self.viewport else None,
            browser=self.browser,
        )

    def expect(self, name: str, passed: bool, details: str = "") -> bool:
        """Record one sub-check and return its outcome."""
        self.records.append(self.make_record(name, passed, details))
        return bool(passed)

    def url(self, path: str = "/") -> str:
        return urljoin(self.base_url.rstrip("/") + "/", path.lstrip("/"))

    async def settle(self, ms: int | None = None) -> None:
        """Wait a fixed number of milliseconds for animations and media to catch up."""
        delay = self.settle_ms if ms is None else ms
        if delay <= 0:
            return
        wait = getattr(self.page, "wait_for_timeout", None)
        if wait is not None:
            await wait(delay)
        else:
            await asyncio.sleep(delay / 1000)


def current_context() -> CheckContext:
    """Return the context of the running check."""
    ctx = CHECK_CONTEXT.get()
    if ctx is None:
        msg = "No check is running"
        raise RuntimeError(msg)
    return ctx


def expect(name: str, passed: bool, details: str = "") -> bool:
    """Record a sub-check against the running check's context."""
    return current_context().expect(name, passed, details)


@contextmanager
def check_context_scope(ctx: CheckContext) -> Iterator[None]:
    token = CHECK_CONTEXT.set(ctx)
    try:
        yield
    finally:
        CHECK_CONTEXT.reset(token)


__all__ = ["CHECK_CONTEXT", "CheckContext", "check_context_scope", "current_context", "expect"]
