"""Shared fixtures for unit tests."""

from __future__ import annotations

import pytest

from pagecheck.reports.base import Reporter
from pagecheck.scenarios import clear_registry


class NullReporter(Reporter):
    """Silent reporter that remembers what it was told."""

    def __init__(self) -> None:
        self.no_scenarios = False
        self.collected = None
        self.outcomes = []
        self.report = None

    async def on_no_scenarios_found(self) -> None:
        self.no_scenarios = True

    async def on_collection_complete(self, scenarios) -> None:
        self.collected = list(scenarios)

    async def on_scenario_complete(self, outcome) -> None:
        self.outcomes.append(outcome)

    async def on_run_complete(self, report) -> None:
        self.report = report


class FakePage:
    """Stands in for a Playwright page; records navigation and resizing."""

    def __init__(self, *, goto_error: Exception | None = None) -> None:
        self.goto_error = goto_error
        self.visited: list[str] = []
        self.waits: list[int] = []
        self.sizes: list[dict[str, int]] = []
        self.screenshots: list[str] = []
        self.closed = False

    async def goto(self, url: str) -> None:
        self.visited.append(url)
        if self.goto_error is not None:
            raise self.goto_error

    async def wait_for_timeout(self, ms: int) -> None:
        self.waits.append(ms)

    async def set_viewport_size(self, size: dict[str, int]) -> None:
        self.sizes.append(size)

    async def screenshot(self, path: str) -> None:
        self.screenshots.append(path)

    async def close(self) -> None:
        self.closed = True


class FakeSession:
    """Async context manager with the ``BrowserSession`` surface the runner uses."""

    def __init__(
        self,
        browser: str,
        page: FakePage | None = None,
        *,
        launch_error: Exception | None = None,
    ) -> None:
        self.name = browser
        self.page = page or FakePage()
        self.launch_error = launch_error
        self.entered = False
        self.exited = False

    async def __aenter__(self) -> FakeSession:
        if self.launch_error is not None:
            raise self.launch_error
        self.entered = True
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.exited = True

    async def new_page(self, viewport=None) -> FakePage:
        if viewport is not None:
            await self.resize(self.page, viewport)
        return self.page

    async def resize(self, page: FakePage, viewport) -> None:
        await page.set_viewport_size(viewport.size)


@pytest.fixture
def null_reporter() -> NullReporter:
    """Provide a silent reporter for tests."""
    return NullReporter()


@pytest.fixture
def sessions() -> list[FakeSession]:
    """Sessions created by :func:`session_factory`, in creation order."""
    return []


@pytest.fixture
def session_factory(sessions):
    def factory(browser: str) -> FakeSession:
        session = FakeSession(browser)
        sessions.append(session)
        return session

    return factory


@pytest.fixture(autouse=True)
def clean_scenario_registry():
    """Start every test with empty scenario and requirement registries."""
    clear_registry()
    yield
    clear_registry()
