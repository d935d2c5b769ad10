"""Thin wrapper over Playwright's async API: launch, open a page, resize."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from pagecheck.types import DEFAULT_VIEWPORT, BrowserName, Viewport, resolve_browser


logger = logging.getLogger(__name__)


class BrowserSession:
    """One launched browser with a single context.

    Use as an async context manager::

        async with BrowserSession("chromium") as session:
            page = await session.new_page(VIEWPORTS["mobile"])
    """

    def __init__(
        self,
        browser: str | BrowserName = BrowserName.CHROMIUM,
        *,
        headless: bool = True,
        timeout_ms: int = 10_000,
        capture_console: bool = False,
    ) -> None:
        self.browser_name = browser if isinstance(browser, BrowserName) else resolve_browser(browser)
        self.headless = headless
        self.timeout_ms = timeout_ms
        self.capture_console = capture_console
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None

    @property
    def name(self) -> str:
        return self.browser_name.value

    async def __aenter__(self) -> BrowserSession:
        self._playwright = await async_playwright().start()
        launcher = getattr(self._playwright, self.browser_name.value)
        logger.info("Launching %s (headless=%s)", self.name, self.headless)
        try:
            self._browser = await launcher.launch(headless=self.headless)
            self._context = await self._browser.new_context(viewport=DEFAULT_VIEWPORT.size)
        except BaseException:
            # __aexit__ is not called when __aenter__ raises
            await self.__aexit__(None, None, None)
            raise
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        try:
            if self._context is not None:
                await self._context.close()
            if self._browser is not None:
                await self._browser.close()
        finally:
            if self._playwright is not None:
                await self._playwright.stop()
            self._context = self._browser = self._playwright = None

    async def new_page(self, viewport: Viewport | None = None) -> Page:
        if self._context is None:
            msg = "BrowserSession is not started"
            raise RuntimeError(msg)
        page = await self._context.new_page()
        page.set_default_timeout(self.timeout_ms)
        if self.capture_console:
            _forward_page_logs(page)
        if viewport is not None:
            await self.resize(page, viewport)
        return page

    async def resize(self, page: Page, viewport: Viewport) -> None:
        logger.debug("Resizing page to %s", viewport.label)
        await page.set_viewport_size(viewport.size)


def _forward_page_logs(page: Any) -> None:
    page.on("console", lambda msg: logger.info("[page console] %s", msg.text))
    page.on("pageerror", lambda err: logger.error("[page error] %s", err))


__all__ = ["BrowserSession"]
