"""Browser orchestration helpers."""
from __future__ import annotations

import logging
import sys
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from types import TracebackType
from typing import Optional, Type

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from market_e2e.config.settings import Settings

logger = logging.getLogger(__name__)


@dataclass
class BrowserSession:
    """Async context manager that owns Playwright + browser lifecycle."""

    settings: Settings
    _playwright_cm: Optional[AbstractAsyncContextManager] = None
    _playwright: Optional[Playwright] = None
    _browser: Optional[Browser] = None

    async def __aenter__(self) -> "BrowserSession":  # noqa: D401
        self.settings.ensure_directories()
        self._playwright_cm = async_playwright()
        self._playwright = await self._playwright_cm.__aenter__()

        browser_type = getattr(self._playwright, self.settings.browser_name)
        launch_args = self.settings.launch_args()
        logger.info("Launching %s with args: %s", self.settings.browser_name, launch_args)
        try:
            self._browser = await browser_type.launch(**launch_args)
        except BaseException:
            logger.error("Failed to launch %s; stopping Playwright", self.settings.browser_name)
            await self._stop_playwright(*sys.exc_info())
            raise
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        try:
            if self._browser:
                await self._browser.close()
        finally:
            self._browser = None
            await self._stop_playwright(exc_type, exc, tb)

    async def _stop_playwright(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        playwright_cm = self._playwright_cm
        self._playwright_cm = None
        self._playwright = None
        if playwright_cm:
            await playwright_cm.__aexit__(exc_type, exc, tb)

    @property
    def browser(self) -> Browser:
        if not self._browser:
            raise RuntimeError("Browser not initialised")
        return self._browser

    async def new_context(self, **overrides: object) -> BrowserContext:
        options = {**self.settings.context_options(), **overrides}
        logger.debug("Creating context with options: %s", options)
        context = await self.browser.new_context(**options)
        context.set_default_timeout(self.settings.default_timeout_ms)
        context.set_default_navigation_timeout(self.settings.navigation_timeout_ms)
        return context

    async def new_page(self, **overrides: object) -> Page:
        context = await self.new_context(**overrides)
        return await context.new_page()


async def ensure_close_context(context: BrowserContext) -> None:
    """Helper to close contexts in finally blocks."""
    try:
        await context.close()
    except Exception:  # pragma: no cover - best effort cleanup
        logger.exception("Failed to close context")
