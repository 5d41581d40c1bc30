"""Search-and-verify flow for the market index page."""
from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from playwright.async_api import Page, expect

from market_e2e.config.settings import Settings
from market_e2e.selectors.market_page import MarketSelectors

logger = logging.getLogger(__name__)

_UNSAFE_LABEL_CHARS = re.compile(r"[^A-Za-z0-9_.-]+")


@dataclass(frozen=True)
class SearchOutcome:
    """Final page URL and the query that was found in <main>."""

    url: str
    query: str


class MarketSearchFlow:
    """Drives the market page search box and checks the rendered result."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    async def open(self, page: Page) -> None:
        url = self.settings.market_url()
        logger.info("Opening market page %s", url)
        await page.goto(url)

    async def search(self, page: Page, query: str) -> None:
        textbox = page.get_by_role(MarketSelectors.search_input_role)
        await textbox.click()
        await textbox.fill(query)
        logger.debug("Submitting query %r with %s", query, MarketSelectors.submit_key)
        await textbox.press(MarketSelectors.submit_key)

    async def assert_results_contain(self, page: Page, query: str) -> None:
        main = page.get_by_role(MarketSelectors.results_role)
        await expect(main).to_contain_text(query, timeout=self.settings.expect_timeout_ms)
        logger.info("Main content contains %r", query)

    async def run(self, page: Page, query: Optional[str] = None) -> SearchOutcome:
        """Open the market page, submit ``query`` and wait for it to show up in <main>."""
        query = query if query is not None else self.settings.search_query
        await self.open(page)
        await self.search(page, query)
        await self.assert_results_contain(page, query)
        return SearchOutcome(url=page.url, query=query)

    async def capture_failure(self, page: Page, label: str) -> Optional[Path]:
        """Best-effort full-page screenshot; returns None when the page is gone."""
        self.settings.artifacts_dir.mkdir(parents=True, exist_ok=True)
        safe_label = _UNSAFE_LABEL_CHARS.sub("_", label).strip("_") or "failure"
        stamp = time.strftime("%Y%m%d-%H%M%S")
        path = self.settings.artifacts_dir / f"{safe_label}_{stamp}.png"
        try:
            await page.screenshot(path=str(path), full_page=True)
        except Exception as exc:
            logger.warning("Failed to capture failure screenshot: %s", exc)
            return None
        logger.warning("Saved failure screenshot to %s", path)
        return path
