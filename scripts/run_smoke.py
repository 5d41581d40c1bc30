"""Entry point for manual market smoke runs."""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from playwright.async_api import Error as PlaywrightError

from market_e2e.config.settings import SUPPORTED_BROWSERS, Settings
from market_e2e.core.browser import BrowserSession, ensure_close_context
from market_e2e.core.logging import configure_logging
from market_e2e.flows import MarketSearchFlow

logger = logging.getLogger(__name__)


async def run(settings: Settings, query: str | None = None) -> bool:
    flow = MarketSearchFlow(settings)
    async with BrowserSession(settings) as session:
        context = await session.new_context()
        try:
            page = await context.new_page()
            try:
                outcome = await flow.run(page, query)
            except (AssertionError, PlaywrightError) as exc:
                logger.error("Market search smoke failed: %s", exc)
                if settings.screenshot_on_failure:
                    await flow.capture_failure(page, "market_search")
                return False
            logger.info("Market search smoke passed for %r at %s", outcome.query, outcome.url)
            return True
        finally:
            await ensure_close_context(context)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the market search smoke check")
    parser.add_argument("--base-url", help="Override the server origin (default from settings)")
    parser.add_argument("--query", help="Search text to submit (default from settings)")
    parser.add_argument(
        "--browser",
        choices=SUPPORTED_BROWSERS,
        help="Playwright browser type to launch",
    )
    parser.add_argument(
        "--headed",
        action="store_true",
        help="Force headed browser mode (overrides env)",
    )
    parser.add_argument("--log-level", help="Logging level (e.g. DEBUG, INFO)")
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    overrides: dict[str, object] = {}
    if args.base_url:
        overrides["base_url"] = args.base_url
    if args.browser:
        overrides["browser_name"] = args.browser
    if args.headed:
        overrides["headless"] = False
    if args.log_level:
        overrides["log_level"] = args.log_level
    return Settings(**overrides)


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = settings_from_args(args)

    log_path = configure_logging(settings)
    logger.debug("Writing run log to %s", log_path)
    if args.headed:
        logger.info("CLI override: running in headed mode")

    ok = asyncio.run(run(settings, args.query))
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
