"""Runtime configuration for the market smoke tests.

Relies on pydantic-settings so that environment variables (prefixed with ``MARKET_E2E_``)
can override defaults, e.g. ``MARKET_E2E_BASE_URL=http://staging:3000``.
"""
from __future__ import annotations

import logging
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

SUPPORTED_BROWSERS: tuple[str, ...] = ("chromium", "firefox", "webkit")


class Settings(BaseSettings):
    """Captures runtime configuration for the market search smoke run."""

    base_url: str = Field(
        default="http://localhost:3000",
        description="Origin of the market web server under test",
    )
    market_path: str = Field(default="/market", description="Path of the market index page")
    search_query: str = Field(default="mouse 345", description="Text submitted through the search box")

    browser_name: str = Field(default="chromium", description="Playwright browser type to launch")
    headless: bool = True
    slow_mo_ms: int = Field(default=0, description="Slow-mo delay in milliseconds")
    viewport_width: int = 1280
    viewport_height: int = 720

    default_timeout_ms: int = Field(
        default=30000, description="Timeout applied to actions such as click, fill and press"
    )
    navigation_timeout_ms: int = Field(default=30000)
    expect_timeout_ms: int = Field(
        default=5000, description="Timeout applied to web-first assertions"
    )

    log_level: str = Field(default="INFO")
    log_dir: Path = Field(default=Path("data/logs"))
    artifacts_dir: Path = Field(
        default=Path("data/artifacts"), description="Where failure screenshots are written"
    )
    screenshot_on_failure: bool = True

    model_config = SettingsConfigDict(
        env_prefix="MARKET_E2E_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("log_dir", "artifacts_dir", mode="before")
    def _expand_dir(cls, value: str | Path) -> Path:  # noqa: D401
        if isinstance(value, Path):
            return value.expanduser()
        return Path(value).expanduser()

    @field_validator("base_url")
    def _strip_base_url(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("market_path")
    def _normalise_market_path(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith("/"):
            value = f"/{value}"
        return value

    @field_validator("browser_name")
    def _validate_browser(cls, value: str) -> str:
        lowered = value.strip().lower()
        if lowered not in SUPPORTED_BROWSERS:
            raise ValueError(
                f"browser_name must be one of {', '.join(SUPPORTED_BROWSERS)} (got '{value}')"
            )
        return lowered

    @field_validator("default_timeout_ms", "navigation_timeout_ms", "expect_timeout_ms")
    def _validate_timeout(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("timeouts must be positive")
        return value

    def market_url(self) -> str:
        return f"{self.base_url}{self.market_path}"

    def ensure_directories(self) -> None:
        """Create directories that must exist at runtime."""
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.artifacts_dir.mkdir(parents=True, exist_ok=True)

    def viewport(self) -> dict[str, int]:
        return {"width": self.viewport_width, "height": self.viewport_height}

    def launch_args(self) -> dict[str, object]:
        launch_args: dict[str, object] = {
            "headless": self.headless,
        }
        if self.slow_mo_ms:
            launch_args["slow_mo"] = self.slow_mo_ms
        return launch_args

    def context_options(self) -> dict[str, object]:
        return {
            "base_url": self.base_url,
            "viewport": self.viewport(),
        }
