"""Logging setup for smoke runs."""
from __future__ import annotations

import logging
from pathlib import Path

from market_e2e.config.settings import Settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_FILENAME = "market_e2e.log"


def configure_logging(settings: Settings) -> Path:
    """Send records to stderr and ``<log_dir>/market_e2e.log``; returns the log file path."""
    settings.log_dir.mkdir(parents=True, exist_ok=True)
    log_path = settings.log_dir / LOG_FILENAME

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(log_path, encoding="utf-8"),
        ],
    )
    return log_path
