"""Logging configuration module."""

from __future__ import annotations

import logging

from closet.config.settings import get_settings


def configure_logging() -> None:
    """Configure the root logger from settings."""

    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    # httpx logs every request at INFO; keep it quiet unless debugging.
    if settings.log_level.upper() != "DEBUG":
        logging.getLogger("httpx").setLevel(logging.WARNING)
