"""Logging setup driven by AppSettings.log_level."""

from __future__ import annotations

import logging

from scrubline.core.config import AppSettings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings: AppSettings | None = None) -> int:
    """Configure the root logger and return the level applied."""
    if settings is None:
        settings = AppSettings()
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
    # botocore is chatty at DEBUG
    logging.getLogger("botocore").setLevel(max(level, logging.INFO))
    return level
