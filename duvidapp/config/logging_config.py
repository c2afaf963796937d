"""Logging configuration helpers for DuvidApp."""

import logging
from logging import Logger
from typing import Optional, Union

from duvidapp.config.settings import settings


def configure_logging(level: Optional[Union[int, str]] = None) -> Logger:
    """Configure basic logging for the application and return the package logger."""
    logging.basicConfig(
        level=level if level is not None else settings.log_level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    # httpx logs every request at INFO, ours already do at DEBUG
    logging.getLogger("httpx").setLevel(logging.WARNING)
    return logging.getLogger("duvidapp")
