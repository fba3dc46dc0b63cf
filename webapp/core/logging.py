"""
Logging configuration.

Provides the application-wide logging setup used by the entry point.
"""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str | int = logging.INFO) -> None:
    """
    Configure root logging for the adapter and its host application.

    Args:
        level: Log level name (e.g. "DEBUG") or numeric level
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler()],
    )
    logging.getLogger("webapp").setLevel(level)
