"""Logging configuration for the srclens command line."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAMES = ("cli", "codebuffer", "docs", "locate", "parse", "scan", "settings")


def setup_logging(verbosity: int = 0) -> None:
    """Send srclens log records to stderr through Rich.

    Args:
        verbosity: 0=WARNING, 1=INFO, 2 or more=DEBUG.
    """
    level_map = {0: logging.WARNING, 1: logging.INFO}
    level = level_map.get(verbosity, logging.DEBUG)

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=verbosity >= 2,
        show_path=verbosity >= 2,
        rich_tracebacks=True,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))

    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        logger.handlers.clear()
        logger.addHandler(handler)
        logger.propagate = False
