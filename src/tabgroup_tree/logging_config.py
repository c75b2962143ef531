"""Logging configuration for tabgroup-tree."""

import sys
from typing import Any

from loguru import logger


def configure_logging(*, verbose: bool = False, sink: Any = sys.stderr) -> int:
    """Route loguru output to ``sink`` at INFO, or DEBUG when verbose.

    Returns the sink id so callers can remove it again.
    """
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    return logger.add(sink, level=level, format="{level.icon} {message}")
