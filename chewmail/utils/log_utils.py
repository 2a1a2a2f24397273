"""Logging setup for the command line."""

import logging
import sys
from typing import Optional, TextIO

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

# verbosity tier -> logging level
VERBOSITY_LEVELS = {
    0: logging.WARNING,
    1: logging.INFO,
    2: logging.DEBUG,
    3: TRACE,
}

LOG_FORMAT = "chewmail: %(message)s"


def level_for_verbosity(verbosity: int) -> int:
    """
    Map a -v count to a logging level.

    Args:
        verbosity: Number of -v flags given

    Returns:
        Logging level; counts above 3 behave like 3
    """
    if verbosity <= 0:
        return VERBOSITY_LEVELS[0]
    return VERBOSITY_LEVELS[min(verbosity, 3)]


def configure_logging(verbosity: int = 0, stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Configure the package logger for a command line run.

    Args:
        verbosity: Number of -v flags given
        stream: Output stream (default: stderr)

    Returns:
        The configured "chewmail" logger
    """
    logger = logging.getLogger("chewmail")
    logger.setLevel(level_for_verbosity(verbosity))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False

    return logger
