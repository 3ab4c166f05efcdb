"""Logging configuration for search-dal.

Modules log through `logging.getLogger(__name__)`; this only attaches a
console handler to the package logger for hosts that don't configure
logging themselves.
"""

import logging
import sys

LOGGER_NAME = "search_dal"


def setup_logging(level: int | str = logging.INFO) -> logging.Logger:
    """Configure the `search_dal` logger with a single console handler.

    Repeated calls only update the level.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return logger
