"""
Logging utilities.

Every rfpscope module logs through ``logging.getLogger(__name__)``, so all
records flow through the ``rfpscope`` package logger. The stderr handler is
attached there once; applications that configure logging themselves can
skip it entirely.
"""

import logging
import sys

PACKAGE_LOGGER = "rfpscope"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _package_logger() -> logging.Logger:
    logger = logging.getLogger(PACKAGE_LOGGER)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)

    return logger


def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
    """
    Get a logger inside the rfpscope hierarchy.

    Args:
        name: Logger name (usually __name__); names outside the package
            are nested under ``rfpscope`` so they share its handler

    Returns:
        Configured logger
    """
    _package_logger()

    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


def set_log_level(level: int | str) -> None:
    """
    Set the log level for every rfpscope logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Raises:
        ValueError: if ``level`` is not a known level name
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved

    _package_logger().setLevel(level)
