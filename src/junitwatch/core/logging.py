"""Logging helpers for junitwatch.

All modules obtain their logger through get_logger() so that a single
call to configure_logging() controls the whole package.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

ROOT_LOGGER_NAME = "junitwatch"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DEBUG_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(threadName)s]: %(message)s"

_HANDLER: Optional[logging.Handler] = None


def get_logger(name: str) -> logging.Logger:
    """Return a logger in the junitwatch namespace.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        Logger instance.
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    stream: Optional[TextIO] = None,
) -> None:
    """Configure the package logger.

    Level precedence: debug > verbose > quiet > default (WARNING).
    Calling this again replaces the previously installed handler.

    Args:
        debug: Enable DEBUG level output including thread names.
        verbose: Enable INFO level output.
        quiet: Only show errors.
        stream: Output stream (default: stderr).
    """
    global _HANDLER

    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    if _HANDLER is not None:
        logger.removeHandler(_HANDLER)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(DEBUG_LOG_FORMAT if debug else LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    _HANDLER = handler
