"""
Logging for the decoding package.

Every module logs through a child of the "decoding" logger. Importing the
package installs no handlers, so a host application keeps control of its
own output. The decode-response command calls setup_logging() before it
reads any input.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

ROOT_LOGGER = "decoding"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _attach(logger: logging.Logger, handler: logging.Handler, level: int, formatter: logging.Formatter) -> None:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Send decoder diagnostics to a console stream and, optionally, a file.

    Calling it again replaces the handlers from the previous call.

    Args:
        level: Threshold for the "decoding" logger and its handlers
        log_file: Also append records to this file (UTF-8)
        format_string: Record layout, DEFAULT_FORMAT when omitted
        stream: Console target; stderr by default, since stdout carries
            the decoded record

    Returns:
        The "decoding" logger
    """
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT, datefmt=DATE_FORMAT)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()

    _attach(logger, logging.StreamHandler(stream or sys.stderr), level, formatter)
    if log_file:
        _attach(logger, logging.FileHandler(log_file, encoding="utf-8"), level, formatter)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for `name`, placed under "decoding" unless it already is."""
    if name == ROOT_LOGGER or name.startswith(f"{ROOT_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
