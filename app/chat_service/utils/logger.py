"""
Centralized logging utility.

Provides a consistent logger across the chat service. Context passed
through ``extra={...}`` is appended to the line as ``key=value`` pairs.
"""

import logging
import os
import sys
from typing import Optional

# Read log level from environment (default: INFO)
LOG_LEVEL = os.getenv("SAHAYAK_LOG_LEVEL", "INFO").upper()

LINE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_RECORD_FIELDS = set(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime", "taskName"}

_SECRET_FIELDS = {"api_key", "key", "geminiApiKey"}


class ContextFormatter(logging.Formatter):
    """Formatter that renders ``extra`` fields after the message."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)

        context = {
            name: value
            for name, value in record.__dict__.items()
            if name not in _RECORD_FIELDS and not name.startswith("_")
        }
        if not context:
            return line

        pairs = " ".join(
            f"{name}={'***' if name in _SECRET_FIELDS else value}"
            for name, value in sorted(context.items())
        )
        return f"{line} | {pairs}"


def configure_logger(
    logger: logging.Logger,
    level: str,
    fmt: str = LINE_FORMAT,
) -> logging.Logger:
    logger.setLevel(level)

    # NiceGUI re-imports page modules on reload; keep one handler
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ContextFormatter(fmt=fmt, datefmt=DATE_FORMAT))
    logger.addHandler(handler)

    logger.propagate = False

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Create or retrieve a configured logger instance.

    Args:
        name (Optional[str]): Logger name (usually __name__).

    Returns:
        logging.Logger: Configured logger instance.
    """
    return configure_logger(logging.getLogger(name), LOG_LEVEL)
