"""Structured logging configuration for graphcalc.

Log lines look like::

    2024-05-01T12:00:00.000000 [WARNING] graphcalc.pipeline: Plot aborted: ... | function_id=2 function_name=g(x)

Anything passed through ``extra=`` (the pipeline passes the function id
and name) is appended as sorted ``key=value`` pairs after a ``|``.
"""

import logging
import sys
from datetime import datetime
from typing import Optional

ROOT_LOGGER_NAME = "graphcalc"

# Attributes every LogRecord carries; anything else came in through ``extra``
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))) | {
    "message",
    "asctime",
    "taskName",
}


def record_context(record: logging.LogRecord) -> dict:
    """The ``extra`` fields attached to ``record``."""
    return {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS and not k.startswith("_")}


class StructuredFormatter(logging.Formatter):
    """Timestamp, level, logger and message, followed by any ``extra`` context."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).isoformat()
        line = f"{timestamp} [{record.levelname}] {record.name}: {record.getMessage()}"
        context = record_context(record)
        if context:
            line += " | " + " ".join(f"{key}={context[key]}" for key in sorted(context))
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(level: str = "WARNING", log_file: Optional[str] = None) -> logging.Logger:
    """Configure the ``graphcalc`` logger; calling it again replaces the handlers.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Also write to this file when given (stderr always gets output)
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    logger.handlers.clear()

    formatter = StructuredFormatter()
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger under the ``graphcalc`` root, e.g. ``get_logger("pipeline")``."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
