# Requires Python 3.12+
"""Logging configuration for fixed-rate amortization.

The library only creates module loggers. Nothing is configured on import;
applications call setup_logging() to attach a handler.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

__version__ = "0.1.0"

PACKAGE_LOGGER = "fixed_rate_amortization"


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
) -> logging.Logger:
    """
    Attach a console handler to the package logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Defaults to
            the configured AMORTIZATION_LOG_LEVEL.
        format_type: "standard" or "json". Defaults to the configured
            AMORTIZATION_LOG_FORMAT.

    Returns:
        The package logger
    """
    from fixed_rate_amortization.config import get_config

    config = get_config()
    level = level or config.log_level
    format_type = format_type or config.log_format
    log_level = getattr(logging, level.upper(), logging.WARNING)

    if format_type == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(log_level)

    # Replace handlers from an earlier call
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)
    package_logger.propagate = False
    return package_logger


class JsonFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def get_logger(name: str) -> logging.Logger:
    """Module logger under the package namespace (pass __name__)."""
    return logging.getLogger(name)
