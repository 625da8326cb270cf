"""Structured logging configuration for application events."""

import json
import logging
import sys
from typing import Any

from app.core.config_file import get_settings

settings = get_settings()

HUMAN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class JSONFormatter(logging.Formatter):
    """Render log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, DATE_FORMAT),
            "logger": record.name,
            "level": record.levelname,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(level: str | None = None, log_format: str | None = None) -> logging.Logger:
    """
    Configure the application logger.

    Args:
        level: Log level name (defaults to settings.LOG_LEVEL).
        log_format: "human" or "json" (defaults to settings.LOG_FORMAT).

    Returns:
        The configured "app" logger.
    """
    level_name = (level or settings.LOG_LEVEL).upper()
    fmt = log_format or settings.LOG_FORMAT

    app_logger = logging.getLogger("app")
    app_logger.setLevel(getattr(logging, level_name, logging.INFO))

    # Add handler only once, even if called repeatedly
    if not app_logger.handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        app_logger.addHandler(console_handler)

    for handler in app_logger.handlers:
        if fmt == "json":
            handler.setFormatter(JSONFormatter())
        else:
            handler.setFormatter(logging.Formatter(HUMAN_FORMAT, datefmt=DATE_FORMAT))

    return app_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the application namespace."""
    return logging.getLogger(name)


app_logger = setup_logging()
