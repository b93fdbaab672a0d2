"""Logging configuration for the application.

Modules log through ``logging.getLogger(__name__)`` and attach context with
``extra={...}``. The JSON formatter renders those extra fields next to the
message, so ``logger.info("Application created", extra={"group_id": 7})``
ends up as a single structured line.
"""

import json
import logging
import sys
from datetime import datetime, timezone

# attributes every LogRecord has; anything else came in through ``extra``
_RESERVED = set(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {"message", "asctime"}


def _extra_fields(record: logging.LogRecord) -> dict:
    return {k: v for k, v in record.__dict__.items() if k not in _RESERVED}


class JSONFormatter(logging.Formatter):
    """Structured one-line JSON output."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_data.update(_extra_fields(record))

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """Human-readable output for local development."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        line = f"[{timestamp}] {record.levelname:8s} {record.name}: {record.getMessage()}"

        fields = _extra_fields(record)
        if fields:
            line += " " + " ".join(f"{k}={v}" for k, v in fields.items())

        if record.exc_info:
            line += f"\n{self.formatException(record.exc_info)}"

        return line


def setup_logging(level: str = "INFO", log_format: str = "json", name: str = "studyspace") -> logging.Logger:
    """
    Configure the package logger.

    Args:
        level: Log level name (DEBUG, INFO, ...)
        log_format: ``json`` or ``text``
        name: Root logger name of the package

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    if log_format.lower() == "text":
        handler.setFormatter(TextFormatter())
    else:
        handler.setFormatter(JSONFormatter())

    logger.addHandler(handler)
    logger.propagate = False

    return logger
