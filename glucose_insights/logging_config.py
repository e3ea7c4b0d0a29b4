"""Story 1.2: Structured Logging Configuration.

Provides JSON-formatted logging with a per-pass correlation ID so every
log line emitted during one analysis or alert pass can be grouped.
"""

import json
import logging
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

from glucose_insights.config import Settings

# Context variable for correlation ID - set for the duration of a pass
correlation_id_ctx: ContextVar[str | None] = ContextVar("correlation_id", default=None)

DEFAULT_SERVICE_NAME = "glucose-insights"


class JsonFormatter(logging.Formatter):
    """Custom formatter that outputs logs as JSON.

    Format includes:
    - timestamp: ISO 8601 format with timezone
    - level: Log level (INFO, ERROR, etc.)
    - service: Service name (glucose-insights)
    - message: Log message
    - correlation_id: Pass correlation ID for tracing
    - logger: Logger name
    - Additional fields from extra parameter
    """

    def __init__(self, service_name: str = DEFAULT_SERVICE_NAME):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as JSON."""
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "service": self.service_name,
            "message": record.getMessage(),
            "logger": record.name,
        }

        correlation_id = correlation_id_ctx.get()
        if correlation_id:
            log_data["correlation_id"] = correlation_id

        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Add location info for errors
        if record.levelno >= logging.ERROR:
            log_data["location"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable text formatter for development.

    Format: timestamp - service - level - correlation_id - message [key=value ...]
    """

    def __init__(self, service_name: str = DEFAULT_SERVICE_NAME):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as readable text."""
        timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")
        correlation_id = correlation_id_ctx.get() or "-"

        base_msg = (
            f"{timestamp} - {self.service_name} - {record.levelname} - "
            f"[{correlation_id}] - {record.getMessage()}"
        )

        extra_fields = getattr(record, "extra_fields", None)
        if extra_fields:
            pairs = " ".join(f"{key}={value}" for key, value in extra_fields.items())
            base_msg += f" {pairs}"

        if record.exc_info:
            base_msg += f"\n{self.formatException(record.exc_info)}"

        return base_msg


def setup_logging(
    log_format: str = "json",
    log_level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
) -> None:
    """Configure structured logging for the engine's host process.

    Args:
        log_format: 'json' for structured logging, 'text' for human-readable
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        service_name: Service name to include in logs
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    if log_format.lower() == "json":
        formatter = JsonFormatter(service_name=service_name)
    else:
        formatter = TextFormatter(service_name=service_name)

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)


def configure_logging(settings: Settings) -> None:
    """Configure logging from the engine settings."""
    setup_logging(
        log_format=settings.log_format,
        log_level=settings.log_level,
        service_name=settings.service_name,
    )


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """Bind a correlation ID for the duration of one pass.

    An already-bound ID is reused so nested passes (an alert pass started
    from inside an analysis pass, for example) keep a single ID.

    Args:
        correlation_id: Explicit ID to bind. Generated when omitted.

    Yields:
        The correlation ID in effect inside the block.
    """
    current = correlation_id_ctx.get()
    if current is not None and correlation_id is None:
        yield current
        return

    value = correlation_id or uuid.uuid4().hex[:12]
    token = correlation_id_ctx.set(value)
    try:
        yield value
    finally:
        correlation_id_ctx.reset(token)


class StructuredLogger:
    """Logger wrapper that supports structured extra fields."""

    def __init__(self, name: str):
        self._logger = logging.getLogger(name)

    def _log(self, level: int, msg: str, extra_fields: dict[str, Any] | None = None):
        """Log with optional extra fields."""
        record_extra = {"extra_fields": extra_fields} if extra_fields else {}
        self._logger.log(level, msg, extra=record_extra)

    def debug(self, msg: str, **extra_fields: Any) -> None:
        """Log debug message with optional extra fields."""
        self._log(logging.DEBUG, msg, extra_fields if extra_fields else None)

    def info(self, msg: str, **extra_fields: Any) -> None:
        """Log info message with optional extra fields."""
        self._log(logging.INFO, msg, extra_fields if extra_fields else None)

    def warning(self, msg: str, **extra_fields: Any) -> None:
        """Log warning message with optional extra fields."""
        self._log(logging.WARNING, msg, extra_fields if extra_fields else None)

    def error(self, msg: str, **extra_fields: Any) -> None:
        """Log error message with optional extra fields."""
        self._log(logging.ERROR, msg, extra_fields if extra_fields else None)

    def exception(self, msg: str, **extra_fields: Any) -> None:
        """Log exception with traceback and optional extra fields."""
        record_extra = {"extra_fields": extra_fields} if extra_fields else {}
        self._logger.exception(msg, extra=record_extra)


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        StructuredLogger instance
    """
    return StructuredLogger(name)
