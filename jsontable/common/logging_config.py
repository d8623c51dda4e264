"""
Structured JSON logging with read correlation IDs.

Provides logging for table reads with:
- JSON format for log aggregation
- Per-read correlation IDs
- Structured metadata
- Pass timing
"""

import logging
import json
import time
import uuid
from contextvars import ContextVar
from typing import Optional
from datetime import datetime, timezone

# Context variable for the current read ID (thread-safe)
read_id_ctx: ContextVar[Optional[str]] = ContextVar(
    "read_id", default=None)


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs logs in JSON format with standardized fields.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        read_id = read_id_ctx.get()
        if read_id:
            log_data["read_id"] = read_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Fields passed as extra={"extra_fields": {...}}
        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        return json.dumps(log_data, ensure_ascii=False, default=str)


class PerformanceTracker:
    """
    Context manager for tracking operation performance.

    Usage:
        with PerformanceTracker("schema_pass", logger, records=10):
            # ... perform operation
            pass
    """

    def __init__(
        self,
        operation: str,
        logger: logging.Logger,
        log_level: int = logging.DEBUG,
        **extra_fields,
    ):
        """
        Initialize performance tracker.

        Args:
            operation: Operation name
            logger: Logger instance
            log_level: Log level for completion message
            **extra_fields: Additional structured fields
        """
        self.operation = operation
        self.logger = logger
        self.log_level = log_level
        self.extra_fields = extra_fields
        self.start_time: Optional[float] = None
        self.duration_ms: Optional[float] = None

    def __enter__(self):
        """Start timing."""
        self.start_time = time.perf_counter()
        self.logger.log(
            logging.DEBUG,
            f"Starting operation: {self.operation}",
            extra={"extra_fields": {"operation": self.operation, **self.extra_fields}},
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Log completion with duration."""
        self.duration_ms = round((time.perf_counter() - self.start_time) * 1000, 2)
        extra = {
            "operation": self.operation,
            "duration_ms": self.duration_ms,
            **self.extra_fields,
        }

        if exc_type:
            extra["error"] = str(exc_val)
            extra["error_type"] = exc_type.__name__
            self.logger.error(
                f"Operation failed: {self.operation}",
                extra={"extra_fields": extra},
            )
        else:
            self.logger.log(
                self.log_level,
                f"Operation completed: {self.operation}",
                extra={"extra_fields": extra},
            )


def setup_logging(log_level: Optional[str] = None, json_format: Optional[bool] = None):
    """
    Configure logging for the jsontable package.

    Args:
        log_level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL);
            defaults to the configured level
        json_format: Use JSON formatting if True, standard format if False
    """
    from jsontable.config.settings import get_settings

    settings = get_settings()
    level = getattr(logging, (log_level or settings.log_level).upper())
    if json_format is None:
        json_format = settings.log_json

    package_logger = logging.getLogger("jsontable")
    package_logger.setLevel(level)

    # Remove existing handlers
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)

    if json_format:
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)


def set_read_id(read_id: Optional[str] = None) -> str:
    """
    Set read ID in context.

    Args:
        read_id: Read ID (generated if not provided)

    Returns:
        Read ID
    """
    if read_id is None:
        read_id = str(uuid.uuid4())
    read_id_ctx.set(read_id)
    return read_id


def get_read_id() -> Optional[str]:
    """Get current read ID from context."""
    return read_id_ctx.get()


def clear_read_id():
    """Clear read ID from context."""
    read_id_ctx.set(None)
