"""Logging formatters for the console, log files and log aggregation.

Available Formatters:
- SimpleFormatter: ``[LEVEL] logger: message``
- DetailedFormatter: timestamped human-readable lines for development
- StructuredFormatter: ``key=value`` pairs, readable and grep-able
- JSONFormatter: one JSON object per record for production pipelines

Structured and JSON output include every ``extra=`` attribute passed to the
log call (for example ``book_id`` or ``correlation_id``).
"""

import json
import logging
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Type

# Attributes every LogRecord carries; anything else came from ``extra=``.
RESERVED_RECORD_ATTRIBUTES = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "message",
        "exc_info",
        "exc_text",
        "stack_info",
    }
)


def record_context(record: logging.LogRecord) -> Dict[str, Any]:
    """Return the user-supplied context attached to a log record."""
    return {key: value for key, value in record.__dict__.items() if key not in RESERVED_RECORD_ATTRIBUTES}


class SimpleFormatter(logging.Formatter):
    """Basic console output.

    Example: [INFO] bookcatalog.modules.book.services: Book created
    """

    def __init__(self):
        super().__init__(fmt="[%(levelname)s] %(name)s: %(message)s", datefmt="%H:%M:%S")


class DetailedFormatter(logging.Formatter):
    """Timestamped output for development consoles."""

    def __init__(self):
        super().__init__(fmt="%(asctime)s [%(levelname)8s] %(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S")


class StructuredFormatter(logging.Formatter):
    """Key-value formatter.

    Format: timestamp=... level=LEVEL module=name message="text" key1=value1
    """

    def format(self, record: logging.LogRecord) -> str:
        parts = [
            f"timestamp={datetime.now(timezone.utc).isoformat()}",
            f"level={record.levelname}",
            f"module={record.name}",
            f'message="{record.getMessage()}"',
        ]

        for key, value in record_context(record).items():
            if isinstance(value, (int, float, bool)):
                parts.append(f"{key}={value}")
            else:
                parts.append(f'{key}="{value}"')

        if record.exc_info:
            exc_text = self.formatException(record.exc_info).replace("\n", "\\n")
            parts.append(f'exception="{exc_text}"')

        return " ".join(parts)


class JSONFormatter(logging.Formatter):
    """Machine-readable JSON lines for production."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.name,
            "message": record.getMessage(),
            "filename": record.filename,
            "function": record.funcName,
            "line_number": record.lineno,
            "process_id": record.process,
        }

        for key, value in record_context(record).items():
            try:
                json.dumps(value)
                log_data[key] = value
            except (TypeError, ValueError):
                log_data[key] = str(value)

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": traceback.format_exception(*record.exc_info),
            }

        return json.dumps(log_data, ensure_ascii=False)


FORMATTERS: Dict[str, Type[logging.Formatter]] = {
    "simple": SimpleFormatter,
    "detailed": DetailedFormatter,
    "structured": StructuredFormatter,
    "json": JSONFormatter,
}


def get_formatter(format_type: str) -> logging.Formatter:
    """Get a formatter instance by name.

    Args:
        format_type: One of "simple", "detailed", "structured", "json"

    Returns:
        Configured formatter instance

    Raises:
        ValueError: If format_type is not recognized
    """
    formatter_class = FORMATTERS.get(format_type.lower())
    if formatter_class is None:
        raise ValueError(f"Unknown format type: {format_type}. Available: {', '.join(FORMATTERS.keys())}")

    return formatter_class()
