"""Environment-aware logging configuration.

- Development/local: detailed coloured console, DEBUG when verbose
- Staging: structured console, optional file
- Production: JSON console at WARNING, optional file, noisy libraries quieted
- Testing: a null handler, errors only

Request correlation ids live in a context variable set by the request
middleware; ``CorrelationIdFilter`` copies them onto every record so the
structured and JSON formatters emit them.
"""

import contextvars
import logging
import uuid
from typing import List

from ..config.settings import EnvironmentOption, Settings, get_settings
from .handlers import create_console_handler, create_file_handler, create_null_handler

correlation_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("correlation_id")


def setup_logging_configuration() -> None:
    """Configure the root logger from application settings.

    Called once, the first time a logger is requested.
    """
    settings = get_settings()

    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    if settings.ENVIRONMENT == EnvironmentOption.STAGING:
        handlers = _staging_handlers(settings)
    elif settings.ENVIRONMENT == EnvironmentOption.PRODUCTION:
        handlers = _production_handlers(settings)
    else:
        handlers = _development_handlers(settings)

    for handler in handlers:
        if settings.LOG_CORRELATION_ID:
            handler.addFilter(CorrelationIdFilter())
        root_logger.addHandler(handler)

    root_logger.setLevel(settings.LOG_LEVEL_INT)

    if settings.ENVIRONMENT == EnvironmentOption.PRODUCTION:
        _configure_noisy_loggers()


def _file_handler(settings: Settings) -> logging.Handler:
    return create_file_handler(
        filepath=settings.LOG_FILE_PATH,
        format_type="structured",
        level=logging.DEBUG,
        max_bytes=settings.LOG_FILE_MAX_SIZE,
        backup_count=settings.LOG_FILE_BACKUP_COUNT,
    )


def _development_handlers(settings: Settings) -> List[logging.Handler]:
    handlers = []
    if settings.LOG_CONSOLE_ENABLED:
        console_level = logging.DEBUG if settings.LOG_DEVELOPMENT_VERBOSE else settings.LOG_LEVEL_INT
        handlers.append(create_console_handler(format_type="detailed", level=console_level, use_colors=True))
    if settings.LOG_FILE_ENABLED:
        handlers.append(_file_handler(settings))
    return handlers


def _staging_handlers(settings: Settings) -> List[logging.Handler]:
    handlers = []
    if settings.LOG_CONSOLE_ENABLED:
        handlers.append(create_console_handler(format_type="structured", level=settings.LOG_LEVEL_INT, use_colors=False))
    if settings.LOG_FILE_ENABLED:
        handlers.append(_file_handler(settings))
    return handlers


def _production_handlers(settings: Settings) -> List[logging.Handler]:
    handlers = []
    if settings.LOG_CONSOLE_ENABLED:
        console_level = logging.WARNING if settings.LOG_PRODUCTION_OPTIMIZE else settings.LOG_LEVEL_INT
        handlers.append(create_console_handler(format_type="json", level=console_level, use_colors=False))
    if settings.LOG_FILE_ENABLED:
        handlers.append(_file_handler(settings))
    return handlers


def _configure_noisy_loggers() -> None:
    """Raise the threshold of chatty third-party loggers."""
    noisy_loggers = {
        "uvicorn.access": logging.WARNING,
        "httpx": logging.WARNING,
        "httpcore": logging.WARNING,
        "sqlalchemy.engine": logging.WARNING,
        "sqlalchemy.pool": logging.WARNING,
        "asyncpg": logging.WARNING,
        "aiosqlite": logging.WARNING,
    }

    for logger_name, level in noisy_loggers.items():
        logging.getLogger(logger_name).setLevel(level)


def configure_testing_logging() -> None:
    """Silence logging for test runs, keeping only errors."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(create_null_handler())
    root_logger.setLevel(logging.ERROR)

    for logger_name in ("sqlalchemy.engine", "aiosqlite", "asyncpg", "httpx"):
        logging.getLogger(logger_name).setLevel(logging.ERROR)


def get_configured_logger(name: str) -> logging.Logger:
    """Get a logger that inherits the configured root handlers."""
    return logging.getLogger(name)


class CorrelationIdFilter(logging.Filter):
    """Attach the current request's correlation id to each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "correlation_id", None):
            record.correlation_id = get_correlation_id() or "no-correlation"
        return True


def set_correlation_id(correlation_id: str) -> contextvars.Token:
    """Set the correlation id for the current context.

    Returns:
        Token that ``reset_correlation_id`` accepts to restore the previous value.
    """
    return correlation_id_var.set(correlation_id)


def reset_correlation_id(token: contextvars.Token) -> None:
    """Restore the correlation id that was active before ``set_correlation_id``."""
    correlation_id_var.reset(token)


def get_correlation_id() -> str | None:
    """Get the current correlation id, or None outside a request."""
    try:
        return correlation_id_var.get()
    except LookupError:
        return None


def generate_correlation_id() -> str:
    """Generate a new UUID-based correlation id."""
    return str(uuid.uuid4())
