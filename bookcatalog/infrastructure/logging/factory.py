"""Logger factory with lazy, settings-driven configuration.

``get_logger()`` is the only entry point application code needs: the first
call configures the root logger from settings, later calls return plain
``logging`` loggers (or adapters when extra context is given).
"""

import inspect
import logging
from threading import Lock
from typing import Optional, Union

from ..config.settings import get_settings
from .config import get_configured_logger, setup_logging_configuration

_logging_configured = False
_configuration_lock = Lock()


def get_logger(name: Optional[str] = None, **extra_context) -> Union[logging.Logger, logging.LoggerAdapter]:
    """Get a configured logger.

    Args:
        name: Logger name. If None, the calling module's name is used.
        **extra_context: Context included in every record from this logger.

    Example:
        ```python
        logger = get_logger(__name__)
        logger.info("Book created", extra={"book_id": book.id})
        ```
    """
    _ensure_logging_configured()

    if name is None:
        name = _detect_calling_module()

    base_logger = get_configured_logger(name)

    if extra_context:
        return logging.LoggerAdapter(base_logger, extra_context)
    return base_logger


def configure_logging() -> None:
    """Configure logging now instead of on first use."""
    global _logging_configured

    with _configuration_lock:
        if _logging_configured:
            return
        setup_logging_configuration()
        _logging_configured = True

        settings = get_settings()
        logging.getLogger(__name__).info(
            f"Logging configured for {settings.ENVIRONMENT.value} environment",
            extra={
                "log_level": settings.LOG_LEVEL,
                "log_format": settings.LOG_FORMAT,
                "console_enabled": settings.LOG_CONSOLE_ENABLED,
                "file_enabled": settings.LOG_FILE_ENABLED,
            },
        )


def mark_logging_configured() -> None:
    """Stop ``get_logger`` from reconfiguring logging (tests install their own setup)."""
    global _logging_configured
    _logging_configured = True


def _ensure_logging_configured() -> None:
    if not _logging_configured:
        configure_logging()


def _detect_calling_module() -> str:
    """Return the ``__name__`` of the module that called ``get_logger``."""
    frame = inspect.currentframe()
    try:
        for _ in range(2):
            if frame is None:
                break
            frame = frame.f_back

        if frame is None:
            return "unknown"
        return str(frame.f_globals.get("__name__", "unknown"))
    finally:
        del frame
