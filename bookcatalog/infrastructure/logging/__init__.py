"""Centralized logging for the book catalog.

Usage:
    ```python
    from bookcatalog.infrastructure.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Book deleted", extra={"book_id": book_id})
    ```
"""

from .config import (
    configure_testing_logging,
    generate_correlation_id,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
    setup_logging_configuration,
)
from .factory import configure_logging, get_logger, mark_logging_configured

__all__ = [
    "configure_logging",
    "configure_testing_logging",
    "generate_correlation_id",
    "get_correlation_id",
    "get_logger",
    "mark_logging_configured",
    "reset_correlation_id",
    "set_correlation_id",
    "setup_logging_configuration",
]
