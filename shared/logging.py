"""
Logger factory for mailsend.

Provides:
- get_logger(): Get a configured logger instance
- log_with_context(): Bind request-scoped context to a logger
"""

from __future__ import annotations

import structlog
from structlog.stdlib import BoundLogger

from shared.logging_config import configure_structlog, setup_logging


def get_logger(name: str) -> BoundLogger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Configured structlog BoundLogger instance

    Example:
        >>> from shared.logging import get_logger
        >>> log = get_logger(__name__)
        >>> log.info("login_success", user_id="123", auth_method="password")
    """
    return structlog.get_logger(name)


def log_with_context(logger: BoundLogger, **context) -> BoundLogger:
    """
    Bind context to a logger for all subsequent log calls.

    Args:
        logger: The logger to bind context to
        **context: Key-value pairs to bind

    Returns:
        Logger with bound context
    """
    return logger.bind(**context)


__all__ = [
    "get_logger",
    "log_with_context",
    "configure_structlog",
    "setup_logging",
]
