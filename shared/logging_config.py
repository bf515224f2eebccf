"""
Centralized logging configuration for mailsend.

This module sets up structured logging with:
- Settings-driven configuration (dev vs production)
- JSON formatting for production, pretty console for development
- Redaction of credentials, OTP codes and keys before anything is rendered
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import Optional

import structlog
from structlog.types import EventDict, Processor

from config import LoggingSettings

# Exact field names that are always redacted
REDACTED_FIELDS = {"authorization", "cookie", "plaintext"}

# Any field whose name contains one of these is redacted
REDACTED_SUBSTRINGS = ("password", "token", "secret", "key", "code", "otp")

# Identifiers and labels that match a substring above but carry no secret
SAFE_FIELDS = {"key_id", "key_preview", "otp_type", "status_code", "error_code"}

_RESERVED_FIELDS = ("level", "event", "timestamp", "logger")


def add_timestamp(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add ISO format timestamp to event dict."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def redact_sensitive_fields(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Redact sensitive fields from logs."""
    for key in list(event_dict.keys()):
        lowered = key.lower()
        if key in _RESERVED_FIELDS or lowered in SAFE_FIELDS:
            continue
        if lowered in REDACTED_FIELDS or any(
            sensitive in lowered for sensitive in REDACTED_SUBSTRINGS
        ):
            event_dict[key] = "***REDACTED***"
    return event_dict


def configure_structlog(log_format: str = "console") -> None:
    """
    Configure structlog with appropriate processors for the environment.

    Production: JSON formatting for easy parsing
    Development: Pretty console formatting with colors
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_timestamp,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        redact_sensitive_fields,
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            pad_event=15,
            sort_keys=False,
        )

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_stdlib_logging(log_level: str = "INFO") -> None:
    """Route stdlib logging to stdout and quieten third-party libraries."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    # Silence pymongo debug logs (connection pool, server monitoring, etc.)
    logging.getLogger("pymongo").setLevel(logging.WARNING)
    logging.getLogger("pymongo.connection").setLevel(logging.WARNING)
    logging.getLogger("pymongo.serverSelection").setLevel(logging.WARNING)
    logging.getLogger("pymongo.command").setLevel(logging.WARNING)
    logging.getLogger("pymongo.topology").setLevel(logging.WARNING)


def setup_logging(settings: Optional[LoggingSettings] = None) -> None:
    """
    Initialize logging system for the application.

    Called once from create_app() before anything logs.
    """
    if settings is None:
        settings = LoggingSettings()

    configure_stdlib_logging(settings.log_level)
    configure_structlog(settings.log_format)

    structlog.get_logger(__name__).info(
        "logging_initialized",
        log_level=settings.log_level,
        log_format=settings.log_format,
    )
