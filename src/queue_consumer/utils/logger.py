"""
Module: logger.py
Description: Structured logging configuration for the queue consumer.

Configures structlog for JSON output optimized for CloudWatch Logs.
Every module logs through get_logger() so records share the same
timestamp, level and context fields.

Key Components:
- JSON output for CloudWatch compatibility
- Timestamp and log level processors
- configure_logging() to apply the configured log level
- get_logger() helper function

Dependencies: structlog, logging, datetime
Author: Queue Consumer Team
"""

import logging

import structlog
from datetime import datetime, timezone


def _add_timestamp(logger, method_name, event_dict):
    """
    Add ISO 8601 timestamp to log entries.

    Args:
        logger: Logger instance
        method_name: Log method name (info, error, etc.)
        event_dict: Current log event dictionary

    Returns:
        Updated event dictionary with timestamp
    """
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _add_log_level(logger, method_name, event_dict):
    """Add log level to event dictionary."""
    event_dict["level"] = method_name.upper()
    return event_dict


def configure_logging(log_level: str = "INFO") -> None:
    """
    Configure structlog for JSON output at the given level.

    Records below log_level are dropped before any processor runs.

    Args:
        log_level: Standard logging level name (DEBUG, INFO, ...)

    Raises:
        ValueError: If log_level is not a known level name
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level}")

    structlog.configure(
        processors=[
            _add_timestamp,
            _add_log_level,
            structlog.processors.format_exc_info,
            # Render as JSON for CloudWatch compatibility
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.WriteLoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        # Module loggers rebind on every call so a later configure_logging() applies
        cache_logger_on_first_use=False,
    )


configure_logging()


def get_logger(name: str) -> structlog.typing.FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.error("Delete failed", receipt_handle="AQEB...", error_code="InternalError")
        {"receipt_handle": "AQEB...", "error_code": "InternalError", "event": "Delete failed", "timestamp": "2024-01-15T10:30:00+00:00", "level": "ERROR"}
    """
    return structlog.get_logger(name)
