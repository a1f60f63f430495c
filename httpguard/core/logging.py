"""Structured logging configuration for httpguard.

Uses structlog for JSON-formatted logging with context management.
"""

import logging

import structlog

from httpguard.config import Config


def configure_logging(level: str = None):
    """Configure structured logging with JSON output.

    Args:
        level: Log level name. Defaults to HTTPGUARD_LOG_LEVEL (INFO).
    """
    level_name = (level or Config.log_level()).upper()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level_name, logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return structlog.get_logger()


# Global logger instance
logger = configure_logging()


def get_logger():
    """Get the configured logger instance."""
    return logger
