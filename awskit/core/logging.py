"""Structured logging configuration for awskit.

Uses structlog for JSON-formatted logging with context management. Log output
goes to stderr so command results on stdout stay machine-readable.
"""

import logging
import sys
from typing import Optional

import structlog

from awskit.config import config


def _stderr_logger(*args):
    # Looked up per logger so redirected streams (tests, CLI runners) are honoured
    return structlog.PrintLogger(file=sys.stderr)


def configure_logging(level: Optional[str] = None, fmt: Optional[str] = None):
    """Configure structured logging.

    Args:
        level: Log level name (defaults to AWSKIT_LOG_LEVEL or WARNING)
        fmt: Renderer name, "json" or "console" (defaults to AWSKIT_LOG_FORMAT)

    Returns:
        Configured structlog logger
    """
    level_name = (level or config.log_level()).upper()
    renderer = (
        structlog.dev.ConsoleRenderer(colors=False)
        if (fmt or config.log_format()) == "console"
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level_name, logging.WARNING)
        ),
        context_class=dict,
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )
    return structlog.get_logger()


# Global logger instance
logger = configure_logging()
