"""Structured logging configuration for diagnostics."""

import logging
import sys

import structlog

_logging_configured = False


def configure_logging_once(level: str = "WARNING") -> None:
    """Route structlog diagnostics to stderr, filtered at ``level``."""
    global _logging_configured
    if _logging_configured:
        return

    log_level = getattr(logging, level.upper(), logging.WARNING)

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )

    logging.basicConfig(level=log_level, format="%(message)s", stream=sys.stderr)

    _logging_configured = True
