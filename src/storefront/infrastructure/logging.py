"""Logging configuration.

Everything goes through the standard library root logger on stderr, so
command output on stdout stays machine-readable.
"""

from __future__ import annotations

import logging
import sys

import structlog

from storefront.infrastructure.settings import Settings

_LEVELS_BY_ENVIRONMENT = {
    "production": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}


def get_log_level(settings: Settings) -> str:
    """Get log level based on environment, unless set explicitly."""
    if settings.log_level:
        return settings.log_level.upper()
    return _LEVELS_BY_ENVIRONMENT.get(settings.environment, "INFO")


def setup_stdlib_logging(settings: Settings) -> None:
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=get_log_level(settings),
        force=True,
    )


def setup_structlog(settings: Settings) -> None:
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.contextvars.merge_contextvars,
    ]

    if settings.is_production:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def configure_logging(settings: Settings) -> None:
    """Configure all logging for the application."""
    setup_stdlib_logging(settings)
    setup_structlog(settings)
