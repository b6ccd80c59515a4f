"""Logging configuration using structlog."""

import logging
import sys

import structlog

from jobly.core.config import get_settings


def _select_renderer(log_record_format: str):
    if log_record_format == "console":
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def setup_logging() -> None:
    """Configure stdlib logging and structlog for the service."""
    settings = get_settings()
    level = getattr(logging, settings.app.log_level.value)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            _select_renderer(settings.observability.log_record_format),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
