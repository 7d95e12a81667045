"""
Centralized structlog configuration for the notifier service.

Every record is one JSON object on stdout carrying timestamp, level, logger
name, message and the bound service/environment context.
"""

from __future__ import annotations

import logging
import sys

import structlog

from .config import settings

LOGGER_NAME = "shl-notifier"


def _normalize_log_level(level: str | None, environment: str) -> int:
    if level:
        normalized = level.strip().upper()
    else:
        normalized = "INFO" if environment.lower() == "production" else "DEBUG"
    return logging.getLevelNamesMapping().get(normalized, logging.INFO)


def configure_logging() -> None:
    """Route structlog through stdlib logging and render JSON."""
    resolved_level = _normalize_log_level(settings.log_level, settings.environment)
    # structlog renders the full line, the stdlib handler only writes it out
    logging.basicConfig(level=resolved_level, format="%(message)s", stream=sys.stdout)
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.EventRenamer("message"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(resolved_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


configure_logging()

logger = structlog.get_logger(LOGGER_NAME).bind(
    service=LOGGER_NAME,
    environment=settings.environment,
)
