"""Structured logging for the automation engine.

Every record is stamped with the service name and version. Output is a
colored console rendering when ``debug`` is set, one JSON object per line
otherwise.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from automator.core.config import Settings

# Transport libraries that log every request at INFO
TRANSPORT_LOGGERS = ("httpx", "httpcore", "aiosmtplib")


def service_context(settings: Settings) -> Processor:
    """Build a processor adding ``service`` and ``service_version`` to records.

    Values bound explicitly on a logger win.
    """
    static = {"service": settings.app_name, "service_version": settings.app_version}

    def add_service(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        for key, value in static.items():
            event_dict.setdefault(key, value)
        return event_dict

    return add_service


def _renderers(debug: bool) -> list[Processor]:
    if debug:
        return [structlog.dev.ConsoleRenderer(colors=True)]
    return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]


def setup_logging(settings: Settings) -> None:
    """Configure structlog and stdlib logging from settings.

    Args:
        settings: Application settings (``log_level``, ``debug``, name and version)
    """
    level = logging.getLevelNamesMapping()[settings.log_level]

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            service_context(settings),
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            *_renderers(settings.debug),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    # Webhook and SMTP traffic is already covered by dispatch outcomes
    transport_level = level if settings.debug else max(level, logging.WARNING)
    for name in TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)


def get_logger(name: str | None = None, **initial_values: Any) -> structlog.stdlib.BoundLogger:
    """Logger for a module, with optional bound context."""
    logger = structlog.get_logger(name)
    return logger.bind(**initial_values) if initial_values else logger
