"""Structured logging setup.

Call ``configure_logging`` once at application start, then log through
``structlog.get_logger(__name__)`` with an event name and key/value context::

    log = structlog.get_logger(__name__)
    log.info("ticket_created", ticket_id=12, queue_id=3)

Production renders one JSON object per line; every other environment gets
the colored console renderer.
"""

import logging

import structlog
from structlog.typing import Processor


def _resolve_level(level_name: str) -> int:
    return getattr(logging, level_name.upper(), logging.INFO)


def configure_logging(environment: str = "development", log_level: str = "INFO") -> None:
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if environment.lower() == "production":
        final_processor: Processor = structlog.processors.JSONRenderer()
    else:
        final_processor = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[*shared_processors, final_processor],
        wrapper_class=structlog.make_filtering_bound_logger(_resolve_level(log_level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
