"""Structlog configuration — JSON in production, pretty console in development."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

SERVICE_NAME = "search-quality"

# Events emitted once per scored or classified record.
PER_RESULT_EVENTS: tuple[str, ...] = ("score.", "domain.detected")


def add_service_name(
    logger: Any, method_name: str, event_dict: structlog.types.EventDict  # noqa: ANN401
) -> structlog.types.EventDict:
    """Tag every event with the service name for log shipping."""
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def drop_per_result_events(
    logger: Any, method_name: str, event_dict: structlog.types.EventDict  # noqa: ANN401
) -> structlog.types.EventDict:
    """Drop per-result events; batch-level events such as ``filter.done`` pass."""
    event = event_dict.get("event")
    if isinstance(event, str) and event.startswith(PER_RESULT_EVENTS):
        raise structlog.DropEvent
    return event_dict


def configure_logging(environment: str, log_level: str = "INFO") -> None:
    """Configure structlog for the given environment.

    Production emits newline-delimited JSON and drops the per-result
    scoring events, which would otherwise log once per record in every
    batch. Development renders everything to the console.

    Args:
        environment: ``"production"`` or ``"development"`` (default).
        log_level:   Standard Python log-level name, e.g. ``"INFO"``.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    production = environment == "production"

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        add_service_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    chain = list(shared_processors)
    if production:
        chain.insert(0, drop_per_result_events)
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=[*chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=shared_processors)
    )

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(level)

    if production:
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
