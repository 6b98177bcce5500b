"""Structured logging configuration with structlog.

This module configures structlog for processes hosting ballot engines and
provides a ballot-scoped logging context, so that every line emitted while a
ballot is being driven (by the engine or by the caller driving it) carries
the same ``ballot_id``.

Log Entry Format (production):
    {
        "timestamp": "2026-01-01T00:00:00.000000Z",
        "level": "info",
        "event": "vote_accepted",
        "ballot_id": "uuid",
        "deployment": "lunchvote",
        "environment": "production",
        "service": "BallotEngine",
        "component": "ballot",
        ...additional context
    }

``deployment``/``environment`` come from SERVICE_NAME/ENVIRONMENT, the same
variables that label the Prometheus metrics.

Usage:
    from lunchvote.infrastructure.observability import (
        ballot_log_context,
        configure_structlog,
    )

    configure_structlog(environment="production")

    with ballot_log_context(engine.ballot_id, scenario="lunch.json"):
        engine.vote("bob", 12, 2)
        log.info("step_done")  # carries ballot_id and scenario
"""

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

# Environment variable for log level (default: INFO)
LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"


def _get_log_level() -> int:
    """Get the configured log level from environment.

    Returns:
        The logging level integer (e.g., logging.INFO).
    """
    level_name = os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper()
    return getattr(logging, level_name, logging.INFO)


def add_deployment_labels(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Structlog processor adding the deployment and environment labels.

    Values already present in the event are kept.
    """
    event_dict.setdefault("deployment", os.environ.get("SERVICE_NAME", "lunchvote"))
    event_dict.setdefault("environment", os.environ.get("ENVIRONMENT", "development"))
    return event_dict


@contextmanager
def ballot_log_context(ballot_id: str, **context: Any) -> Iterator[None]:
    """Bind a ballot context for the duration of a ``with`` block.

    Keys bound before entering are restored on exit.
    """
    tokens = structlog.contextvars.bind_contextvars(ballot_id=ballot_id, **context)
    try:
        yield
    finally:
        structlog.contextvars.reset_contextvars(**tokens)


def configure_structlog(environment: str = "production") -> None:
    """Configure structlog for the process.

    Should be called once at startup, before any engine is created.

    Args:
        environment: 'production' for JSON output, 'development' for console.
                    Defaults to 'production'.
    """
    shared_processors: list[Processor] = [
        # Ballot context bound via ballot_log_context
        structlog.contextvars.merge_contextvars,
        add_deployment_labels,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if environment == "production":
        # JSON output for log aggregation; tracebacks rendered as strings
        renderers: list[Processor] = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderers = [structlog.dev.ConsoleRenderer(colors=True)]

    structlog.configure(
        processors=shared_processors + renderers,
        wrapper_class=structlog.make_filtering_bound_logger(_get_log_level()),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
