"""Observability infrastructure for structured logging.

Usage:
    from lunchvote.infrastructure.observability import (
        ballot_log_context,
        configure_structlog,
    )

    # At startup
    configure_structlog(environment="production")

    # While driving one ballot
    with ballot_log_context(engine.ballot_id):
        ...
"""

from lunchvote.infrastructure.observability.logging import (
    add_deployment_labels,
    ballot_log_context,
    configure_structlog,
)

__all__: list[str] = [
    "add_deployment_labels",
    "ballot_log_context",
    "configure_structlog",
]
