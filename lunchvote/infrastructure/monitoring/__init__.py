"""Infrastructure monitoring components.

Prometheus metrics collection for ballot engine activity.
"""

from lunchvote.infrastructure.monitoring.ballot_metrics import (
    VOTE_REJECTION_REASONS,
    BallotMetricsCollector,
    get_ballot_metrics_collector,
    reset_ballot_metrics_collector,
)

__all__ = [
    "VOTE_REJECTION_REASONS",
    "BallotMetricsCollector",
    "get_ballot_metrics_collector",
    "reset_ballot_metrics_collector",
]
