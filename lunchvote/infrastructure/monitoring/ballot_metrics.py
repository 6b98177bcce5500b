"""Ballot metrics for Prometheus exposition.

This module provides Prometheus counters for tracking vote acceptance,
rejection reasons, phase transitions and how ballots close.
"""

from __future__ import annotations

import os
import threading

from prometheus_client import CollectorRegistry, Counter, generate_latest

# Thread lock for singleton initialization
_metrics_lock = threading.Lock()

# Reasons a vote can be rejected without raising
VOTE_REJECTION_REASONS: tuple[str, ...] = (
    "not_participant",
    "unknown_nomination",
    "already_voted",
    "deadline_elapsed",
)


class BallotMetricsCollector:
    """Collects ballot engine metrics for Prometheus.

    This collector tracks:
    - Votes by outcome (accepted/rejected) and rejection reason
    - Phase transitions by target phase
    - Finalizations by trigger (QUORUM, DEADLINE)

    Attributes:
        ballot_votes_total: Counter for vote attempts.
        ballot_phase_transitions_total: Counter for phase transitions.
        ballot_finalizations_total: Counter for closed ballots.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize ballot metrics collector.

        Args:
            registry: Optional custom registry for testing isolation.
        """
        self._registry = registry or CollectorRegistry()
        self._environment = os.environ.get("ENVIRONMENT", "development")
        self._service_name = os.environ.get("SERVICE_NAME", "lunchvote")

        self.ballot_votes_total = Counter(
            name="ballot_votes_total",
            documentation="Vote attempts by outcome and rejection reason",
            labelnames=["outcome", "reason", "service", "environment"],
            registry=self._registry,
        )

        self.ballot_phase_transitions_total = Counter(
            name="ballot_phase_transitions_total",
            documentation="Ballot phase transitions by target phase",
            labelnames=["to_phase", "service", "environment"],
            registry=self._registry,
        )

        self.ballot_finalizations_total = Counter(
            name="ballot_finalizations_total",
            documentation="Closed ballots by finalization trigger",
            labelnames=["trigger", "service", "environment"],
            registry=self._registry,
        )

    @property
    def base_labels(self) -> dict[str, str]:
        """Labels attached to every sample (service, environment)."""
        return {"service": self._service_name, "environment": self._environment}

    def record_vote_accepted(self) -> None:
        """Record an accepted vote."""
        self.ballot_votes_total.labels(
            outcome="accepted",
            reason="",
            service=self._service_name,
            environment=self._environment,
        ).inc()

    def record_vote_rejected(self, reason: str) -> None:
        """Record a rejected vote.

        Args:
            reason: One of VOTE_REJECTION_REASONS.

        Raises:
            ValueError: If reason is not a known rejection reason.
        """
        if reason not in VOTE_REJECTION_REASONS:
            raise ValueError(
                f"Invalid reason '{reason}'. Must be one of {VOTE_REJECTION_REASONS}."
            )

        self.ballot_votes_total.labels(
            outcome="rejected",
            reason=reason,
            service=self._service_name,
            environment=self._environment,
        ).inc()

    def record_phase_transition(self, to_phase: str) -> None:
        """Record a transition into ``to_phase``."""
        self.ballot_phase_transitions_total.labels(
            to_phase=to_phase,
            service=self._service_name,
            environment=self._environment,
        ).inc()

    def record_finalization(self, trigger: str) -> None:
        """Record a ballot closing.

        Args:
            trigger: QUORUM or DEADLINE.
        """
        self.ballot_finalizations_total.labels(
            trigger=trigger,
            service=self._service_name,
            environment=self._environment,
        ).inc()

    def get_registry(self) -> CollectorRegistry:
        """Get the collector registry.

        Returns:
            The Prometheus collector registry.
        """
        return self._registry

    def generate_metrics(self) -> bytes:
        """Render the registry in Prometheus text exposition format."""
        return generate_latest(self._registry)


# Singleton instance
_ballot_metrics_collector: BallotMetricsCollector | None = None


def get_ballot_metrics_collector() -> BallotMetricsCollector:
    """Get the singleton BallotMetricsCollector instance (thread-safe).

    Uses double-checked locking pattern for thread-safe lazy initialization.

    Returns:
        The global BallotMetricsCollector instance.
    """
    global _ballot_metrics_collector
    if _ballot_metrics_collector is None:
        with _metrics_lock:
            # Double-check inside lock
            if _ballot_metrics_collector is None:
                _ballot_metrics_collector = BallotMetricsCollector()
    return _ballot_metrics_collector


def reset_ballot_metrics_collector() -> None:
    """Reset the singleton collector (for testing only).

    Thread-safe reset using the metrics lock.
    """
    global _ballot_metrics_collector
    with _metrics_lock:
        _ballot_metrics_collector = None
