"""
Pytest configuration and shared fixtures for Lunch Vote tests.

Testing Standards:
- Unit tests go in tests/unit/, mirroring the lunchvote package
- Drive ticks through FakeLogicalClock, never through wall-clock time
- Assert on exception types and attributes, not on messages
"""

import pytest
from prometheus_client import CollectorRegistry

from lunchvote.application.services.ballot_engine import BallotEngine
from lunchvote.infrastructure.monitoring.ballot_metrics import BallotMetricsCollector
from tests.helpers import FakeLogicalClock

COORDINATOR = "coordinator"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from lunchvote import __version__

    return __version__


@pytest.fixture
def logical_clock() -> FakeLogicalClock:
    """A logical clock starting at tick 0."""
    return FakeLogicalClock()


@pytest.fixture
def metrics() -> BallotMetricsCollector:
    """Metrics collector on an isolated registry."""
    return BallotMetricsCollector(registry=CollectorRegistry())


@pytest.fixture
def engine(metrics: BallotMetricsCollector) -> BallotEngine:
    """A fresh ballot in PLANNING, created by COORDINATOR."""
    return BallotEngine(COORDINATOR, metrics=metrics, ballot_id="test-ballot")
