"""
Domain layer - Pure ballot logic for Lunch Vote.

This layer contains:
- Domain models (phase, nominations, participants, ballots)
- Domain services (tallying)
- Domain events (ballot finalization)
- Domain exceptions

CRITICAL: This layer must NOT import from application, infrastructure, or api.
Only stdlib and typing imports are allowed.
"""

from lunchvote.domain.errors import (
    AccessDeniedError,
    BallotError,
    InvalidDeadlineError,
    LogicalClockRegressionError,
    PhaseViolationError,
)
from lunchvote.domain.exceptions import LunchVoteError

__all__: list[str] = [
    "LunchVoteError",
    "BallotError",
    "AccessDeniedError",
    "PhaseViolationError",
    "InvalidDeadlineError",
    "LogicalClockRegressionError",
]
