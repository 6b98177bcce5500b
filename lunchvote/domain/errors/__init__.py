"""Domain errors for Lunch Vote.

Provides specific exception classes for different failure scenarios.
All exceptions inherit from LunchVoteError.
"""

from lunchvote.domain.errors.ballot import (
    AccessDeniedError,
    BallotError,
    InvalidDeadlineError,
    LogicalClockRegressionError,
    PhaseViolationError,
)

__all__: list[str] = [
    "BallotError",
    "AccessDeniedError",
    "PhaseViolationError",
    "InvalidDeadlineError",
    "LogicalClockRegressionError",
]
