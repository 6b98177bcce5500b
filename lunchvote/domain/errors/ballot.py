"""Ballot engine domain errors.

This module defines the hard failures a ballot engine call can end in.
Every error is terminal for the call that raised it: the engine performs no
retry and leaves its state as it was, apart from a deadline finalization
that the call itself discovered before failing.

Callers should branch on the exception type and its attributes, never on
the rendered message.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from lunchvote.domain.exceptions import LunchVoteError

if TYPE_CHECKING:
    from lunchvote.domain.models.ballot import BallotPhase


class BallotError(LunchVoteError):
    """Base class for ballot engine errors."""

    pass


class AccessDeniedError(BallotError):
    """Raised when a non-coordinator calls a coordinator-only operation.

    Attributes:
        operation: Name of the operation that was refused.
        caller: Identity that attempted the call.
    """

    def __init__(self, operation: str, caller: str) -> None:
        """Initialize AccessDeniedError.

        Args:
            operation: Name of the operation that was refused.
            caller: Identity that attempted the call.
        """
        self.operation = operation
        self.caller = caller

        message = (
            f"{operation} requires the coordinator; "
            f"caller '{caller}' is not authorized"
        )
        super().__init__(message)


class PhaseViolationError(BallotError):
    """Raised when an operation is invoked outside its required phase.

    The observed phase is the phase after the deadline guard ran, so a call
    that itself closed the ballot reports FINISHED.

    Attributes:
        operation: Name of the operation that was refused.
        observed_phase: Phase the engine was in when the call was evaluated.
        required_phase: Phase the operation needs.
    """

    def __init__(
        self,
        operation: str,
        observed_phase: BallotPhase,
        required_phase: BallotPhase,
    ) -> None:
        """Initialize PhaseViolationError.

        Args:
            operation: Name of the operation that was refused.
            observed_phase: Phase the engine was in.
            required_phase: Phase the operation needs.
        """
        self.operation = operation
        self.observed_phase = observed_phase
        self.required_phase = required_phase

        message = (
            f"{operation} is not allowed in phase {observed_phase.value}; "
            f"it requires phase {required_phase.value}"
        )
        super().__init__(message)


class InvalidDeadlineError(BallotError):
    """Raised when a deadline adjustment would be rejected.

    Attributes:
        requested_deadline: Deadline the adjustment would have produced.
        now: Logical tick supplied with the call.
        reason: Short description of the violated rule.
    """

    def __init__(self, requested_deadline: int, now: int, reason: str) -> None:
        """Initialize InvalidDeadlineError.

        Args:
            requested_deadline: Deadline the adjustment would have produced.
            now: Logical tick supplied with the call.
            reason: Short description of the violated rule.
        """
        self.requested_deadline = requested_deadline
        self.now = now
        self.reason = reason

        message = (
            f"Invalid deadline {requested_deadline} at tick {now}: {reason}"
        )
        super().__init__(message)


class LogicalClockRegressionError(BallotError):
    """Raised when a call supplies a tick earlier than one already observed.

    The logical clock is owned by the caller's environment and must be
    non-decreasing across calls.

    Attributes:
        now: Tick supplied with the call.
        last_seen: Highest tick the engine has observed.
    """

    def __init__(self, now: int, last_seen: int) -> None:
        """Initialize LogicalClockRegressionError.

        Args:
            now: Tick supplied with the call.
            last_seen: Highest tick the engine has observed.
        """
        self.now = now
        self.last_seen = last_seen

        message = (
            f"Logical clock went backwards: tick {now} supplied after "
            f"tick {last_seen} was observed"
        )
        super().__init__(message)
