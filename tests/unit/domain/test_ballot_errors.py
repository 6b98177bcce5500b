"""Unit tests for ballot domain errors."""

from __future__ import annotations

import pytest

from lunchvote.domain import LunchVoteError
from lunchvote.domain.errors import (
    AccessDeniedError,
    BallotError,
    InvalidDeadlineError,
    LogicalClockRegressionError,
    PhaseViolationError,
)
from lunchvote.domain.models.ballot import BallotPhase


class TestErrorHierarchy:
    """All ballot errors share one base."""

    @pytest.mark.parametrize(
        "error",
        [
            AccessDeniedError("open_voting", "mallory"),
            PhaseViolationError("vote", BallotPhase.PLANNING, BallotPhase.VOTING),
            InvalidDeadlineError(5, 10, "too early"),
            LogicalClockRegressionError(now=3, last_seen=7),
        ],
    )
    def test_subclasses_ballot_error(self, error: BallotError) -> None:
        assert isinstance(error, BallotError)
        assert isinstance(error, LunchVoteError)


class TestAccessDeniedError:
    """Tests for AccessDeniedError."""

    def test_attributes_and_message(self) -> None:
        error = AccessDeniedError(operation="open_voting", caller="mallory")

        assert error.operation == "open_voting"
        assert error.caller == "mallory"
        assert "mallory" in str(error)
        assert "open_voting" in str(error)


class TestPhaseViolationError:
    """Tests for PhaseViolationError."""

    def test_attributes_and_message(self) -> None:
        error = PhaseViolationError(
            operation="register_nomination",
            observed_phase=BallotPhase.FINISHED,
            required_phase=BallotPhase.PLANNING,
        )

        assert error.operation == "register_nomination"
        assert error.observed_phase is BallotPhase.FINISHED
        assert error.required_phase is BallotPhase.PLANNING
        assert "FINISHED" in str(error)
        assert "PLANNING" in str(error)


class TestInvalidDeadlineError:
    """Tests for InvalidDeadlineError."""

    def test_attributes(self) -> None:
        error = InvalidDeadlineError(requested_deadline=5, now=10, reason="past")

        assert (error.requested_deadline, error.now, error.reason) == (5, 10, "past")
        assert "past" in str(error)


class TestLogicalClockRegressionError:
    """Tests for LogicalClockRegressionError."""

    def test_attributes(self) -> None:
        error = LogicalClockRegressionError(now=3, last_seen=7)

        assert error.now == 3
        assert error.last_seen == 7
