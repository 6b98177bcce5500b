"""Unit tests for BallotEngine deadline handling.

Test categories:
- Deadline guard closing the ballot
- set_deadline / extend_deadline / reduce_deadline rules
- Interaction between the guard and the role check
"""

from __future__ import annotations

import pytest

from lunchvote.application.services.ballot_engine import BallotEngine
from lunchvote.domain.errors.ballot import (
    AccessDeniedError,
    InvalidDeadlineError,
    PhaseViolationError,
)
from lunchvote.domain.events.ballot_finalized import FinalizationTrigger
from lunchvote.domain.models.ballot import UNDECIDED_RESULT, BallotPhase
from tests.helpers import FakeLogicalClock

COORDINATOR = "coordinator"


@pytest.fixture
def voting_engine(engine: BallotEngine) -> BallotEngine:
    """Engine opened at tick 5 with two nominations and four participants."""
    engine.register_nomination(COORDINATOR, 0, "Courtyard Cafe")
    engine.register_nomination(COORDINATOR, 0, "Uni Cafe")
    for identity in ("p1", "p2", "p3", "p4"):
        engine.register_participant(COORDINATOR, 0, identity, identity.upper())
    engine.open_voting(COORDINATOR, 5)
    return engine


class TestDeadlineGuard:
    """Tests for closing the ballot once the deadline has passed."""

    def test_deadline_is_window_after_open(self, voting_engine: BallotEngine) -> None:
        """Opening at tick 5 gives deadline 285."""
        assert voting_engine.deadline == 285

    def test_call_before_deadline_keeps_voting(
        self, voting_engine: BallotEngine
    ) -> None:
        """At deadline - 1 the ballot is still open."""
        assert voting_engine.vote("p1", 284, 1) is True
        assert voting_engine.current_phase() == BallotPhase.VOTING

    def test_coordinator_call_at_deadline_closes_undecided(
        self, voting_engine: BallotEngine
    ) -> None:
        """A call at exactly the deadline closes, then fails its phase check."""
        with pytest.raises(PhaseViolationError) as exc_info:
            voting_engine.extend_deadline(COORDINATOR, 285, 10)

        assert exc_info.value.observed_phase == BallotPhase.FINISHED
        assert exc_info.value.required_phase == BallotPhase.VOTING
        assert voting_engine.current_phase() == BallotPhase.FINISHED
        assert voting_engine.result() == UNDECIDED_RESULT
        assert voting_engine.deadline == 285

        event = voting_engine.finalization()
        assert event is not None
        assert event.trigger == FinalizationTrigger.DEADLINE
        assert event.is_undecided
        assert event.closed_at == 285

    def test_vote_at_deadline_returns_false(self, voting_engine: BallotEngine) -> None:
        """The vote that discovers the deadline closes the ballot and is rejected."""
        assert voting_engine.vote("p1", 285, 1) is False

        assert voting_engine.current_phase() == BallotPhase.FINISHED
        assert voting_engine.ballots() == ()
        assert voting_engine.result() == UNDECIDED_RESULT

    def test_vote_after_deadline_close_raises(
        self, voting_engine: BallotEngine
    ) -> None:
        """Once closed, a later vote is a phase violation."""
        voting_engine.vote("p1", 300, 1)

        with pytest.raises(PhaseViolationError):
            voting_engine.vote("p2", 301, 1)

    def test_deadline_close_with_ballots_picks_leader(
        self, voting_engine: BallotEngine
    ) -> None:
        """Ballots below quorum still decide the result at the deadline."""
        voting_engine.vote("p1", 10, 2)
        voting_engine.vote("p2", 11, 1)

        assert voting_engine.vote("p3", 400, 1) is False

        assert voting_engine.result() == "Uni Cafe"
        event = voting_engine.finalization()
        assert event is not None
        assert event.trigger == FinalizationTrigger.DEADLINE
        assert event.ballot_count == 2

    def test_non_coordinator_call_closes_then_access_denied(
        self, voting_engine: BallotEngine
    ) -> None:
        """The guard runs before the role check, and its close persists."""
        with pytest.raises(AccessDeniedError):
            voting_engine.set_deadline("mallory", 290, 500)

        assert voting_engine.current_phase() == BallotPhase.FINISHED
        assert voting_engine.result() == UNDECIDED_RESULT

    def test_guard_close_commits_tick(self, voting_engine: BallotEngine) -> None:
        """The closing tick is recorded even though the call itself fails."""
        with pytest.raises(AccessDeniedError):
            voting_engine.reduce_deadline("mallory", 290, 5)

        assert voting_engine.snapshot().last_tick == 290

    def test_invalid_deadline_leaves_snapshot(
        self, voting_engine: BallotEngine
    ) -> None:
        """A rejected adjustment does not record its tick."""
        before = voting_engine.snapshot()

        with pytest.raises(InvalidDeadlineError):
            voting_engine.set_deadline(COORDINATOR, 100, 50)

        assert voting_engine.snapshot() == before

    def test_planning_phase_ignores_guard(self, engine: BallotEngine) -> None:
        """Before voting opens there is no deadline to elapse."""
        engine.register_nomination(COORDINATOR, 10_000, "Uni Cafe")
        assert engine.current_phase() == BallotPhase.PLANNING

    def test_finalizes_once_with_fake_clock(self, voting_engine: BallotEngine) -> None:
        """Advancing past the deadline closes the ballot exactly once."""
        clock = FakeLogicalClock(start=5)
        clock.advance(280)

        assert voting_engine.vote("p1", clock.now(), 1) is False
        first = voting_engine.finalization()

        clock.advance()
        with pytest.raises(PhaseViolationError):
            voting_engine.vote("p1", clock.now(), 1)

        assert voting_engine.finalization() is first


class TestSetDeadline:
    """Tests for set_deadline."""

    def test_sets_absolute_deadline(self, voting_engine: BallotEngine) -> None:
        """The deadline becomes the requested tick."""
        assert voting_engine.set_deadline(COORDINATOR, 10, 50) == 50
        assert voting_engine.deadline == 50

    def test_earlier_than_now_rejected(self, voting_engine: BallotEngine) -> None:
        """A deadline in the past is an InvalidDeadlineError; nothing changes."""
        with pytest.raises(InvalidDeadlineError) as exc_info:
            voting_engine.set_deadline(COORDINATOR, 10, 9)

        assert exc_info.value.requested_deadline == 9
        assert exc_info.value.now == 10
        assert voting_engine.deadline == 285

    def test_deadline_equal_to_now_closes_on_next_call(
        self, voting_engine: BallotEngine
    ) -> None:
        """Setting the deadline to now is allowed; the next call closes."""
        voting_engine.set_deadline(COORDINATOR, 10, 10)
        assert voting_engine.current_phase() == BallotPhase.VOTING

        assert voting_engine.vote("p1", 10, 1) is False
        assert voting_engine.current_phase() == BallotPhase.FINISHED

    def test_requires_voting_phase(self, engine: BallotEngine) -> None:
        """Deadline changes during PLANNING are phase violations."""
        with pytest.raises(PhaseViolationError) as exc_info:
            engine.set_deadline(COORDINATOR, 0, 100)

        assert exc_info.value.observed_phase == BallotPhase.PLANNING
        assert engine.deadline is None

    def test_requires_coordinator(self, voting_engine: BallotEngine) -> None:
        """Participants cannot move the deadline."""
        with pytest.raises(AccessDeniedError):
            voting_engine.set_deadline("p1", 10, 1000)
        assert voting_engine.deadline == 285


class TestExtendDeadline:
    """Tests for extend_deadline."""

    def test_extends(self, voting_engine: BallotEngine) -> None:
        """The deadline moves later by the given ticks."""
        assert voting_engine.extend_deadline(COORDINATOR, 10, 15) == 300

    def test_zero_is_allowed(self, voting_engine: BallotEngine) -> None:
        """A zero extension leaves the deadline unchanged."""
        assert voting_engine.extend_deadline(COORDINATOR, 10, 0) == 285

    def test_negative_rejected(self, voting_engine: BallotEngine) -> None:
        """Negative ticks are refused."""
        with pytest.raises(InvalidDeadlineError):
            voting_engine.extend_deadline(COORDINATOR, 10, -1)
        assert voting_engine.deadline == 285

    def test_extension_keeps_ballot_open(self, voting_engine: BallotEngine) -> None:
        """A vote after the old deadline is accepted once extended."""
        voting_engine.extend_deadline(COORDINATOR, 280, 100)

        assert voting_engine.vote("p1", 300, 1) is True


class TestReduceDeadline:
    """Tests for reduce_deadline."""

    def test_reduces(self, voting_engine: BallotEngine) -> None:
        """The deadline moves earlier by the given ticks."""
        assert voting_engine.reduce_deadline(COORDINATOR, 10, 85) == 200

    def test_reduce_to_now_allowed(self, voting_engine: BallotEngine) -> None:
        """Reducing exactly to the current tick is accepted."""
        assert voting_engine.reduce_deadline(COORDINATOR, 85, 200) == 85

    def test_reduce_before_now_rejected(self, voting_engine: BallotEngine) -> None:
        """A reduction that lands before now is refused."""
        with pytest.raises(InvalidDeadlineError) as exc_info:
            voting_engine.reduce_deadline(COORDINATOR, 100, 200)

        assert exc_info.value.requested_deadline == 85
        assert voting_engine.deadline == 285

    def test_negative_rejected(self, voting_engine: BallotEngine) -> None:
        """Negative ticks would extend and are refused."""
        with pytest.raises(InvalidDeadlineError):
            voting_engine.reduce_deadline(COORDINATOR, 10, -5)
        assert voting_engine.deadline == 285

    def test_requires_coordinator(self, voting_engine: BallotEngine) -> None:
        """Participants cannot shorten the vote."""
        with pytest.raises(AccessDeniedError):
            voting_engine.reduce_deadline("p2", 10, 100)
