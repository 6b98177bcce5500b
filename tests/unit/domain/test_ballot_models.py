"""Unit tests for ballot domain models.

Tests cover:
- BallotPhase lifecycle and transition matrix
- quorum_for
- Nomination, Participant and Ballot validation
- BallotSnapshot helpers
"""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from lunchvote.domain.models.ballot import (
    PHASE_TRANSITION_MATRIX,
    UNDECIDED_RESULT,
    Ballot,
    BallotPhase,
    BallotSnapshot,
    Nomination,
    Participant,
    quorum_for,
)


class TestBallotPhase:
    """Tests for the BallotPhase enum."""

    def test_phase_values(self) -> None:
        """Phase values are their upper-case names."""
        assert [phase.value for phase in BallotPhase] == [
            "PLANNING",
            "VOTING",
            "FINISHED",
        ]

    def test_only_finished_is_terminal(self) -> None:
        """FINISHED is the single terminal phase."""
        assert BallotPhase.FINISHED.is_terminal()
        assert not BallotPhase.PLANNING.is_terminal()
        assert not BallotPhase.VOTING.is_terminal()

    def test_next_phase(self) -> None:
        """Each phase has exactly one successor, FINISHED has none."""
        assert BallotPhase.PLANNING.next_phase() == BallotPhase.VOTING
        assert BallotPhase.VOTING.next_phase() == BallotPhase.FINISHED
        assert BallotPhase.FINISHED.next_phase() is None

    @pytest.mark.parametrize(
        ("source", "target", "allowed"),
        [
            (BallotPhase.PLANNING, BallotPhase.VOTING, True),
            (BallotPhase.VOTING, BallotPhase.FINISHED, True),
            (BallotPhase.PLANNING, BallotPhase.FINISHED, False),
            (BallotPhase.VOTING, BallotPhase.PLANNING, False),
            (BallotPhase.FINISHED, BallotPhase.VOTING, False),
            (BallotPhase.FINISHED, BallotPhase.FINISHED, False),
        ],
    )
    def test_can_transition_to(
        self, source: BallotPhase, target: BallotPhase, allowed: bool
    ) -> None:
        """Only forward single-step transitions are allowed."""
        assert source.can_transition_to(target) is allowed

    def test_matrix_covers_every_phase(self) -> None:
        """The transition matrix has an entry per phase."""
        assert set(PHASE_TRANSITION_MATRIX) == set(BallotPhase)


class TestQuorum:
    """Tests for quorum_for."""

    @pytest.mark.parametrize(
        ("participants", "quorum"),
        [(0, 1), (1, 1), (2, 2), (3, 2), (4, 3), (5, 3), (50, 26)],
    )
    def test_strict_majority(self, participants: int, quorum: int) -> None:
        """Quorum is floor(n / 2) + 1."""
        assert quorum_for(participants) == quorum

    def test_negative_count_rejected(self) -> None:
        """A negative participant count is a programming error."""
        with pytest.raises(ValueError):
            quorum_for(-1)


class TestNomination:
    """Tests for Nomination."""

    def test_valid_nomination(self) -> None:
        nomination = Nomination(number=1, name="Uni Cafe")
        assert (nomination.number, nomination.name) == (1, "Uni Cafe")

    @pytest.mark.parametrize(("number", "name"), [(0, "Uni Cafe"), (1, "")])
    def test_invalid_nomination(self, number: int, name: str) -> None:
        """Numbers start at 1 and names are non-empty."""
        with pytest.raises(ValueError):
            Nomination(number=number, name=name)

    def test_is_frozen(self) -> None:
        nomination = Nomination(number=1, name="Uni Cafe")
        with pytest.raises(FrozenInstanceError):
            nomination.name = "Other"  # type: ignore[misc]


class TestParticipant:
    """Tests for Participant."""

    def test_defaults_to_not_voted(self) -> None:
        assert Participant(identity="p1", name="Ann").has_voted is False

    def test_empty_identity_rejected(self) -> None:
        with pytest.raises(ValueError):
            Participant(identity="", name="Ann")

    def test_with_voted_returns_copy(self) -> None:
        """with_voted leaves the original untouched."""
        participant = Participant(identity="p1", name="Ann")

        voted = participant.with_voted()

        assert voted.has_voted is True
        assert voted.identity == "p1"
        assert participant.has_voted is False

    def test_with_voted_twice_rejected(self) -> None:
        """A participant cannot be marked as voted twice."""
        voted = Participant(identity="p1", name="Ann").with_voted()
        with pytest.raises(ValueError, match="already voted"):
            voted.with_voted()


class TestBallot:
    """Tests for Ballot."""

    def test_valid_ballot(self) -> None:
        ballot = Ballot(sequence=1, voter="p1", nomination=2, cast_at=10)
        assert ballot.nomination == 2

    @pytest.mark.parametrize(("sequence", "nomination"), [(0, 1), (1, 0)])
    def test_invalid_ballot(self, sequence: int, nomination: int) -> None:
        with pytest.raises(ValueError):
            Ballot(sequence=sequence, voter="p1", nomination=nomination, cast_at=0)


class TestBallotSnapshot:
    """Tests for BallotSnapshot."""

    def _snapshot(self, phase: BallotPhase, result: str | None) -> BallotSnapshot:
        return BallotSnapshot(
            coordinator="alice",
            phase=phase,
            deadline=280,
            last_tick=300,
            nominations=(Nomination(1, "Uni Cafe"),),
            participants=(),
            ballots=(),
            registration_count=0,
            result=result,
        )

    def test_is_finished(self) -> None:
        assert self._snapshot(BallotPhase.FINISHED, UNDECIDED_RESULT).is_finished
        assert not self._snapshot(BallotPhase.VOTING, None).is_finished

    def test_snapshots_compare_by_value(self) -> None:
        assert self._snapshot(BallotPhase.VOTING, None) == self._snapshot(
            BallotPhase.VOTING, None
        )
