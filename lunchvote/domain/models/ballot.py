"""Ballot domain models.

This module defines the entities held by a ballot engine: the engine-wide
phase, the nominated venues, the registered participants and the
append-only log of accepted ballots.

Invariants:
- Phase only advances PLANNING -> VOTING -> FINISHED; FINISHED is terminal
- Nomination numbers are 1-based and assigned in registration order
- A participant has at most one ballot in the log
- Ballots are immutable once appended
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

# Result recorded when the ballot closes without a single accepted vote
UNDECIDED_RESULT: str = "undecided"


class BallotPhase(Enum):
    """Engine-wide lifecycle stage.

    Phases:
        PLANNING: Nominations and participants are being registered
        VOTING: Participants may cast their single ballot
        FINISHED: Terminal - the result is fixed
    """

    PLANNING = "PLANNING"
    VOTING = "VOTING"
    FINISHED = "FINISHED"

    def is_terminal(self) -> bool:
        """Check if this phase is the terminal phase.

        Returns:
            True if this is the FINISHED phase, False otherwise.
        """
        return self == BallotPhase.FINISHED

    def next_phase(self) -> BallotPhase | None:
        """Get the next phase in the lifecycle.

        Returns:
            The next phase, or None if this is the terminal phase.
        """
        return PHASE_TRANSITION_MATRIX.get(self)

    def can_transition_to(self, target: BallotPhase) -> bool:
        """Check whether moving to ``target`` keeps the lifecycle forward-only."""
        return self.next_phase() == target


# Maps each phase to its only valid successor
PHASE_TRANSITION_MATRIX: dict[BallotPhase, BallotPhase | None] = {
    BallotPhase.PLANNING: BallotPhase.VOTING,
    BallotPhase.VOTING: BallotPhase.FINISHED,
    BallotPhase.FINISHED: None,  # Terminal
}


def quorum_for(participant_count: int) -> int:
    """Return the number of accepted ballots that closes the vote early.

    Args:
        participant_count: Number of eligible participants.

    Returns:
        ``floor(participant_count / 2) + 1``.
    """
    if participant_count < 0:
        raise ValueError(
            f"participant_count must be >= 0, got {participant_count}"
        )
    return participant_count // 2 + 1


@dataclass(frozen=True, eq=True)
class Nomination:
    """A venue participants may vote for.

    Attributes:
        number: 1-based sequence number assigned at registration.
        name: Display name of the venue.
    """

    number: int
    name: str

    def __post_init__(self) -> None:
        """Validate nomination invariants."""
        if self.number < 1:
            raise ValueError(f"number must be >= 1, got {self.number}")
        if not self.name:
            raise ValueError("name must be a non-empty string")


@dataclass(frozen=True, eq=True)
class Participant:
    """A friend eligible to cast exactly one ballot.

    Attributes:
        identity: Caller identity the participant votes with.
        name: Display name.
        has_voted: True once a ballot from this identity was accepted.
    """

    identity: str
    name: str
    has_voted: bool = field(default=False)

    def __post_init__(self) -> None:
        """Validate participant invariants."""
        if not self.identity:
            raise ValueError("identity must be a non-empty string")

    def with_voted(self) -> Participant:
        """Create a copy of this participant marked as having voted.

        Returns:
            New Participant with has_voted set.

        Raises:
            ValueError: If the participant already voted.
        """
        if self.has_voted:
            raise ValueError(f"Participant {self.identity} has already voted")
        return replace(self, has_voted=True)


@dataclass(frozen=True, eq=True)
class Ballot:
    """An accepted vote, as appended to the ballot log.

    Attributes:
        sequence: 1-based position in the ballot log.
        voter: Identity of the participant that cast it.
        nomination: Number of the nomination voted for.
        cast_at: Logical tick at which the vote was accepted.
    """

    sequence: int
    voter: str
    nomination: int
    cast_at: int

    def __post_init__(self) -> None:
        """Validate ballot invariants."""
        if self.sequence < 1:
            raise ValueError(f"sequence must be >= 1, got {self.sequence}")
        if self.nomination < 1:
            raise ValueError(f"nomination must be >= 1, got {self.nomination}")


@dataclass(frozen=True, eq=True)
class BallotSnapshot:
    """Consistent point-in-time copy of every entity an engine holds.

    Intended for durability collaborators that persist the engine between
    calls; the engine itself never reads a snapshot back.

    Attributes:
        coordinator: Identity that created the engine.
        phase: Current phase.
        deadline: Deadline tick, None before voting opens.
        last_tick: Tick of the latest call that changed state (None before any).
        nominations: Registered nominations in number order.
        participants: Registered participants in registration order.
        ballots: Ballot log in append order.
        registration_count: Value returned by the last participant registration.
        result: Winning name, UNDECIDED_RESULT, or None until finished.
    """

    coordinator: str
    phase: BallotPhase
    deadline: int | None
    last_tick: int | None
    nominations: tuple[Nomination, ...]
    participants: tuple[Participant, ...]
    ballots: tuple[Ballot, ...]
    registration_count: int
    result: str | None

    @property
    def is_finished(self) -> bool:
        """Check whether the snapshot was taken after the ballot closed."""
        return self.phase.is_terminal()
