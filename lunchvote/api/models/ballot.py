"""Ballot read models.

Pydantic models describing a ballot engine snapshot, for callers that need
to serialize ballot state (a durability collaborator, the scenario CLI).
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from lunchvote.domain.events.ballot_finalized import BallotFinalizedEvent
from lunchvote.domain.models.ballot import (
    Ballot,
    BallotPhase,
    BallotSnapshot,
    Nomination,
    Participant,
)


class NominationResponse(BaseModel):
    """A registered venue.

    Attributes:
        number: 1-based nomination number.
        name: Display name.
    """

    number: int = Field(..., ge=1, description="1-based nomination number")
    name: str = Field(..., min_length=1, description="Display name of the venue")

    @classmethod
    def from_domain(cls, nomination: Nomination) -> NominationResponse:
        return cls(number=nomination.number, name=nomination.name)


class ParticipantResponse(BaseModel):
    """A registered participant.

    Attributes:
        identity: Identity the participant votes with.
        name: Display name.
        has_voted: Whether a ballot from this identity was accepted.
    """

    identity: str = Field(..., min_length=1, description="Voting identity")
    name: str = Field(..., description="Display name")
    has_voted: bool = Field(default=False, description="Whether a ballot was accepted")

    @classmethod
    def from_domain(cls, participant: Participant) -> ParticipantResponse:
        return cls(
            identity=participant.identity,
            name=participant.name,
            has_voted=participant.has_voted,
        )


class BallotResponse(BaseModel):
    """An accepted ballot.

    Attributes:
        sequence: 1-based position in the ballot log.
        voter: Identity that cast it.
        nomination: Nomination number voted for.
        cast_at: Logical tick at acceptance.
    """

    sequence: int = Field(..., ge=1)
    voter: str
    nomination: int = Field(..., ge=1)
    cast_at: int

    @classmethod
    def from_domain(cls, ballot: Ballot) -> BallotResponse:
        return cls(
            sequence=ballot.sequence,
            voter=ballot.voter,
            nomination=ballot.nomination,
            cast_at=ballot.cast_at,
        )


class FinalizationResponse(BaseModel):
    """How and when a ballot closed."""

    trigger: str = Field(..., description="QUORUM or DEADLINE")
    closed_at: int = Field(..., description="Tick of the call that closed the ballot")
    winner: int | None = Field(
        default=None, description="Winning nomination number (None if undecided)"
    )
    result: str = Field(..., description="Winning name or 'undecided'")
    ballot_count: int = Field(..., ge=0)
    quorum: int = Field(..., ge=1)
    tallies: dict[int, int] = Field(default_factory=dict)

    @classmethod
    def from_domain(cls, event: BallotFinalizedEvent) -> FinalizationResponse:
        return cls(
            trigger=event.trigger.value,
            closed_at=event.closed_at,
            winner=event.winner,
            result=event.result,
            ballot_count=event.ballot_count,
            quorum=event.quorum,
            tallies=dict(event.tallies),
        )


class BallotSnapshotResponse(BaseModel):
    """Serializable view of a whole ballot.

    Attributes:
        coordinator: Identity that created the ballot.
        phase: PLANNING, VOTING or FINISHED.
        deadline: Deadline tick (None before voting opens).
        last_tick: Tick of the latest call that changed state.
        nominations: Registered nominations in number order.
        participants: Registered participants.
        ballots: Ballot log in append order.
        registration_count: Registration count / quorum divisor.
        result: Winning name, 'undecided', or None until finished.
        finalization: Closing details once finished.
    """

    coordinator: str
    phase: BallotPhase
    deadline: int | None = None
    last_tick: int | None = None
    nominations: list[NominationResponse] = Field(default_factory=list)
    participants: list[ParticipantResponse] = Field(default_factory=list)
    ballots: list[BallotResponse] = Field(default_factory=list)
    registration_count: int = Field(default=0, ge=0)
    result: str | None = None
    finalization: FinalizationResponse | None = None

    @classmethod
    def from_snapshot(
        cls,
        snapshot: BallotSnapshot,
        finalization: BallotFinalizedEvent | None = None,
    ) -> BallotSnapshotResponse:
        """Build the response from an engine snapshot.

        Args:
            snapshot: Snapshot taken with BallotEngine.snapshot().
            finalization: Event from BallotEngine.finalization(), if any.

        Returns:
            BallotSnapshotResponse mirroring the snapshot.
        """
        return cls(
            coordinator=snapshot.coordinator,
            phase=snapshot.phase,
            deadline=snapshot.deadline,
            last_tick=snapshot.last_tick,
            nominations=[NominationResponse.from_domain(n) for n in snapshot.nominations],
            participants=[
                ParticipantResponse.from_domain(p) for p in snapshot.participants
            ],
            ballots=[BallotResponse.from_domain(b) for b in snapshot.ballots],
            registration_count=snapshot.registration_count,
            result=snapshot.result,
            finalization=(
                FinalizationResponse.from_domain(finalization)
                if finalization is not None
                else None
            ),
        )
