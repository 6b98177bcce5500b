"""Ballot finalized event.

This module defines the BallotFinalizedEvent recorded exactly once, when a
ballot engine transitions to FINISHED either because quorum was reached or
because a mutating call observed that the deadline had passed.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from lunchvote.domain.models.ballot import UNDECIDED_RESULT

# Event type constant (used by log records and serialized payloads)
BALLOT_FINALIZED_EVENT_TYPE: str = "lunchvote.ballot.finalized"

# Schema version for forward/backward compatibility
BALLOT_FINALIZED_SCHEMA_VERSION: int = 1


class FinalizationTrigger(Enum):
    """What closed the ballot.

    Triggers:
        QUORUM: An accepted vote brought the ballot count to quorum
        DEADLINE: A mutating call arrived at or after the deadline tick
    """

    QUORUM = "QUORUM"
    DEADLINE = "DEADLINE"


@dataclass(frozen=True, eq=True)
class BallotFinalizedEvent:
    """Event recorded when a ballot closes.

    Attributes:
        trigger: Whether quorum or the deadline closed the ballot.
        closed_at: Logical tick of the call that closed the ballot.
        deadline: Deadline in force when the ballot closed.
        winner: Number of the winning nomination (None if undecided).
        result: Winning nomination name, or UNDECIDED_RESULT.
        ballot_count: Number of ballots in the log.
        participant_count: Participant count used for quorum.
        quorum: Accepted ballots needed to close early.
        tallies: Final count per nomination that received a ballot (read-only).
        schema_version: Event schema version for compatibility.
    """

    trigger: FinalizationTrigger
    closed_at: int
    deadline: int | None
    winner: int | None
    result: str
    ballot_count: int
    participant_count: int
    quorum: int
    tallies: Mapping[int, int] = field(default_factory=dict)
    schema_version: int = field(default=BALLOT_FINALIZED_SCHEMA_VERSION)

    def __post_init__(self) -> None:
        """Validate finalization event invariants.

        Raises:
            ValueError: If any invariant is violated.
        """
        # Frozen event: callers get a read-only copy of the counts
        object.__setattr__(self, "tallies", MappingProxyType(dict(self.tallies)))
        if (self.winner is None) != (self.result == UNDECIDED_RESULT):
            raise ValueError(
                "result must be UNDECIDED_RESULT exactly when winner is None"
            )
        if self.winner is None and self.ballot_count != 0:
            raise ValueError("an undecided ballot must have an empty ballot log")
        if sum(self.tallies.values()) != self.ballot_count:
            raise ValueError(
                f"tallies sum to {sum(self.tallies.values())}, "
                f"expected ballot_count {self.ballot_count}"
            )
        if self.trigger == FinalizationTrigger.QUORUM and self.ballot_count < self.quorum:
            raise ValueError(
                f"quorum finalization with {self.ballot_count} ballots, "
                f"quorum is {self.quorum}"
            )
        if self.schema_version != BALLOT_FINALIZED_SCHEMA_VERSION:
            raise ValueError(
                f"schema_version must be {BALLOT_FINALIZED_SCHEMA_VERSION}, "
                f"got {self.schema_version}"
            )

    @property
    def event_type(self) -> str:
        """Event type string for this event."""
        return BALLOT_FINALIZED_EVENT_TYPE

    @property
    def is_undecided(self) -> bool:
        """True when the ballot closed with no accepted votes."""
        return self.winner is None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization.

        Returns:
            Dictionary with JSON-compatible values.
        """
        return {
            "event_type": BALLOT_FINALIZED_EVENT_TYPE,
            "trigger": self.trigger.value,
            "closed_at": self.closed_at,
            "deadline": self.deadline,
            "winner": self.winner,
            "result": self.result,
            "ballot_count": self.ballot_count,
            "participant_count": self.participant_count,
            "quorum": self.quorum,
            "tallies": {str(k): v for k, v in sorted(self.tallies.items())},
            "schema_version": self.schema_version,
        }
