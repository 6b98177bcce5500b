"""Domain models for Lunch Vote.

Contains value objects and domain models that represent
core ballot concepts. These models are immutable and
contain no infrastructure dependencies.
"""

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

__all__: list[str] = [
    "PHASE_TRANSITION_MATRIX",
    "UNDECIDED_RESULT",
    "Ballot",
    "BallotPhase",
    "BallotSnapshot",
    "Nomination",
    "Participant",
    "quorum_for",
]
