"""Domain events for Lunch Vote."""

from lunchvote.domain.events.ballot_finalized import (
    BALLOT_FINALIZED_EVENT_TYPE,
    BALLOT_FINALIZED_SCHEMA_VERSION,
    BallotFinalizedEvent,
    FinalizationTrigger,
)

__all__: list[str] = [
    "BALLOT_FINALIZED_EVENT_TYPE",
    "BALLOT_FINALIZED_SCHEMA_VERSION",
    "BallotFinalizedEvent",
    "FinalizationTrigger",
]
