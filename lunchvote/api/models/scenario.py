"""Ballot scenario models.

A scenario is a JSON document describing one ballot and the ordered calls
made against it by several callers:

    {
        "coordinator": "alice",
        "voting_window_ticks": 280,
        "steps": [
            {"op": "register_nomination", "caller": "alice", "now": 0, "name": "Uni Cafe"},
            {"op": "register_participant", "caller": "alice", "now": 0,
             "identity": "bob", "name": "Bob"},
            {"op": "open_voting", "caller": "alice", "now": 1},
            {"op": "vote", "caller": "bob", "now": 2, "nomination": 1}
        ]
    }
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator

from lunchvote.config.ballot_config import (
    MAX_VOTING_WINDOW_TICKS,
    MIN_VOTING_WINDOW_TICKS,
)

ScenarioOperation = Literal[
    "register_nomination",
    "register_participant",
    "open_voting",
    "set_deadline",
    "extend_deadline",
    "reduce_deadline",
    "vote",
]

# Fields each operation needs beyond caller and now
REQUIRED_STEP_FIELDS: dict[str, tuple[str, ...]] = {
    "register_nomination": ("name",),
    "register_participant": ("identity", "name"),
    "open_voting": (),
    "set_deadline": ("deadline",),
    "extend_deadline": ("ticks",),
    "reduce_deadline": ("ticks",),
    "vote": ("nomination",),
}


class ScenarioStep(BaseModel):
    """One call against the engine.

    Attributes:
        op: Engine operation to invoke.
        caller: Identity making the call.
        now: Logical tick supplied with the call.
        name: Nomination or participant display name.
        identity: Participant identity to register.
        nomination: Nomination number to vote for.
        deadline: Absolute deadline for set_deadline.
        ticks: Delta for extend_deadline / reduce_deadline.
    """

    op: ScenarioOperation
    caller: str = Field(..., min_length=1)
    now: int = Field(..., ge=0)
    name: str | None = None
    identity: str | None = None
    nomination: int | None = None
    deadline: int | None = None
    ticks: int | None = None

    @model_validator(mode="after")
    def validate_operation_fields(self) -> ScenarioStep:
        """Check the operation-specific fields are present."""
        missing = [
            field_name
            for field_name in REQUIRED_STEP_FIELDS[self.op]
            if getattr(self, field_name) is None
        ]
        if missing:
            raise ValueError(f"{self.op} requires: {', '.join(missing)}")
        return self

    def arguments(self) -> tuple[Any, ...]:
        """Positional arguments following (caller, now) for this operation."""
        return tuple(getattr(self, f) for f in REQUIRED_STEP_FIELDS[self.op])


class BallotScenario(BaseModel):
    """A ballot and the ordered calls made against it.

    Attributes:
        coordinator: Identity creating the ballot.
        voting_window_ticks: Override for the voting window (None = config).
        count_reregistrations: Override for registration counting (None = config).
        steps: Calls in the order they reach the engine.
    """

    coordinator: str = Field(..., min_length=1)
    voting_window_ticks: int | None = Field(
        default=None, ge=MIN_VOTING_WINDOW_TICKS, le=MAX_VOTING_WINDOW_TICKS
    )
    count_reregistrations: bool | None = None
    steps: list[ScenarioStep] = Field(default_factory=list)
