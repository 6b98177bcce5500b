"""
API models (Pydantic DTOs) for Lunch Vote.

This module contains the Pydantic request/response models used by
callers that serialize ballot state or replay scenarios.
"""

from lunchvote.api.models.ballot import (
    BallotResponse,
    BallotSnapshotResponse,
    FinalizationResponse,
    NominationResponse,
    ParticipantResponse,
)
from lunchvote.api.models.scenario import BallotScenario, ScenarioStep

__all__: list[str] = [
    "BallotResponse",
    "BallotScenario",
    "BallotSnapshotResponse",
    "FinalizationResponse",
    "NominationResponse",
    "ParticipantResponse",
    "ScenarioStep",
]
