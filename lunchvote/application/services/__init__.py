"""Application services - Use case orchestration.

This module contains the services that drive ballot state on behalf of
callers.

Available services:
- BallotEngine: Phased ballot with quorum and deadline closing
- LoggingMixin: Structured logging binding shared by services
"""

from lunchvote.application.services.ballot_engine import BallotEngine
from lunchvote.application.services.base import LoggingMixin

__all__: list[str] = ["BallotEngine", "LoggingMixin"]
