"""Configuration module for Lunch Vote.

This module provides centralized configuration for the ballot engine.

Available Configurations:
- BallotConfig: Voting window and registration counting
"""

from lunchvote.config.ballot_config import (
    DEFAULT_BALLOT_CONFIG,
    ORIGINAL_COUNTING_BALLOT_CONFIG,
    SHORT_WINDOW_BALLOT_CONFIG,
    BallotConfig,
)

__all__ = [
    "BallotConfig",
    "DEFAULT_BALLOT_CONFIG",
    "ORIGINAL_COUNTING_BALLOT_CONFIG",
    "SHORT_WINDOW_BALLOT_CONFIG",
]
