"""Ballot voting window and registration counting configuration.

This module defines configuration for the ballot engine with environment
variable overrides for deployment tuning.

Environment Variables:
- BALLOT_VOTING_WINDOW_TICKS: Ticks between opening voting and the deadline
  (default: 280, min: 1, max: 100000)
- BALLOT_COUNT_REREGISTRATIONS: When true, every participant registration
  increments the registration count, re-registrations included
  (default: false)
"""

from __future__ import annotations

import os
from dataclasses import dataclass


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_bool_env(key: str, default: bool) -> bool:
    """Get boolean environment variable with default.

    Accepts 1/0, true/false, yes/no, on/off (case-insensitive).

    Args:
        key: Environment variable name.
        default: Default value if not set or unrecognized.

    Returns:
        Parsed boolean value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in ("1", "true", "yes", "on"):
        return True
    if normalized in ("0", "false", "no", "off"):
        return False
    return default


# =============================================================================
# Voting Window Configuration
# =============================================================================

# Default ticks between opening voting and the automatic deadline
DEFAULT_VOTING_WINDOW_TICKS = 280

# Minimum window (the deadline must lie after the opening tick)
MIN_VOTING_WINDOW_TICKS = 1

# Maximum window
MAX_VOTING_WINDOW_TICKS = 100_000


@dataclass(frozen=True)
class BallotConfig:
    """Configuration for a ballot engine.

    Attributes:
        voting_window_ticks: Ticks added to the opening tick to form the
                            initial deadline.
                            Default: 280.
                            Minimum: 1.
                            Maximum: 100000.
        count_reregistrations: If True, re-registering an identity still
                              increments the registration count, and that
                              count is also the quorum divisor.
                              If False, the count is the number of distinct
                              identities.
                              Default: False.
    """

    voting_window_ticks: int = DEFAULT_VOTING_WINDOW_TICKS
    count_reregistrations: bool = False

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if (
            not MIN_VOTING_WINDOW_TICKS
            <= self.voting_window_ticks
            <= MAX_VOTING_WINDOW_TICKS
        ):
            raise ValueError(
                f"voting_window_ticks must be between {MIN_VOTING_WINDOW_TICKS} "
                f"and {MAX_VOTING_WINDOW_TICKS}, got {self.voting_window_ticks}"
            )

    @classmethod
    def from_environment(cls) -> BallotConfig:
        """Create config from environment variables with defaults.

        Environment Variables:
            BALLOT_VOTING_WINDOW_TICKS: Voting window in ticks (default: 280)
            BALLOT_COUNT_REREGISTRATIONS: Count re-registrations (default: false)

        Returns:
            BallotConfig with values from environment or defaults.
        """
        window = _get_int_env(
            "BALLOT_VOTING_WINDOW_TICKS",
            DEFAULT_VOTING_WINDOW_TICKS,
        )
        # Clamp to valid range
        window = max(
            MIN_VOTING_WINDOW_TICKS,
            min(window, MAX_VOTING_WINDOW_TICKS),
        )

        count_reregistrations = _get_bool_env(
            "BALLOT_COUNT_REREGISTRATIONS",
            False,
        )

        return cls(
            voting_window_ticks=window,
            count_reregistrations=count_reregistrations,
        )


# Pre-defined configurations for common use cases

# Default config: distinct-identity registration count
DEFAULT_BALLOT_CONFIG = BallotConfig()

# Reproduces the incrementing registration counter, overwrites included
ORIGINAL_COUNTING_BALLOT_CONFIG = BallotConfig(
    voting_window_ticks=DEFAULT_VOTING_WINDOW_TICKS,
    count_reregistrations=True,
)

# Short window for tests that exercise the deadline
SHORT_WINDOW_BALLOT_CONFIG = BallotConfig(
    voting_window_ticks=10,
    count_reregistrations=False,
)
