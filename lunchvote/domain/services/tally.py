"""Ballot tallying domain service.

Replays the ballot log once, in append order, to find the winning
nomination of a single-round plurality vote.

Tie-break rule:
    A nomination only takes the lead with a strictly greater running count.
    On equal final counts the winner is therefore the nomination that
    reached that count first in ballot order, not the lowest-numbered one.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from lunchvote.domain.models.ballot import Ballot


@dataclass(frozen=True, eq=True)
class TallyResult:
    """Outcome of replaying a ballot log.

    Attributes:
        winner: Number of the winning nomination, None if no ballots exist.
        winning_count: Final count of the winner (0 if no ballots).
        counts: Final count per nomination that received a ballot.
        ballot_count: Number of ballots replayed.
    """

    winner: int | None
    winning_count: int
    counts: dict[int, int]
    ballot_count: int

    @property
    def is_undecided(self) -> bool:
        """True when the log was empty and nothing can win."""
        return self.winner is None


def tally_ballots(ballots: Iterable[Ballot]) -> TallyResult:
    """Tally a ballot log with the earliest-to-reach tie-break.

    Args:
        ballots: Ballots in append order.

    Returns:
        TallyResult with the winner and the running counts.

    Examples:
        >>> log = [Ballot(i + 1, f"p{i}", n, 0) for i, n in enumerate([1, 2, 1, 2])]
        >>> tally_ballots(log).winner
        1
    """
    counts: dict[int, int] = {}
    leader: int | None = None
    leading_count = 0
    replayed = 0

    for ballot in ballots:
        replayed += 1
        count = counts.get(ballot.nomination, 0) + 1
        counts[ballot.nomination] = count
        # Strictly greater: equal counts never take the lead
        if count > leading_count:
            leading_count = count
            leader = ballot.nomination

    return TallyResult(
        winner=leader,
        winning_count=leading_count,
        counts=counts,
        ballot_count=replayed,
    )
