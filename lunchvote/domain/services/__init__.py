"""Domain services for Lunch Vote.

Pure functions over domain models with no infrastructure dependencies.
"""

from lunchvote.domain.services.tally import TallyResult, tally_ballots

__all__: list[str] = ["TallyResult", "tally_ballots"]
