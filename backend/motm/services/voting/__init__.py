"""Voting domain services: game/vote stores, ballot admission and tallies.

This package contains the voting core used by the HTTP routes, keeping
transport concerns separated from admission and aggregation rules.
"""

from .errors import ConflictRetry, NotFound, ValidationError, VotingClosed, VotingError
from .store import append_moment, create_game, get_game, list_votes, set_status, upsert_vote
from .admission import submit_vote
from .tally import get_results, tally_results
