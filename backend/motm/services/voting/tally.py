"""Results aggregation.

`tally_results` is a pure function over a game (anything with `moments`
carrying `id` and `text`) and an iterable of votes. It keeps no state
between calls, so results can be recomputed at any time.
"""

from collections import OrderedDict
from typing import Iterable, List, Optional

from .store import get_game, list_votes


def _comment(value) -> Optional[str]:
    value = value.strip() if isinstance(value, str) else ''
    return value or None


def tally_players(votes: Iterable, category: str) -> List[dict]:
    """Count mom or dod nominations per player (exact name match).

    Sorted by count descending, ties by player name ascending. Comments
    keep first-seen order.
    """
    buckets: "OrderedDict[str, dict]" = OrderedDict()
    for vote in votes:
        player = getattr(vote, f'{category}_player', None)
        if not player:
            continue
        entry = buckets.setdefault(player, {'player': player, 'count': 0, 'comments': []})
        entry['count'] += 1
        comment = _comment(getattr(vote, f'{category}_comment', None))
        if comment:
            entry['comments'].append(comment)
    return sorted(buckets.values(), key=lambda e: (-e['count'], e['player']))


def tally_moments(moments: Iterable, votes: Iterable) -> List[dict]:
    """Every moment exactly once, zero-vote moments included."""
    entries = OrderedDict(
        (m.id, {'id': m.id, 'text': m.text, 'count': 0, 'comments': []}) for m in moments
    )
    for vote in votes:
        entry = entries.get(getattr(vote, 'moment_id', None))
        # Votes pointing at a moment of another game are not counted here
        if entry is None:
            continue
        entry['count'] += 1
        comment = _comment(getattr(vote, 'moment_comment', None))
        if comment:
            entry['comments'].append(comment)
    return sorted(entries.values(), key=lambda e: (-e['count'], e['text']))


def voter_selections(game, vote) -> dict:
    """The requester's own current choices, for pre-filling an edit form."""
    selections = {}
    for category in ('mom', 'dod'):
        player = getattr(vote, f'{category}_player', None)
        if player:
            selections[category] = {'player': player, 'comment': getattr(vote, f'{category}_comment', None)}
    moment_id = getattr(vote, 'moment_id', None)
    if moment_id is not None:
        text = next((m.text for m in game.moments if m.id == moment_id), None)
        selections['moment'] = {'event_id': moment_id, 'text': text, 'comment': vote.moment_comment}
    return selections


def tally_results(game, votes: Iterable, requester_token: Optional[str] = None) -> dict:
    votes = list(votes)
    results = {
        'totals': {
            'mom': tally_players(votes, 'mom'),
            'dod': tally_players(votes, 'dod'),
        },
        'moments': tally_moments(game.moments, votes),
    }
    if requester_token:
        mine = next((v for v in votes if v.voter_token == requester_token), None)
        if mine is not None:
            results['my_vote'] = voter_selections(game, mine)
    return results


def get_results(game_id, requester_token=None) -> dict:
    game = get_game(game_id)
    results = tally_results(game, list_votes(game.id), requester_token)
    results['game'] = game.to_dict()
    return results
