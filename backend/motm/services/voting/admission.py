from typing import Optional

from flask import current_app

from motm.models import NAME_MAX_LENGTH, Vote
from .errors import ValidationError, VotingClosed
from .moments import resolve_moment
from .store import Nomination, VotePatch, get_game, upsert_vote


def _text(value, field) -> str:
    """Strip a string field. Integers count as their decimal form."""
    if value is None:
        return ''
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if not isinstance(value, str):
        raise ValidationError(f'{field} must be a string')
    return value.strip()


def _name(value, field) -> str:
    value = _text(value, field)
    if len(value) > NAME_MAX_LENGTH:
        raise ValidationError(f'{field} must be at most {NAME_MAX_LENGTH} characters')
    return value


def _player_nomination(raw, category) -> Optional[Nomination]:
    """Normalize a {player, comment} pair; a blank player means no nomination."""
    player = _name(raw.get('player'), f'{category} player')
    if not player:
        return None
    return Nomination(player, _text(raw.get('comment'), f'{category} comment') or None)


def submit_vote(game_id, voter_name, voter_token, mom=None, dod=None, moment=None) -> Vote:
    """Admit a ballot and store it as the voter's single vote for the game.

    A category left out of the ballot (None) keeps whatever is stored. A
    category that is present replaces the stored nomination, or clears it
    when its player (or moment) is blank. All categories go out in one
    upsert. A moment created from new text stays on the game even if the
    upsert fails afterwards.
    """
    game = get_game(game_id)
    if game.status != 'open':
        current_app.logger.warning(f"[vote-rejected] game={game.id} reason=closed")
        raise VotingClosed()

    voter_name = _name(voter_name, 'Voter name')
    voter_token = _name(voter_token, 'Voter token')
    if not (voter_name and voter_token):
        raise ValidationError('Voter name and token are required')

    for category, raw in (('mom', mom), ('dod', dod), ('moment', moment)):
        if raw is not None and not isinstance(raw, dict):
            raise ValidationError(f'{category} must be an object')

    patch = VotePatch(voter_name=voter_name)
    for category, raw in (('mom', mom), ('dod', dod)):
        if raw is None:
            continue
        nomination = _player_nomination(raw, category)
        if nomination is None:
            patch.clears.add(category)
            continue
        if current_app.config.get('RESTRICT_TO_TEAM_SHEET') and nomination.choice not in game.players:
            raise ValidationError(f'{nomination.choice} is not on the team sheet')
        patch.updates[category] = nomination

    if moment is not None:
        moment_nomination = resolve_moment(game, moment)
        if moment_nomination is None:
            patch.clears.add('moment')
        else:
            patch.updates['moment'] = moment_nomination

    return upsert_vote(game.id, voter_token, patch)
