"""Game and vote persistence.

Games own their roster, their append-only list of moments and their
open/closed status. Votes are one row per (game, voter token); the unique
index is what serializes concurrent first submissions from one voter.
"""

import json
from dataclasses import dataclass, field
from typing import Dict, Optional, Set

from flask import current_app
from sqlalchemy.exc import IntegrityError

from motm import db
from motm.models import Game, Moment, Vote, GAME_STATUSES, CATEGORIES, NAME_MAX_LENGTH
from .errors import ConflictRetry, NotFound, ValidationError


@dataclass
class Nomination:
    """A choice for one category: a player name, or a moment id for moments."""
    choice: object
    comment: Optional[str] = None


@dataclass
class VotePatch:
    voter_name: str
    updates: Dict[str, Nomination] = field(default_factory=dict)
    clears: Set[str] = field(default_factory=set)

    def apply(self, vote: Vote) -> None:
        vote.voter_name = self.voter_name
        for category in CATEGORIES:
            column = 'moment_id' if category == 'moment' else f'{category}_player'
            if category in self.updates:
                nomination = self.updates[category]
                setattr(vote, column, nomination.choice)
                setattr(vote, f'{category}_comment', nomination.comment)
            elif category in self.clears:
                setattr(vote, column, None)
                setattr(vote, f'{category}_comment', None)


def _clean(value) -> str:
    return value.strip() if isinstance(value, str) else ''


# ---- Game store ----

def create_game(date, opponents, team_sheet, team_name=None, club_name=None, moments=None) -> Game:
    date = _clean(date)
    opponents = _clean(opponents)
    if not isinstance(team_sheet, (list, tuple)):
        team_sheet = []
    players = [_clean(p) for p in team_sheet if _clean(p)]
    if not (date and opponents and players):
        raise ValidationError('Missing required fields: date, opponents, and team sheet')
    if len(date) > 32 or any(len(v) > NAME_MAX_LENGTH for v in [opponents, _clean(team_name), _clean(club_name)] + players):
        raise ValidationError(f'Names must be at most {NAME_MAX_LENGTH} characters')

    cfg = current_app.config
    game = Game(
        date=date,
        opponents=opponents,
        team_name=_clean(team_name) or cfg.get('DEFAULT_TEAM_NAME', 'Weysiders'),
        club_name=_clean(club_name) or cfg.get('DEFAULT_CLUB_NAME', 'Guildford Hockey Club'),
        team_sheet=json.dumps(players),
        status='open',
    )
    for text in moments or []:
        if _clean(text):
            game.moments.append(Moment(text=_clean(text)))
    db.session.add(game)
    db.session.commit()
    current_app.logger.info(f"[game-created] game={game.id} opponents={game.opponents!r} players={len(players)}")
    return game


def get_game(game_id) -> Game:
    game = Game.query.filter_by(id=game_id).first()
    if not game:
        raise NotFound()
    return game


def append_moment(game_id, text) -> int:
    """Append a moment to a game and return its new id.

    A single-row insert, so concurrent appends to the same game never
    overwrite each other.
    """
    text = _clean(text)
    if not text:
        raise ValidationError('Moment text is required')
    moment = Moment(game_id=game_id, text=text)
    db.session.add(moment)
    db.session.commit()
    current_app.logger.info(f"[moment-appended] game={game_id} moment={moment.id}")
    return moment.id


def set_status(game_id, status) -> Game:
    if status not in GAME_STATUSES:
        raise ValidationError(f"Status must be one of: {', '.join(GAME_STATUSES)}")
    game = get_game(game_id)
    if game.status == status:
        return game
    previous = game.status
    game.status = status
    db.session.add(game)
    db.session.commit()
    current_app.logger.info(f"[game-status] game={game.id} {previous} -> {status}")
    return game


# ---- Vote store ----

def find_vote(game_id, voter_token) -> Optional[Vote]:
    return Vote.query.filter_by(game_id=game_id, voter_token=voter_token).with_for_update().first()


def list_votes(game_id):
    """All votes for a game as a lazy query; iterate it as often as needed."""
    return Vote.query.filter_by(game_id=game_id).order_by(Vote.id)


def _write_vote(game_id, voter_token, patch: VotePatch) -> Vote:
    vote = find_vote(game_id, voter_token)
    created = vote is None
    if created:
        vote = Vote(game_id=game_id, voter_token=voter_token)
        db.session.add(vote)
    patch.apply(vote)
    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        if not created:
            raise
        raise ConflictRetry() from exc
    current_app.logger.info(f"[vote-upsert] game={game_id} vote={vote.id} created={created}")
    return vote


def upsert_vote(game_id, voter_token, patch: VotePatch) -> Vote:
    """Create or amend the single vote for (game_id, voter_token).

    Losing the first-insert race to a concurrent request is retried as an
    amend of the row that request created.
    """
    retries = int(current_app.config.get('VOTE_UPSERT_RETRIES', 3))
    attempt = 0
    while True:
        try:
            return _write_vote(game_id, voter_token, patch)
        except ConflictRetry:
            attempt += 1
            current_app.logger.warning(f"[vote-conflict] game={game_id} attempt={attempt}/{retries}")
            if attempt > retries:
                raise
