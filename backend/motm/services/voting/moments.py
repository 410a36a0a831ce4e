from typing import Optional

from flask import current_app

from motm.models import Game
from .errors import ValidationError
from .store import Nomination, append_moment

# Upper bound of the integer moment_id column
MAX_MOMENT_ID = 2 ** 31 - 1


def _text(value) -> str:
    return value.strip() if isinstance(value, str) else ''


def _moment_id(value) -> int:
    """Accept an int or a digit-only string; bools, floats and the rest are rejected."""
    if isinstance(value, str) and value.strip().isascii() and value.strip().isdigit():
        value = int(value.strip())
    if isinstance(value, int) and not isinstance(value, bool) and 0 < value <= MAX_MOMENT_ID:
        return value
    raise ValidationError("Moment event_id must be a positive integer")


def resolve_moment(game: Game, selection) -> Optional[Nomination]:
    """Turn a ballot's moment selection into a nomination, or None to clear.

    New text always wins over an existing id and creates a fresh moment;
    identical texts are not merged. Existing ids are trusted unless
    STRICT_MOMENT_REFERENCES is set.
    """
    if not isinstance(selection, dict):
        return None
    comment = _text(selection.get('comment')) or None

    new_text = _text(selection.get('new_text'))
    if new_text:
        return Nomination(append_moment(game.id, new_text), comment)

    event_id = selection.get('event_id')
    if event_id is None or (isinstance(event_id, str) and not event_id.strip()):
        return None
    event_id = _moment_id(event_id)
    if current_app.config.get('STRICT_MOMENT_REFERENCES') and event_id not in {m.id for m in game.moments}:
        raise ValidationError('Moment does not belong to this game')
    return Nomination(event_id, comment)
