from motm import db
from datetime import datetime
import json

GAME_STATUSES = ('open', 'closed')
CATEGORIES = ('mom', 'dod', 'moment')
NAME_MAX_LENGTH = 128


class Game(db.Model):
    __tablename__ = 'game'
    id = db.Column(db.Integer, primary_key=True)
    date = db.Column(db.String(32), nullable=False)
    opponents = db.Column(db.String(NAME_MAX_LENGTH), nullable=False)
    team_name = db.Column(db.String(NAME_MAX_LENGTH), nullable=False)
    club_name = db.Column(db.String(NAME_MAX_LENGTH), nullable=False)
    team_sheet = db.Column(db.Text, nullable=False, default='[]')  # JSON-encoded list of player names
    status = db.Column(db.String(16), nullable=False, default='open')  # open, closed
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    moments = db.relationship('Moment', back_populates='game', order_by='Moment.id',
                              cascade='all, delete-orphan')
    votes = db.relationship('Vote', back_populates='game', lazy='dynamic',
                            cascade='all, delete-orphan')

    @property
    def players(self):
        return json.loads(self.team_sheet or '[]')

    def to_dict(self):
        return {
            'id': self.id,
            'date': self.date,
            'opponents': self.opponents,
            'team_name': self.team_name,
            'club_name': self.club_name,
            'team_sheet': self.players,
            'moments': [m.to_dict() for m in self.moments],
            'status': self.status,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }


class Moment(db.Model):
    """A free-text nominable moment. Append-only; ids are never reused."""
    __tablename__ = 'moment'
    id = db.Column(db.Integer, primary_key=True)
    game_id = db.Column(db.Integer, db.ForeignKey('game.id'), nullable=False, index=True)
    text = db.Column(db.Text, nullable=False)
    game = db.relationship('Game', back_populates='moments')

    def to_dict(self):
        return {
            'id': self.id,
            'text': self.text,
        }


class Vote(db.Model):
    __tablename__ = 'vote'
    __table_args__ = (db.UniqueConstraint('game_id', 'voter_token', name='uq_vote_game_voter'),)

    id = db.Column(db.Integer, primary_key=True)
    game_id = db.Column(db.Integer, db.ForeignKey('game.id'), nullable=False, index=True)
    voter_name = db.Column(db.String(NAME_MAX_LENGTH), nullable=False)
    voter_token = db.Column(db.String(NAME_MAX_LENGTH), nullable=False)
    mom_player = db.Column(db.String(NAME_MAX_LENGTH), nullable=True)
    mom_comment = db.Column(db.Text, nullable=True)
    dod_player = db.Column(db.String(NAME_MAX_LENGTH), nullable=True)
    dod_comment = db.Column(db.Text, nullable=True)
    # Not a foreign key: client-supplied moment ids are stored as given
    moment_id = db.Column(db.Integer, nullable=True)
    moment_comment = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    game = db.relationship('Game', back_populates='votes')

    def nomination(self, category):
        """Return the stored (choice, comment) pair for a category, or None."""
        if category == 'moment':
            choice = self.moment_id
        else:
            choice = getattr(self, f'{category}_player')
        if choice is None:
            return None
        return choice, getattr(self, f'{category}_comment')

    def to_dict(self):
        mom = self.nomination('mom')
        dod = self.nomination('dod')
        moment = self.nomination('moment')
        return {
            'id': self.id,
            'game_id': self.game_id,
            'voter': {'name': self.voter_name, 'token': self.voter_token},
            'mom': {'player': mom[0], 'comment': mom[1]} if mom else None,
            'dod': {'player': dod[0], 'comment': dod[1]} if dod else None,
            'moment': {'event_id': moment[0], 'comment': moment[1]} if moment else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
