from enum import IntEnum
from flask_sqlalchemy import SQLAlchemy

from shared.context import ZERO_IDENTITY

db = SQLAlchemy()


def commit_or_rollback():
    """Commit the single in-flight operation or leave no trace of it."""
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise


class Difficulty(IntEnum):
    """Padel competition tiers, ordered from easiest to hardest."""
    P25 = 0
    P100 = 1
    P250 = 2
    P500 = 3
    P1000 = 4
    P2000 = 5

    @classmethod
    def from_code(cls, code) -> 'Difficulty':
        """Raises ValueError for anything outside the six tiers."""
        if isinstance(code, bool) or not isinstance(code, int):
            raise ValueError(f"Invalid difficulty code: {code!r}")
        return cls(code)


class Manager(db.Model):
    __tablename__ = 'managers'

    identity = db.Column(db.String(100), primary_key=True)
    added_at = db.Column(db.DateTime, nullable=False)


class Tournament(db.Model):
    __tablename__ = 'tournaments'

    # Position in the registry; assigned 0, 1, 2, ... by TournamentRegistry
    id = db.Column(db.Integer, primary_key=True, autoincrement=False)
    manager = db.Column(db.String(100), db.ForeignKey('managers.identity'), nullable=False, index=True)
    city = db.Column(db.String(200), nullable=False)
    date = db.Column(db.DateTime, nullable=False)
    difficulty = db.Column(db.Integer, nullable=False)
    max_players = db.Column(db.Integer, nullable=False)
    registrations_available = db.Column(db.Integer, nullable=False)
    winner1 = db.Column(db.String(100), nullable=False, default=ZERO_IDENTITY)
    winner2 = db.Column(db.String(100), nullable=False, default=ZERO_IDENTITY)
    comment_count = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False)

    __table_args__ = (
        db.CheckConstraint('registrations_available >= 0', name='non_negative_capacity'),
    )

    @property
    def difficulty_tier(self) -> Difficulty:
        return Difficulty(self.difficulty)

    @property
    def has_winners(self) -> bool:
        return self.winner1 != ZERO_IDENTITY and self.winner2 != ZERO_IDENTITY

    def to_dict(self):
        return {
            'id': self.id,
            'manager': self.manager,
            'city': self.city,
            'date': self.date.isoformat() if self.date else None,
            'difficulty': self.difficulty_tier.name,
            'max_players': self.max_players,
            'registrations_available': self.registrations_available,
            'winner1': self.winner1,
            'winner2': self.winner2,
            'comment_count': self.comment_count,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }


class Registration(db.Model):
    __tablename__ = 'registrations'

    # Autoincrement id doubles as the player's registration order
    id = db.Column(db.Integer, primary_key=True)
    tournament_id = db.Column(db.Integer, db.ForeignKey('tournaments.id'), nullable=False)
    player = db.Column(db.String(100), nullable=False, index=True)
    registered_at = db.Column(db.DateTime, nullable=False)

    __table_args__ = (
        db.UniqueConstraint('tournament_id', 'player', name='unique_registration'),
    )

    @classmethod
    def exists(cls, tournament_id: int, player: str) -> bool:
        return cls.query.filter_by(tournament_id=tournament_id, player=player).first() is not None


class Follow(db.Model):
    __tablename__ = 'follows'

    id = db.Column(db.Integer, primary_key=True)
    tournament_id = db.Column(db.Integer, db.ForeignKey('tournaments.id'), nullable=False)
    player = db.Column(db.String(100), nullable=False, index=True)
    following = db.Column(db.Boolean, nullable=False, default=False)
    updated_at = db.Column(db.DateTime, nullable=False)

    __table_args__ = (
        db.UniqueConstraint('tournament_id', 'player', name='unique_follow'),
    )


class Comment(db.Model):
    __tablename__ = 'comments'

    id = db.Column(db.Integer, primary_key=True)
    tournament_id = db.Column(db.Integer, db.ForeignKey('tournaments.id'), nullable=False)
    position = db.Column(db.Integer, nullable=False)
    text = db.Column(db.Text, nullable=False)
    author = db.Column(db.String(100), nullable=False)
    posted_at = db.Column(db.DateTime, nullable=False)

    __table_args__ = (
        db.UniqueConstraint('tournament_id', 'position', name='unique_comment_position'),
    )

    def to_dict(self):
        return {
            'index': self.position,
            'text': self.text,
            'author': self.author,
        }


class Message(db.Model):
    __tablename__ = 'messages'

    id = db.Column(db.Integer, primary_key=True)
    tournament_id = db.Column(db.Integer, db.ForeignKey('tournaments.id'), nullable=False)
    # The player the thread belongs to; author is either that player or the manager
    participant = db.Column(db.String(100), nullable=False)
    position = db.Column(db.Integer, nullable=False)
    text = db.Column(db.Text, nullable=False)
    author = db.Column(db.String(100), nullable=False)
    posted_at = db.Column(db.DateTime, nullable=False)

    __table_args__ = (
        db.UniqueConstraint('tournament_id', 'participant', 'position', name='unique_message_position'),
    )

    def to_dict(self):
        return {
            'text': self.text,
            'author': self.author,
        }


class Exchange(db.Model):
    __tablename__ = 'exchanges'

    id = db.Column(db.Integer, primary_key=True)
    tournament_id = db.Column(db.Integer, db.ForeignKey('tournaments.id'), nullable=False)
    position = db.Column(db.Integer, nullable=False)
    participant = db.Column(db.String(100), nullable=False)

    __table_args__ = (
        db.UniqueConstraint('tournament_id', 'position', name='unique_exchange_position'),
    )


class PostTimestamp(db.Model):
    __tablename__ = 'post_timestamps'

    author = db.Column(db.String(100), primary_key=True)
    posted_at = db.Column(db.DateTime, nullable=False)
