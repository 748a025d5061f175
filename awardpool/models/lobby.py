import secrets
from datetime import datetime, timezone

from awardpool import db
from awardpool.errors import StateConflict


class Lobby(db.Model):
    """
    One prediction pool, owned by one admin.

    Status moves open -> locked -> completed. Locking is reversible
    (locked -> open); completed is terminal.
    """

    __tablename__ = "lobbies"

    STATUS_OPEN = "open"
    STATUS_LOCKED = "locked"
    STATUS_COMPLETED = "completed"
    STATUSES = (STATUS_OPEN, STATUS_LOCKED, STATUS_COMPLETED)

    # Opaque, non-guessable id used in invite links
    id = db.Column(db.String(32), primary_key=True)
    admin_id = db.Column(db.Integer, db.ForeignKey("admins.id"), nullable=False)
    name = db.Column(db.String(100), nullable=False)
    status = db.Column(db.String(20), nullable=False, default=STATUS_OPEN)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    locked_at = db.Column(db.DateTime, nullable=True)

    # Relationships
    participants = db.relationship(
        "Participant",
        backref="lobby",
        lazy="dynamic",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        db.Index("idx_lobby_admin", "admin_id"),
        db.Index("idx_lobby_created_at", "created_at"),
    )

    def __repr__(self):
        return f"<Lobby {self.id} {self.name} ({self.status})>"

    def __init__(self, id_length=10, **kwargs):
        super(Lobby, self).__init__(**kwargs)
        if not self.id:
            self.id = self.generate_id(id_length)
        if not self.status:
            self.status = self.STATUS_OPEN

    @staticmethod
    def generate_id(length=10):
        """Generate a unique URL-safe lobby id"""
        while True:
            lobby_id = secrets.token_urlsafe(length)[:length]
            if not db.session.get(Lobby, lobby_id):
                return lobby_id

    @property
    def is_open(self):
        return self.status == self.STATUS_OPEN

    @property
    def is_completed(self):
        return self.status == self.STATUS_COMPLETED

    @property
    def accepts_predictions(self):
        """Prediction batches are only accepted while the lobby is open"""
        return self.is_open

    @property
    def picks_visible(self):
        """Individual picks are revealed once the lobby is locked or completed"""
        return self.status in (self.STATUS_LOCKED, self.STATUS_COMPLETED)

    def ensure_accepting_predictions(self):
        if not self.accepts_predictions:
            raise StateConflict("This lobby is no longer accepting predictions")

    def ensure_picks_visible(self):
        if not self.picks_visible:
            raise StateConflict("Picks are hidden until the lobby is locked")

    def lock(self):
        """Close the lobby to new submissions"""
        if self.is_completed:
            raise StateConflict("Completed lobbies cannot be locked again")
        if self.status == self.STATUS_LOCKED:
            return
        self.status = self.STATUS_LOCKED
        self.locked_at = datetime.now(timezone.utc)

    def unlock(self):
        """Reopen a locked lobby for submissions"""
        if self.is_completed:
            raise StateConflict("Completed lobbies cannot be reopened")
        self.status = self.STATUS_OPEN
        self.locked_at = None

    def complete(self):
        """Mark the ceremony as finished"""
        if self.is_completed:
            return
        self.status = self.STATUS_COMPLETED

    def get_participant_count(self):
        return self.participants.count()

    def to_dict(self, include_participant_count=False):
        """Convert lobby to dictionary for API responses"""
        data = {
            "id": self.id,
            "admin_id": self.admin_id,
            "name": self.name,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "locked_at": self.locked_at.isoformat() if self.locked_at else None,
        }

        if include_participant_count:
            data["participant_count"] = self.get_participant_count()

        return data
