from datetime import datetime, timezone

from awardpool import db


def normalize_name(name):
    """Key used for case-insensitive name uniqueness within a lobby"""
    return (name or "").strip().casefold()


class Participant(db.Model):
    """An anonymous entrant, created once per successful submission"""

    __tablename__ = "participants"

    MAX_NAME_LENGTH = 100

    id = db.Column(db.Integer, primary_key=True)
    lobby_id = db.Column(db.String(32), db.ForeignKey("lobbies.id"), nullable=False)
    name = db.Column(db.String(MAX_NAME_LENGTH), nullable=False)
    # casefold() can expand a character to up to three
    name_key = db.Column(db.String(MAX_NAME_LENGTH * 3), nullable=False)

    submitted_at = db.Column(
        db.DateTime, default=lambda: datetime.now(timezone.utc)
    )

    # Relationships
    predictions = db.relationship(
        "Prediction",
        backref="participant",
        lazy="dynamic",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        db.UniqueConstraint("lobby_id", "name_key", name="unique_lobby_participant"),
        db.Index("idx_participant_lobby", "lobby_id", "submitted_at"),
    )

    def __repr__(self):
        return f"<Participant {self.name} lobby_id={self.lobby_id}>"

    def __init__(self, **kwargs):
        super(Participant, self).__init__(**kwargs)
        if self.name is not None:
            self.name = self.name.strip()
            self.name_key = normalize_name(self.name)

    def to_dict(self):
        """Convert participant to dictionary for API responses"""
        return {
            "id": self.id,
            "lobby_id": self.lobby_id,
            "name": self.name,
            "submitted_at": (
                self.submitted_at.isoformat() if self.submitted_at else None
            ),
        }
