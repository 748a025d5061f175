from datetime import datetime, timezone

from awardpool import db


class SystemConfig(db.Model):
    """Single-row table holding the participation limits"""

    __tablename__ = "system_config"

    id = db.Column(db.Integer, primary_key=True)
    max_admins = db.Column(db.Integer, nullable=False, default=100)
    max_lobbies_per_admin = db.Column(db.Integer, nullable=False, default=10)
    max_participants_per_lobby = db.Column(db.Integer, nullable=False, default=50)

    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self):
        return (
            f"<SystemConfig admins={self.max_admins} "
            f"lobbies={self.max_lobbies_per_admin} "
            f"participants={self.max_participants_per_lobby}>"
        )

    def to_dict(self):
        return {
            "max_admins": self.max_admins,
            "max_lobbies_per_admin": self.max_lobbies_per_admin,
            "max_participants_per_lobby": self.max_participants_per_lobby,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
