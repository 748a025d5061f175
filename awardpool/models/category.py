from datetime import datetime, timezone

from awardpool import db


class Category(db.Model):
    """A single award being predicted. Categories are global across lobbies."""

    __tablename__ = "categories"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    display_order = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    # Relationships
    nominees = db.relationship(
        "Nominee",
        backref="category",
        lazy="select",
        order_by="Nominee.id",
        cascade="all, delete-orphan",
    )
    predictions = db.relationship(
        "Prediction",
        backref="category",
        lazy="dynamic",
        cascade="all, delete",
    )

    __table_args__ = (db.Index("idx_category_display_order", "display_order", "id"),)

    def __repr__(self):
        return f"<Category {self.name}>"

    @staticmethod
    def ordered():
        """Query for all categories in ballot order"""
        return Category.query.order_by(Category.display_order, Category.id)

    @property
    def winner(self):
        """The announced winning nominee, or None"""
        winners = [nominee for nominee in self.nominees if nominee.is_winner]
        return winners[0] if winners else None

    def to_dict(self, include_nominees=False):
        """Convert category to dictionary for API responses"""
        data = {
            "id": self.id,
            "name": self.name,
            "display_order": self.display_order,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

        if include_nominees:
            winner = self.winner
            data["nominees"] = [nominee.to_dict() for nominee in self.nominees]
            data["winner_id"] = winner.id if winner else None

        return data
