from awardpool import db


class Prediction(db.Model):
    """One participant's chosen nominee for one category"""

    __tablename__ = "predictions"

    id = db.Column(db.Integer, primary_key=True)
    participant_id = db.Column(
        db.Integer, db.ForeignKey("participants.id"), nullable=False
    )
    category_id = db.Column(
        db.Integer, db.ForeignKey("categories.id"), nullable=False
    )
    nominee_id = db.Column(db.Integer, db.ForeignKey("nominees.id"), nullable=False)

    __table_args__ = (
        db.UniqueConstraint(
            "participant_id", "category_id", name="unique_participant_category"
        ),
        db.Index("idx_prediction_participant", "participant_id"),
        db.Index("idx_prediction_category", "category_id"),
    )

    def __repr__(self):
        return (
            f"<Prediction participant_id={self.participant_id} "
            f"category_id={self.category_id} nominee_id={self.nominee_id}>"
        )

    def to_dict(self):
        """Convert prediction to dictionary for API responses"""
        return {
            "id": self.id,
            "participant_id": self.participant_id,
            "category_id": self.category_id,
            "nominee_id": self.nominee_id,
        }
