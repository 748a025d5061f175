from awardpool import db


class Nominee(db.Model):
    __tablename__ = "nominees"

    id = db.Column(db.Integer, primary_key=True)
    category_id = db.Column(
        db.Integer, db.ForeignKey("categories.id"), nullable=False
    )
    name = db.Column(db.String(200), nullable=False)

    # At most one winner per category; maintained by the category service,
    # not by a store constraint
    is_winner = db.Column(db.Boolean, nullable=False, default=False)

    predictions = db.relationship(
        "Prediction",
        backref="nominee",
        lazy="dynamic",
        cascade="all, delete",
    )

    __table_args__ = (
        db.UniqueConstraint("category_id", "name", name="unique_category_nominee"),
        db.Index("idx_nominee_category", "category_id"),
        db.Index("idx_nominee_winner", "is_winner"),
    )

    def __repr__(self):
        return f"<Nominee {self.name} category_id={self.category_id}>"

    def to_dict(self):
        """Convert nominee to dictionary for API responses"""
        return {
            "id": self.id,
            "category_id": self.category_id,
            "name": self.name,
            "is_winner": bool(self.is_winner),
        }
