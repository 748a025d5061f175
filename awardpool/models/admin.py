from datetime import datetime, timezone

from flask_login import UserMixin
from werkzeug.security import check_password_hash, generate_password_hash

from awardpool import db


class Admin(UserMixin, db.Model):
    __tablename__ = "admins"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    # Relationships
    lobbies = db.relationship("Lobby", backref="admin", lazy="dynamic")

    def __repr__(self):
        return f"<Admin {self.username}>"

    def set_password(self, password):
        """Set password hash"""
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        """Check password against hash"""
        return check_password_hash(self.password_hash, password)

    def to_dict(self):
        """Convert admin to dictionary for API responses"""
        return {
            "id": self.id,
            "username": self.username,
        }

    @staticmethod
    def create_admin(username, password):
        """Create an admin account, raising Conflict if the username is taken"""
        from sqlalchemy.exc import IntegrityError

        from awardpool.errors import Conflict
        from awardpool.utils.db_utils import atomic

        if Admin.query.filter_by(username=username).first():
            raise Conflict("Username already exists")

        try:
            with atomic():
                admin = Admin(username=username)
                admin.set_password(password)
                db.session.add(admin)
        except IntegrityError:
            raise Conflict("Username already exists")

        return admin

    @staticmethod
    def authenticate(username, password):
        """Return the admin for valid credentials, else None"""
        admin = Admin.query.filter_by(username=username).first()
        if admin and admin.check_password(password):
            return admin
        return None
