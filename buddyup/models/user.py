from buddyup.extensions import db
from buddyup.helpers.time import utcnow

class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)

    # Subject claim from the identity provider
    auth_id = db.Column(db.String(128), nullable=False, unique=True, index=True)

    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False, default="")

    is_verified = db.Column(db.Boolean, nullable=False, default=False)
    is_admin = db.Column(db.Boolean, nullable=False, default=False)

    # Soft delete: deactivated users are never removed
    active = db.Column(db.Boolean, nullable=False, default=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    last_login_at = db.Column(db.DateTime(timezone=True), nullable=True)

    profile = db.relationship("UserProfile", back_populates="user", uselist=False)
    sports = db.relationship("UserSport", back_populates="user", lazy=True)

    def __repr__(self):
        return f"<User(id={self.id}, first_name={self.first_name}, active={self.active})>"
