from buddyup.extensions import db
from buddyup.helpers.time import utcnow

class Sport(db.Model):
    __tablename__ = "sport"

    id = db.Column(db.Integer, primary_key=True)

    name = db.Column(db.String(100), nullable=False, unique=True)
    description = db.Column(db.Text, nullable=True)
    icon_url = db.Column(db.String(255), nullable=True)

    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    user_sports = db.relationship("UserSport", back_populates="sport", lazy=True)
