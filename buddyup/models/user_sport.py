from sqlalchemy import UniqueConstraint
from buddyup.extensions import db
from buddyup.helpers.time import utcnow

SKILL_LEVELS = ("Beginner", "Intermediate", "Advanced", "Expert")

class UserSport(db.Model):
    __tablename__ = "user_sport"

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    sport_id = db.Column(
        db.Integer,
        db.ForeignKey("sport.id"),
        nullable=False,
        index=True,
    )

    skill_level = db.Column(db.String(50), nullable=False)  # one of SKILL_LEVELS
    years_experience = db.Column(db.Integer, nullable=True)
    notes = db.Column(db.Text, nullable=True)
    is_public = db.Column(db.Boolean, nullable=False, default=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    user = db.relationship("User", back_populates="sports")
    sport = db.relationship("Sport", back_populates="user_sports")

    __table_args__ = (
        UniqueConstraint("user_id", "sport_id", name="uq_user_sport"),
    )
