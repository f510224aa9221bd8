from buddyup.extensions import db
from buddyup.helpers.time import utcnow

class Conversation(db.Model):
    __tablename__ = "conversation"

    id = db.Column(db.Integer, primary_key=True)

    # One thread per accepted match
    match_id = db.Column(
        db.Integer,
        db.ForeignKey("matches.id"),
        nullable=True,
        unique=True,
    )

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    last_message_at = db.Column(db.DateTime(timezone=True), nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    match = db.relationship("Match", back_populates="conversation")
