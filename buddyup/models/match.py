import enum

from sqlalchemy import Index, text
from buddyup.extensions import db
from buddyup.helpers.time import utcnow


class MatchStatus(str, enum.Enum):
    """Possible states for a match request between two users."""

    PENDING = "Pending"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"
    CANCELED = "Canceled"


class Match(db.Model):
    """
    A buddy request from requester to recipient for one sport.

    Rows are never deleted, only status-transitioned. The pair columns hold
    the two user ids in sorted order so one index covers both request
    directions.
    """

    __tablename__ = "matches"

    id = db.Column(db.Integer, primary_key=True)

    requester_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    recipient_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    # normalized: user_low_id < user_high_id
    user_low_id = db.Column(db.Integer, nullable=False)
    user_high_id = db.Column(db.Integer, nullable=False)

    sport_id = db.Column(
        db.Integer,
        db.ForeignKey("sport.id"),
        nullable=True,
        index=True,
    )

    status = db.Column(
        db.String(20),
        nullable=False,
        default=MatchStatus.PENDING.value,
        index=True,
    )

    requested_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    responded_at = db.Column(db.DateTime(timezone=True), nullable=True)

    requester = db.relationship("User", foreign_keys=[requester_id])
    recipient = db.relationship("User", foreign_keys=[recipient_id])
    sport = db.relationship("Sport")
    conversation = db.relationship("Conversation", back_populates="match", uselist=False)

    __table_args__ = (
        # One live relationship per pair and sport. Rejected rows are
        # excluded so a rejected request can be sent again.
        Index(
            "uq_match_live_pair_sport",
            "user_low_id",
            "user_high_id",
            "sport_id",
            unique=True,
            sqlite_where=text("status != 'Rejected'"),
            postgresql_where=text("status != 'Rejected'"),
        ),
    )

    @classmethod
    def request(cls, requester_id, recipient_id, sport_id, requested_at=None):
        low, high = sorted((requester_id, recipient_id))
        return cls(
            requester_id=requester_id,
            recipient_id=recipient_id,
            user_low_id=low,
            user_high_id=high,
            sport_id=sport_id,
            status=MatchStatus.PENDING.value,
            requested_at=requested_at or utcnow(),
        )

    def __repr__(self):
        return f"<Match(id={self.id}, {self.requester_id}->{self.recipient_id}, sport={self.sport_id}, status={self.status})>"
