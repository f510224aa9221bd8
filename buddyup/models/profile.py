from buddyup.extensions import db
from buddyup.helpers.distance import GeoPoint
from buddyup.helpers.time import utcnow

class UserProfile(db.Model):
    __tablename__ = "user_profile"

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id"),
        nullable=False,
        unique=True,
    )

    bio = db.Column(db.Text, nullable=True)
    profile_picture_url = db.Column(db.String(255), nullable=True)

    # Preferred meeting point, degrees. Both null = no point set.
    latitude = db.Column(db.Float, nullable=True)
    longitude = db.Column(db.Float, nullable=True)

    max_travel_distance = db.Column(db.Integer, nullable=False, default=20)  # km

    # e.g. ["Monday", "Saturday"] / ["Morning", "Evening"]
    preferred_days = db.Column(db.JSON, nullable=True)
    preferred_times = db.Column(db.JSON, nullable=True)

    verification_status = db.Column(db.String(50), nullable=False, default="Unverified")
    public_profile = db.Column(db.Boolean, nullable=False, default=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    user = db.relationship("User", back_populates="profile")

    @property
    def point(self):
        if self.latitude is None or self.longitude is None:
            return None
        return GeoPoint(longitude=self.longitude, latitude=self.latitude)
