# seed_buddies.py
import random

from buddyup.run import api
from buddyup.extensions import db
from buddyup.models import Location, Sport, User, UserProfile, UserSport, SKILL_LEVELS

SPORTS = ["Tennis", "Running", "Climbing", "Cycling", "Swimming"]
DAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
TIMES = ["Morning", "Afternoon", "Evening"]

# Melbourne CBD-ish
CENTER_LAT = -37.8136
CENTER_LON = 144.9631

def get_or_create_sport(name):
    sport = Sport.query.filter_by(name=name).first()
    if sport:
        return sport
    sport = Sport(name=name)
    db.session.add(sport)
    return sport

def main(num_users=200):
    with api.app_context():
        sports = [get_or_create_sport(n) for n in SPORTS]

        if Location.query.count() == 0:
            db.session.add(Location(name="Princes Park Courts", city="Melbourne",
                                    latitude=-37.7833, longitude=144.9617, is_verified=True))
            db.session.add(Location(name="Tan Track", city="Melbourne",
                                    latitude=-37.8304, longitude=144.9796, is_verified=True))
        db.session.commit()

        existing = User.query.count()
        print(f"Existing users: {existing}")

        for i in range(num_users):
            n = existing + i + 1
            user = User(
                auth_id=f"seed|{n}",
                email=f"buddy{n}@example.com",
                first_name=f"Buddy {n}",
                is_verified=random.random() < 0.3,
            )
            db.session.add(user)
            db.session.flush()

            db.session.add(UserProfile(
                user_id=user.id,
                latitude=CENTER_LAT + random.uniform(-0.3, 0.3),
                longitude=CENTER_LON + random.uniform(-0.3, 0.3),
                max_travel_distance=random.choice([5, 10, 20, 50]),
                preferred_days=random.sample(DAYS, random.randint(1, 4)),
                preferred_times=random.sample(TIMES, random.randint(1, 2)),
            ))

            for sport in random.sample(sports, random.randint(1, 3)):
                db.session.add(UserSport(
                    user_id=user.id,
                    sport_id=sport.id,
                    skill_level=random.choice(SKILL_LEVELS),
                ))

        db.session.commit()
        total = User.query.count()
        print(f"Now have {total} users in the DB.")

if __name__ == "__main__":
    main()
