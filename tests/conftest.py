import pytest

from buddyup import create_app
from buddyup.config import TestConfig
from buddyup.extensions import db as _db
from buddyup.models import Sport, User, UserProfile, UserSport
from buddyup.routes import register_blueprints


@pytest.fixture
def app():
    app = create_app(TestConfig)
    register_blueprints(app)

    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture
def client(app):
    return app.test_client()


class RecordingBridge:
    """Stands in for the conversation service and counts calls."""

    def __init__(self):
        self.calls = []

    def ensure_for_match(self, match):
        self.calls.append(match.id)
        return 1000 + match.id

    def conversation_id_for(self, match_id):
        return 1000 + match_id if match_id in self.calls else None


@pytest.fixture
def bridge():
    return RecordingBridge()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(first_name, lon=None, lat=None, days=None, times=None,
              active=True, verified=False, with_profile=True):
        counter["n"] += 1
        n = counter["n"]
        user = User(
            auth_id=f"test|{n}",
            email=f"{first_name.lower()}{n}@example.com",
            first_name=first_name,
            active=active,
            is_verified=verified,
        )
        db.session.add(user)
        db.session.flush()

        if with_profile:
            db.session.add(UserProfile(
                user_id=user.id,
                longitude=lon,
                latitude=lat,
                preferred_days=days,
                preferred_times=times,
            ))

        db.session.commit()
        return user

    return _make


@pytest.fixture
def make_sport(db):
    def _make(name):
        sport = Sport(name=name)
        db.session.add(sport)
        db.session.commit()
        return sport

    return _make


@pytest.fixture
def add_sport(db):
    def _add(user, sport, skill_level="Intermediate"):
        us = UserSport(user_id=user.id, sport_id=sport.id, skill_level=skill_level)
        db.session.add(us)
        db.session.commit()
        return us

    return _add


@pytest.fixture
def tennis(make_sport):
    return make_sport("Tennis")


@pytest.fixture
def running(make_sport):
    return make_sport("Running")


@pytest.fixture
def login(client):
    def _login(user):
        with client.session_transaction() as sess:
            sess["user_id"] = user.id

    return _login
