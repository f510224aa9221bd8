"""
Read-only lookups over users, profiles, declared sports and the
sport/location catalog.

The matching core only talks to this narrow surface so the storage can be
swapped for an in-memory fake in tests.
"""
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import contains_eager, joinedload

from buddyup.extensions import db
from buddyup.helpers.distance import distance_km, distance_sort_key
from buddyup.models import Location, Sport, User, UserProfile, UserSport


class SqlDirectory:

    def get_user(self, user_id) -> Optional[User]:
        if user_id is None:
            return None
        return db.session.get(User, user_id)

    def get_profile(self, user_id) -> Optional[UserProfile]:
        return UserProfile.query.filter_by(user_id=user_id).first()

    def get_profiles(self, user_ids: Iterable[int]) -> Dict[int, UserProfile]:
        """Profiles keyed by user id, one query for the whole batch."""
        user_ids = list(user_ids)
        if not user_ids:
            return {}
        rows = UserProfile.query.filter(UserProfile.user_id.in_(user_ids)).all()
        return {p.user_id: p for p in rows}

    def get_user_sports(self, user_id) -> List[UserSport]:
        return (
            UserSport.query
            .filter_by(user_id=user_id)
            .order_by(UserSport.id.asc())
            .all()
        )

    def get_user_sport(self, user_id, sport_id) -> Optional[UserSport]:
        return UserSport.query.filter_by(user_id=user_id, sport_id=sport_id).first()

    def get_sport(self, sport_id) -> Optional[Sport]:
        if sport_id is None:
            return None
        return db.session.get(Sport, sport_id)

    def find_user_sports(
        self,
        sport_ids: Iterable[int],
        exclude_user_id,
        skill_level: Optional[str] = None,
    ) -> List[UserSport]:
        """
        UserSport rows of other active users for any of ``sport_ids``.

        Rows come back in insertion order so "first sport per user" is
        stable between calls. The user and sport are loaded with the rows.
        """
        sport_ids = list(sport_ids)
        if not sport_ids:
            return []

        q = (
            UserSport.query
            .join(User, User.id == UserSport.user_id)
            .options(contains_eager(UserSport.user), joinedload(UserSport.sport))
            .filter(
                User.active == True,
                User.id != exclude_user_id,
                UserSport.sport_id.in_(sport_ids),
            )
        )

        if skill_level:
            q = q.filter(UserSport.skill_level == skill_level)

        return q.order_by(UserSport.id.asc()).all()

    def active_sports(self) -> List[Sport]:
        return Sport.query.filter_by(is_active=True).order_by(Sport.name.asc()).all()

    def nearby_locations(self, point, radius_km) -> List[tuple]:
        """
        Active locations within ``radius_km`` of ``point``.
        Returns (location, distance_km) pairs, closest first.
        """
        rows = []
        for loc in Location.query.filter_by(is_active=True).all():
            dist = distance_km(point, loc.point)
            if dist <= radius_km:
                rows.append((loc, dist))

        rows.sort(key=lambda r: (distance_sort_key(r[1]), r[0].name))
        return rows


sql_directory = SqlDirectory()
