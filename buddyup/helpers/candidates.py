import logging
from dataclasses import dataclass, field, asdict
from typing import List, Optional

from buddyup.errors import NotFound
from buddyup.helpers.directory import sql_directory
from buddyup.helpers.distance import distance_between, distance_sort_key, within_radius
from buddyup.helpers.match_store import sql_match_store
from buddyup.models import SKILL_LEVELS

logger = logging.getLogger(__name__)

DEFAULT_MAX_DISTANCE_KM = 50


@dataclass
class MatchFilter:
    sport_id: Optional[int] = None
    skill_level: Optional[str] = None
    max_distance_km: float = DEFAULT_MAX_DISTANCE_KM
    days: List[str] = field(default_factory=list)
    times: List[str] = field(default_factory=list)


@dataclass
class CandidateSummary:
    candidate_user_id: int
    display_name: str
    sport_id: int
    sport_name: str
    skill_level: str
    verified: bool
    distance_km: Optional[float]
    preferred_days: List[str]
    preferred_times: List[str]
    profile_picture_url: Optional[str] = None
    bio: Optional[str] = None

    def as_dict(self):
        d = asdict(self)
        if d["distance_km"] is not None:
            d["distance_km"] = round(d["distance_km"], 2)
        return d


def normalize_skill_level(raw: Optional[str]) -> Optional[str]:
    """
    "beginner" / "BEGINNER" / " Beginner " -> "Beginner".
    Empty -> None. Anything else is a ValueError.
    """
    k = (raw or "").strip().lower()
    if not k:
        return None

    for level in SKILL_LEVELS:
        if level.lower() == k:
            return level

    raise ValueError(f"Unknown skill level: {raw!r}")


def _overlaps(wanted, offered) -> bool:
    if not offered:
        return False
    offered = set(offered)
    return any(w in offered for w in wanted)


def find_candidates(user_id, match_filter: MatchFilter, directory=None, store=None) -> List[CandidateSummary]:
    """
    Compatible buddies for ``user_id``, closest first.

    Candidates share a sport with the requester (or the filter's sport),
    are active, have no live match with the requester, sit within the
    filter radius and overlap on any requested days/times. Each candidate
    appears once, with the first qualifying sport found for them.
    Unknown distances sort last.
    """
    directory = directory or sql_directory
    store = store or sql_match_store

    user = directory.get_user(user_id)
    if user is None:
        raise NotFound(f"User not found with ID: {user_id}")

    profile = directory.get_profile(user_id)
    my_point = profile.point if profile else None

    my_sports = directory.get_user_sports(user_id)
    if not my_sports and match_filter.sport_id is None:
        return []

    if match_filter.sport_id is not None:
        sport_ids = [match_filter.sport_id]
    else:
        sport_ids = [us.sport_id for us in my_sports]

    rows = directory.find_user_sports(
        sport_ids,
        exclude_user_id=user_id,
        skill_level=match_filter.skill_level,
    )

    # Group by user, keep the first sport encountered for each
    first_by_user = {}
    for us in rows:
        first_by_user.setdefault(us.user_id, us)

    if not first_by_user:
        return []

    already_matched = store.live_partner_ids(user_id)
    profiles = directory.get_profiles(
        uid for uid in first_by_user if uid not in already_matched
    )

    results = []
    for other_id, us in first_by_user.items():
        if other_id in already_matched:
            continue

        other_profile = profiles.get(other_id)
        other_point = other_profile.point if other_profile else None

        dist = distance_between(my_point, other_point)
        if not within_radius(dist, match_filter.max_distance_km):
            continue

        other_days = list((other_profile.preferred_days if other_profile else None) or [])
        other_times = list((other_profile.preferred_times if other_profile else None) or [])

        if match_filter.days and not _overlaps(match_filter.days, other_days):
            continue
        if match_filter.times and not _overlaps(match_filter.times, other_times):
            continue

        other_user = getattr(us, "user", None) or directory.get_user(other_id)
        sport = getattr(us, "sport", None) or directory.get_sport(us.sport_id)

        results.append(CandidateSummary(
            candidate_user_id=other_id,
            display_name=other_user.first_name,
            profile_picture_url=other_profile.profile_picture_url if other_profile else None,
            bio=other_profile.bio if other_profile else None,
            sport_id=us.sport_id,
            sport_name=sport.name if sport else None,
            skill_level=us.skill_level,
            verified=bool(other_user.is_verified),
            distance_km=dist,
            preferred_days=other_days,
            preferred_times=other_times,
        ))

    # stable sort: ties keep encounter order
    results.sort(key=lambda c: distance_sort_key(c.distance_km))

    logger.debug(
        "find_candidates user=%s sports=%s skill=%r radius=%s -> %d",
        user_id, sport_ids, match_filter.skill_level, match_filter.max_distance_km, len(results),
    )
    return results
