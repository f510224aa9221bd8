import pytest
from sqlalchemy import event

from buddyup.errors import NotFound
from buddyup.helpers.candidates import MatchFilter, find_candidates, normalize_skill_level
from buddyup.models import Match, MatchStatus


def ids(candidates):
    return [c.candidate_user_id for c in candidates]


def test_nearby_candidate_is_found_with_distance(make_user, add_sport, tennis):
    r = make_user("Rita", lon=0.0, lat=0.0)
    c = make_user("Cal", lon=0.0, lat=0.1, verified=True)
    add_sport(r, tennis)
    add_sport(c, tennis, "Advanced")

    result = find_candidates(r.id, MatchFilter(max_distance_km=50))

    assert ids(result) == [c.id]
    cand = result[0]
    assert cand.distance_km == pytest.approx(11.1, abs=0.1)
    assert cand.display_name == "Cal"
    assert cand.sport_id == tennis.id
    assert cand.sport_name == "Tennis"
    assert cand.skill_level == "Advanced"
    assert cand.verified is True


def test_sorted_closest_first_unknown_last(make_user, add_sport, tennis):
    r = make_user("Rita", lon=0.0, lat=0.0)
    far = make_user("Far", lon=0.0, lat=0.3)
    nowhere = make_user("Nowhere")
    near = make_user("Near", lon=0.0, lat=0.1)
    for u in (r, far, nowhere, near):
        add_sport(u, tennis)

    result = find_candidates(r.id, MatchFilter(max_distance_km=50))

    assert ids(result) == [near.id, far.id, nowhere.id]
    assert result[-1].distance_km is None


def test_distance_cutoff(make_user, add_sport, tennis):
    r = make_user("Rita", lon=0.0, lat=0.0)
    c = make_user("Cal", lon=0.0, lat=0.1)
    add_sport(r, tennis)
    add_sport(c, tennis)

    assert find_candidates(r.id, MatchFilter(max_distance_km=10)) == []
    assert ids(find_candidates(r.id, MatchFilter(max_distance_km=12))) == [c.id]


def test_requester_without_point_skips_distance_filter(make_user, add_sport, tennis):
    r = make_user("Rita", with_profile=False)
    c = make_user("Cal", lon=100.0, lat=10.0)
    add_sport(r, tennis)
    add_sport(c, tennis)

    result = find_candidates(r.id, MatchFilter(max_distance_km=1))
    assert ids(result) == [c.id]
    assert result[0].distance_km is None


def test_only_shared_sports_by_default(make_user, add_sport, tennis, running):
    r = make_user("Rita", lon=0.0, lat=0.0)
    tennis_player = make_user("Tess", lon=0.0, lat=0.0)
    runner = make_user("Ron", lon=0.0, lat=0.0)
    add_sport(r, tennis)
    add_sport(tennis_player, tennis)
    add_sport(runner, running)

    assert ids(find_candidates(r.id, MatchFilter())) == [tennis_player.id]


def test_explicit_sport_filter(make_user, add_sport, tennis, running):
    r = make_user("Rita", lon=0.0, lat=0.0)
    tennis_player = make_user("Tess", lon=0.0, lat=0.0)
    runner = make_user("Ron", lon=0.0, lat=0.0)
    add_sport(r, tennis)
    add_sport(tennis_player, tennis)
    add_sport(runner, running)

    assert ids(find_candidates(r.id, MatchFilter(sport_id=running.id))) == [runner.id]


def test_no_declared_sports_returns_empty(make_user, add_sport, tennis):
    r = make_user("Rita", lon=0.0, lat=0.0)
    c = make_user("Cal", lon=0.0, lat=0.0)
    add_sport(c, tennis)

    assert find_candidates(r.id, MatchFilter()) == []
    # an explicit sport still works
    assert ids(find_candidates(r.id, MatchFilter(sport_id=tennis.id))) == [c.id]


def test_skill_level_is_exact(make_user, add_sport, tennis):
    r = make_user("Rita", lon=0.0, lat=0.0)
    beginner = make_user("Bea", lon=0.0, lat=0.0)
    expert = make_user("Ed", lon=0.0, lat=0.0)
    add_sport(r, tennis)
    add_sport(beginner, tennis, "Beginner")
    add_sport(expert, tennis, "Expert")

    assert ids(find_candidates(r.id, MatchFilter(skill_level="Expert"))) == [expert.id]


def test_inactive_users_are_hidden(make_user, add_sport, tennis):
    r = make_user("Rita", lon=0.0, lat=0.0)
    gone = make_user("Gone", lon=0.0, lat=0.0, active=False)
    add_sport(r, tennis)
    add_sport(gone, tennis)

    assert find_candidates(r.id, MatchFilter()) == []


def test_one_row_per_candidate_with_first_sport(make_user, add_sport, tennis, running):
    r = make_user("Rita", lon=0.0, lat=0.0)
    c = make_user("Cal", lon=0.0, lat=0.0)
    add_sport(r, tennis)
    add_sport(r, running)
    add_sport(c, running, "Beginner")
    add_sport(c, tennis, "Expert")

    result = find_candidates(r.id, MatchFilter())

    assert ids(result) == [c.id]
    assert result[0].sport_id == running.id
    assert result[0].skill_level == "Beginner"


@pytest.mark.parametrize("status", [
    MatchStatus.PENDING,
    MatchStatus.ACCEPTED,
    MatchStatus.CANCELED,
])
def test_live_match_excludes_candidate_in_either_direction(db, make_user, add_sport, tennis, running, status):
    r = make_user("Rita", lon=0.0, lat=0.0)
    c = make_user("Cal", lon=0.0, lat=0.0)
    add_sport(r, tennis)
    add_sport(r, running)
    add_sport(c, tennis)
    add_sport(c, running)

    # match on a different sport, sent by the candidate
    m = Match.request(c.id, r.id, running.id)
    m.status = status.value
    db.session.add(m)
    db.session.commit()

    for f in (MatchFilter(), MatchFilter(sport_id=tennis.id), MatchFilter(max_distance_km=10000)):
        assert find_candidates(r.id, f) == []
        assert find_candidates(c.id, f) == []


def test_rejected_match_does_not_exclude(db, make_user, add_sport, tennis):
    r = make_user("Rita", lon=0.0, lat=0.0)
    c = make_user("Cal", lon=0.0, lat=0.0)
    add_sport(r, tennis)
    add_sport(c, tennis)

    m = Match.request(r.id, c.id, tennis.id)
    m.status = MatchStatus.REJECTED.value
    db.session.add(m)
    db.session.commit()

    assert ids(find_candidates(r.id, MatchFilter())) == [c.id]


def test_day_and_time_overlap(make_user, add_sport, tennis):
    r = make_user("Rita", lon=0.0, lat=0.0)
    weekend = make_user("Wes", lon=0.0, lat=0.0, days=["Saturday", "Sunday"], times=["Morning"])
    weekday = make_user("Wendy", lon=0.0, lat=0.0, days=["Monday"], times=["Evening"])
    blank = make_user("Blank", lon=0.0, lat=0.0)
    for u in (r, weekend, weekday, blank):
        add_sport(u, tennis)

    assert ids(find_candidates(r.id, MatchFilter(days=["Sunday", "Tuesday"]))) == [weekend.id]
    assert ids(find_candidates(r.id, MatchFilter(times=["Evening"]))) == [weekday.id]
    assert ids(find_candidates(r.id, MatchFilter(days=["Monday"], times=["Morning"]))) == []
    # no day/time filter: nobody is dropped for missing preferences
    assert set(ids(find_candidates(r.id, MatchFilter()))) == {weekend.id, weekday.id, blank.id}


def test_candidate_without_profile_dropped_only_when_filtering_days(make_user, add_sport, tennis):
    r = make_user("Rita", lon=0.0, lat=0.0)
    c = make_user("Cal", with_profile=False)
    add_sport(r, tennis)
    add_sport(c, tennis)

    assert ids(find_candidates(r.id, MatchFilter())) == [c.id]
    assert find_candidates(r.id, MatchFilter(days=["Monday"])) == []


def test_unknown_user_is_not_found(app):
    with pytest.raises(NotFound):
        find_candidates(12345, MatchFilter())


def test_candidate_summary_as_dict_rounds_distance(make_user, add_sport, tennis):
    r = make_user("Rita", lon=0.0, lat=0.0)
    c = make_user("Cal", lon=0.0, lat=0.1, days=["Monday"])
    add_sport(r, tennis)
    add_sport(c, tennis)

    d = find_candidates(r.id, MatchFilter())[0].as_dict()
    assert d["distance_km"] == 11.12
    assert d["preferred_days"] == ["Monday"]
    assert d["preferred_times"] == []


@pytest.mark.parametrize("raw, expected", [
    (None, None),
    ("", None),
    ("  ", None),
    ("beginner", "Beginner"),
    (" EXPERT ", "Expert"),
    ("Intermediate", "Intermediate"),
])
def test_normalize_skill_level(raw, expected):
    assert normalize_skill_level(raw) == expected


def test_normalize_skill_level_rejects_unknown():
    with pytest.raises(ValueError):
        normalize_skill_level("pro")


def count_statements(db, fn):
    statements = []

    def record(conn, cursor, statement, *args):
        statements.append(statement)

    event.listen(db.engine, "before_cursor_execute", record)
    try:
        result = fn()
    finally:
        event.remove(db.engine, "before_cursor_execute", record)
    return result, len(statements)


def test_query_count_does_not_grow_with_candidates(db, make_user, add_sport, tennis):
    r = make_user("Rita", lon=0.0, lat=0.0)
    add_sport(r, tennis)
    for i in range(30):
        c = make_user(f"Cand{i}", lon=0.0, lat=0.01 * (i + 1), days=["Monday"])
        add_sport(c, tennis)
    rid = r.id
    db.session.expire_all()

    result, n = count_statements(db, lambda: find_candidates(rid, MatchFilter(max_distance_km=500)))

    assert len(result) == 30
    assert [c.display_name for c in result][:2] == ["Cand0", "Cand1"]
    assert result[0].sport_name == "Tennis"
    assert n <= 8
