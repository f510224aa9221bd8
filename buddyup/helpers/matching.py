"""
Match lifecycle: request, respond, cancel and the read queries.

    Pending --accept--> Accepted --cancel--> Canceled
    Pending --reject--> Rejected
    Pending --cancel (requester only)--> Canceled

Every function takes the acting user id explicitly. Storage, directory and
conversation collaborators default to the SQL-backed ones and can be
replaced.
"""
import logging

from buddyup.errors import Conflict, Forbidden, InvalidState, NotFound
from buddyup.helpers.conversation import sql_conversation_bridge
from buddyup.helpers.directory import sql_directory
from buddyup.helpers.distance import distance_between
from buddyup.helpers.match_store import sql_match_store
from buddyup.helpers.time import to_utc_iso, utcnow
from buddyup.models import Match, MatchStatus

logger = logging.getLogger(__name__)


def _require_user(directory, user_id, label="User"):
    user = directory.get_user(user_id)
    if user is None:
        raise NotFound(f"{label} not found with ID: {user_id}")
    return user


def _require_match(store, match_id):
    match = store.get(match_id)
    if match is None:
        raise NotFound(f"Match not found with ID: {match_id}")
    return match


def match_summary(match, directory=None, bridge=None) -> dict:
    """Flatten a match plus both parties and the sport into a JSON-ready dict."""
    directory = directory or sql_directory
    bridge = bridge or sql_conversation_bridge

    requester = directory.get_user(match.requester_id)
    recipient = directory.get_user(match.recipient_id)
    requester_profile = directory.get_profile(match.requester_id)
    recipient_profile = directory.get_profile(match.recipient_id)
    sport = directory.get_sport(match.sport_id)

    requester_sport = None
    recipient_sport = None
    if match.sport_id is not None:
        requester_sport = directory.get_user_sport(match.requester_id, match.sport_id)
        recipient_sport = directory.get_user_sport(match.recipient_id, match.sport_id)

    dist = distance_between(
        requester_profile.point if requester_profile else None,
        recipient_profile.point if recipient_profile else None,
    )

    conversation_id = None
    if match.status == MatchStatus.ACCEPTED.value:
        conversation_id = bridge.conversation_id_for(match.id)

    return {
        "match_id": match.id,
        "requester_id": match.requester_id,
        "requester_first_name": requester.first_name if requester else None,
        "requester_profile_picture_url": requester_profile.profile_picture_url if requester_profile else None,
        "recipient_id": match.recipient_id,
        "recipient_first_name": recipient.first_name if recipient else None,
        "recipient_profile_picture_url": recipient_profile.profile_picture_url if recipient_profile else None,
        "sport_id": match.sport_id,
        "sport_name": sport.name if sport else None,
        "requester_skill_level": requester_sport.skill_level if requester_sport else None,
        "recipient_skill_level": recipient_sport.skill_level if recipient_sport else None,
        "status": match.status,
        "requested_at": to_utc_iso(match.requested_at),
        "responded_at": to_utc_iso(match.responded_at),
        "distance_km": round(dist, 2) if dist is not None else None,
        "conversation_id": conversation_id,
    }


# --- Create ---

def send_match_request(requester_id, recipient_id, sport_id, directory=None, store=None, bridge=None) -> dict:
    directory = directory or sql_directory
    store = store or sql_match_store

    _require_user(directory, requester_id)
    _require_user(directory, recipient_id, label="Recipient")

    sport = directory.get_sport(sport_id)
    if sport is None:
        raise NotFound(f"Sport not found with ID: {sport_id}")

    if requester_id == recipient_id:
        raise InvalidState("You can't send a match request to yourself")

    # Both sides must have opted into the sport
    if directory.get_user_sport(requester_id, sport_id) is None:
        raise InvalidState(f"User does not have sport with ID: {sport_id}")
    if directory.get_user_sport(recipient_id, sport_id) is None:
        raise InvalidState(f"Recipient does not have sport with ID: {sport_id}")

    if store.live_between(requester_id, recipient_id, sport_id) is not None:
        raise Conflict()

    # The unique index is the real guard; add() turns a lost race into Conflict
    match = store.add(Match.request(requester_id, recipient_id, sport_id, requested_at=utcnow()))

    logger.info(
        "Match %s requested: %s -> %s sport=%s",
        match.id, requester_id, recipient_id, sport_id,
    )
    return match_summary(match, directory=directory, bridge=bridge)


# --- Respond ---

def respond(user_id, match_id, accept, directory=None, store=None, bridge=None) -> dict:
    """
    Recipient accepts or rejects a pending request. Accepting opens the
    conversation for the pair in the same transaction.
    """
    directory = directory or sql_directory
    store = store or sql_match_store
    bridge = bridge or sql_conversation_bridge

    _require_user(directory, user_id)
    match = _require_match(store, match_id)

    if match.recipient_id != user_id:
        raise Forbidden("You are not authorized to respond to this match request")

    if match.status != MatchStatus.PENDING.value:
        raise InvalidState("This match request has already been processed")

    new_status = MatchStatus.ACCEPTED if accept else MatchStatus.REJECTED

    if not store.transition(match_id, [MatchStatus.PENDING], new_status, utcnow()):
        store.rollback()
        raise InvalidState("This match request has already been processed")

    try:
        if accept:
            bridge.ensure_for_match(match)
        store.commit()
    except Exception:
        store.rollback()
        logger.exception("Failed to record response to match %s by user %s", match_id, user_id)
        raise

    logger.info("Match %s %s by user %s", match_id, new_status.value.lower(), user_id)
    return match_summary(match, directory=directory, bridge=bridge)


# --- Cancel ---

def cancel(user_id, match_id, directory=None, store=None) -> None:
    """
    Requester withdraws a pending request, or either party ends an accepted
    match. A recipient with a pending request must reject it instead.
    """
    directory = directory or sql_directory
    store = store or sql_match_store

    _require_user(directory, user_id)
    match = _require_match(store, match_id)

    if user_id not in (match.requester_id, match.recipient_id):
        raise Forbidden("You are not authorized to cancel this match")

    if match.requester_id == user_id and match.status == MatchStatus.PENDING.value:
        from_status = MatchStatus.PENDING
    elif match.status == MatchStatus.ACCEPTED.value:
        from_status = MatchStatus.ACCEPTED
    elif match.recipient_id == user_id and match.status == MatchStatus.PENDING.value:
        raise InvalidState("You can't cancel a request sent to you. Reject it instead.")
    else:
        raise InvalidState("This match cannot be canceled due to its current status.")

    if not store.transition(match_id, [from_status], MatchStatus.CANCELED, utcnow()):
        store.rollback()
        raise InvalidState("This match cannot be canceled due to its current status.")

    store.commit()
    logger.info("Match %s canceled by user %s (was %s)", match_id, user_id, from_status.value)


# --- Reads ---

def get_match_by_id(match_id, directory=None, store=None, bridge=None) -> dict:
    store = store or sql_match_store
    match = _require_match(store, match_id)
    return match_summary(match, directory=directory, bridge=bridge)


def _list(user_id, status, role, directory, store, bridge):
    directory = directory or sql_directory
    store = store or sql_match_store

    _require_user(directory, user_id)
    return [
        match_summary(m, directory=directory, bridge=bridge)
        for m in store.list_for(user_id, status, role=role)
    ]


def get_current_matches(user_id, directory=None, store=None, bridge=None) -> list:
    return _list(user_id, MatchStatus.ACCEPTED, "either", directory, store, bridge)


def get_sent_requests(user_id, directory=None, store=None, bridge=None) -> list:
    return _list(user_id, MatchStatus.PENDING, "requester", directory, store, bridge)


def get_received_requests(user_id, directory=None, store=None, bridge=None) -> list:
    return _list(user_id, MatchStatus.PENDING, "recipient", directory, store, bridge)
