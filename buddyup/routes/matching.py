import math

from flask import Blueprint, request, jsonify, current_app, url_for

from buddyup.helpers.candidates import MatchFilter, find_candidates, normalize_skill_level
from buddyup.helpers.matching import (
    cancel,
    get_current_matches,
    get_match_by_id,
    get_received_requests,
    get_sent_requests,
    respond,
    send_match_request,
)
from buddyup.helpers.session import get_viewer_id
from buddyup.routes.errors import error_response

matching_bp = Blueprint("matching", __name__, url_prefix="/api/matching")


def _split_list_arg(name) -> list:
    """
    Accepts ?days=Monday&days=Friday and ?days=Monday,Friday (or both).
    """
    values = []
    for raw in request.args.getlist(name):
        for part in (raw or "").split(","):
            part = part.strip()
            if part and part not in values:
                values.append(part)
    return values


def _parse_int(raw, name):
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid {name}")


@matching_bp.route("/potential", methods=["GET"])
def potential_matches():
    """
    Candidate buddies for the viewer, closest first.

    Query params (all optional):
      sport_id, skill_level, distance (km), days, times
    """
    viewer_id = get_viewer_id()
    if not viewer_id:
        return error_response("Login required", 401)

    try:
        sport_id = request.args.get("sport_id")
        sport_id = _parse_int(sport_id, "sport_id") if sport_id not in (None, "") else None

        skill_level = normalize_skill_level(request.args.get("skill_level"))

        raw_distance = request.args.get("distance")
        if raw_distance in (None, ""):
            distance = current_app.config["DEFAULT_MATCH_DISTANCE_KM"]
        else:
            try:
                distance = float(raw_distance)
            except (TypeError, ValueError):
                raise ValueError("Invalid distance")
    except ValueError as e:
        return error_response(str(e), 400)

    if not math.isfinite(distance) or distance < 0:
        return error_response("Invalid distance", 400)

    max_distance = current_app.config["MAX_MATCH_DISTANCE_KM"]
    if distance > max_distance:
        distance = max_distance  # sanity cap

    match_filter = MatchFilter(
        sport_id=sport_id,
        skill_level=skill_level,
        max_distance_km=distance,
        days=_split_list_arg("days"),
        times=_split_list_arg("times"),
    )

    candidates = find_candidates(viewer_id, match_filter)

    current_app.logger.info(
        "Potential matches user=%s sport=%s skill=%r distance=%s days=%s times=%s -> %d",
        viewer_id, sport_id, skill_level, distance, match_filter.days, match_filter.times, len(candidates),
    )

    return jsonify([c.as_dict() for c in candidates])


@matching_bp.route("/current", methods=["GET"])
def current_matches():
    viewer_id = get_viewer_id()
    if not viewer_id:
        return error_response("Login required", 401)

    return jsonify(get_current_matches(viewer_id))


@matching_bp.route("/sent", methods=["GET"])
def sent_requests():
    viewer_id = get_viewer_id()
    if not viewer_id:
        return error_response("Login required", 401)

    return jsonify(get_sent_requests(viewer_id))


@matching_bp.route("/received", methods=["GET"])
def received_requests():
    viewer_id = get_viewer_id()
    if not viewer_id:
        return error_response("Login required", 401)

    return jsonify(get_received_requests(viewer_id))


@matching_bp.route("/request", methods=["POST"])
def request_match():
    """
    Payload:
      {"recipient_id": 12, "sport_id": 3}
    """
    viewer_id = get_viewer_id()
    if not viewer_id:
        return error_response("Login required", 401)

    data = request.get_json(force=True, silent=True) or {}

    try:
        recipient_id = _parse_int(data.get("recipient_id"), "recipient_id")
        sport_id = _parse_int(data.get("sport_id"), "sport_id")
    except ValueError as e:
        return error_response(str(e), 400)

    match = send_match_request(viewer_id, recipient_id, sport_id)

    resp = jsonify(match)
    resp.status_code = 201
    resp.headers["Location"] = url_for("matching.match_detail", match_id=match["match_id"])
    return resp


@matching_bp.route("/<int:match_id>/respond", methods=["PUT"])
def respond_to_match(match_id):
    """
    Payload:
      {"accept": true}
    """
    viewer_id = get_viewer_id()
    if not viewer_id:
        return error_response("Login required", 401)

    data = request.get_json(force=True, silent=True) or {}
    accept = data.get("accept")
    if not isinstance(accept, bool):
        return error_response("accept must be true or false", 400)

    return jsonify(respond(viewer_id, match_id, accept))


@matching_bp.route("/<int:match_id>", methods=["DELETE"])
def cancel_match(match_id):
    viewer_id = get_viewer_id()
    if not viewer_id:
        return error_response("Login required", 401)

    cancel(viewer_id, match_id)
    return "", 204


@matching_bp.route("/<int:match_id>", methods=["GET"])
def match_detail(match_id):
    viewer_id = get_viewer_id()
    if not viewer_id:
        return error_response("Login required", 401)

    return jsonify(get_match_by_id(match_id))
