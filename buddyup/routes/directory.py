import math

from flask import Blueprint, request, jsonify, current_app

from buddyup.helpers.directory import sql_directory
from buddyup.helpers.distance import GeoPoint
from buddyup.routes.errors import error_response

directory_bp = Blueprint("directory", __name__, url_prefix="/api")


@directory_bp.route("/sports", methods=["GET"])
def list_sports():
    sports = sql_directory.active_sports()
    return jsonify([
        {
            "sport_id": s.id,
            "name": s.name,
            "description": s.description,
            "icon_url": s.icon_url,
        }
        for s in sports
    ])


@directory_bp.route("/locations/nearby", methods=["GET"])
def nearby_locations():
    """
    Active locations around a point.

    Query params: lat, lon (required), radius (km, optional)
    """
    try:
        lat = float(request.args.get("lat"))
        lon = float(request.args.get("lon"))
    except (TypeError, ValueError):
        return error_response("lat and lon are required", 400)

    if not (-90.0 <= lat <= 90.0) or not (-180.0 <= lon <= 180.0):
        return error_response("lat/lon out of range", 400)

    radius = request.args.get("radius", current_app.config["DEFAULT_MATCH_DISTANCE_KM"], type=float)
    if radius is None or not math.isfinite(radius) or radius < 0:
        return error_response("Invalid radius", 400)
    radius = min(radius, current_app.config["MAX_MATCH_DISTANCE_KM"])

    rows = sql_directory.nearby_locations(GeoPoint(longitude=lon, latitude=lat), radius)

    return jsonify([
        {
            "location_id": loc.id,
            "name": loc.name,
            "city": loc.city,
            "latitude": loc.latitude,
            "longitude": loc.longitude,
            "is_verified": loc.is_verified,
            "distance_km": round(dist, 2),
        }
        for loc, dist in rows
    ])
