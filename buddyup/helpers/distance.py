import math
from collections import namedtuple
from typing import Optional

# Mean earth radius (IUGG), km
EARTH_RADIUS_KM = 6371.0088

GeoPoint = namedtuple("GeoPoint", ["longitude", "latitude"])


def distance_km(point_a: GeoPoint, point_b: GeoPoint) -> float:
    """
    Great-circle distance between two (longitude, latitude) points in km.

    Uses the haversine formula on a spherical earth. The terms are built so
    that swapping the arguments gives exactly the same float.
    """
    lon1, lat1 = math.radians(point_a.longitude), math.radians(point_a.latitude)
    lon2, lat2 = math.radians(point_b.longitude), math.radians(point_b.latitude)

    sin_dlat = math.sin((lat2 - lat1) / 2.0)
    sin_dlon = math.sin((lon2 - lon1) / 2.0)

    h = sin_dlat * sin_dlat + math.cos(lat1) * math.cos(lat2) * sin_dlon * sin_dlon
    # float noise can push h a hair outside [0, 1]
    h = max(0.0, min(1.0, h))

    return 2.0 * EARTH_RADIUS_KM * math.asin(math.sqrt(h))


def distance_between(point_a: Optional[GeoPoint], point_b: Optional[GeoPoint]) -> Optional[float]:
    """None when either point is missing. Callers treat None as unknown, never as 0."""
    if point_a is None or point_b is None:
        return None
    return distance_km(point_a, point_b)


def within_radius(distance: Optional[float], max_km) -> bool:
    if distance is None:
        return True
    return distance <= max_km


def distance_sort_key(distance: Optional[float]) -> float:
    return math.inf if distance is None else distance
