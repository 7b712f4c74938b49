"""
Great-circle distance and the coordinate/radius rules used by nearby search.
"""

from math import atan2, cos, radians, sin, sqrt

EARTH_RADIUS_KM = 6371.0

MIN_RADIUS_KM = 0.1
MAX_RADIUS_KM = 100.0


def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance in kilometres between two lat/lon points."""
    d_lat = radians(lat2 - lat1)
    d_lon = radians(lon2 - lon1)
    a = (
        sin(d_lat / 2) ** 2
        + cos(radians(lat1)) * cos(radians(lat2)) * sin(d_lon / 2) ** 2
    )
    # Rounding can push `a` a hair outside [0, 1] for antipodal points
    a = min(1.0, max(0.0, a))
    return EARTH_RADIUS_KM * 2 * atan2(sqrt(a), sqrt(1 - a))


def validate_coordinates(latitude: float, longitude: float) -> tuple[bool, str]:
    """Validate coordinates are within valid ranges"""
    if isinstance(latitude, bool) or isinstance(longitude, bool):
        return False, "Coordinates must be numbers"
    if not isinstance(latitude, (int, float)) or not isinstance(longitude, (int, float)):
        return False, "Coordinates must be numbers"
    if latitude != latitude or longitude != longitude:
        return False, "Coordinates must be numbers"
    if latitude < -90 or latitude > 90:
        return False, "Latitude must be between -90 and 90"
    if longitude < -180 or longitude > 180:
        return False, "Longitude must be between -180 and 180"
    return True, ""


def validate_radius(radius_km: float) -> tuple[bool, str]:
    """Validate a search radius lies in (0.1, 100] km"""
    if isinstance(radius_km, bool) or not isinstance(radius_km, (int, float)):
        return False, "Radius must be a number"
    if not (MIN_RADIUS_KM < radius_km <= MAX_RADIUS_KM):
        return False, f"Radius must be greater than {MIN_RADIUS_KM} and at most {MAX_RADIUS_KM:g} km"
    return True, ""
