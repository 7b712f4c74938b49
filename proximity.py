"""
Nearby search over noise reports and quiet zones.

The whole candidate set (optionally one city) is loaded, every row gets its
haversine distance from the centre, rows outside the radius are dropped and
the rest are sorted nearest first. That is O(n log n) per call with no
spatial index, which is fine for the per-city datasets this service holds
and keeps the results exact. Swap in a bounding-box prefilter or a spatial
index if a city ever grows past a few hundred thousand rows.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from config import settings
from errors import ValidationError
from geo import distance_km, validate_coordinates, validate_radius
from stores import ReportStore, ZoneStore

logger = logging.getLogger(__name__)


def _check_search_args(latitude, longitude, radius_km):
    valid, error = validate_coordinates(latitude, longitude)
    if not valid:
        raise ValidationError(error)
    valid, error = validate_radius(radius_km)
    if not valid:
        raise ValidationError(error)


def rank_by_distance(records, latitude: float, longitude: float, radius_km: float) -> list[dict]:
    """Serialise records inside the radius with a `distanceKm` field, nearest first.

    `sorted` is stable, so rows at the same distance keep store order.
    """
    nearby = []
    for record in records:
        distance = distance_km(latitude, longitude, record.latitude, record.longitude)
        if distance <= radius_km:
            item = record.to_dict()
            item["distanceKm"] = distance
            nearby.append(item)
    return sorted(nearby, key=lambda item: item["distanceKm"])


def search_nearby_reports(
    db: Session,
    latitude: float,
    longitude: float,
    radius_km: Optional[float] = None,
    city: Optional[str] = None,
) -> dict:
    if radius_km is None:
        radius_km = settings.REPORT_SEARCH_RADIUS_KM
    _check_search_args(latitude, longitude, radius_km)

    reports = ReportStore(db).all(city=city)
    nearby = rank_by_distance(reports, latitude, longitude, radius_km)
    logger.debug("Nearby reports at (%s, %s) r=%skm: %d of %d", latitude, longitude, radius_km, len(nearby), len(reports))
    return {"reports": nearby, "radiusKm": radius_km}


def search_nearby_zones(
    db: Session,
    latitude: float,
    longitude: float,
    radius_km: Optional[float] = None,
    city: Optional[str] = None,
) -> dict:
    if radius_km is None:
        radius_km = settings.ZONE_SEARCH_RADIUS_KM
    _check_search_args(latitude, longitude, radius_km)

    zones = ZoneStore(db).all(city=city)
    nearby = rank_by_distance(zones, latitude, longitude, radius_km)
    logger.debug("Nearby zones at (%s, %s) r=%skm: %d of %d", latitude, longitude, radius_km, len(nearby), len(zones))
    return {"zones": nearby, "radiusKm": radius_km}
