"""
Quiet zone routes - browse, nearby search, create, rate.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from auth import CallerIdentity, get_current_identity
from database import get_db
from proximity import search_nearby_zones
from schemas import RatingIn, ZoneIn, ZoneType
from stores import ZoneStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/zones", tags=["Quiet zones"])


@router.get("")
async def list_zones(
    city: Optional[str] = None,
    type: Optional[ZoneType] = None,
    limit: int = Query(50, ge=1, le=100),
    db: Session = Depends(get_db)
):
    """Get zones, best rated first"""
    zones = ZoneStore(db).find(city=city, zone_type=type, limit=limit)
    return {"zones": [zone.to_dict() for zone in zones]}


@router.get("/nearby")
async def nearby_zones(
    latitude: float,
    longitude: float,
    radius: Optional[float] = None,
    city: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """Zones within `radius` km of a point, nearest first"""
    return search_nearby_zones(db, latitude, longitude, radius_km=radius, city=city)


@router.get("/{zone_id}")
async def get_zone(zone_id: str, db: Session = Depends(get_db)):
    return {"zone": ZoneStore(db).get(zone_id).to_dict()}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_zone(
    data: ZoneIn,
    caller: CallerIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Create a new quiet zone"""
    zone = ZoneStore(db).add(data.model_dump(), created_by=caller.id)
    logger.info("Zone %s (%s) created by %s", zone.id, zone.name, caller.id)
    return {
        "message": "Quiet zone created successfully",
        "zone": zone.to_dict()
    }


@router.post("/{zone_id}/rate")
async def rate_zone(
    zone_id: str,
    data: RatingIn,
    caller: CallerIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Rate a zone (create or update the caller's rating)"""
    average = ZoneStore(db).rate(zone_id, caller.id, data.rating, data.comment)
    logger.info("Zone %s rated %s by %s, average now %.2f", zone_id, data.rating, caller.id, average)
    return {
        "message": "Rating submitted successfully",
        "averageRating": average
    }


@router.get("/{zone_id}/rating")
async def get_user_rating(
    zone_id: str,
    caller: CallerIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Get current caller's rating for a zone"""
    store = ZoneStore(db)
    store.get(zone_id)
    rating = store.get_rating(zone_id, caller.id)
    if rating:
        return {"rating": rating.rating, "comment": rating.comment}
    return {"rating": None, "comment": None}
