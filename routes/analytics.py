"""
Analytics routes - hourly/weekly patterns, sources, hotspots, city stats.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import analytics
from database import get_db

router = APIRouter(prefix="/api/analytics", tags=["Analytics"])


@router.get("/hourly")
async def hourly(city: Optional[str] = None, db: Session = Depends(get_db)):
    return {"data": analytics.hourly_pattern(db, city=city)}


@router.get("/weekly")
async def weekly(city: Optional[str] = None, db: Session = Depends(get_db)):
    return {"data": analytics.weekly_pattern(db, city=city)}


@router.get("/sources")
async def sources(city: Optional[str] = None, db: Session = Depends(get_db)):
    return {"data": analytics.source_distribution(db, city=city)}


@router.get("/hotspots")
async def hotspots(city: Optional[str] = None, db: Session = Depends(get_db)):
    """Noisiest ~110 m cells with more than one report (max 10)"""
    return {"hotspots": analytics.hotspots(db, city=city)}


@router.get("/city-stats")
async def city_stats(city: Optional[str] = None, db: Session = Depends(get_db)):
    return {"stats": analytics.city_stats(db, city=city)}
