"""
Noise report routes - submit, browse, nearby search, delete.
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from auth import CallerIdentity, get_current_identity, get_optional_identity
from broadcaster import ConnectionRegistry, get_connection_registry, on_report_created
from database import get_db
from proximity import search_nearby_reports
from schemas import NoiseCategory, ReportIn
from stores import ReportStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reports", tags=["Reports"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def submit_report(
    data: ReportIn,
    background_tasks: BackgroundTasks,
    caller: Optional[CallerIdentity] = Depends(get_optional_identity),
    registry: ConnectionRegistry = Depends(get_connection_registry),
    db: Session = Depends(get_db)
):
    """Submit a noise report (anonymous or signed in)"""
    report = ReportStore(db).add(
        data.model_dump(),
        reporter_id=caller.id if caller else None
    )
    payload = report.to_dict()
    logger.info("Report %s submitted: %sdB %s", report.id, report.decibel_level, report.noise_category)

    on_report_created(registry, payload, background_tasks)

    return {
        "message": "Noise report submitted successfully",
        "report": payload
    }


@router.get("")
async def list_reports(
    city: Optional[str] = None,
    category: Optional[NoiseCategory] = None,
    source: Optional[str] = None,
    since: Optional[datetime] = None,
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db)
):
    """Get reports with optional filters, newest first"""
    reports, total = ReportStore(db).find(
        city=city,
        category=category,
        source=source.strip() if source else None,
        since=since,
        limit=limit,
        offset=offset
    )
    return {
        "reports": [report.to_dict() for report in reports],
        "total": total,
        "limit": limit,
        "offset": offset
    }


@router.get("/nearby")
async def nearby_reports(
    latitude: float,
    longitude: float,
    radius: Optional[float] = None,
    city: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """Reports within `radius` km of a point, nearest first"""
    return search_nearby_reports(db, latitude, longitude, radius_km=radius, city=city)


@router.get("/{report_id}")
async def get_report(report_id: str, db: Session = Depends(get_db)):
    return {"report": ReportStore(db).get(report_id).to_dict()}


@router.delete("/{report_id}")
async def delete_report(
    report_id: str,
    caller: CallerIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Delete own report"""
    ReportStore(db).delete(report_id, caller.id)
    logger.info("Report %s deleted by %s", report_id, caller.id)
    return {"message": "Report deleted successfully"}
