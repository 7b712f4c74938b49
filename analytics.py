"""
Noise analytics derived from the report table.

Every view is read-only and independent of the others. Time windows are
measured against the caller-supplied report `timestamp` (stored as naive
UTC), never against `created_at`. Grouping by hour and weekday is done in
Python so the results do not depend on the SQL dialect's date functions.
"""

import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from errors import InternalError
from models import NoiseReport
from stores import ZoneStore

logger = logging.getLogger(__name__)

WEEKDAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
HOTSPOT_PRECISION = Decimal("0.001")  # ~110 m grid cells
HOTSPOT_LIMIT = 10
WINDOW = timedelta(days=7)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _round_half_up(value: float, step: Decimal) -> float:
    return float(Decimal(str(value)).quantize(step, rounding=ROUND_HALF_UP))


def _mean(values) -> float:
    return sum(values) / len(values)


def _reports(db: Session, city: Optional[str] = None, since: Optional[datetime] = None):
    query = db.query(NoiseReport)
    if city:
        query = query.filter(NoiseReport.city == city)
    if since is not None:
        query = query.filter(NoiseReport.timestamp >= since)
    return query


def _group_decibels(reports, key) -> dict:
    """Bucket decibel levels by `key(report)`, buckets in first-seen order."""
    groups = {}
    for report in reports:
        groups.setdefault(key(report), []).append(report.decibel_level)
    return groups


def _sunday_first_weekday(moment: datetime) -> int:
    # datetime.weekday() is Monday=0
    return (moment.weekday() + 1) % 7


def hourly_pattern(db: Session, city: Optional[str] = None, now: Optional[datetime] = None) -> list[dict]:
    """Mean decibels per hour of day over the last 7 days. Empty hours are omitted."""
    now = now or _utcnow()
    try:
        reports = _reports(db, city, since=now - WINDOW).all()
    except SQLAlchemyError:
        logger.exception("Hourly analytics query failed")
        raise InternalError()

    groups = _group_decibels(reports, lambda r: r.timestamp.hour)
    return [
        {
            "hour": f"{hour:02d}",
            "avgDecibels": _mean(levels),
            "reportCount": len(levels),
        }
        for hour, levels in sorted(groups.items())
    ]


def weekly_pattern(db: Session, city: Optional[str] = None, now: Optional[datetime] = None) -> list[dict]:
    """Mean decibels per weekday (Sun..Sat) over the last 7 days."""
    now = now or _utcnow()
    try:
        reports = _reports(db, city, since=now - WINDOW).all()
    except SQLAlchemyError:
        logger.exception("Weekly analytics query failed")
        raise InternalError()

    groups = _group_decibels(reports, lambda r: _sunday_first_weekday(r.timestamp))
    return [
        {
            "day": WEEKDAY_NAMES[day],
            "avgDecibels": _mean(levels),
            "reportCount": len(levels),
        }
        for day, levels in sorted(groups.items())
    ]


def source_distribution(db: Session, city: Optional[str] = None) -> list[dict]:
    """Report counts per noise source, most common first."""
    try:
        count = func.count(NoiseReport.id).label("value")
        query = db.query(NoiseReport.noise_source, count).filter(NoiseReport.noise_source.isnot(None))
        if city:
            query = query.filter(NoiseReport.city == city)
        rows = query.group_by(NoiseReport.noise_source).order_by(count.desc()).all()
    except SQLAlchemyError:
        logger.exception("Source analytics query failed")
        raise InternalError()

    return [{"name": source, "value": value} for source, value in rows]


def hotspots(db: Session, city: Optional[str] = None) -> list[dict]:
    """Noisiest grid cells holding more than one report, top 10 by mean decibels.

    Coordinates are rounded half away from zero to 3 decimals. The
    `noiseCategory` of a cell is copied from its first report in store order;
    it is not an aggregate of the cell and may disagree with `avgDecibels`.
    Consumers already read it that way, so it stays as is.
    """
    try:
        reports = _reports(db, city).all()
    except SQLAlchemyError:
        logger.exception("Hotspot analytics query failed")
        raise InternalError()

    cells = {}
    for report in reports:
        cell = (
            _round_half_up(report.latitude, HOTSPOT_PRECISION),
            _round_half_up(report.longitude, HOTSPOT_PRECISION),
        )
        if cell not in cells:
            cells[cell] = {"levels": [], "category": report.noise_category}
        cells[cell]["levels"].append(report.decibel_level)

    spots = [
        {
            "lat": lat,
            "lng": lng,
            "avgDecibels": _mean(cell["levels"]),
            "reportCount": len(cell["levels"]),
            "noiseCategory": cell["category"],
        }
        for (lat, lng), cell in cells.items()
        if len(cell["levels"]) > 1
    ]
    spots.sort(key=lambda spot: spot["avgDecibels"], reverse=True)
    return spots[:HOTSPOT_LIMIT]


def weekly_change(current: int, previous: int) -> str:
    """Week-over-week change as a percentage string.

    With no reports in the previous week the result is "0%". That is a
    placeholder to avoid dividing by zero, not a measured change.
    """
    if previous == 0:
        return "0%"
    return f"{(current - previous) / previous * 100:.1f}%"


def city_stats(db: Session, city: Optional[str] = None, now: Optional[datetime] = None) -> dict:
    now = now or _utcnow()
    try:
        reports = _reports(db, city).all()
        zone_count = ZoneStore(db).count(city=city)
        weekly_reports = _reports(db, city, since=now - WINDOW).count()
        last_week_reports = (
            _reports(db, city, since=now - 2 * WINDOW)
            .filter(NoiseReport.timestamp < now - WINDOW)
            .count()
        )
    except SQLAlchemyError:
        logger.exception("City stats query failed")
        raise InternalError()

    if reports:
        avg_noise = int(_round_half_up(_mean([r.decibel_level for r in reports]), Decimal("1")))
        by_hour = _group_decibels(reports, lambda r: r.timestamp.hour)
        # min() keeps the first of equally quiet hours
        quietest_hour = min(by_hour, key=lambda hour: _mean(by_hour[hour]))
        quietest_time = f"{quietest_hour:02d}:00"
    else:
        avg_noise = 0
        quietest_time = "N/A"

    return {
        "totalReports": len(reports),
        "avgCityNoise": avg_noise,
        "quietZonesFound": zone_count,
        "quietestTime": quietest_time,
        "weeklyReports": weekly_reports,
        "weeklyChange": weekly_change(weekly_reports, last_week_reports),
    }
