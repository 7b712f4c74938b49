"""
Report and zone stores.

Thin query layers over a SQLAlchemy session. Routes, nearby search and the
analytics module go through these instead of building queries themselves.
"""

import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from errors import AuthorizationError, InternalError, NotFoundError, ValidationError
from models import (
    NoiseReport, QuietZone, ZoneRating, NOISE_CATEGORIES, ZONE_TYPES, to_naive_utc, validate_rating
)

logger = logging.getLogger(__name__)

MAX_REPORT_PAGE = 1000
MAX_ZONE_PAGE = 100


class ReportStore:
    def __init__(self, db: Session):
        self.db = db

    def add(self, fields: dict, reporter_id: Optional[str] = None) -> NoiseReport:
        """Insert a report and return it as persisted, with id and created_at populated."""
        report = NoiseReport(user_id=reporter_id, **fields)
        try:
            self.db.add(report)
            self.db.commit()
            self.db.refresh(report)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to insert noise report")
            raise InternalError("Error saving report")
        return report

    def get(self, report_id: str) -> NoiseReport:
        report = self.db.query(NoiseReport).filter(NoiseReport.id == report_id).first()
        if not report:
            raise NotFoundError("Report not found")
        return report

    def find(
        self,
        city: Optional[str] = None,
        category: Optional[str] = None,
        source: Optional[str] = None,
        since=None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[NoiseReport], int]:
        """Filtered page of reports, newest first, plus the count of all matches."""
        if limit < 1 or limit > MAX_REPORT_PAGE:
            raise ValidationError(f"Limit must be between 1 and {MAX_REPORT_PAGE}")
        if offset < 0:
            raise ValidationError("Offset must be 0 or greater")
        if category is not None and category not in NOISE_CATEGORIES:
            raise ValidationError(f"Noise category must be one of: {', '.join(NOISE_CATEGORIES)}")

        query = self.db.query(NoiseReport)
        if city:
            query = query.filter(NoiseReport.city == city)
        if category:
            query = query.filter(NoiseReport.noise_category == category)
        if source:
            query = query.filter(NoiseReport.noise_source.like(f"%{source}%"))
        if since is not None:
            query = query.filter(NoiseReport.timestamp >= to_naive_utc(since))

        total = query.count()
        reports = (
            query.order_by(NoiseReport.timestamp.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )
        return reports, total

    def all(self, city: Optional[str] = None) -> list[NoiseReport]:
        query = self.db.query(NoiseReport)
        if city:
            query = query.filter(NoiseReport.city == city)
        return query.all()

    def delete(self, report_id: str, caller_id: str):
        """Delete a report; only its original reporter may do so."""
        report = self.get(report_id)
        if report.user_id is None or report.user_id != caller_id:
            raise AuthorizationError("Not authorized to delete this report")
        try:
            self.db.delete(report)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to delete report %s", report_id)
            raise InternalError("Error deleting report")


class ZoneStore:
    def __init__(self, db: Session):
        self.db = db

    def add(self, fields: dict, created_by: Optional[str] = None) -> QuietZone:
        zone = QuietZone(created_by=created_by, **fields)
        try:
            self.db.add(zone)
            self.db.commit()
            self.db.refresh(zone)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to insert quiet zone")
            raise InternalError("Error creating zone")
        return zone

    def get(self, zone_id: str) -> QuietZone:
        zone = self.db.query(QuietZone).filter(QuietZone.id == zone_id).first()
        if not zone:
            raise NotFoundError("Zone not found")
        return zone

    def find(
        self,
        city: Optional[str] = None,
        zone_type: Optional[str] = None,
        limit: int = 50,
    ) -> list[QuietZone]:
        """Zones ordered by community rating, best first."""
        if limit < 1 or limit > MAX_ZONE_PAGE:
            raise ValidationError(f"Limit must be between 1 and {MAX_ZONE_PAGE}")
        if zone_type is not None and zone_type not in ZONE_TYPES:
            raise ValidationError(f"Zone type must be one of: {', '.join(ZONE_TYPES)}")

        query = self.db.query(QuietZone)
        if city:
            query = query.filter(QuietZone.city == city)
        if zone_type:
            query = query.filter(QuietZone.type == zone_type)
        return query.order_by(QuietZone.rating.desc()).limit(limit).all()

    def all(self, city: Optional[str] = None) -> list[QuietZone]:
        query = self.db.query(QuietZone)
        if city:
            query = query.filter(QuietZone.city == city)
        return query.all()

    def count(self, city: Optional[str] = None) -> int:
        query = self.db.query(func.count(QuietZone.id))
        if city:
            query = query.filter(QuietZone.city == city)
        return query.scalar() or 0

    def get_rating(self, zone_id: str, user_id: str) -> Optional[ZoneRating]:
        return self.db.query(ZoneRating).filter(
            ZoneRating.zone_id == zone_id,
            ZoneRating.user_id == user_id
        ).first()

    def rate(self, zone_id: str, user_id: str, rating: int, comment: Optional[str] = None) -> float:
        """Create or update the caller's rating and return the zone's new mean.

        The upsert and the recomputed mean are committed together. If another
        request inserts the same (zone, user) row first, the unique constraint
        fires and the upsert is replayed once as an update.
        """
        valid, error = validate_rating(rating)
        if not valid:
            raise ValidationError(error)

        try:
            return self._rate_once(zone_id, user_id, rating, comment)
        except IntegrityError:
            self.db.rollback()
            logger.info("Concurrent first rating for zone %s by %s, retrying as update", zone_id, user_id)
        try:
            return self._rate_once(zone_id, user_id, rating, comment)
        except IntegrityError:
            self.db.rollback()
            logger.exception("Rating for zone %s by %s could not be saved", zone_id, user_id)
            raise InternalError("Error saving rating")

    def _rate_once(self, zone_id, user_id, rating, comment) -> float:
        try:
            zone = self.get(zone_id)

            # Check if user already rated this zone
            existing_rating = self.get_rating(zone_id, user_id)
            if existing_rating:
                existing_rating.rating = rating
                existing_rating.comment = comment
            else:
                self.db.add(ZoneRating(
                    zone_id=zone_id,
                    user_id=user_id,
                    rating=rating,
                    comment=comment
                ))
            self.db.flush()

            # Same transaction, so the row written above is counted
            avg_rating_result = self.db.query(func.avg(ZoneRating.rating)).filter(
                ZoneRating.zone_id == zone_id
            ).scalar()
            avg_rating = float(avg_rating_result) if avg_rating_result is not None else 0.0

            zone.rating = avg_rating
            self.db.commit()
        except IntegrityError:
            raise
        except NotFoundError:
            self.db.rollback()
            raise
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to save rating for zone %s", zone_id)
            raise InternalError("Error saving rating")
        return avg_rating
