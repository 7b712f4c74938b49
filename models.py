"""
Database models using SQLAlchemy ORM.
"""

import json
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, Text, Float, ForeignKey, UniqueConstraint, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship, validates
from sqlalchemy.types import TypeDecorator

from config import settings
from database import Base
from errors import ValidationError
from geo import validate_coordinates

NOISE_CATEGORIES = ("low", "medium", "high", "extreme")
ZONE_TYPES = ("park", "library", "cafe", "workspace", "nature")

MIN_DECIBELS = 0
MAX_DECIBELS = 150


def generate_id() -> str:
    return str(uuid.uuid4())


def to_naive_utc(value):
    """Parse an ISO 8601 string if needed and drop the offset after converting to UTC."""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            raise ValidationError(f"Invalid ISO 8601 timestamp: '{value}'")
    if not isinstance(value, datetime):
        raise ValidationError("Timestamp must be an ISO 8601 datetime")
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _isoformat(value):
    return value.isoformat() if value else None


def validate_rating(rating) -> tuple[bool, str]:
    """Validate rating is an integer between 1 and 5"""
    if isinstance(rating, bool) or not isinstance(rating, int):
        return False, "Rating must be an integer"
    if rating < 1 or rating > 5:
        return False, "Rating must be between 1 and 5"
    return True, ""


class JSONList(TypeDecorator):
    """Ordered list of strings stored as a JSON array in a text column."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return json.dumps(list(value))

    def process_result_value(self, value, dialect):
        if not value:
            return []
        try:
            items = json.loads(value)
        except (json.JSONDecodeError, TypeError):
            return []
        if not isinstance(items, list):
            return []
        return [str(item) for item in items]


def _check_coordinates(latitude, longitude):
    valid, error = validate_coordinates(latitude, longitude)
    if not valid:
        raise ValidationError(error)


def _check_decibels(value, field):
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer")
    if value < MIN_DECIBELS or value > MAX_DECIBELS:
        raise ValidationError(f"{field} must be between {MIN_DECIBELS} and {MAX_DECIBELS}")
    return value


class NoiseReport(Base):
    __tablename__ = "noise_reports"
    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(64), nullable=True, index=True)  # null for anonymous reports
    city = Column(String(100), nullable=False, default=lambda: settings.DEFAULT_CITY, index=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    decibel_level = Column(Integer, nullable=False)
    noise_category = Column(String(10), nullable=False)
    noise_source = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    timestamp = Column(DateTime, nullable=False)  # when the noise happened, caller-supplied
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("idx_noise_reports_location", "latitude", "longitude"),
        Index("idx_noise_reports_timestamp", "timestamp"),
    )

    def __init__(self, **kwargs):
        kwargs.setdefault("id", generate_id())
        if kwargs.get("city") is None:
            kwargs["city"] = settings.DEFAULT_CITY
        super().__init__(**kwargs)
        _check_coordinates(self.latitude, self.longitude)
        for field in ("decibel_level", "noise_category", "timestamp"):
            if getattr(self, field) is None:
                raise ValidationError(f"{field} is required")

    @validates("latitude", "longitude")
    def _validate_position(self, key, value):
        if self.id is not None and getattr(self, key) is not None and getattr(self, key) != value:
            raise ValidationError(f"{key} cannot be changed once a report exists")
        return value

    @validates("decibel_level")
    def _validate_decibel_level(self, key, value):
        return _check_decibels(value, "Decibel level")

    @validates("noise_category")
    def _validate_category(self, key, value):
        if value not in NOISE_CATEGORIES:
            raise ValidationError(f"Noise category must be one of: {', '.join(NOISE_CATEGORIES)}")
        return value

    @validates("timestamp")
    def _validate_timestamp(self, key, value):
        return to_naive_utc(value)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "city": self.city,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "decibel_level": self.decibel_level,
            "noise_category": self.noise_category,
            "noise_source": self.noise_source,
            "description": self.description,
            "timestamp": _isoformat(self.timestamp),
            "created_at": _isoformat(self.created_at),
        }

    def __repr__(self):
        return f"<NoiseReport {self.id} {self.decibel_level}dB>"


class QuietZone(Base):
    __tablename__ = "quiet_zones"
    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(200), nullable=False)
    city = Column(String(100), nullable=False, default=lambda: settings.DEFAULT_CITY, index=True)
    type = Column(String(20), nullable=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    avg_decibels = Column(Integer, nullable=True)  # curated figure, not derived from ratings
    rating = Column(Float, nullable=False, default=0.0)  # mean of zone_ratings.rating
    description = Column(Text, nullable=True)
    amenities = Column(JSONList, nullable=True)
    best_time = Column(String(100), nullable=True)
    created_by = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    ratings = relationship("ZoneRating", back_populates="zone", cascade="all, delete-orphan")

    def __init__(self, **kwargs):
        kwargs.setdefault("id", generate_id())
        if kwargs.get("city") is None:
            kwargs["city"] = settings.DEFAULT_CITY
        kwargs.setdefault("rating", 0.0)
        kwargs.setdefault("amenities", [])
        super().__init__(**kwargs)
        _check_coordinates(self.latitude, self.longitude)
        if not self.name or not self.name.strip():
            raise ValidationError("Name is required")
        if self.type is None:
            raise ValidationError("Zone type is required")

    @validates("type")
    def _validate_type(self, key, value):
        if value not in ZONE_TYPES:
            raise ValidationError(f"Zone type must be one of: {', '.join(ZONE_TYPES)}")
        return value

    @validates("avg_decibels")
    def _validate_avg_decibels(self, key, value):
        if value is None:
            return None
        return _check_decibels(value, "Average decibels")

    @validates("amenities")
    def _validate_amenities(self, key, value):
        if value is None:
            return []
        if isinstance(value, str) or not all(isinstance(item, str) for item in value):
            raise ValidationError("Amenities must be a list of strings")
        return list(value)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "city": self.city,
            "type": self.type,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "avg_decibels": self.avg_decibels,
            "rating": self.rating or 0.0,
            "description": self.description,
            "amenities": list(self.amenities or []),
            "best_time": self.best_time,
            "created_by": self.created_by,
            "created_at": _isoformat(self.created_at),
            "updated_at": _isoformat(self.updated_at),
        }

    def __repr__(self):
        return f"<QuietZone {self.name}>"


class ZoneRating(Base):
    __tablename__ = "zone_ratings"
    id = Column(String(36), primary_key=True, default=generate_id)
    zone_id = Column(String(36), ForeignKey("quiet_zones.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    rating = Column(Integer, nullable=False)  # 1 to 5
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    zone = relationship("QuietZone", back_populates="ratings")

    # Ensure one rating per user per zone
    __table_args__ = (
        UniqueConstraint("zone_id", "user_id", name="uq_zone_user_rating"),
    )

    def __init__(self, **kwargs):
        kwargs.setdefault("id", generate_id())
        super().__init__(**kwargs)

    @validates("rating")
    def _validate_rating(self, key, value):
        valid, error = validate_rating(value)
        if not valid:
            raise ValidationError(error)
        return value

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "zone_id": self.zone_id,
            "user_id": self.user_id,
            "rating": self.rating,
            "comment": self.comment,
            "created_at": _isoformat(self.created_at),
            "updated_at": _isoformat(self.updated_at),
        }
