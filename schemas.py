"""
Request bodies accepted by the API.
"""

from datetime import datetime
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, BeforeValidator, Field, field_validator

NoiseCategory = Literal["low", "medium", "high", "extreme"]
ZoneType = Literal["park", "library", "cafe", "workspace", "nature"]


def _strip_or_none(value):
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


# Trimmed free text; blank becomes None
OptionalText = Annotated[Optional[str], BeforeValidator(_strip_or_none)]


class ReportIn(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    decibel_level: int = Field(..., ge=0, le=150)
    noise_category: NoiseCategory
    noise_source: OptionalText = Field(None, max_length=100)
    description: OptionalText = None
    timestamp: datetime
    city: OptionalText = Field(None, max_length=100)


class ZoneIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    type: ZoneType
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    avg_decibels: Optional[int] = Field(None, ge=0, le=150)
    description: OptionalText = None
    amenities: List[str] = Field(default_factory=list)
    best_time: OptionalText = Field(None, max_length=100)
    city: OptionalText = Field(None, max_length=100)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value


class RatingIn(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: OptionalText = None
