"""
schemas.py — station, review and promotion Pydantic v2 contracts.

Defines:
  - StationStatus enum
  - StationCreate  (POST/PUT body — PUT replaces every editable field)
  - Station        (response)
  - ReviewCreate, Review
  - PromotionCreate, Promotion, ActivePromotion (promotion + embedded station)
"""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from voltmap.api.schemas import ApiModel


class StationStatus(str, Enum):
    available = "available"
    busy = "busy"
    offline = "offline"


# ---------------------------------------------------------------------------
# Stations
# ---------------------------------------------------------------------------

class StationCreate(ApiModel):
    """
    Editable station fields.

    connector_types is a set on the server: duplicates and blank entries are
    dropped, at least one connector must remain.
    """
    name: str = Field(..., min_length=1, max_length=255)
    address: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=128)
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    connector_types: List[str] = Field(..., min_length=1)
    price_per_kwh: Optional[float] = Field(default=None, ge=0)
    is_free: bool = False
    power: int = Field(..., gt=0, description="Rated power in kW")
    opening_hours: str = Field(..., min_length=1, max_length=128)
    status: StationStatus = StationStatus.available
    has_wifi: bool = False
    has_free_parking: bool = False
    has_restaurant: bool = False
    has_waiting_area: bool = False

    @field_validator("connector_types")
    @classmethod
    def _normalize_connectors(cls, value: List[str]) -> List[str]:
        cleaned = sorted({c.strip() for c in value if c and c.strip()})
        if not cleaned:
            raise ValueError("At least one connector type is required")
        for c in cleaned:
            if len(c) > 32:
                raise ValueError(f"Connector type '{c[:32]}...' exceeds 32 characters")
        return cleaned


class Station(ApiModel):
    id: int
    name: str
    address: str
    city: str
    lat: float
    lng: float
    connector_types: List[str]
    price_per_kwh: Optional[float] = None
    is_free: bool
    power: int
    opening_hours: str
    status: StationStatus
    has_wifi: bool
    has_free_parking: bool
    has_restaurant: bool
    has_waiting_area: bool
    owner_id: Optional[int] = None
    created_at: datetime


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------

class ReviewCreate(ApiModel):
    rating: int = Field(..., ge=1, le=5, strict=True)
    comment: Optional[str] = Field(default=None, max_length=2000)


class Review(ApiModel):
    id: int
    station_id: int
    user_id: int
    rating: int
    comment: Optional[str] = None
    created_at: datetime


# ---------------------------------------------------------------------------
# Promotions
# ---------------------------------------------------------------------------

def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class PromotionCreate(ApiModel):
    description: str = Field(..., min_length=1)
    points_value: int = Field(default=0, ge=0)
    start_date: datetime
    end_date: datetime

    @field_validator("start_date", "end_date")
    @classmethod
    def _normalize_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)

    @model_validator(mode="after")
    def _end_after_start(self) -> "PromotionCreate":
        if self.end_date < self.start_date:
            raise ValueError("endDate must not be earlier than startDate")
        return self


class Promotion(ApiModel):
    id: int
    station_id: int
    description: str
    points_value: int
    start_date: datetime
    end_date: datetime
    created_at: datetime


class ActivePromotion(Promotion):
    station: Station


__all__ = [
    "StationStatus",
    "StationCreate",
    "Station",
    "ReviewCreate",
    "Review",
    "PromotionCreate",
    "Promotion",
    "ActivePromotion",
]
