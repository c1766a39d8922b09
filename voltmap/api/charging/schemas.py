"""
schemas.py — charging session Pydantic v2 contracts.

  - SessionStatus      in_progress | completed | cancelled
  - StartSessionRequest {stationId}
  - EndSessionRequest   {kwhCharged} — must be a positive JSON number
  - ChargingSession     response
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from voltmap.api.schemas import ApiModel


class SessionStatus(str, Enum):
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"


class StartSessionRequest(ApiModel):
    station_id: int = Field(..., gt=0, strict=True)


MAX_KWH_PER_SESSION = 100_000


class EndSessionRequest(ApiModel):
    kwh_charged: float

    @field_validator("kwh_charged", mode="before")
    @classmethod
    def _positive_number(cls, value: object) -> object:
        # bool is an int subclass; "10" is a string — both rejected
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("Invalid kWh value")
        if not 0 < value <= MAX_KWH_PER_SESSION:
            raise ValueError("Invalid kWh value")
        return value


class ChargingSession(ApiModel):
    id: int
    user_id: int
    station_id: int
    start_time: datetime
    end_time: Optional[datetime] = None
    kwh_charged: Optional[float] = None
    points_earned: int
    total_price: Optional[float] = None
    status: SessionStatus


__all__ = ["SessionStatus", "StartSessionRequest", "EndSessionRequest", "ChargingSession"]
