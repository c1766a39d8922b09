"""
pricing.py — pure price/points rules for a completed charging session.

  total_price   = 0                             if the station is free
                = (price_per_kwh or 0) * kwh    otherwise
  points_earned = floor(kwh * points_per_kwh)   (10 points per kWh by default)

No I/O here: store.end_charging_session() calls these and persists the result.
"""
from __future__ import annotations

import math
from typing import Optional

from voltmap.config import settings


def compute_total_price(is_free: bool, price_per_kwh: Optional[float], kwh_charged: float) -> float:
    """Price of a session; a missing tariff counts as 0."""
    if is_free:
        return 0.0
    return (price_per_kwh or 0.0) * kwh_charged


def compute_points(kwh_charged: float, points_per_kwh: Optional[int] = None) -> int:
    """Whole reward points earned for kwh_charged, rounded down."""
    rate = settings.points_per_kwh if points_per_kwh is None else points_per_kwh
    return math.floor(kwh_charged * rate)
