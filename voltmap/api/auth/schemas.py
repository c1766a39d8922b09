"""
schemas.py — registration, login and user profile contracts.

The password only ever appears on the way in (RegisterRequest/LoginRequest);
User never carries it back out.
"""
from __future__ import annotations

from datetime import datetime

from pydantic import Field

from voltmap.api.schemas import ApiModel

_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class RegisterRequest(ApiModel):
    username: str = Field(..., min_length=3, max_length=64)
    password: str = Field(..., min_length=6, max_length=128)
    email: str = Field(..., max_length=255, pattern=_EMAIL_PATTERN)
    name: str = Field(..., min_length=1, max_length=255)


class LoginRequest(ApiModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class User(ApiModel):
    id: int
    username: str
    email: str
    name: str
    created_at: datetime
    total_points: int
    total_charges: int
    total_kwh: float


class UserStats(ApiModel):
    """
    Stored counters next to the same figures recomputed from completed sessions.

    completed_charges / completed_kwh must equal total_charges / total_kwh;
    points_earned - points_spent must equal total_points.
    """
    total_points: int
    total_charges: int
    total_kwh: float
    completed_charges: int
    completed_kwh: float
    points_earned: int
    points_spent: int


__all__ = ["RegisterRequest", "LoginRequest", "User", "UserStats"]
