"""
schemas.py — rewards catalog and claim Pydantic v2 contracts.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from voltmap.api.schemas import ApiModel


class Reward(ApiModel):
    id: int
    name: str
    description: str
    points_required: int
    type: str
    value: float
    created_at: datetime


class UserReward(ApiModel):
    id: int
    user_id: int
    reward_id: int
    is_used: bool
    used_at: Optional[datetime] = None
    created_at: datetime


class UserRewardWithReward(UserReward):
    reward: Reward


__all__ = ["Reward", "UserReward", "UserRewardWithReward"]
