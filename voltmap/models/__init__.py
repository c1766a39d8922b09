"""
models/__init__.py — imports all ORM models so Alembic's env.py
sees them via Base.metadata when generating migrations.

Import order matters for FK dependencies: users before stations before the rest.
"""
from voltmap.models.user import UserORM
from voltmap.models.station import StationConnectorORM, StationORM
from voltmap.models.review import ReviewORM
from voltmap.models.favorite import FavoriteORM
from voltmap.models.promotion import PromotionORM
from voltmap.models.charging_session import ChargingSessionORM
from voltmap.models.reward import RewardORM, UserRewardORM

__all__ = [
    "UserORM",
    "StationORM",
    "StationConnectorORM",
    "ReviewORM",
    "FavoriteORM",
    "PromotionORM",
    "ChargingSessionORM",
    "RewardORM",
    "UserRewardORM",
]
