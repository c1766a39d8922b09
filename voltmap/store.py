"""
store.py — Data access facade for VoltMap.

Provides a consistent, high-level API for persisting and retrieving domain objects.
All routers use these functions — no router touches SQLAlchemy directly.

Design principles:
  - All functions are async and accept an AsyncSession parameter
  - No raw SQL: ORM / Core expression queries only
  - flush() not commit(): the get_db() dependency commits once per request,
    so every multi-step mutation here is a single transaction
  - Counters and status transitions use conditional UPDATEs (compare-and-swap)
    so concurrent requests can never double-complete a session or double-spend points
  - Logs ids only — never passwords, emails or tokens
  - Returns ORM instances; routers serialize them through the api schemas
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional, Sequence

from sqlalchemy import and_, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from voltmap.api.charging.pricing import compute_points, compute_total_price
from voltmap.api.stations.filters import StationFilters
from voltmap.api.stations.schemas import PromotionCreate, StationCreate, StationStatus
from voltmap.config import settings
from voltmap.exceptions import DomainError, NotFoundError
from voltmap.models.charging_session import ChargingSessionORM
from voltmap.models.favorite import FavoriteORM
from voltmap.models.promotion import PromotionORM
from voltmap.models.review import ReviewORM
from voltmap.models.reward import RewardORM, UserRewardORM
from voltmap.models.station import StationConnectorORM, StationORM
from voltmap.models.user import UserORM

logger = logging.getLogger(__name__)

_IN_PROGRESS = "in_progress"
_COMPLETED = "completed"
_CANCELLED = "cancelled"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# User operations
# ---------------------------------------------------------------------------

async def get_user(db: AsyncSession, user_id: int) -> Optional[UserORM]:
    result = await db.execute(select(UserORM).where(UserORM.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_username(db: AsyncSession, username: str) -> Optional[UserORM]:
    result = await db.execute(select(UserORM).where(UserORM.username == username))
    return result.scalar_one_or_none()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[UserORM]:
    result = await db.execute(select(UserORM).where(UserORM.email == email))
    return result.scalar_one_or_none()


async def create_user(
    db: AsyncSession,
    username: str,
    password_hash: str,
    email: str,
    name: str,
) -> UserORM:
    """
    Insert a new user with zeroed totals.

    Raises:
        DomainError: username or email already taken.
    """
    if await get_user_by_username(db, username) is not None:
        raise DomainError("Username already exists")
    if await get_user_by_email(db, email) is not None:
        raise DomainError("Email already exists")

    orm = UserORM(
        username=username,
        password_hash=password_hash,
        email=email,
        name=name,
        total_points=0,
        total_charges=0,
        total_kwh=0.0,
    )
    db.add(orm)
    await db.flush()
    logger.info("Created user user_id=%s", orm.id)
    return orm


async def get_user_stats(db: AsyncSession, user: UserORM) -> dict:
    """
    Stored counters plus the same aggregates recomputed from source rows:
    completed sessions (charges, kWh, points earned) and claims (points spent).
    """
    sessions = await db.execute(
        select(
            func.count(ChargingSessionORM.id),
            func.coalesce(func.sum(ChargingSessionORM.kwh_charged), 0.0),
            func.coalesce(func.sum(ChargingSessionORM.points_earned), 0),
        ).where(
            ChargingSessionORM.user_id == user.id,
            ChargingSessionORM.status == _COMPLETED,
        )
    )
    completed_charges, completed_kwh, points_earned = sessions.one()

    spent = await db.execute(
        select(func.coalesce(func.sum(RewardORM.points_required), 0))
        .select_from(UserRewardORM)
        .join(RewardORM, UserRewardORM.reward_id == RewardORM.id)
        .where(UserRewardORM.user_id == user.id)
    )
    points_spent = spent.scalar_one()

    return {
        "total_points": user.total_points,
        "total_charges": user.total_charges,
        "total_kwh": user.total_kwh,
        "completed_charges": int(completed_charges),
        "completed_kwh": float(completed_kwh),
        "points_earned": int(points_earned),
        "points_spent": int(points_spent),
    }


# ---------------------------------------------------------------------------
# Station operations
# ---------------------------------------------------------------------------

async def list_stations(
    db: AsyncSession,
    filters: Optional[StationFilters] = None,
) -> Sequence[StationORM]:
    """
    Stations matching every supplied filter (AND), in id order.

    connector_types matches when the station offers ANY of the given types.
    """
    query = select(StationORM)

    if filters is not None:
        if filters.status:
            query = query.where(StationORM.status.in_([s.value for s in filters.status]))
        if filters.connector_types:
            query = query.where(
                StationORM.connectors.any(
                    StationConnectorORM.connector_type.in_(filters.connector_types)
                )
            )
        if filters.is_free is not None:
            query = query.where(StationORM.is_free == filters.is_free)
        if filters.min_power is not None:
            query = query.where(StationORM.power >= filters.min_power)

    result = await db.execute(query.order_by(StationORM.id))
    return result.scalars().all()


async def get_station(db: AsyncSession, station_id: int) -> Optional[StationORM]:
    result = await db.execute(select(StationORM).where(StationORM.id == station_id))
    return result.scalar_one_or_none()


async def list_stations_by_owner(db: AsyncSession, owner_id: int) -> Sequence[StationORM]:
    result = await db.execute(
        select(StationORM).where(StationORM.owner_id == owner_id).order_by(StationORM.id)
    )
    return result.scalars().all()


def _apply_station_fields(orm: StationORM, data: StationCreate) -> None:
    for field in (
        "name", "address", "city", "lat", "lng", "price_per_kwh", "is_free",
        "power", "opening_hours", "has_wifi", "has_free_parking",
        "has_restaurant", "has_waiting_area",
    ):
        setattr(orm, field, getattr(data, field))
    orm.status = data.status.value


async def create_station(db: AsyncSession, data: StationCreate, owner_id: int) -> StationORM:
    orm = StationORM(owner_id=owner_id)
    _apply_station_fields(orm, data)
    orm.connectors = [StationConnectorORM(connector_type=c) for c in data.connector_types]
    db.add(orm)
    await db.flush()
    logger.info("Created station station_id=%s owner_id=%s", orm.id, owner_id)
    return orm


async def update_station(db: AsyncSession, station: StationORM, data: StationCreate) -> StationORM:
    """
    Replace every editable field of an existing station.

    Connectors are diffed rather than swapped wholesale so an unchanged
    (station_id, connector_type) key is never deleted and re-inserted in one flush.
    """
    _apply_station_fields(station, data)

    wanted = set(data.connector_types)
    for connector in list(station.connectors):
        if connector.connector_type not in wanted:
            station.connectors.remove(connector)
    existing = {c.connector_type for c in station.connectors}
    for connector_type in sorted(wanted - existing):
        station.connectors.append(StationConnectorORM(connector_type=connector_type))

    await db.flush()
    logger.info("Updated station station_id=%s", station.id)
    return station


# ---------------------------------------------------------------------------
# Review operations
# ---------------------------------------------------------------------------

async def list_reviews(db: AsyncSession, station_id: int) -> Sequence[ReviewORM]:
    result = await db.execute(
        select(ReviewORM)
        .where(ReviewORM.station_id == station_id)
        .order_by(ReviewORM.created_at.desc(), ReviewORM.id.desc())
    )
    return result.scalars().all()


async def create_review(
    db: AsyncSession,
    station_id: int,
    user_id: int,
    rating: int,
    comment: Optional[str],
) -> ReviewORM:
    orm = ReviewORM(station_id=station_id, user_id=user_id, rating=rating, comment=comment)
    db.add(orm)
    await db.flush()
    logger.info("Saved review review_id=%s station_id=%s", orm.id, station_id)
    return orm


# ---------------------------------------------------------------------------
# Favorite operations
# ---------------------------------------------------------------------------

async def list_favorite_stations(db: AsyncSession, user_id: int) -> Sequence[StationORM]:
    result = await db.execute(
        select(StationORM)
        .join(FavoriteORM, FavoriteORM.station_id == StationORM.id)
        .where(FavoriteORM.user_id == user_id)
        .order_by(FavoriteORM.created_at.desc(), StationORM.id)
    )
    return result.scalars().all()


async def is_favorite(db: AsyncSession, user_id: int, station_id: int) -> bool:
    result = await db.execute(
        select(FavoriteORM).where(
            FavoriteORM.user_id == user_id,
            FavoriteORM.station_id == station_id,
        )
    )
    return result.scalar_one_or_none() is not None


async def add_favorite(db: AsyncSession, user_id: int, station_id: int) -> FavoriteORM:
    """
    Raises:
        DomainError: the pair is already bookmarked.
    """
    if await is_favorite(db, user_id, station_id):
        raise DomainError("Already in favorites")
    orm = FavoriteORM(user_id=user_id, station_id=station_id)
    db.add(orm)
    await db.flush()
    logger.info("Added favorite user_id=%s station_id=%s", user_id, station_id)
    return orm


async def remove_favorite(db: AsyncSession, user_id: int, station_id: int) -> None:
    await db.execute(
        delete(FavoriteORM).where(
            FavoriteORM.user_id == user_id,
            FavoriteORM.station_id == station_id,
        )
    )
    logger.info("Removed favorite user_id=%s station_id=%s", user_id, station_id)


# ---------------------------------------------------------------------------
# Promotion operations
# ---------------------------------------------------------------------------

async def list_promotions(db: AsyncSession, station_id: int) -> Sequence[PromotionORM]:
    result = await db.execute(
        select(PromotionORM)
        .where(PromotionORM.station_id == station_id)
        .order_by(PromotionORM.created_at.desc(), PromotionORM.id.desc())
    )
    return result.scalars().all()


async def create_promotion(db: AsyncSession, station_id: int, data: PromotionCreate) -> PromotionORM:
    orm = PromotionORM(
        station_id=station_id,
        description=data.description,
        points_value=data.points_value,
        start_date=data.start_date,
        end_date=data.end_date,
    )
    db.add(orm)
    await db.flush()
    logger.info("Created promotion promotion_id=%s station_id=%s", orm.id, station_id)
    return orm


async def list_active_promotions(
    db: AsyncSession,
    now: Optional[datetime] = None,
) -> Sequence[PromotionORM]:
    """Promotions running at `now`, soonest-ending first, each with its station loaded."""
    now = now or _utcnow()
    result = await db.execute(
        select(PromotionORM)
        .options(selectinload(PromotionORM.station))
        .where(PromotionORM.start_date <= now, PromotionORM.end_date >= now)
        .order_by(PromotionORM.end_date.asc(), PromotionORM.id)
    )
    return result.scalars().all()


# ---------------------------------------------------------------------------
# Charging session operations
# ---------------------------------------------------------------------------

async def get_charging_session(db: AsyncSession, session_id: int) -> Optional[ChargingSessionORM]:
    result = await db.execute(
        select(ChargingSessionORM).where(ChargingSessionORM.id == session_id)
    )
    return result.scalar_one_or_none()


async def list_charging_sessions(db: AsyncSession, user_id: int) -> Sequence[ChargingSessionORM]:
    result = await db.execute(
        select(ChargingSessionORM)
        .where(ChargingSessionORM.user_id == user_id)
        .order_by(ChargingSessionORM.start_time.desc(), ChargingSessionORM.id.desc())
    )
    return result.scalars().all()


async def start_charging_session(
    db: AsyncSession,
    user_id: int,
    station_id: int,
) -> ChargingSessionORM:
    """
    Open an in_progress session for user_id at station_id.

    Raises:
        NotFoundError: station does not exist.
        DomainError:   station not available (only when settings.require_available_station)
                       or user already charging (only when not settings.allow_concurrent_sessions).
    """
    station = await get_station(db, station_id)
    if station is None:
        raise NotFoundError("Station not found")

    if station.status != StationStatus.available.value:
        if settings.require_available_station:
            raise DomainError("Station is not available")
        logger.warning(
            "Starting session at non-available station station_id=%s status=%s",
            station_id, station.status,
        )

    if not settings.allow_concurrent_sessions:
        open_session = await db.execute(
            select(ChargingSessionORM.id).where(
                ChargingSessionORM.user_id == user_id,
                ChargingSessionORM.status == _IN_PROGRESS,
            ).limit(1)
        )
        if open_session.scalar_one_or_none() is not None:
            raise DomainError("A charging session is already in progress")

    orm = ChargingSessionORM(
        user_id=user_id,
        station_id=station_id,
        start_time=_utcnow(),
        points_earned=0,
        status=_IN_PROGRESS,
    )
    db.add(orm)
    await db.flush()
    logger.info(
        "Started charging session session_id=%s user_id=%s station_id=%s",
        orm.id, user_id, station_id,
    )
    return orm


async def end_charging_session(
    db: AsyncSession,
    session_id: int,
    kwh_charged: float,
) -> ChargingSessionORM:
    """
    Complete a session: price it, award points, roll the user's totals forward.

    Sequence (single transaction — get_db commits or rolls back all of it):
      1. load session, then its station            → NotFoundError if either missing
      2. total_price / points_earned via pricing.py
      3. CAS session in_progress → completed       → DomainError if it already left in_progress
      4. SQL-side increment of the user's totals

    Raises:
        NotFoundError: session or station missing.
        DomainError:   session is not in progress.
    """
    charging_session = await get_charging_session(db, session_id)
    if charging_session is None:
        raise NotFoundError("Charging session not found")

    station = await get_station(db, charging_session.station_id)
    if station is None:
        raise NotFoundError("Station not found")

    total_price = compute_total_price(station.is_free, station.price_per_kwh, kwh_charged)
    points_earned = compute_points(kwh_charged)

    completed = await db.execute(
        update(ChargingSessionORM)
        .where(
            ChargingSessionORM.id == session_id,
            ChargingSessionORM.status == _IN_PROGRESS,
        )
        .values(
            end_time=_utcnow(),
            kwh_charged=kwh_charged,
            points_earned=points_earned,
            total_price=total_price,
            status=_COMPLETED,
        )
        .execution_options(synchronize_session=False)
    )
    if completed.rowcount != 1:
        raise DomainError("Charging session is not in progress")

    await db.execute(
        update(UserORM)
        .where(UserORM.id == charging_session.user_id)
        .values(
            total_points=UserORM.total_points + points_earned,
            total_charges=UserORM.total_charges + 1,
            total_kwh=UserORM.total_kwh + kwh_charged,
        )
        .execution_options(synchronize_session=False)
    )

    await db.refresh(charging_session)
    logger.info(
        "Completed charging session session_id=%s user_id=%s points=%d price=%.2f",
        session_id, charging_session.user_id, points_earned, total_price,
    )
    return charging_session


async def cancel_charging_session(db: AsyncSession, session_id: int) -> ChargingSessionORM:
    """
    Abandon an in_progress session without charging or awarding anything.

    Raises:
        NotFoundError: session missing.
        DomainError:   session is not in progress.
    """
    charging_session = await get_charging_session(db, session_id)
    if charging_session is None:
        raise NotFoundError("Charging session not found")

    cancelled = await db.execute(
        update(ChargingSessionORM)
        .where(
            ChargingSessionORM.id == session_id,
            ChargingSessionORM.status == _IN_PROGRESS,
        )
        .values(end_time=_utcnow(), status=_CANCELLED)
        .execution_options(synchronize_session=False)
    )
    if cancelled.rowcount != 1:
        raise DomainError("Charging session is not in progress")

    await db.refresh(charging_session)
    logger.info("Cancelled charging session session_id=%s", session_id)
    return charging_session


# ---------------------------------------------------------------------------
# Reward operations
# ---------------------------------------------------------------------------

async def list_rewards(db: AsyncSession) -> Sequence[RewardORM]:
    result = await db.execute(
        select(RewardORM).order_by(RewardORM.points_required.asc(), RewardORM.id)
    )
    return result.scalars().all()


async def get_reward(db: AsyncSession, reward_id: int) -> Optional[RewardORM]:
    result = await db.execute(select(RewardORM).where(RewardORM.id == reward_id))
    return result.scalar_one_or_none()


async def get_user_reward(db: AsyncSession, user_reward_id: int) -> Optional[UserRewardORM]:
    result = await db.execute(select(UserRewardORM).where(UserRewardORM.id == user_reward_id))
    return result.scalar_one_or_none()


async def list_user_rewards(db: AsyncSession, user_id: int) -> Sequence[UserRewardORM]:
    result = await db.execute(
        select(UserRewardORM)
        .options(selectinload(UserRewardORM.reward))
        .where(UserRewardORM.user_id == user_id)
        .order_by(UserRewardORM.created_at.desc(), UserRewardORM.id.desc())
    )
    return result.scalars().all()


async def claim_reward(db: AsyncSession, user_id: int, reward_id: int) -> UserRewardORM:
    """
    Spend reward.points_required from the user's balance and record the claim.

    The balance check and the debit are one conditional UPDATE
    (... WHERE total_points >= cost), so two concurrent claims can never both
    pass the check against the same points. The claim row is inserted in the
    same transaction.

    Raises:
        NotFoundError: reward or user missing.
        DomainError:   not enough points.
    """
    reward = await get_reward(db, reward_id)
    if reward is None:
        raise NotFoundError("Reward not found")
    if await get_user(db, user_id) is None:
        raise NotFoundError("User not found")

    debited = await db.execute(
        update(UserORM)
        .where(
            and_(
                UserORM.id == user_id,
                UserORM.total_points >= reward.points_required,
            )
        )
        .values(total_points=UserORM.total_points - reward.points_required)
        .execution_options(synchronize_session=False)
    )
    if debited.rowcount != 1:
        raise DomainError("Not enough points to claim this reward")

    orm = UserRewardORM(user_id=user_id, reward_id=reward_id, is_used=False)
    db.add(orm)
    await db.flush()
    logger.info(
        "Claimed reward user_reward_id=%s user_id=%s reward_id=%s cost=%d",
        orm.id, user_id, reward_id, reward.points_required,
    )
    return orm


async def use_reward(db: AsyncSession, user_reward_id: int) -> UserRewardORM:
    """
    Mark a claimed reward as used.

    Using an already-used claim is an idempotent overwrite: used_at is
    refreshed and no error is raised.

    Raises:
        NotFoundError: no such claim.
    """
    user_reward = await get_user_reward(db, user_reward_id)
    if user_reward is None:
        raise NotFoundError("User reward not found")

    if user_reward.is_used:
        logger.info("Reward used again user_reward_id=%s", user_reward_id)

    await db.execute(
        update(UserRewardORM)
        .where(UserRewardORM.id == user_reward_id)
        .values(is_used=True, used_at=_utcnow())
        .execution_options(synchronize_session=False)
    )
    await db.refresh(user_reward)
    logger.info("Used reward user_reward_id=%s", user_reward_id)
    return user_reward
