"""
Test configuration for VoltMap.

Every test gets a fresh in-memory SQLite database (aiosqlite + StaticPool so
all sessions share one connection). get_db is overridden with a session
factory bound to it, keeping the same commit/rollback-per-request contract
as production. No PostgreSQL or network needed.
"""
from __future__ import annotations

from typing import AsyncGenerator, Awaitable, Callable, Optional

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import voltmap.models  # noqa: F401  (registers tables on Base.metadata)
from voltmap.api.auth.security import create_access_token
from voltmap.database import Base, get_db
from voltmap.main import app
from voltmap.models.reward import RewardORM


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _override_get_db
    yield factory
    app.dependency_overrides.pop(get_db, None)
    await engine.dispose()


@pytest_asyncio.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """A standalone session for store-level tests; committed by the test when needed."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Async httpx client using ASGI transport — no live server needed."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

STATION_PAYLOAD = {
    "name": "Downtown Supercharge",
    "address": "1 Main St",
    "city": "Springfield",
    "lat": 40.0,
    "lng": -74.0,
    "connectorTypes": ["CCS", "Type 2"],
    "pricePerKwh": 2.5,
    "isFree": False,
    "power": 50,
    "openingHours": "24/7",
    "status": "available",
}


def auth_headers(user_id: int) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


@pytest_asyncio.fixture
async def register(client: AsyncClient) -> Callable[..., Awaitable[dict]]:
    """Register a user over HTTP; returns {"id", "headers", "user"}."""
    counter = {"n": 0}

    async def _register(username: Optional[str] = None) -> dict:
        counter["n"] += 1
        username = username or f"driver{counter['n']}"
        response = await client.post(
            "/api/register",
            json={
                "username": username,
                "password": "s3cret-pass",
                "email": f"{username}@example.com",
                "name": username.title(),
            },
        )
        assert response.status_code == 201, response.text
        # Tests authenticate with explicit headers; keep the jar empty.
        client.cookies.clear()
        user = response.json()
        return {"id": user["id"], "headers": auth_headers(user["id"]), "user": user}

    return _register


@pytest_asyncio.fixture
async def create_station(client: AsyncClient) -> Callable[..., Awaitable[dict]]:
    """Create a station owned by `owner`; keyword overrides are camelCase payload keys."""

    async def _create(owner: dict, **overrides) -> dict:
        response = await client.post(
            "/api/stations",
            json={**STATION_PAYLOAD, **overrides},
            headers=owner["headers"],
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest_asyncio.fixture
async def add_reward(session_factory) -> Callable[..., Awaitable[int]]:
    async def _add(points_required: int = 100, name: str = "10% off") -> int:
        async with session_factory() as session:
            reward = RewardORM(
                name=name,
                description=f"{name} reward",
                points_required=points_required,
                type="discount",
                value=10.0,
            )
            session.add(reward)
            await session.commit()
            return reward.id

    return _add
