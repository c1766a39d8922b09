"""
Integration tests for the charging session lifecycle.

Covers: start/end/cancel transitions, pricing and points on completion,
user totals rolled forward exactly once, ownership, and input validation.
"""
from __future__ import annotations

import pytest

from voltmap.config import settings


async def _start(client, user, station_id):
    return await client.post(
        "/api/charging/start", json={"stationId": station_id}, headers=user["headers"]
    )


async def _end(client, user, session_id, kwh):
    return await client.post(
        f"/api/charging/{session_id}/end", json={"kwhCharged": kwh}, headers=user["headers"]
    )


async def _me(client, user) -> dict:
    response = await client.get("/api/user", headers=user["headers"])
    assert response.status_code == 200
    return response.json()


@pytest.mark.asyncio
async def test_start_opens_in_progress_session(client, register, create_station):
    owner = await register()
    driver = await register()
    station = await create_station(owner)

    response = await _start(client, driver, station["id"])
    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "in_progress"
    assert body["userId"] == driver["id"]
    assert body["stationId"] == station["id"]
    assert body["pointsEarned"] == 0
    assert body["endTime"] is None
    assert body["kwhCharged"] is None


@pytest.mark.asyncio
async def test_end_prices_session_and_awards_points(client, register, create_station):
    owner = await register()
    driver = await register()
    station = await create_station(owner, pricePerKwh=2.5)
    started = (await _start(client, driver, station["id"])).json()

    response = await _end(client, driver, started["id"], 10)
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "completed"
    assert body["kwhCharged"] == pytest.approx(10.0)
    assert body["totalPrice"] == pytest.approx(25.0)
    assert body["pointsEarned"] == 100
    assert body["endTime"] is not None

    me = await _me(client, driver)
    assert me["totalPoints"] == 100
    assert me["totalCharges"] == 1
    assert me["totalKwh"] == pytest.approx(10.0)


@pytest.mark.asyncio
async def test_free_station_costs_nothing_but_still_earns(client, register, create_station):
    owner = await register()
    driver = await register()
    station = await create_station(owner, isFree=True, pricePerKwh=3.0)
    started = (await _start(client, driver, station["id"])).json()

    body = (await _end(client, driver, started["id"], 7.77)).json()
    assert body["totalPrice"] == 0.0
    assert body["pointsEarned"] == 77


@pytest.mark.asyncio
async def test_totals_accumulate_across_sessions(client, register, create_station):
    owner = await register()
    driver = await register()
    station = await create_station(owner)

    for kwh in (3.5, 6.5):
        started = (await _start(client, driver, station["id"])).json()
        assert (await _end(client, driver, started["id"], kwh)).status_code == 200

    me = await _me(client, driver)
    assert me["totalCharges"] == 2
    assert me["totalKwh"] == pytest.approx(10.0)
    assert me["totalPoints"] == 35 + 65


@pytest.mark.asyncio
async def test_ending_twice_is_rejected_and_counts_once(client, register, create_station):
    owner = await register()
    driver = await register()
    station = await create_station(owner)
    started = (await _start(client, driver, station["id"])).json()

    assert (await _end(client, driver, started["id"], 5)).status_code == 200
    second = await _end(client, driver, started["id"], 5)
    assert second.status_code == 400
    assert second.json()["error"]["message"] == "Charging session is not in progress"

    me = await _me(client, driver)
    assert me["totalCharges"] == 1
    assert me["totalPoints"] == 50


@pytest.mark.asyncio
@pytest.mark.parametrize("kwh", ["abc", True, 0, -3.2, None, 1e308, 1e30, 100_000.5])
async def test_invalid_kwh_rejected(client, register, create_station, kwh):
    owner = await register()
    driver = await register()
    station = await create_station(owner)
    started = (await _start(client, driver, station["id"])).json()

    response = await _end(client, driver, started["id"], kwh)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    history = (await client.get("/api/charging/history", headers=driver["headers"])).json()
    assert history[0]["status"] == "in_progress"


@pytest.mark.asyncio
async def test_largest_accepted_kwh(client, register, create_station):
    owner = await register()
    driver = await register()
    station = await create_station(owner, pricePerKwh=0.5)
    started = (await _start(client, driver, station["id"])).json()

    body = (await _end(client, driver, started["id"], 100_000)).json()
    assert body["pointsEarned"] == 1_000_000
    assert body["totalPrice"] == pytest.approx(50_000.0)


@pytest.mark.asyncio
async def test_end_unknown_session_is_404(client, register):
    driver = await register()
    response = await _end(client, driver, 9999, 5)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_cannot_end_another_users_session(client, register, create_station):
    owner = await register()
    driver = await register()
    intruder = await register()
    station = await create_station(owner)
    started = (await _start(client, driver, station["id"])).json()

    response = await _end(client, intruder, started["id"], 5)
    assert response.status_code == 403

    assert (await _me(client, intruder))["totalPoints"] == 0
    assert (await _me(client, driver))["totalPoints"] == 0


@pytest.mark.asyncio
async def test_start_on_unknown_station_is_404(client, register):
    driver = await register()
    response = await _start(client, driver, 4242)
    assert response.status_code == 404
    assert response.json()["error"]["message"] == "Station not found"


@pytest.mark.asyncio
async def test_start_on_offline_station_allowed_by_default(client, register, create_station):
    owner = await register()
    driver = await register()
    station = await create_station(owner, status="offline")

    response = await _start(client, driver, station["id"])
    assert response.status_code == 201
    assert response.json()["status"] == "in_progress"


@pytest.mark.asyncio
async def test_start_on_unavailable_station_is_400_when_enforced(
    client, register, create_station, monkeypatch
):
    monkeypatch.setattr(settings, "require_available_station", True)
    owner = await register()
    driver = await register()
    station = await create_station(owner, status="offline")

    response = await _start(client, driver, station["id"])
    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Station is not available"


@pytest.mark.asyncio
async def test_concurrent_sessions_allowed_by_default(client, register, create_station):
    owner = await register()
    driver = await register()
    first = await create_station(owner)
    second = await create_station(owner, name="Mall Level 2")

    assert (await _start(client, driver, first["id"])).status_code == 201
    assert (await _start(client, driver, second["id"])).status_code == 201


@pytest.mark.asyncio
async def test_only_one_open_session_per_user_when_enforced(
    client, register, create_station, monkeypatch
):
    monkeypatch.setattr(settings, "allow_concurrent_sessions", False)
    owner = await register()
    driver = await register()
    first = await create_station(owner)
    second = await create_station(owner, name="Mall Level 2")

    assert (await _start(client, driver, first["id"])).status_code == 201
    response = await _start(client, driver, second["id"])
    assert response.status_code == 400
    assert response.json()["error"]["message"] == "A charging session is already in progress"


@pytest.mark.asyncio
async def test_start_requires_integer_station_id(client, register):
    driver = await register()
    response = await client.post(
        "/api/charging/start", json={"stationId": "1"}, headers=driver["headers"]
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_start_requires_auth(client):
    response = await client.post("/api/charging/start", json={"stationId": 1})
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"


@pytest.mark.asyncio
async def test_cancel_closes_session_without_points(client, register, create_station, monkeypatch):
    monkeypatch.setattr(settings, "allow_concurrent_sessions", False)
    owner = await register()
    driver = await register()
    station = await create_station(owner)
    started = (await _start(client, driver, station["id"])).json()

    response = await client.post(
        f"/api/charging/{started['id']}/cancel", headers=driver["headers"]
    )
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "cancelled"
    assert body["pointsEarned"] == 0
    assert body["endTime"] is not None

    assert (await _end(client, driver, started["id"], 5)).status_code == 400
    me = await _me(client, driver)
    assert me["totalCharges"] == 0
    assert me["totalPoints"] == 0

    # With one-open-session enforced, a cancelled session no longer blocks a new start.
    assert (await _start(client, driver, station["id"])).status_code == 201


@pytest.mark.asyncio
async def test_history_is_newest_first_and_private(client, register, create_station):
    owner = await register()
    driver = await register()
    other = await register()
    station = await create_station(owner)

    ids = []
    for _ in range(3):
        started = (await _start(client, driver, station["id"])).json()
        await _end(client, driver, started["id"], 1)
        ids.append(started["id"])

    history = (await client.get("/api/charging/history", headers=driver["headers"])).json()
    assert [s["id"] for s in history] == list(reversed(ids))

    other_history = (await client.get("/api/charging/history", headers=other["headers"])).json()
    assert other_history == []


@pytest.mark.asyncio
async def test_stats_match_recomputed_aggregates(client, register, create_station, add_reward):
    owner = await register()
    driver = await register()
    station = await create_station(owner)
    reward_id = await add_reward(points_required=30)

    for kwh in (2.0, 4.5):
        started = (await _start(client, driver, station["id"])).json()
        await _end(client, driver, started["id"], kwh)
    cancelled = (await _start(client, driver, station["id"])).json()
    await client.post(f"/api/charging/{cancelled['id']}/cancel", headers=driver["headers"])
    assert (
        await client.post(f"/api/rewards/{reward_id}/claim", headers=driver["headers"])
    ).status_code == 201

    stats = (await client.get("/api/user/stats", headers=driver["headers"])).json()
    assert stats["totalCharges"] == stats["completedCharges"] == 2
    assert stats["totalKwh"] == pytest.approx(stats["completedKwh"])
    assert stats["pointsEarned"] == 20 + 45
    assert stats["pointsSpent"] == 30
    assert stats["totalPoints"] == stats["pointsEarned"] - stats["pointsSpent"]
