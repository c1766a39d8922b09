"""
Integration tests for the reward catalog, claims and redemption.
"""
from __future__ import annotations

from datetime import datetime

import pytest


async def _earn(client, user, station_id: int, kwh: float) -> None:
    started = await client.post(
        "/api/charging/start", json={"stationId": station_id}, headers=user["headers"]
    )
    ended = await client.post(
        f"/api/charging/{started.json()['id']}/end",
        json={"kwhCharged": kwh},
        headers=user["headers"],
    )
    assert ended.status_code == 200, ended.text


async def _points(client, user) -> int:
    return (await client.get("/api/user", headers=user["headers"])).json()["totalPoints"]


@pytest.mark.asyncio
async def test_catalog_sorted_by_cost(client, add_reward):
    await add_reward(points_required=400, name="Free charge")
    await add_reward(points_required=100, name="10% off")
    await add_reward(points_required=250, name="Coffee")

    response = await client.get("/api/rewards")
    assert response.status_code == 200
    assert [r["pointsRequired"] for r in response.json()] == [100, 250, 400]


@pytest.mark.asyncio
async def test_claim_without_enough_points_changes_nothing(client, register, add_reward):
    driver = await register()
    reward_id = await add_reward(points_required=100)

    response = await client.post(f"/api/rewards/{reward_id}/claim", headers=driver["headers"])
    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Not enough points to claim this reward"

    assert await _points(client, driver) == 0
    claims = await client.get("/api/user/rewards", headers=driver["headers"])
    assert claims.json() == []


@pytest.mark.asyncio
async def test_claim_deducts_exact_cost(client, register, create_station, add_reward):
    owner = await register()
    driver = await register()
    station = await create_station(owner)
    reward_id = await add_reward(points_required=100)
    await _earn(client, driver, station["id"], 12.5)
    assert await _points(client, driver) == 125

    response = await client.post(f"/api/rewards/{reward_id}/claim", headers=driver["headers"])
    assert response.status_code == 201
    claim = response.json()
    assert claim["rewardId"] == reward_id
    assert claim["userId"] == driver["id"]
    assert claim["isUsed"] is False
    assert claim["usedAt"] is None

    assert await _points(client, driver) == 25

    second = await client.post(f"/api/rewards/{reward_id}/claim", headers=driver["headers"])
    assert second.status_code == 400
    assert await _points(client, driver) == 25


@pytest.mark.asyncio
async def test_claim_exactly_the_balance(client, register, create_station, add_reward):
    owner = await register()
    driver = await register()
    station = await create_station(owner)
    reward_id = await add_reward(points_required=100)
    await _earn(client, driver, station["id"], 10)

    response = await client.post(f"/api/rewards/{reward_id}/claim", headers=driver["headers"])
    assert response.status_code == 201
    assert await _points(client, driver) == 0


@pytest.mark.asyncio
async def test_claim_unknown_reward_is_404(client, register):
    driver = await register()
    response = await client.post("/api/rewards/777/claim", headers=driver["headers"])
    assert response.status_code == 404
    assert response.json()["error"]["message"] == "Reward not found"


@pytest.mark.asyncio
async def test_user_rewards_embed_reward(client, register, create_station, add_reward):
    owner = await register()
    driver = await register()
    station = await create_station(owner)
    reward_id = await add_reward(points_required=50, name="Car wash")
    await _earn(client, driver, station["id"], 5)
    await client.post(f"/api/rewards/{reward_id}/claim", headers=driver["headers"])

    claims = (await client.get("/api/user/rewards", headers=driver["headers"])).json()
    assert len(claims) == 1
    assert claims[0]["reward"]["name"] == "Car wash"
    assert claims[0]["reward"]["pointsRequired"] == 50


@pytest.mark.asyncio
async def test_using_a_claim_again_is_idempotent(client, register, create_station, add_reward):
    owner = await register()
    driver = await register()
    station = await create_station(owner)
    reward_id = await add_reward(points_required=50)
    await _earn(client, driver, station["id"], 5)
    claim = (
        await client.post(f"/api/rewards/{reward_id}/claim", headers=driver["headers"])
    ).json()

    response = await client.post(f"/api/user/rewards/{claim['id']}/use", headers=driver["headers"])
    assert response.status_code == 200
    body = response.json()
    assert body["isUsed"] is True
    assert body["usedAt"] is not None

    again = await client.post(f"/api/user/rewards/{claim['id']}/use", headers=driver["headers"])
    assert again.status_code == 200
    assert again.json()["isUsed"] is True
    assert datetime.fromisoformat(again.json()["usedAt"]) >= datetime.fromisoformat(body["usedAt"])

    claims = (await client.get("/api/user/rewards", headers=driver["headers"])).json()
    assert len(claims) == 1
    assert await _points(client, driver) == 0


@pytest.mark.asyncio
async def test_use_unknown_claim_is_404(client, register):
    driver = await register()
    response = await client.post("/api/user/rewards/31337/use", headers=driver["headers"])
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_cannot_use_another_users_claim(client, register, create_station, add_reward):
    owner = await register()
    driver = await register()
    intruder = await register()
    station = await create_station(owner)
    reward_id = await add_reward(points_required=50)
    await _earn(client, driver, station["id"], 5)
    claim = (
        await client.post(f"/api/rewards/{reward_id}/claim", headers=driver["headers"])
    ).json()

    response = await client.post(
        f"/api/user/rewards/{claim['id']}/use", headers=intruder["headers"]
    )
    assert response.status_code == 403

    mine = (await client.get("/api/user/rewards", headers=driver["headers"])).json()
    assert mine[0]["isUsed"] is False
