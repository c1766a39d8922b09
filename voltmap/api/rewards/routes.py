"""
Reward HTTP routes — GET  /api/rewards                 (catalog, public)
                     GET  /api/user/rewards            (auth; claims + embedded reward)
                     POST /api/rewards/{id}/claim      (auth; 400 if not enough points)
                     POST /api/user/rewards/{id}/use   (auth; 404 if missing)
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Path
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from voltmap.api.auth.dependencies import get_current_user
from voltmap.api.rewards.schemas import Reward, UserReward, UserRewardWithReward
from voltmap.api.schemas import to_json, to_json_list
from voltmap.database import get_db
from voltmap.models.user import UserORM
from voltmap.store import (
    claim_reward,
    get_user_reward,
    list_rewards,
    list_user_rewards,
    use_reward,
)

router = APIRouter(prefix="/api", tags=["rewards"])


@router.get("/rewards")
async def get_rewards(db: AsyncSession = Depends(get_db)) -> JSONResponse:
    rewards = await list_rewards(db)
    return JSONResponse(status_code=200, content=to_json_list(Reward, rewards))


@router.get("/user/rewards")
async def get_user_rewards(
    user: UserORM = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    claims = await list_user_rewards(db, user.id)
    return JSONResponse(status_code=200, content=to_json_list(UserRewardWithReward, claims))


@router.post("/rewards/{reward_id}/claim")
async def post_claim_reward(
    reward_id: int = Path(..., gt=0),
    user: UserORM = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    claim = await claim_reward(db, user.id, reward_id)
    return JSONResponse(status_code=201, content=to_json(UserReward, claim))


@router.post("/user/rewards/{user_reward_id}/use")
async def post_use_reward(
    user_reward_id: int = Path(..., gt=0),
    user: UserORM = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    claim = await get_user_reward(db, user_reward_id)
    if claim is None:
        raise HTTPException(status_code=404, detail="User reward not found")
    if claim.user_id != user.id:
        raise HTTPException(status_code=403, detail="Forbidden: not your reward")
    claim = await use_reward(db, user_reward_id)
    return JSONResponse(status_code=200, content=to_json(UserReward, claim))
