"""
Charging session HTTP routes — POST /api/charging/start        (auth; 201)
                                POST /api/charging/{id}/end     (auth; owner only)
                                POST /api/charging/{id}/cancel  (auth; owner only)
                                GET  /api/charging/history      (auth)

Pricing and point rules live in pricing.py; the transactional sequence lives
in store.end_charging_session(). Routes only check shape and ownership.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Path
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from voltmap.api.auth.dependencies import get_current_user
from voltmap.api.charging.schemas import ChargingSession, EndSessionRequest, StartSessionRequest
from voltmap.api.schemas import to_json, to_json_list
from voltmap.database import get_db
from voltmap.models.charging_session import ChargingSessionORM
from voltmap.models.user import UserORM
from voltmap.store import (
    cancel_charging_session,
    end_charging_session,
    get_charging_session,
    list_charging_sessions,
    start_charging_session,
)

router = APIRouter(prefix="/api/charging", tags=["charging"])
logger = logging.getLogger(__name__)


async def _require_own_session(db: AsyncSession, session_id: int, user: UserORM) -> ChargingSessionORM:
    charging_session = await get_charging_session(db, session_id)
    if charging_session is None:
        raise HTTPException(status_code=404, detail="Charging session not found")
    if charging_session.user_id != user.id:
        raise HTTPException(status_code=403, detail="Forbidden: not your charging session")
    return charging_session


@router.post("/start")
async def start_session(
    body: StartSessionRequest,
    user: UserORM = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    charging_session = await start_charging_session(db, user.id, body.station_id)
    return JSONResponse(status_code=201, content=to_json(ChargingSession, charging_session))


@router.post("/{session_id}/end")
async def end_session(
    body: EndSessionRequest,
    session_id: int = Path(..., gt=0),
    user: UserORM = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """
    Complete a session with the delivered energy.

    Returns the completed session with totalPrice and pointsEarned; the
    caller's totals are updated in the same transaction.
    """
    await _require_own_session(db, session_id, user)
    charging_session = await end_charging_session(db, session_id, body.kwh_charged)
    return JSONResponse(status_code=200, content=to_json(ChargingSession, charging_session))


@router.post("/{session_id}/cancel")
async def cancel_session(
    session_id: int = Path(..., gt=0),
    user: UserORM = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    await _require_own_session(db, session_id, user)
    charging_session = await cancel_charging_session(db, session_id)
    return JSONResponse(status_code=200, content=to_json(ChargingSession, charging_session))


@router.get("/history")
async def session_history(
    user: UserORM = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    sessions = await list_charging_sessions(db, user.id)
    return JSONResponse(status_code=200, content=to_json_list(ChargingSession, sessions))
