"""
Auth & user HTTP routes — POST /api/register
                           POST /api/login
                           POST /api/logout
                           GET  /api/user            (auth)
                           GET  /api/user/stats      (auth; counters vs recomputed aggregates)
                           GET  /api/user/stations   (auth; stations the caller owns)

Register and login set an HTTP-only cookie carrying the access token and
return the user (never the password hash).
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from voltmap.api.auth.dependencies import get_current_user
from voltmap.api.auth.schemas import LoginRequest, RegisterRequest, User, UserStats
from voltmap.api.auth.security import create_access_token, hash_password, verify_password
from voltmap.api.schemas import to_json, to_json_list
from voltmap.api.stations.schemas import Station
from voltmap.config import settings
from voltmap.database import get_db
from voltmap.exceptions import AuthenticationError
from voltmap.models.user import UserORM
from voltmap.store import create_user, get_user_by_username, get_user_stats, list_stations_by_owner

router = APIRouter(prefix="/api", tags=["auth"])
logger = logging.getLogger(__name__)


def _with_auth_cookie(response: JSONResponse, user_id: int) -> JSONResponse:
    response.set_cookie(
        key=settings.cookie_name,
        value=create_access_token(user_id),
        max_age=settings.token_ttl_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
    )
    return response


@router.post("/register")
async def register(body: RegisterRequest, db: AsyncSession = Depends(get_db)) -> JSONResponse:
    user = await create_user(
        db,
        username=body.username,
        password_hash=await run_in_threadpool(hash_password, body.password),
        email=body.email,
        name=body.name,
    )
    return _with_auth_cookie(JSONResponse(status_code=201, content=to_json(User, user)), user.id)


@router.post("/login")
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)) -> JSONResponse:
    user = await get_user_by_username(db, body.username)
    if user is None or not await run_in_threadpool(
        verify_password, body.password, user.password_hash
    ):
        logger.info("Failed login attempt")
        raise AuthenticationError("Invalid username or password")
    logger.info("User logged in user_id=%s", user.id)
    return _with_auth_cookie(JSONResponse(status_code=200, content=to_json(User, user)), user.id)


@router.post("/logout")
async def logout() -> JSONResponse:
    response = JSONResponse(status_code=200, content={"message": "Logged out"})
    response.delete_cookie(settings.cookie_name)
    return response


@router.get("/user")
async def current_user(user: UserORM = Depends(get_current_user)) -> JSONResponse:
    return JSONResponse(status_code=200, content=to_json(User, user))


@router.get("/user/stats")
async def current_user_stats(
    user: UserORM = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    stats = await get_user_stats(db, user)
    return JSONResponse(status_code=200, content=to_json(UserStats, stats))


@router.get("/user/stations")
async def current_user_stations(
    user: UserORM = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    stations = await list_stations_by_owner(db, user.id)
    return JSONResponse(status_code=200, content=to_json_list(Station, stations))
