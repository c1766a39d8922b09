"""
Favorite HTTP routes — GET    /api/favorites                   (auth)
                       POST   /api/favorites                   (auth; 400 if duplicate)
                       DELETE /api/favorites/{stationId}       (auth; 204)
                       GET    /api/favorites/check/{stationId} (auth)
"""
from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Path, Response
from fastapi.responses import JSONResponse
from pydantic import Field
from sqlalchemy.ext.asyncio import AsyncSession

from voltmap.api.auth.dependencies import get_current_user
from voltmap.api.schemas import ApiModel, to_json, to_json_list
from voltmap.api.stations.schemas import Station
from voltmap.database import get_db
from voltmap.models.user import UserORM
from voltmap.store import (
    add_favorite,
    get_station,
    is_favorite,
    list_favorite_stations,
    remove_favorite,
)

router = APIRouter(prefix="/api", tags=["favorites"])


class FavoriteCreate(ApiModel):
    station_id: int = Field(..., gt=0, strict=True)


class Favorite(ApiModel):
    user_id: int
    station_id: int
    created_at: datetime


@router.get("/favorites")
async def get_favorites(
    user: UserORM = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    stations = await list_favorite_stations(db, user.id)
    return JSONResponse(status_code=200, content=to_json_list(Station, stations))


@router.post("/favorites")
async def post_favorite(
    body: FavoriteCreate,
    user: UserORM = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    if await get_station(db, body.station_id) is None:
        raise HTTPException(status_code=404, detail="Station not found")
    favorite = await add_favorite(db, user.id, body.station_id)
    return JSONResponse(status_code=201, content=to_json(Favorite, favorite))


@router.delete("/favorites/{station_id}", status_code=204)
async def delete_favorite(
    station_id: int = Path(..., gt=0),
    user: UserORM = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Response:
    await remove_favorite(db, user.id, station_id)
    return Response(status_code=204)


@router.get("/favorites/check/{station_id}")
async def check_favorite(
    station_id: int = Path(..., gt=0),
    user: UserORM = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    return JSONResponse(
        status_code=200,
        content={"isFavorite": await is_favorite(db, user.id, station_id)},
    )
