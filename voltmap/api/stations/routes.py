"""
Station HTTP routes — GET  /api/stations               (filtered list)
                      GET  /api/stations/{id}
                      POST /api/stations               (auth; caller becomes owner)
                      PUT  /api/stations/{id}          (auth; owner only)
                      GET  /api/stations/{id}/reviews
                      POST /api/stations/{id}/reviews  (auth)
                      GET  /api/stations/{id}/promotions
                      POST /api/stations/{id}/promotions (auth; owner only)
                      GET  /api/promotions             (active promotions + station)

Path ids are positive integers (Path(gt=0)); anything else is a 400 via the
RequestValidationError handler in main.py.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Path
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from voltmap.api.auth.dependencies import get_current_user
from voltmap.api.schemas import to_json, to_json_list
from voltmap.api.stations.filters import StationFilters, parse_station_filters
from voltmap.api.stations.schemas import (
    ActivePromotion,
    Promotion,
    PromotionCreate,
    Review,
    ReviewCreate,
    Station,
    StationCreate,
)
from voltmap.database import get_db
from voltmap.models.station import StationORM
from voltmap.models.user import UserORM
from voltmap.store import (
    create_promotion,
    create_review,
    create_station,
    get_station,
    list_active_promotions,
    list_promotions,
    list_reviews,
    list_stations,
    update_station,
)

router = APIRouter(prefix="/api", tags=["stations"])
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def _require_station(db: AsyncSession, station_id: int) -> StationORM:
    station = await get_station(db, station_id)
    if station is None:
        raise HTTPException(status_code=404, detail="Station not found")
    return station


async def _require_owned_station(db: AsyncSession, station_id: int, user: UserORM) -> StationORM:
    station = await _require_station(db, station_id)
    if station.owner_id != user.id:
        logger.info("Ownership check failed station_id=%s user_id=%s", station_id, user.id)
        raise HTTPException(status_code=403, detail="Forbidden: You do not own this station")
    return station


# ---------------------------------------------------------------------------
# Stations
# ---------------------------------------------------------------------------

@router.get("/stations")
async def get_stations(
    filters: StationFilters = Depends(parse_station_filters),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """List stations; all filters optional and combined with AND."""
    stations = await list_stations(db, None if filters.is_empty else filters)
    return JSONResponse(status_code=200, content=to_json_list(Station, stations))


@router.get("/stations/{station_id}")
async def get_station_by_id(
    station_id: int = Path(..., gt=0),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    station = await _require_station(db, station_id)
    return JSONResponse(status_code=200, content=to_json(Station, station))


@router.post("/stations")
async def post_station(
    body: StationCreate,
    user: UserORM = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    station = await create_station(db, body, owner_id=user.id)
    return JSONResponse(status_code=201, content=to_json(Station, station))


@router.put("/stations/{station_id}")
async def put_station(
    body: StationCreate,
    station_id: int = Path(..., gt=0),
    user: UserORM = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """Replace a station's editable fields. Only the owner may do this."""
    station = await _require_owned_station(db, station_id, user)
    station = await update_station(db, station, body)
    return JSONResponse(status_code=200, content=to_json(Station, station))


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------

@router.get("/stations/{station_id}/reviews")
async def get_station_reviews(
    station_id: int = Path(..., gt=0),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    reviews = await list_reviews(db, station_id)
    return JSONResponse(status_code=200, content=to_json_list(Review, reviews))


@router.post("/stations/{station_id}/reviews")
async def post_station_review(
    body: ReviewCreate,
    station_id: int = Path(..., gt=0),
    user: UserORM = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    await _require_station(db, station_id)
    review = await create_review(db, station_id, user.id, body.rating, body.comment)
    return JSONResponse(status_code=201, content=to_json(Review, review))


# ---------------------------------------------------------------------------
# Promotions
# ---------------------------------------------------------------------------

@router.get("/stations/{station_id}/promotions")
async def get_station_promotions(
    station_id: int = Path(..., gt=0),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    promotions = await list_promotions(db, station_id)
    return JSONResponse(status_code=200, content=to_json_list(Promotion, promotions))


@router.post("/stations/{station_id}/promotions")
async def post_station_promotion(
    body: PromotionCreate,
    station_id: int = Path(..., gt=0),
    user: UserORM = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    await _require_owned_station(db, station_id, user)
    promotion = await create_promotion(db, station_id, body)
    return JSONResponse(status_code=201, content=to_json(Promotion, promotion))


@router.get("/promotions")
async def get_active_promotions(db: AsyncSession = Depends(get_db)) -> JSONResponse:
    """Promotions running right now, each with its station embedded."""
    promotions = await list_active_promotions(db)
    return JSONResponse(status_code=200, content=to_json_list(ActivePromotion, promotions))
