"""
filters.py — typed station list filters, parsed once at the HTTP boundary.

GET /api/stations?status=available,busy&connectorTypes=CCS,Type%202&isFree=false&minPower=50

Every field is optional and the filters combine with AND. Comma lists are
split here; store.list_stations() only ever sees a validated StationFilters.
"""
from __future__ import annotations

from typing import List, Optional

from fastapi import Query
from fastapi.exceptions import RequestValidationError
from pydantic import Field, ValidationError, field_validator

from voltmap.api.schemas import ApiModel
from voltmap.api.stations.schemas import StationStatus


def _split_csv(value: object) -> object:
    if isinstance(value, str):
        items = [v.strip() for v in value.split(",")]
        return [v for v in items if v] or None
    return value


class StationFilters(ApiModel):
    status: Optional[List[StationStatus]] = None
    connector_types: Optional[List[str]] = None
    is_free: Optional[bool] = None
    min_power: Optional[int] = Field(default=None, ge=0)

    @field_validator("status", "connector_types", mode="before")
    @classmethod
    def _comma_list(cls, value: object) -> object:
        return _split_csv(value)

    @field_validator("status", "connector_types")
    @classmethod
    def _empty_as_absent(cls, value: Optional[list]) -> Optional[list]:
        return value or None

    @property
    def is_empty(self) -> bool:
        return (
            self.status is None
            and self.connector_types is None
            and self.is_free is None
            and self.min_power is None
        )


def parse_station_filters(
    status: Optional[str] = Query(default=None, description="Comma list: available,busy,offline"),
    connector_types: Optional[str] = Query(default=None, alias="connectorTypes"),
    is_free: Optional[str] = Query(default=None, alias="isFree"),
    min_power: Optional[str] = Query(default=None, alias="minPower"),
) -> StationFilters:
    """
    FastAPI dependency: raw query strings → StationFilters.

    Validation failures are re-raised as RequestValidationError so they reach
    the same 400 VALIDATION_ERROR handler as body/path errors.
    """
    raw = {
        "status": status,
        "connectorTypes": connector_types,
        "isFree": is_free,
        "minPower": min_power,
    }
    try:
        return StationFilters.model_validate({k: v for k, v in raw.items() if v is not None})
    except ValidationError as exc:
        raise RequestValidationError(
            [{**err, "loc": ("query", *err["loc"])} for err in exc.errors(include_context=False)]
        ) from exc
