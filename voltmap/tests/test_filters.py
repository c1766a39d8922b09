"""
Unit tests for StationFilters parsing at the HTTP boundary.
"""
from __future__ import annotations

import pytest
from fastapi.exceptions import RequestValidationError

from voltmap.api.stations.filters import StationFilters, parse_station_filters
from voltmap.api.stations.schemas import StationStatus


def test_no_params_is_empty() -> None:
    filters = parse_station_filters(status=None, connector_types=None, is_free=None, min_power=None)
    assert filters.is_empty


def test_comma_lists_are_split_and_trimmed() -> None:
    filters = parse_station_filters(
        status="available, busy",
        connector_types="CCS,Type 2,",
        is_free=None,
        min_power=None,
    )
    assert filters.status == [StationStatus.available, StationStatus.busy]
    assert filters.connector_types == ["CCS", "Type 2"]
    assert not filters.is_empty


def test_scalar_params_are_coerced() -> None:
    filters = parse_station_filters(status=None, connector_types=None, is_free="true", min_power="50")
    assert filters.is_free is True
    assert filters.min_power == 50


def test_blank_list_is_absent() -> None:
    filters = parse_station_filters(status=",", connector_types="", is_free=None, min_power=None)
    assert filters.status is None
    assert filters.connector_types is None


@pytest.mark.parametrize(
    "kwargs",
    [
        {"status": "charging"},
        {"is_free": "sometimes"},
        {"min_power": "fast"},
        {"min_power": "-1"},
    ],
)
def test_invalid_values_raise_request_validation_error(kwargs: dict) -> None:
    params = {"status": None, "connector_types": None, "is_free": None, "min_power": None, **kwargs}
    with pytest.raises(RequestValidationError) as exc_info:
        parse_station_filters(**params)
    assert all(err["loc"][0] == "query" for err in exc_info.value.errors())


def test_model_accepts_snake_case_in_code() -> None:
    filters = StationFilters(min_power=22, is_free=False)
    assert filters.min_power == 22
    assert filters.is_free is False
