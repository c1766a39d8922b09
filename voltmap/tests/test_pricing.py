"""
Unit tests for the session price / points rules (pure functions, no DB).
"""
from __future__ import annotations

import math

import pytest

from voltmap.api.charging.pricing import compute_points, compute_total_price


def test_priced_station_example() -> None:
    """pricePerKwh 2.50, 10 kWh → 25.00 and 100 points."""
    assert compute_total_price(False, 2.50, 10) == pytest.approx(25.00)
    assert compute_points(10) == 100


@pytest.mark.parametrize("price,kwh", [(0.35, 7.5), (1.0, 0.1), (4.2, 33.3)])
def test_priced_station_is_price_times_kwh(price: float, kwh: float) -> None:
    assert compute_total_price(False, price, kwh) == pytest.approx(price * kwh)


@pytest.mark.parametrize("price", [None, 0.0, 3.99])
def test_free_station_costs_nothing(price) -> None:
    assert compute_total_price(True, price, 42.0) == 0.0


def test_missing_tariff_counts_as_zero() -> None:
    assert compute_total_price(False, None, 12.0) == 0.0


@pytest.mark.parametrize("kwh", [0.05, 0.09, 1.0, 7.77, 12.345, 100.0])
def test_points_are_floored(kwh: float) -> None:
    assert compute_points(kwh) == math.floor(kwh * 10)


def test_points_rate_override() -> None:
    assert compute_points(3.5, points_per_kwh=4) == 14
