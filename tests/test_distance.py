"""Great-circle distance and its display form."""

from __future__ import annotations

import math

import pytest

from sportfinder.distance import distance_miles, format_distance, haversine_miles

LA = {"lat": 34.0522, "lon": -118.2437}
NYC = {"lat": 40.7128, "lon": -74.0060}


def test_identical_points_are_zero() -> None:
    assert distance_miles(LA, LA) == 0.0


def test_symmetric() -> None:
    assert distance_miles(LA, NYC) == distance_miles(NYC, LA)


def test_known_distance() -> None:
    assert distance_miles(LA, NYC) == pytest.approx(2445, abs=5)


def test_one_degree_of_latitude() -> None:
    assert haversine_miles(0, 0, 1, 0) == pytest.approx(3959 * math.pi / 180)


def test_antipodes_do_not_overflow() -> None:
    assert haversine_miles(0, 0, 0, 180) == pytest.approx(3959 * math.pi)


@pytest.mark.parametrize(
    "miles, text",
    [
        (0.0, "0 feet"),
        (0.5, "2640 feet"),
        (1.0, "1.0 miles"),
        (12.345, "12.3 miles"),
    ],
)
def test_format_distance(miles: float, text: str) -> None:
    assert format_distance(miles) == text
