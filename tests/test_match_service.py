"""
tests/test_match_service.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~
Radius / sport filtering and nearest-first ordering.
"""

from __future__ import annotations

import copy
from typing import Any

import pytest

from sportfinder.distance import distance_miles
from sportfinder.match_service import event_coords, match_events

PROVO = {"lat": 40.2282, "lon": -111.6630}
OREM = {"lat": 40.3134, "lon": -111.6992}
BOISE = {"lat": 43.6323, "lon": -116.2052}


def _event(title: str, where: dict[str, float] | None, sport: str = "Football") -> dict[str, Any]:
    return {
        "title": title,
        "sport": sport,
        "latitude": where["lat"] if where else None,
        "longitude": where["lon"] if where else None,
    }


@pytest.fixture
def events() -> list[dict[str, Any]]:
    return [
        _event("at Boise", BOISE),
        _event("at Orem", OREM, sport="Soccer"),
        _event("TBA", None),
        _event("home", PROVO),
        _event("home again", PROVO, sport="Soccer"),
    ]


def test_sorted_nearest_first(events: list[dict[str, Any]]) -> None:
    out = match_events(PROVO, events, 500)
    assert [e["title"] for e in out] == ["home", "home again", "at Orem", "at Boise"]
    assert out[0]["distance"] == 0.0
    assert out[2]["distance"] == pytest.approx(distance_miles(PROVO, OREM))


def test_zero_radius_keeps_only_origin(events: list[dict[str, Any]]) -> None:
    out = match_events(PROVO, events, 0, "all")
    assert [e["title"] for e in out] == ["home", "home again"]


def test_radius_is_inclusive(events: list[dict[str, Any]]) -> None:
    exact = distance_miles(PROVO, OREM)
    titles = [e["title"] for e in match_events(PROVO, events, exact)]
    assert "at Orem" in titles
    assert "at Boise" not in titles


def test_sport_filter(events: list[dict[str, Any]]) -> None:
    out = match_events(PROVO, events, 500, "Soccer")
    assert [e["title"] for e in out] == ["home again", "at Orem"]
    assert match_events(PROVO, events, 500, "Curling") == []


def test_ties_keep_input_order() -> None:
    evs = [_event(str(i), OREM) for i in range(5)]
    assert [e["title"] for e in match_events(PROVO, evs, 50)] == ["0", "1", "2", "3", "4"]


def test_inputs_are_not_mutated(events: list[dict[str, Any]]) -> None:
    before = copy.deepcopy(events)
    match_events(PROVO, events, 500)
    assert events == before


def test_empty_input() -> None:
    assert match_events(PROVO, [], 50) == []


@pytest.mark.parametrize(
    "lat, lon",
    [(None, None), (40.0, None), ("40.2", "-111.6"), (True, False), (float("nan"), 1.0)],
)
def test_unusable_coordinates_are_skipped(lat, lon) -> None:
    ev = {"title": "x", "sport": "Football", "latitude": lat, "longitude": lon}
    assert event_coords(ev) is None
    assert match_events(PROVO, [ev], 10_000) == []


def test_integer_coordinates_accepted() -> None:
    assert event_coords({"latitude": 40, "longitude": -111}) == {"lat": 40.0, "lon": -111.0}
