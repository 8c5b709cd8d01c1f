"""match_service.py
~~~~~~~~~~~~~~~~~
Rank a candidate event set by distance from an origin.

An event is kept when it carries numeric ``latitude``/``longitude``, lies
within ``max_distance_mi`` of the origin and matches the sport filter.
Results are annotated with ``distance`` (miles) and sorted nearest first;
events at the same distance keep their input order.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Iterable

from .constants import ALL_SPORTS
from .distance import distance_miles
from .reference_table import Coordinate

LOG = logging.getLogger("match_service")


def event_coords(event: dict[str, Any]) -> Coordinate | None:
    """Return the event's coordinates, or ``None`` when unresolved."""
    lat = event.get("latitude")
    lon = event.get("longitude")
    for value in (lat, lon):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        if not math.isfinite(value):
            return None
    return {"lat": float(lat), "lon": float(lon)}


def sport_matches(event: dict[str, Any], sport: str | None) -> bool:
    if sport is None or sport == ALL_SPORTS:
        return True
    return event.get("sport") == sport


def match_events(
    origin: Coordinate,
    events: Iterable[dict[str, Any]],
    max_distance_mi: float,
    sport: str | None = ALL_SPORTS,
) -> list[dict[str, Any]]:
    """
    Events within *max_distance_mi* of *origin*, nearest first.

    Args:
        origin:           ``{"lat", "lon"}`` of the searched place.
        events:           Event dicts (``latitude``/``longitude`` may be null).
        max_distance_mi:  Inclusive radius in miles.
        sport:            Exact ``sport`` value to keep, or ``"all"``.

    Returns:
        New dicts (inputs untouched), each with an added ``distance`` key.
    """
    matched: list[dict[str, Any]] = []
    unresolved = 0

    for event in events:
        coords = event_coords(event)
        if coords is None:
            unresolved += 1
            continue
        if not sport_matches(event, sport):
            continue
        distance = distance_miles(origin, coords)
        if distance <= max_distance_mi:
            matched.append({**event, "distance": distance})

    if unresolved:
        LOG.debug("Skipped %d event(s) without coordinates", unresolved)

    # list.sort is stable → ties keep input order
    matched.sort(key=lambda e: e["distance"])
    return matched
