"""search_service.py
~~~~~~~~~~~~~~~~~~~
Answer one "events near me" request.

The query is either a 5-digit ZIP code or free text such as
``"Provo, Utah"``; it is resolved to an origin, then handed to the match
engine together with the clamped radius and the sport filter.

Outcome statuses (never conflated):

* ``"ok"``               – origin resolved, at least one event in range
* ``"no_events"``        – origin resolved, nothing in range
* ``"origin_not_found"`` – well-formed query, but the place is unknown
* ``"invalid_query"``    – empty input, malformed ZIP, or no "City, State"
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import asdict, dataclass, field
from typing import Any, Iterable

from .constants import ALL_SPORTS, DEFAULT_RADIUS_MI, MAX_RADIUS_MI, MIN_RADIUS_MI
from .location_normalizer import normalize
from .match_service import match_events
from .place_resolver import resolve_city_state, resolve_zip
from .reference_table import Coordinate, ReferenceIndex

LOG = logging.getLogger("search_service")

ZIP_RE = re.compile(r"^[0-9]{5}$")
DIGITS_RE = re.compile(r"^[0-9]+$")


@dataclass
class SearchResult:
    status: str
    query: str
    radius: float
    sport: str
    origin: Coordinate | None = None
    origin_label: str | None = None
    results: list[dict[str, Any]] = field(default_factory=list)

    @property
    def origin_found(self) -> bool:
        return self.origin is not None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def is_valid_zip(text: str) -> bool:
    """Exactly five ASCII digits."""
    return bool(ZIP_RE.match(text))


def clamp_radius(value: float | None) -> float:
    """Default 50 mi; anything else is forced into [1, 500]."""
    if value is None:
        return DEFAULT_RADIUS_MI
    try:
        radius = float(value)
    except (TypeError, ValueError):
        return DEFAULT_RADIUS_MI
    if math.isnan(radius):
        return DEFAULT_RADIUS_MI
    return min(MAX_RADIUS_MI, max(MIN_RADIUS_MI, radius))


def normalize_sport(sport: str | None) -> str:
    """Blank or any-case ``"all"`` → ``"all"``; otherwise the trimmed value."""
    sport = (sport or "").strip()
    if not sport or sport.lower() == ALL_SPORTS:
        return ALL_SPORTS
    return sport


def resolve_origin(query: str, index: ReferenceIndex) -> tuple[Coordinate | None, str | None]:
    """
    Coordinates and display label for *query*.

    Returns ``(None, None)`` when the text holds no city/state pair and
    ``(None, label)`` when it parsed but the place is unknown.
    """
    q = query.strip()
    if is_valid_zip(q):
        return resolve_zip(q, index), q

    place = normalize(q)
    if place is None:
        return None, None
    return resolve_city_state(place.city, place.state_code, index), place.label


def search(
    query: str | None,
    events: Iterable[dict[str, Any]],
    index: ReferenceIndex,
    radius: float | None = None,
    sport: str | None = ALL_SPORTS,
) -> SearchResult:
    """Resolve *query* and return matching events, nearest first."""
    q = (query or "").strip()
    result = SearchResult(
        status="invalid_query",
        query=q,
        radius=clamp_radius(radius),
        sport=normalize_sport(sport),
    )

    if not q or (DIGITS_RE.match(q) and not is_valid_zip(q)):
        return result

    origin, label = resolve_origin(q, index)
    result.origin_label = label
    if label is None:
        return result
    if origin is None:
        LOG.info("Origin not found for %r", q)
        result.status = "origin_not_found"
        return result

    result.origin = origin
    result.results = match_events(origin, events, result.radius, result.sport)
    result.status = "ok" if result.results else "no_events"
    LOG.info(
        "Search %r → %d event(s) within %.0f mi (sport=%s)",
        q,
        len(result.results),
        result.radius,
        result.sport,
    )
    return result
