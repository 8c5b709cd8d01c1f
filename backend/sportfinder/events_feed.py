"""
events_feed.py
~~~~~~~~~~~~~~
Load the scraped event list and attach coordinates to it.

Key behaviour
-------------
* ``EVENTS_SOURCE`` may be an ``http(s)://`` URL, a JSON file, or a directory
  of dated snapshots (``BYUSports2025-10-25.json``); for a directory the
  newest snapshot wins.
* The loaded list is cached in-process for ``EVENTS_CACHE_SEC`` (15 min).
* Events whose ``latitude``/``longitude`` are missing are geocoded through
  ``location_normalizer`` + ``place_resolver``; an event that still cannot be
  placed keeps ``None`` coordinates and is simply never matched.
* Every resolution outcome is written to the rolling resolution log.

Public API
----------
    get_events(source=None, index=None) -> list[dict]      (async)
    geocode_events(events, index) -> list[dict]
    split_location_venue(raw) -> (location, venue)
"""

from __future__ import annotations

import asyncio
import datetime as dt
import hashlib
import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Final, Iterable

import httpx

from .api_logging import logged_request_async
from .constants import USER_AGENT
from .location_normalizer import normalize, venue_override
from .match_service import event_coords
from .place_resolver import resolve_city_state
from .reference_table import ReferenceIndex
from .resolution_log_service import (
    add_resolution_entries,
    add_resolution_entry,
    make_entry,
)

LOG = logging.getLogger("events_feed")

UTC: Final = dt.timezone.utc
EVENTS_SOURCE: Final = os.getenv("EVENTS_SOURCE", "data/events.json")
EVENTS_CACHE_SEC: Final = int(os.getenv("EVENTS_CACHE_SEC", "900"))

SNAPSHOT_RE = re.compile(r"^(?P<prefix>.*?)(?P<date>\d{4}-\d{2}-\d{2})\.json$")
EVENT_FIELDS: Final = ("title", "sport", "date", "time", "venue", "location")

# keyed by (source, id of the index used to geocode, or None for raw lists)
_cached: dict[tuple[str, int | None], tuple[dt.datetime, list[dict[str, Any]]]] = {}


# ── Record helpers ───────────────────────────────────────────────────────
def split_location_venue(raw: str) -> tuple[str, str]:
    """``"Lawrence, Kansas / Rim Rock Farm"`` → ``("Lawrence, Kansas", "Rim Rock Farm")``."""
    parts = raw.split("/")
    location = parts[0].strip()
    venue = parts[1].strip() if len(parts) > 1 else ""
    return location, venue


def _event_id(event: dict[str, Any]) -> str:
    """Stable id derived from the descriptive fields."""
    blob = "|".join(str(event.get(k) or "") for k in EVENT_FIELDS)
    return hashlib.sha1(blob.encode("utf-8")).hexdigest()[:12]


def _coerce_events(data: Any) -> list[dict[str, Any]]:
    """Accept a bare JSON array or ``{"events": [...]}``; drop non-objects."""
    if isinstance(data, dict):
        data = data.get("events", [])
    if not isinstance(data, list):
        raise ValueError(f"expected a JSON array of events, got {type(data).__name__}")
    return [item for item in data if isinstance(item, dict)]


# ── Geocoding ────────────────────────────────────────────────────────────
def _geocode(
    event: dict[str, Any], index: ReferenceIndex
) -> tuple[dict[str, Any], dict[str, Any] | None]:
    """Return the enriched copy of *event* and its log-entry fields (if any)."""
    ev = dict(event)
    if not ev.get("id"):
        ev["id"] = _event_id(ev)
    ev.setdefault("latitude", None)
    ev.setdefault("longitude", None)

    if event_coords(ev) is not None:
        return ev, None

    raw = str(ev.get("location") or ev.get("venue") or "").strip()
    if not raw:
        return ev, None

    if "/" in raw and not ev.get("venue"):
        location, venue = split_location_venue(raw)
        ev["location"], ev["venue"] = location, venue

    place = normalize(raw)
    if place is None:
        LOG.warning("Unparseable location: %r", raw)
        return ev, {"raw": raw, "result_type": "unparseable"}

    coords = resolve_city_state(place.city, place.state_code, index)
    if coords is None:
        LOG.warning(
            "No coordinates found for normalized location: %s (original: %s)",
            place.label,
            raw,
        )
        return ev, {
            "raw": raw,
            "result_type": "not_found",
            "city": place.city,
            "state": place.state_code,
        }

    ev["latitude"], ev["longitude"] = coords["lat"], coords["lon"]
    result_type = "override" if venue_override(raw) else "resolved"
    return ev, {
        "raw": raw,
        "result_type": result_type,
        "city": place.city,
        "state": place.state_code,
        "lat": coords["lat"],
        "lon": coords["lon"],
    }


def geocode_event(event: dict[str, Any], index: ReferenceIndex) -> dict[str, Any]:
    """Copy of *event* with ``latitude``/``longitude`` filled where possible."""
    ev, fields = _geocode(event, index)
    if fields:
        add_resolution_entry(**fields)
    return ev


def geocode_events(
    events: Iterable[dict[str, Any]], index: ReferenceIndex
) -> list[dict[str, Any]]:
    """Geocode a whole list; the resolution log is written once."""
    out: list[dict[str, Any]] = []
    entries: list[dict[str, Any]] = []
    for event in events:
        ev, fields = _geocode(event, index)
        out.append(ev)
        if fields:
            entries.append(make_entry(**fields))

    add_resolution_entries(entries)
    resolved = sum(1 for ev in out if event_coords(ev) is not None)
    LOG.info("[events] %d/%d events have coordinates", resolved, len(out))
    return out


# ── Sources ──────────────────────────────────────────────────────────────
def latest_snapshot(directory: str | Path, prefix: str = "") -> Path | None:
    """Newest ``<prefix>YYYY-MM-DD.json`` in *directory*, or ``None``."""
    best: tuple[dt.date, Path] | None = None
    for path in Path(directory).glob("*.json"):
        m = SNAPSHOT_RE.match(path.name)
        if not m or not m.group("prefix").startswith(prefix):
            continue
        try:
            day = dt.date.fromisoformat(m.group("date"))
        except ValueError:
            continue
        if best is None or day > best[0]:
            best = (day, path)
    return best[1] if best else None


def load_events_file(path: str | Path) -> list[dict[str, Any]]:
    """Read a JSON events file (array or ``{"events": [...]}``)."""
    path = Path(path).expanduser()
    events = _coerce_events(json.loads(path.read_text(encoding="utf-8")))
    LOG.info("[events] %d events read from %s", len(events), path)
    return events


async def fetch_events(url: str, timeout: float = 15.0) -> list[dict[str, Any]]:
    """Download a JSON events feed.

    Raises:
        httpx.HTTPError: network failure or non-2xx response.
        ValueError: the body is not an events array.
    """
    headers = {"User-Agent": USER_AGENT}
    async with httpx.AsyncClient(timeout=timeout, headers=headers) as cli:
        resp = await logged_request_async(cli, "get", url)
        resp.raise_for_status()
        return _coerce_events(resp.json())


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


async def get_events(
    source: str | None = None,
    index: ReferenceIndex | None = None,
) -> list[dict[str, Any]]:
    """
    Return the current event list, geocoded against *index* when given.

    Results are cached per source and index for ``EVENTS_CACHE_SEC``; a raw
    list cached for one caller is never handed to a caller that asked for
    geocoded events.
    """
    source = source or EVENTS_SOURCE
    key = (source, id(index) if index is not None else None)
    now = dt.datetime.now(UTC)
    hit = _cached.get(key)
    if hit and (now - hit[0]).total_seconds() < EVENTS_CACHE_SEC:
        return hit[1]

    if _is_url(source):
        events = await fetch_events(source)
    elif Path(source).is_dir():
        snapshot = latest_snapshot(source)
        if snapshot is None:
            LOG.warning("[events] no dated snapshot under %s", source)
            events = []
        else:
            events = await asyncio.to_thread(load_events_file, snapshot)
    else:
        events = await asyncio.to_thread(load_events_file, source)

    if index is not None:
        events = geocode_events(events, index)

    _cached[key] = (now, events)
    return events


def sports(events: Iterable[dict[str, Any]]) -> list[str]:
    """Distinct non-empty sport names, sorted (sport filter choices)."""
    return sorted({str(e["sport"]) for e in events if e.get("sport")})


def clear_cache() -> None:
    _cached.clear()
