"""
main.py – FastAPI entry point
=============================

Routes
------
* ``/healthz``                 – liveness probe.
* ``/events/near.json``        – events within a radius of a ZIP or "City, State".
* ``/resolve.json``            – how a location string normalises and resolves.
* ``/sports.json``             – sport names present in the current feed.
* ``/resolution_log.json``     – recent ingestion resolution attempts.

The reference table is parsed once during startup; a dataset without the
required columns aborts startup.  The event feed is fetched lazily and cached
by :mod:`events_feed`.
"""

# ─── Std-lib / third-party ────────────────────────────────────────────
import logging
import os
import sys
from contextlib import asynccontextmanager
from typing import Any

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

# ---------------------------------------------------------------------
# Environment (before project modules read os.getenv at import time)
# ---------------------------------------------------------------------
load_dotenv()

# ─── Project modules ──────────────────────────────────────────────────
from .distance import format_distance  # noqa: E402
from .events_feed import get_events, sports  # noqa: E402
from .location_normalizer import normalize  # noqa: E402
from .place_resolver import resolve_city_state  # noqa: E402
from .reference_table import get_reference_index  # noqa: E402
from .resolution_log_service import (  # noqa: E402
    get_resolution_entries,
    get_resolution_stats,
)
from .search_service import search  # noqa: E402

# ─── Logging ──────────────────────────────────────────────────────────
LOG = logging.getLogger("sportfinder")

_handler = logging.StreamHandler(sys.stdout)
_handler.setFormatter(logging.Formatter("%(levelname)s:     %(name)s - %(message)s"))
logging.getLogger().addHandler(_handler)
logging.getLogger().setLevel(os.getenv("LOG_LEVEL", "INFO").upper())

SEARCH_RATE_LIMIT = os.getenv("SEARCH_RATE_LIMIT", "60/minute")

limiter = Limiter(key_func=get_remote_address)

STATUS_CODES: dict[str, int] = {
    "ok": 200,
    "no_events": 200,
    "origin_not_found": 404,
    "invalid_query": 400,
}


# ---------------------------------------------------------------------
# Lifespan – load reference data once
# ---------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Parse the reference table and warm the event cache."""
    index = get_reference_index()
    LOG.info("[init] reference index ready: %r", index)
    try:
        events = await get_events(index=index)
        LOG.info("[init] %d events cached", len(events))
    except Exception as exc:
        LOG.warning("[init] Could not load events: %s", exc)
        LOG.warning("[init] Will retry on first search")
    yield


# ---------------------------------------------------------------------
# FastAPI instance & middleware
# ---------------------------------------------------------------------
app = FastAPI(title="Sports Near Me", lifespan=lifespan)

app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    """Return 429 when rate limit is exceeded."""
    return JSONResponse(
        status_code=429,
        content={"detail": "Rate limit exceeded. Try again later."},
    )


ALLOWED_ORIGINS = [
    o.strip()
    for o in os.getenv(
        "ALLOWED_ORIGINS",
        "https://sports-near-me.pages.dev,http://localhost:8090,http://127.0.0.1:8090",
    ).split(",")
    if o.strip()
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------
async def _current_events() -> list[dict[str, Any]]:
    """Event feed geocoded against the reference index; 503 when unreachable."""
    try:
        return await get_events(index=get_reference_index())
    except Exception as exc:
        LOG.error("[events] feed unavailable: %s", exc)
        raise HTTPException(status_code=503, detail="Event feed unavailable") from exc


def _present(match: dict[str, Any]) -> dict[str, Any]:
    """Round the distance and add its display form."""
    return {
        **match,
        "distance": round(match["distance"], 2),
        "distance_display": f"{format_distance(match['distance'])} away",
    }


# Health probe --------------------------------------------------------
@app.get("/healthz", response_class=PlainTextResponse)
async def healthz() -> PlainTextResponse:
    """Return HTTP 200 with body “ok” if the app is up."""
    return PlainTextResponse("ok", status_code=200)


# ---------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------
@app.get("/events/near.json")
@limiter.limit(SEARCH_RATE_LIMIT)
async def events_near(
    request: Request,
    q: str = Query(..., description="5-digit ZIP code or 'City, State'"),
    radius: float | None = Query(None, description="Miles (default 50, clamped 1–500)"),
    sport: str = Query("all"),
) -> JSONResponse:
    """
    Events near *q*, nearest first.

    * 200 – origin resolved (``results`` may be empty, ``status`` tells).
    * 400 – empty query, malformed ZIP, or no "City, State" pair.
    * 404 – well-formed query whose place is not in the reference table.
    """
    events = await _current_events()
    result = search(q, events, get_reference_index(), radius=radius, sport=sport)

    payload = result.to_dict()
    payload["results"] = [_present(m) for m in result.results]
    payload["count"] = len(result.results)
    if result.status == "origin_not_found":
        payload["detail"] = f"We don't have location data for {q!r}."
    elif result.status == "invalid_query":
        payload["detail"] = "Enter a valid 5-digit ZIP code or 'City, State'."

    return JSONResponse(
        content=jsonable_encoder(payload),
        status_code=STATUS_CODES[result.status],
    )


@app.get("/resolve.json")
async def resolve(location: str = Query(...)) -> JSONResponse:
    """Show how a raw location string normalises and what it resolves to."""
    place = normalize(location)
    coords = None
    if place is not None:
        coords = resolve_city_state(place.city, place.state_code, get_reference_index())
    return JSONResponse(
        {
            "raw": location,
            "normalized": place._asdict() if place else None,
            "coords": coords,
            "found": coords is not None,
        }
    )


@app.get("/sports.json")
async def sports_json() -> JSONResponse:
    """Distinct sport names in the current feed (plus the "all" option)."""
    events = await _current_events()
    return JSONResponse({"sports": ["all", *sports(events)]})


@app.get("/resolution_log.json")
async def resolution_log_json(
    limit: int = Query(100, ge=1, le=500),
    result_type: str | None = Query(None),
) -> JSONResponse:
    """
    Recent ingestion resolution attempts for alias curation.

    Args:
        limit: Maximum number of entries to return (default: 100, max: 500).
        result_type: resolved, override, not_found or unparseable.
    """
    return JSONResponse(
        {
            "entries": get_resolution_entries(limit=limit, result_type=result_type),
            "stats": get_resolution_stats(),
            "query": {"limit": limit, "result_type": result_type},
        }
    )
