"""resolution_log_service.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~
Rolling log of event-location resolution attempts made during ingestion.

Every raw schedule location that passes through ``events_feed.geocode_event``
is recorded with its outcome, so strings that keep failing can be turned into
new venue or city aliases.

Configuration:
    RESOLUTION_LOG_MAX_AGE_H: Maximum age of entries to keep (default: 168 = 7 days)
    PERSIST_DIR:              Storage directory (default: local_data)

Result types:
    "resolved"     – normalised and found in the reference table
    "override"     – resolved through a venue alias
    "not_found"    – normalised, but the reference table has no such place
    "unparseable"  – no city/state could be extracted
"""

from __future__ import annotations

import datetime as dt
import json
import logging
import os
from pathlib import Path
from typing import Any, Final

UTC: Final = dt.timezone.utc
LOG = logging.getLogger("resolution_log_service")

# ── Configuration ─────────────────────────────────────────────────────────
RESOLUTION_LOG_MAX_AGE_H = int(os.getenv("RESOLUTION_LOG_MAX_AGE_H", "168"))

RESULT_TYPES: Final = ("resolved", "override", "not_found", "unparseable")


# ── Persistence Directory ─────────────────────────────────────────────────
def _determine_dir() -> Path:
    base = Path(os.getenv("PERSIST_DIR", "local_data")).expanduser()
    try:
        base.mkdir(parents=True, exist_ok=True)
        return base
    except (PermissionError, OSError):
        fallback = (Path(__file__).resolve().parent.parent / "local_data").resolve()
        fallback.mkdir(parents=True, exist_ok=True)
        LOG.warning("Using %s instead of %s", fallback, base)
        return fallback


DIR = _determine_dir()
FILE = DIR / "resolution_log.json"


# ── Log Entry Storage ─────────────────────────────────────────────────────
def _load_entries() -> list[dict[str, Any]]:
    """Load existing log entries from disk."""
    if not FILE.exists():
        return []

    try:
        data = json.loads(FILE.read_text())
        return data.get("entries", [])
    except Exception as exc:
        LOG.warning("[resolution_log] Failed to load: %s", exc)
        return []


def _save_entries(entries: list[dict[str, Any]]) -> None:
    try:
        data = {
            "entries": entries,
            "max_age_hours": RESOLUTION_LOG_MAX_AGE_H,
            "updated_at": dt.datetime.now(UTC).isoformat(),
        }
        FILE.write_text(json.dumps(data, indent=2, default=str))
    except Exception as exc:
        LOG.error("[resolution_log] Failed to save: %s", exc)


def _parse_ts(entry: dict[str, Any]) -> dt.datetime | None:
    try:
        return dt.datetime.fromisoformat(entry.get("ts", ""))
    except (TypeError, ValueError):
        return None


def _prune_old(entries: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Remove entries older than RESOLUTION_LOG_MAX_AGE_H (and unreadable ones)."""
    cutoff = dt.datetime.now(UTC) - dt.timedelta(hours=RESOLUTION_LOG_MAX_AGE_H)
    kept = []
    for entry in entries:
        ts = _parse_ts(entry)
        if ts is not None and ts >= cutoff:
            kept.append(entry)

    pruned = len(entries) - len(kept)
    if pruned > 0:
        LOG.info("[resolution_log] Pruned %d old entries", pruned)
    return kept


def make_entry(
    raw: str,
    result_type: str,
    city: str | None = None,
    state: str | None = None,
    lat: float | None = None,
    lon: float | None = None,
) -> dict[str, Any]:
    """
    Build one log entry (timestamped now).

    Args:
        raw: Location string exactly as scraped.
        result_type: One of :data:`RESULT_TYPES`.
        city, state: Normalised key, when one was produced.
        lat, lon: Coordinates, when the key resolved.
    """
    entry: dict[str, Any] = {
        "ts": dt.datetime.now(UTC).isoformat(),
        "raw": raw,
        "result_type": result_type,
    }
    if city:
        entry["city"] = city
    if state:
        entry["state"] = state
    if lat is not None:
        entry["lat"] = round(lat, 6)
    if lon is not None:
        entry["lon"] = round(lon, 6)
    return entry


def add_resolution_entries(new_entries: list[dict[str, Any]]) -> None:
    """Append a batch of entries with a single load/prune/save cycle."""
    if not new_entries:
        return
    entries = _load_entries()
    entries.extend(new_entries)
    _save_entries(_prune_old(entries))


def add_resolution_entry(raw: str, result_type: str, **fields: Any) -> None:
    """Append one resolution attempt; see :func:`make_entry` for *fields*."""
    add_resolution_entries([make_entry(raw, result_type, **fields)])


def get_resolution_entries(
    limit: int | None = None,
    result_type: str | None = None,
) -> list[dict[str, Any]]:
    """
    Stored entries, newest first.

    Args:
        limit: Maximum number of entries to return.
        result_type: Keep only entries with this outcome.
    """
    entries = _load_entries()
    if result_type is not None:
        entries = [e for e in entries if e.get("result_type") == result_type]

    entries.sort(key=lambda e: e.get("ts", ""), reverse=True)
    if limit is not None:
        entries = entries[:limit]
    return entries


def get_resolution_stats() -> dict[str, Any]:
    """Counts per outcome plus the raw strings that failed most often."""
    entries = _load_entries()

    by_type: dict[str, int] = {}
    failures: dict[str, int] = {}
    for entry in entries:
        rt = entry.get("result_type", "unknown")
        by_type[rt] = by_type.get(rt, 0) + 1
        if rt in ("not_found", "unparseable"):
            raw = entry.get("raw", "")
            failures[raw] = failures.get(raw, 0) + 1

    top_failures = sorted(failures.items(), key=lambda kv: (-kv[1], kv[0]))[:10]
    return {
        "count": len(entries),
        "by_type": by_type,
        "top_failures": [{"raw": raw, "count": n} for raw, n in top_failures],
        "max_age_hours": RESOLUTION_LOG_MAX_AGE_H,
    }
