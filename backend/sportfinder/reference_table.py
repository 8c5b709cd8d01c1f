"""reference_table.py
~~~~~~~~~~~~~~~~~~
Parse the place reference dataset (``uszips.csv`` layout) into an immutable
in-memory :class:`ReferenceIndex`.

Key behaviour
-------------
* Columns are located by **header name** (case-insensitive), never by
  position: ``city``, ``state_id``, ``state_name``, ``lat`` and one of
  ``lng`` / ``lon`` / ``long``.  ``zip`` is optional.
* Empty lines, short rows and rows with unparseable coordinates are skipped
  silently.
* A header missing a required column yields an *empty* index (``load`` never
  raises); the process-wide loader turns that into :class:`ReferenceTableError`
  because the service cannot start without places.
* Duplicate ``(city, state)`` keys: the **later** row wins.  Same for zips.

Public API
----------
    load(raw_text) -> ReferenceIndex
    load_reference_file(path) -> ReferenceIndex         # path or http(s) URL
    get_reference_index(path=None) -> ReferenceIndex     # cached, at most once
"""

from __future__ import annotations

import csv
import logging
import math
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping, TypedDict

import httpx

from .api_logging import logged_request
from .constants import USER_AGENT

LOG = logging.getLogger("reference_table")

REFERENCE_CSV = os.getenv("REFERENCE_CSV", "data/uszips.csv")

# canonical column -> accepted header names (lower-case)
REQUIRED_COLUMNS: Mapping[str, tuple[str, ...]] = {
    "city": ("city",),
    "state_id": ("state_id",),
    "state_name": ("state_name",),
    "lat": ("lat",),
    "lon": ("lng", "lon", "long"),
}
OPTIONAL_COLUMNS: Mapping[str, tuple[str, ...]] = {
    "zip": ("zip",),
}


class ReferenceTableError(RuntimeError):
    """The reference dataset cannot be used at all (e.g. a column is absent)."""


class Coordinate(TypedDict):
    lat: float
    lon: float


@dataclass(frozen=True)
class PlaceRecord:
    city: str
    state_code: str
    state_name: str
    lat: float
    lon: float
    zip: str = ""

    def coords(self) -> Coordinate:
        return {"lat": self.lat, "lon": self.lon}


def _key(text: str) -> str:
    return text.strip().lower()


class ReferenceIndex:
    """
    Read-only view over the loaded places.

    ``_by_place`` is keyed by ``(city, state)`` where *state* is both the
    lower-cased 2-letter code and the lower-cased full name, so one lookup
    covers either spelling.  ``_by_zip`` is keyed by the 5-digit code.
    """

    def __init__(
        self,
        records: Iterable[PlaceRecord] = (),
        missing_columns: Iterable[str] = (),
    ) -> None:
        self.records: tuple[PlaceRecord, ...] = tuple(records)
        self.missing_columns: tuple[str, ...] = tuple(missing_columns)

        by_place: dict[tuple[str, str], PlaceRecord] = {}
        by_zip: dict[str, PlaceRecord] = {}
        for rec in self.records:
            city = _key(rec.city)
            if city:
                for token in (rec.state_code, rec.state_name):
                    token = _key(token)
                    if token:
                        by_place[(city, token)] = rec
            if rec.zip.strip():
                by_zip[rec.zip.strip()] = rec

        self._by_place = MappingProxyType(by_place)
        self._by_zip = MappingProxyType(by_zip)

    def __len__(self) -> int:
        return len(self.records)

    def __repr__(self) -> str:
        return f"<ReferenceIndex places={len(self.records)} zips={len(self._by_zip)}>"

    @property
    def is_complete(self) -> bool:
        """*True* when the source header carried every required column."""
        return not self.missing_columns

    def lookup_place(self, city: str, state: str) -> PlaceRecord | None:
        return self._by_place.get((_key(city), _key(state)))

    def lookup_zip(self, zip_code: str) -> PlaceRecord | None:
        return self._by_zip.get(zip_code.strip())


# ── Parsing ───────────────────────────────────────────────────────────────
def _find_columns(header: list[str]) -> dict[str, int]:
    """Map canonical column names to their position in *header*."""
    names = [h.strip().lstrip("\ufeff").lower() for h in header]
    found: dict[str, int] = {}
    for column, aliases in {**REQUIRED_COLUMNS, **OPTIONAL_COLUMNS}.items():
        for i, name in enumerate(names):
            if name in aliases:
                found[column] = i
                break
    return found


def _parse_coord(text: str) -> float | None:
    try:
        value = float(text)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _parse_line(line: str) -> list[str] | None:
    """One CSV record; ``None`` when the line is malformed (e.g. unclosed quote)."""
    try:
        return next(csv.reader([line], strict=True), [])
    except csv.Error:
        return None


def load(raw_text: str) -> ReferenceIndex:
    """
    Parse *raw_text* (CSV with a header row) into a :class:`ReferenceIndex`.

    Each line is one record: quoted fields (``"..."`` with ``""`` escapes)
    are unquoted, but a quote never spans lines, so a malformed row costs
    only itself.  Every field is trimmed before use.
    """
    lines = raw_text.splitlines()
    header = _parse_line(lines[0]) if lines else None
    if not header:
        LOG.warning("[reference] empty dataset – no header row")
        return ReferenceIndex(missing_columns=tuple(REQUIRED_COLUMNS))

    cols = _find_columns(header)
    missing = [c for c in REQUIRED_COLUMNS if c not in cols]
    if missing:
        LOG.warning("[reference] header lacks required column(s): %s", missing)
        return ReferenceIndex(missing_columns=missing)

    max_idx = max(cols[c] for c in REQUIRED_COLUMNS)
    zip_idx = cols.get("zip")

    records: list[PlaceRecord] = []
    skipped = 0
    for line in lines[1:]:
        row = _parse_line(line)
        if row is None:
            skipped += 1
            continue
        if not any(field.strip() for field in row):
            continue
        if len(row) <= max_idx:
            skipped += 1
            continue

        lat = _parse_coord(row[cols["lat"]])
        lon = _parse_coord(row[cols["lon"]])
        if lat is None or lon is None:
            skipped += 1
            continue

        zip_code = ""
        if zip_idx is not None and zip_idx < len(row):
            zip_code = row[zip_idx].strip()

        records.append(
            PlaceRecord(
                city=row[cols["city"]].strip(),
                state_code=row[cols["state_id"]].strip(),
                state_name=row[cols["state_name"]].strip(),
                lat=lat,
                lon=lon,
                zip=zip_code,
            )
        )

    LOG.debug("[reference] parsed %d rows, skipped %d", len(records), skipped)
    return ReferenceIndex(records)


def fetch_reference(url: str, timeout: float = 30.0) -> ReferenceIndex:
    """Download the dataset over HTTP and :func:`load` it."""
    with httpx.Client(timeout=timeout, headers={"User-Agent": USER_AGENT}) as cli:
        resp = logged_request(cli, "get", url)
        resp.raise_for_status()
    index = load(resp.text.lstrip("\ufeff"))
    LOG.info("[reference] %d places loaded from %s", len(index), url)
    return index


def load_reference_file(path: str | Path) -> ReferenceIndex:
    """Read *path* (UTF-8, optional BOM) and :func:`load` it."""
    if str(path).startswith(("http://", "https://")):
        return fetch_reference(str(path))
    path = Path(path).expanduser()
    index = load(path.read_text(encoding="utf-8-sig"))
    LOG.info("[reference] %d places loaded from %s", len(index), path)
    return index


# ── Process-wide cache ────────────────────────────────────────────────────
_index: ReferenceIndex | None = None
_index_lock = threading.Lock()


def get_reference_index(path: str | Path | None = None) -> ReferenceIndex:
    """
    Return the process-wide index, parsing the dataset on first use only.

    Concurrent first callers block on a lock so the file is parsed once.

    Raises:
        ReferenceTableError: the dataset header lacks a required column.
        OSError: the dataset file cannot be read.
    """
    global _index
    if _index is not None:
        return _index

    with _index_lock:
        if _index is None:
            index = load_reference_file(path or REFERENCE_CSV)
            if not index.is_complete:
                raise ReferenceTableError(
                    f"reference dataset {path or REFERENCE_CSV} lacks column(s): "
                    f"{', '.join(index.missing_columns)}"
                )
            _index = index
    return _index


def reset_cache() -> None:
    """Forget the cached index (tests and reloads)."""
    global _index
    with _index_lock:
        _index = None


__all__ = [
    "Coordinate",
    "PlaceRecord",
    "ReferenceIndex",
    "ReferenceTableError",
    "fetch_reference",
    "get_reference_index",
    "load",
    "load_reference_file",
    "reset_cache",
]
