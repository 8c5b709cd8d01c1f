"""location_normalizer.py
~~~~~~~~~~~~~~~~~~~~~~~~
Reduce the location strings printed on athletics calendars to a canonical
``(city, state code)`` key the reference table can answer.

Handled shapes (examples taken from real schedule pages)::

    "Seattle, Wash."                           → Seattle, WA
    "Boise State Esports Arena"                → Boise, ID      (venue alias)
    "Hinkle Fieldhouse (Indianapolis, Ind.)"   → Indianapolis, IN
    "Boston, Mass. / Conte Forum"              → Boston, MA
    "Rim Rock Farm / Lawrence, Kansas"         → Lawrence, KS

The pipeline is a fixed sequence of small pure rules; each one is exported so
it can be exercised on its own.  Nothing here performs I/O or looks up
coordinates.
"""

from __future__ import annotations

import re
import unicodedata
from typing import NamedTuple

from .place_aliases import CITY_ALIASES, STATE_ABBREVIATIONS, VENUE_ALIASES

TRANSLATE = str.maketrans(
    {"\u00a0": " ", "\u2010": "-", "\u2011": "-", "\u2013": "-", "\u2014": "-"}
)
PAREN_RE = re.compile(r"\(([^)]+)\)")
SPACES_RE = re.compile(r"\s+")


class NormalizedPlace(NamedTuple):
    city: str
    state_code: str

    @property
    def label(self) -> str:
        """``"City, ST"`` – the form shown next to an event."""
        return f"{self.city}, {self.state_code}"


def _tidy(text: str) -> str:
    """Normalise Unicode, squash NBSP, fancy dashes & runs of spaces, strip."""
    text = unicodedata.normalize("NFKC", text).translate(TRANSLATE)
    return SPACES_RE.sub(" ", text).strip()


def _clean(text: str) -> str:
    """:func:`_tidy` + lower-case; the key form of the alias tables."""
    return _tidy(text).lower()


# ── Rules (applied in this order) ────────────────────────────────────────
def venue_override(text: str) -> NormalizedPlace | None:
    """
    Venue known only by name → its home city.

    Matched on the :func:`_clean` form, so case and runs of whitespace do not
    matter; otherwise the whole string must equal a listed venue.
    """
    hit = VENUE_ALIASES.get(_clean(text))
    return NormalizedPlace(*hit) if hit else None


def extract_parenthetical(text: str) -> str:
    """``"Venue (City, ST)"`` → ``"City, ST"``; first group only."""
    m = PAREN_RE.search(text)
    return m.group(1).strip() if m else text


def strip_slash_suffix(text: str) -> str:
    """Keep the first ``/``-separated segment that still holds a comma."""
    for segment in text.split("/"):
        if "," in segment:
            return segment.strip()
    return text


def split_city_state(text: str) -> tuple[str, str] | None:
    """``"City, State[, ...]"`` → ``("City", "State")``; ``None`` without a comma."""
    parts = text.split(",")
    if len(parts) < 2:
        return None
    return parts[0].strip(), parts[1].strip()


def strip_state_suffix(state: str) -> str:
    """``"Utah / LaVell Edwards Stadium"`` → ``"Utah"``."""
    return state.split("/")[0].strip()


def expand_state(token: str) -> str:
    """AP abbreviation or full name → USPS code; unknown tokens unchanged."""
    return STATE_ABBREVIATIONS.get(token, token)


def apply_city_alias(city: str, state_code: str) -> str:
    """Swap schedule-only city spellings for the reference-table name."""
    return CITY_ALIASES.get((_clean(city), state_code.upper()), city)


# ── Pipeline ─────────────────────────────────────────────────────────────
def normalize(raw: str | None) -> NormalizedPlace | None:
    """
    Canonical ``(city, state code)`` for *raw*, or ``None`` when the string
    holds no recognisable city/state pair.
    """
    if not isinstance(raw, str):
        return None
    text = _tidy(raw)
    if not text:
        return None

    override = venue_override(text)
    if override:
        return override

    text = extract_parenthetical(text)
    text = strip_slash_suffix(text)

    parts = split_city_state(text)
    if parts is None:
        return None
    city, state = parts

    state = expand_state(strip_state_suffix(state))
    city = apply_city_alias(city, state).strip()
    state = state.strip()

    if not city or not state:
        return None
    return NormalizedPlace(city, state)


__all__ = [
    "NormalizedPlace",
    "apply_city_alias",
    "expand_state",
    "extract_parenthetical",
    "normalize",
    "split_city_state",
    "strip_slash_suffix",
    "strip_state_suffix",
    "venue_override",
]
