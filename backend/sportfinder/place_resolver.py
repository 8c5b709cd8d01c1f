"""place_resolver.py
~~~~~~~~~~~~~~~~~~
Turn a canonical place key or a ZIP code into coordinates.

Both resolvers are exact lookups against a :class:`ReferenceIndex`; a miss is
an ordinary outcome and is reported as ``None``.
"""

from __future__ import annotations

import logging

from .reference_table import Coordinate, ReferenceIndex

LOG = logging.getLogger("place_resolver")


def resolve_city_state(city: str, state: str, index: ReferenceIndex) -> Coordinate | None:
    """
    Coordinates for *city* in *state*, or ``None``.

    Args:
        city:  City name, any case, surrounding whitespace ignored.
        state: 2-letter code (``"CA"``) **or** full name (``"California"``).
        index: Loaded reference index.
    """
    rec = index.lookup_place(city, state)
    if rec is None:
        LOG.debug("No place for %r, %r", city, state)
        return None
    return rec.coords()


def resolve_zip(zip_code: str, index: ReferenceIndex) -> Coordinate | None:
    """Coordinates for a 5-digit *zip_code*, or ``None`` for unknown codes."""
    rec = index.lookup_zip(zip_code)
    if rec is None:
        LOG.debug("No place for zip %r", zip_code)
        return None
    return rec.coords()
