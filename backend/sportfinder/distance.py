"""distance.py
~~~~~~~~~~~~
Great-circle distances in statute miles.
"""

from __future__ import annotations

import math

from .constants import EARTH_RADIUS_MI
from .reference_table import Coordinate

FEET_PER_MILE = 5280


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great‑circle distance (mi) between *lat1/lon1* and *lat2/lon2*."""

    φ1, φ2 = map(math.radians, (lat1, lat2))
    dφ = math.radians(lat2 - lat1)
    dλ = math.radians(lon2 - lon1)
    a = math.sin(dφ / 2) ** 2 + math.cos(φ1) * math.cos(φ2) * math.sin(dλ / 2) ** 2
    return 2 * EARTH_RADIUS_MI * math.asin(math.sqrt(min(1.0, a)))


def distance_miles(a: Coordinate, b: Coordinate) -> float:
    """Distance between two ``{"lat", "lon"}`` mappings. No range checks."""
    return haversine_miles(a["lat"], a["lon"], b["lat"], b["lon"])


def format_distance(miles: float) -> str:
    """Human‑friendly distance: “750 feet”, “12.3 miles”."""
    if miles < 1:
        return f"{miles * FEET_PER_MILE:.0f} feet"
    return f"{miles:.1f} miles"
