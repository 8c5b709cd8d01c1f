# backend/sportfinder/constants.py

"""
Global constants shared across modules: the outbound User-Agent, the Earth
radius used for every distance, and the search-radius bounds.
"""

USER_AGENT = "sports-near-me/1.0 (+https://sports-near-me.pages.dev/about.html)"

EARTH_RADIUS_MI = 3959.0

DEFAULT_RADIUS_MI = 50.0
MIN_RADIUS_MI = 1.0
MAX_RADIUS_MI = 500.0

# Sport filter value meaning "no filter"
ALL_SPORTS = "all"
