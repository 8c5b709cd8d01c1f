"""
place_aliases.py
~~~~~~~~~~~~~~~~
Hand-curated lookup tables used by `location_normalizer`.

* ``VENUE_ALIASES`` – venue strings that carry no city/state of their own
  (home arenas listed by name only) → canonical ``(city, state code)``.
  Keys must be **lower-case**, ASCII, already stripped of fancy dashes or
  NB-spaces; the normalizer does the same sanitisation before lookup.
* ``STATE_ABBREVIATIONS`` – AP-style state abbreviations and full names as
  printed on athletics calendars → USPS code.  Keys are matched verbatim.
* ``CITY_ALIASES`` – ``(city, state code)`` spellings from schedules that the
  reference table knows under another name.  Lower-case keys.
"""

VENUE_ALIASES: dict[str, tuple[str, str]] = {
    # ─── Boise State home venues ──────────────────────────────────────
    "boise state esports arena": ("Boise", "ID"),
    "extramile arena": ("Boise", "ID"),
    "albertsons stadium": ("Boise", "ID"),
    "dona larsen park": ("Boise", "ID"),
    "bronco gymnasium": ("Boise", "ID"),
    "boas tennis and soccer complex": ("Boise", "ID"),
    # ─── BYU home venues ──────────────────────────────────────────────
    "lavell edwards stadium": ("Provo", "UT"),
    "marriott center": ("Provo", "UT"),
    "smith fieldhouse": ("Provo", "UT"),
    "miller park": ("Provo", "UT"),
    "gail miller field": ("Provo", "UT"),
    "south field": ("Provo", "UT"),
}

STATE_ABBREVIATIONS: dict[str, str] = {
    "Ala.": "AL", "Alabama": "AL",
    "Alaska": "AK",
    "Ariz.": "AZ", "Arizona": "AZ",
    "Ark.": "AR", "Arkansas": "AR",
    "Calif.": "CA", "California": "CA",
    "Colo.": "CO", "Colorado": "CO",
    "Conn.": "CT", "Connecticut": "CT",
    "Del.": "DE", "Delaware": "DE",
    "D.C.": "DC", "District of Columbia": "DC",
    "Fla.": "FL", "Florida": "FL",
    "Ga.": "GA", "Georgia": "GA",
    "Hawaii": "HI",
    "Idaho": "ID",
    "Ill.": "IL", "Illinois": "IL",
    "Ind.": "IN", "Indiana": "IN",
    "Iowa": "IA",
    "Kan.": "KS", "Kansas": "KS",
    "Ky.": "KY", "Kentucky": "KY",
    "La.": "LA", "Louisiana": "LA",
    "Maine": "ME",
    "Md.": "MD", "Maryland": "MD",
    "Mass.": "MA", "Massachusetts": "MA",
    "Mich.": "MI", "Michigan": "MI",
    "Minn.": "MN", "Minnesota": "MN",
    "Miss.": "MS", "Mississippi": "MS",
    "Mo.": "MO", "Missouri": "MO",
    "Mont.": "MT", "Montana": "MT",
    "Neb.": "NE", "Nebraska": "NE",
    "Nev.": "NV", "Nevada": "NV",
    "N.H.": "NH", "New Hampshire": "NH",
    "N.J.": "NJ", "New Jersey": "NJ",
    "N.M.": "NM", "New Mexico": "NM",
    "N.Y.": "NY", "New York": "NY",
    "N.C.": "NC", "North Carolina": "NC",
    "N.D.": "ND", "North Dakota": "ND",
    "Ohio": "OH",
    "Okla.": "OK", "Oklahoma": "OK",
    "Ore.": "OR", "Oregon": "OR",
    "Pa.": "PA", "Pennsylvania": "PA",
    "R.I.": "RI", "Rhode Island": "RI",
    "S.C.": "SC", "South Carolina": "SC",
    "S.D.": "SD", "South Dakota": "SD",
    "Tenn.": "TN", "Tennessee": "TN",
    "Texas": "TX",
    "Utah": "UT",
    "Vt.": "VT", "Vermont": "VT",
    "Va.": "VA", "Virginia": "VA",
    "Wash.": "WA", "Washington": "WA",
    "W.Va.": "WV", "West Virginia": "WV",
    "Wis.": "WI", "Wisconsin": "WI",
    "Wyo.": "WY", "Wyoming": "WY",
}

CITY_ALIASES: dict[tuple[str, str], str] = {
    # Neighbourhood / campus names that never appear as a city in uszips.csv
    ("lake nona", "FL"): "Orlando",
    ("usafa", "CO"): "USAF Academy",
    ("air force academy", "CO"): "USAF Academy",
}
