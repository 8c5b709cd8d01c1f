"""Exact-key lookups: city/state and ZIP."""

from __future__ import annotations

from sportfinder.place_resolver import resolve_city_state, resolve_zip
from sportfinder.reference_table import ReferenceIndex


def test_city_state_is_case_insensitive(index: ReferenceIndex) -> None:
    assert resolve_city_state("los angeles", "ca", index) == resolve_city_state(
        "LOS ANGELES", "CA", index
    )
    assert resolve_city_state("Los Angeles", "CA", index) == {"lat": 34.0614, "lon": -118.2385}


def test_state_name_equals_state_code(index: ReferenceIndex) -> None:
    assert resolve_city_state("Los Angeles", "California", index) == resolve_city_state(
        "Los Angeles", "CA", index
    )


def test_surrounding_whitespace_ignored(index: ReferenceIndex) -> None:
    assert resolve_city_state("  Boise ", " id ", index) == {"lat": 43.6323, "lon": -116.2052}


def test_unknown_place_is_none(index: ReferenceIndex) -> None:
    assert resolve_city_state("Springfield", "UT", index) is None
    assert resolve_city_state("Provo", "ID", index) is None
    assert resolve_city_state("Provo", "", index) is None


def test_zip_lookup(index: ReferenceIndex) -> None:
    assert resolve_zip("90210", index) == {"lat": 34.103, "lon": -118.4105}
    assert resolve_zip("00000", index) is None


def test_zip_has_no_partial_match(index: ReferenceIndex) -> None:
    assert resolve_zip("9021", index) is None
    assert resolve_zip("902100", index) is None


def test_empty_index_never_matches() -> None:
    empty = ReferenceIndex()
    assert resolve_city_state("Provo", "UT", empty) is None
    assert resolve_zip("84604", empty) is None
