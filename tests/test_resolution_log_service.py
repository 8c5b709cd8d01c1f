"""Tests for resolution_log_service.py."""

from __future__ import annotations

import datetime as dt
import json
from pathlib import Path

from sportfinder import resolution_log_service as rls
from sportfinder.resolution_log_service import (
    add_resolution_entries,
    add_resolution_entry,
    get_resolution_entries,
    get_resolution_stats,
    make_entry,
)


def _ago(**delta: float) -> str:
    return (dt.datetime.now(dt.timezone.utc) - dt.timedelta(**delta)).isoformat()


class TestResolutionLogService:
    def test_add_creates_file(self, isolate_resolution_log_tmp: Path):
        """add_resolution_entry creates the log file if it doesn't exist."""
        assert not isolate_resolution_log_tmp.exists()

        add_resolution_entry("Provo, Utah", "resolved", city="Provo", state="UT", lat=40.2, lon=-111.6)

        data = json.loads(isolate_resolution_log_tmp.read_text())
        (entry,) = data["entries"]
        assert entry["raw"] == "Provo, Utah"
        assert entry["result_type"] == "resolved"
        assert (entry["lat"], entry["lon"]) == (40.2, -111.6)
        assert data["max_age_hours"] == rls.RESOLUTION_LOG_MAX_AGE_H

    def test_make_entry_omits_empty_fields(self):
        entry = make_entry("TBA", "unparseable")
        assert set(entry) == {"ts", "raw", "result_type"}

    def test_entries_newest_first_with_filter_and_limit(self):
        add_resolution_entries(
            [
                {"ts": _ago(hours=3), "raw": "a", "result_type": "resolved"},
                {"ts": _ago(hours=1), "raw": "b", "result_type": "not_found"},
                {"ts": _ago(hours=2), "raw": "c", "result_type": "resolved"},
            ]
        )

        assert [e["raw"] for e in get_resolution_entries()] == ["b", "c", "a"]
        assert [e["raw"] for e in get_resolution_entries(limit=2)] == ["b", "c"]
        assert [e["raw"] for e in get_resolution_entries(result_type="resolved")] == ["c", "a"]

    def test_old_entries_are_pruned(self):
        add_resolution_entries(
            [
                {"ts": _ago(hours=rls.RESOLUTION_LOG_MAX_AGE_H + 1), "raw": "stale", "result_type": "resolved"},
                {"ts": "garbage", "raw": "bad-ts", "result_type": "resolved"},
                {"ts": _ago(minutes=5), "raw": "fresh", "result_type": "resolved"},
            ]
        )
        assert [e["raw"] for e in get_resolution_entries()] == ["fresh"]

    def test_empty_batch_writes_nothing(self, isolate_resolution_log_tmp: Path):
        add_resolution_entries([])
        assert not isolate_resolution_log_tmp.exists()

    def test_corrupt_file_reads_as_empty(self, isolate_resolution_log_tmp: Path):
        isolate_resolution_log_tmp.write_text("{not json")
        assert get_resolution_entries() == []
        assert get_resolution_stats()["count"] == 0

    def test_stats(self):
        for raw in ("TBA", "TBA", "Nowhere, Utah"):
            add_resolution_entry(raw, "not_found" if "," in raw else "unparseable")
        add_resolution_entry("Marriott Center", "override")

        stats = get_resolution_stats()
        assert stats["count"] == 4
        assert stats["by_type"] == {"unparseable": 2, "not_found": 1, "override": 1}
        assert stats["top_failures"] == [
            {"raw": "TBA", "count": 2},
            {"raw": "Nowhere, Utah", "count": 1},
        ]
