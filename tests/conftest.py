"""
tests/conftest.py
~~~~~~~~~~~~~~~~~
Global pytest fixtures.

* ``isolate_resolution_log_tmp`` points the resolution log at a per-test
  temporary file so nothing is left behind under ``local_data/``.
* ``reset_caches`` drops the process-wide reference index and the event
  cache between tests.
* ``reference_csv`` / ``index`` provide a tiny ``uszips.csv``-shaped table.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from sportfinder import events_feed, reference_table
from sportfinder import resolution_log_service as rls


# uszips.csv layout: zip first, coordinates before the names, mixed quoting.
REFERENCE_CSV = '''\
"zip","lat","lng","city","state_id","state_name","county_name"
"90210","34.10300","-118.41050","Beverly Hills","CA","California","Los Angeles"
"90012","34.06140","-118.23850","Los Angeles","CA","California","Los Angeles"
83702,43.63230,-116.20520,Boise,ID,Idaho,Ada
46204,39.77140,-86.15770,Indianapolis,IN,Indiana,Marion
02108,42.35760,-71.06840,Boston,MA,Massachusetts,Suffolk
84604,40.25630,-111.64740,Provo,UT,Utah,Utah
84057,40.31340,-111.69920,Orem,UT,Utah,Utah

32801,28.54190,-81.37600,Orlando,FL,Florida,Orange
80840,38.99080,-104.85780,USAF Academy,CO,Colorado,El Paso
66044,38.98540,-95.22730,Lawrence,KS,Kansas,Douglas
"69763","42.45710","-98.64740","O""Neill","NE","Nebraska","Holt"
99999,not-a-number,-100.0,Nowhere,ZZ,Nowhere,None
12345,40.0
84601,40.22820,-111.66300,Provo,UT,Utah,Utah
'''


@pytest.fixture(autouse=True)
def isolate_resolution_log_tmp(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """
    Redirect ``resolution_log_service.FILE`` & ``DIR`` to *tmp_path*.

    Both are computed at *import time*, so the module attributes are patched
    after import and before each test executes.
    """
    log_dir = tmp_path / "resolution_log"
    log_dir.mkdir(parents=True, exist_ok=True)

    monkeypatch.setenv("PERSIST_DIR", str(log_dir))
    monkeypatch.setattr(rls, "DIR", log_dir)
    monkeypatch.setattr(rls, "FILE", log_dir / "resolution_log.json")
    return log_dir / "resolution_log.json"


@pytest.fixture(autouse=True)
def reset_caches():
    reference_table.reset_cache()
    events_feed.clear_cache()
    yield
    reference_table.reset_cache()
    events_feed.clear_cache()


@pytest.fixture
def reference_csv() -> str:
    return REFERENCE_CSV


@pytest.fixture
def index(reference_csv: str) -> reference_table.ReferenceIndex:
    return reference_table.load(reference_csv)
