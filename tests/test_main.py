"""Smoke test for the CLI entry point with the network client replaced."""

from __future__ import annotations

import importlib
import json
from pathlib import Path

import pytest

from conftest import FakeLookup, road

# expedition.main is shadowed by the re-exported main() function
main_module = importlib.import_module("expedition.main")

GPX = """<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="tests" xmlns="http://www.topografix.com/GPX/1/1">
  <trk><name>Lap</name><trkseg>
    <trkpt lat="0.0" lon="0.0"></trkpt>
    <trkpt lat="0.001" lon="0.0"></trkpt>
    <trkpt lat="0.002" lon="0.0"></trkpt>
  </trkseg></trk>
</gpx>
"""


@pytest.fixture
def fake_client(monkeypatch: pytest.MonkeyPatch) -> FakeLookup:
    lookup = FakeLookup(lambda _p: road("Main St", surface="asphalt"))
    monkeypatch.setattr(main_module, "NominatimClient", lambda *_a, **_k: lookup)
    return lookup


def test_main_writes_ride_record(tmp_path: Path, fake_client: FakeLookup) -> None:
    track = tmp_path / "lap.gpx"
    track.write_text(GPX, encoding="utf-8")
    out = tmp_path / "out" / "lap.json"

    code = main_module.main([str(track), "--name", "Lap", "--output", str(out), "--max-concurrent", "2"])

    assert code == 0
    record = json.loads(out.read_text(encoding="utf-8"))
    assert record["name"] == "Lap"
    assert record["total_distance"] > 0
    assert [w["group_key"] for w in record["ways"]] == ["Main St"]
    assert record["surface_composition"] == {"tarmac": 1.0}


def test_main_default_output_next_to_track(tmp_path: Path, fake_client: FakeLookup) -> None:
    track = tmp_path / "lap.gpx"
    track.write_text(GPX, encoding="utf-8")
    assert main_module.main([str(track)]) == 0
    record = json.loads((tmp_path / "lap.ride.json").read_text(encoding="utf-8"))
    assert record["name"] == "lap"


def test_main_reports_missing_track(tmp_path: Path, fake_client: FakeLookup) -> None:
    assert main_module.main([str(tmp_path / "missing.gpx")]) == 1
    assert fake_client.calls == []


@pytest.mark.parametrize("bound", ["0", "-3"])
def test_main_rejects_non_positive_concurrency(
    tmp_path: Path, fake_client: FakeLookup, bound: str
) -> None:
    track = tmp_path / "lap.gpx"
    track.write_text(GPX, encoding="utf-8")

    assert main_module.main([str(track), "--max-concurrent", bound]) == 1
    assert fake_client.calls == []
    assert not (tmp_path / "lap.ride.json").exists()
