"""Tests for the feature collection builder and ride assembly."""

from __future__ import annotations

import json

import pytest

from conftest import FakeLookup, by_latitude, road
from expedition.errors import (
    ExpeditionError,
    MissingGeometryError,
    PlaceLookupError,
)
from expedition.geometry import (
    Feature,
    FeatureCollection,
    Geometry,
    Point,
    PointGeometry,
    PolygonGeometry,
    distance,
    line_string,
)
from expedition.models import Classification
from expedition.services.ride_builder import (
    RideBuilder,
    build_ride_feature_collection,
)


def _track() -> FeatureCollection:
    return FeatureCollection(
        features=(
            Feature(
                geometry=line_string([(0.0, 0.0), (0.0, 0.001)]),
                properties={"name": "morning"},
            ),
            Feature(geometry=line_string([(0.0, 0.002), (0.0, 0.003)])),
        ),
        bbox=(0.0, 0.0, 0.0, 0.003),
    )


def test_builder_appends_start_and_end_markers() -> None:
    track = _track()
    built = build_ride_feature_collection(track)

    features = built.collection.features
    assert features[:2] == track.features
    start, end = features[-2], features[-1]
    assert (start.id, end.id) == ("start", "end")
    assert start.geometry == Geometry(PointGeometry(Point(0.0, 0.0)))
    assert end.geometry == Geometry(PointGeometry(Point(0.0, 0.003)))
    assert start.properties == {"distance": built.total_distance, "name": "start"}
    assert end.properties == {"distance": built.total_distance, "name": "end"}
    assert built.total_distance > 0
    assert built.collection.bbox == track.bbox
    assert (built.start_point, built.end_point) == (Point(0.0, 0.0), Point(0.0, 0.003))


def test_total_distance_measures_original_track_only() -> None:
    track = _track()
    built = build_ride_feature_collection(track)
    assert built.total_distance == pytest.approx(distance(track))
    # markers are single points and add nothing when re-measured
    assert distance(built.collection) == pytest.approx(built.total_distance)


@pytest.mark.parametrize(
    "collection",
    [
        FeatureCollection(),
        FeatureCollection(
            features=(
                Feature(
                    geometry=Geometry(
                        PolygonGeometry(
                            ((Point(0.0, 0.0), Point(1.0, 0.0), Point(0.0, 0.0)),)
                        )
                    )
                ),
            )
        ),
        FeatureCollection(features=(Feature(),)),
    ],
)
def test_builder_requires_start_and_end(collection: FeatureCollection) -> None:
    with pytest.raises(MissingGeometryError):
        build_ride_feature_collection(collection)


def test_create_ride_assembles_record() -> None:
    lookup = FakeLookup(
        by_latitude(
            {
                0.0: road("Main St", surface="asphalt"),
                0.001: road("Main St", surface="asphalt"),
                0.002: road("Hill Rd", surface="gravel"),
                0.003: road("Hill Rd", surface="gravel"),
            }
        )
    )
    ride = RideBuilder(lookup).create_ride("Sunday loop", _track())

    assert ride.name == "Sunday loop"
    assert [w.group_key for w in ride.ways] == ["Main St", "Hill Rd"]
    assert ride.start_address.road == "Main St"
    assert ride.end_address.road == "Hill Rd"
    assert ride.total_distance == pytest.approx(distance(_track()))
    # 2 geocodes + 4 segmentation lookups
    assert len(lookup.calls) == 6

    record = ride.to_dict()
    json.dumps(record)
    ids = [f.get("id") for f in record["geo_json"]["features"]]
    assert ids == [None, None, "start", "end"]
    assert record["ways"][0]["points"][0] == {"seq": 0, "point": [0.0, 0.0]}
    assert record["start_address"] == {"road": "Main St", "city": "Testville"}


def test_create_ride_without_address_keeps_none() -> None:
    lookup = FakeLookup(lambda _p: Classification.unmatched())
    ride = RideBuilder(lookup).create_ride("Sea crossing", _track())
    assert ride.start_address is None
    assert ride.ways == ()
    assert ride.to_dict()["end_address"] is None


def test_create_ride_propagates_lookup_failure() -> None:
    def classify(point: Point) -> Classification:
        raise PlaceLookupError("service unavailable")

    with pytest.raises(ExpeditionError):
        RideBuilder(FakeLookup(classify)).create_ride("broken", _track())
