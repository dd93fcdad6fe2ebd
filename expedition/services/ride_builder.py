"""Ride assembly service.

Builds the persisted ride record from an imported track: the feature
collection with synthetic ``start``/``end`` markers, the total distance,
start/end addresses and the ordered way segments.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
import logging
from typing import Optional

from ..errors import MissingGeometryError
from ..geometry import (
    Feature,
    FeatureCollection,
    Point,
    distance,
    end_point,
    point_geometry,
    start_point,
)
from ..lookup.base import PlaceLookup
from ..models import Address, Ride
from .way_segmenter import WaySegmenter

START_FEATURE_ID = "start"
END_FEATURE_ID = "end"

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RideFeatureCollection:
    collection: FeatureCollection
    total_distance: float
    start_point: Point
    end_point: Point


def feature_point(feature_id: str, point: Point, total_distance: float) -> Feature:
    """Single point marker feature tagged with the ride's total distance."""

    return Feature(
        geometry=point_geometry(point),
        properties={"distance": total_distance, "name": feature_id},
        id=feature_id,
    )


def build_ride_feature_collection(collection: FeatureCollection) -> RideFeatureCollection:
    """Append start/end marker features and measure the original track.

    Raises ``MissingGeometryError`` when the collection has no start or end
    point (empty, or only polygons).
    """

    first = start_point(collection)
    if first is None:
        raise MissingGeometryError("No start point on geometry")
    last = end_point(collection)
    if last is None:
        raise MissingGeometryError("No end point on geometry")
    total = distance(collection)
    enriched = FeatureCollection(
        features=collection.features
        + (
            feature_point(START_FEATURE_ID, first, total),
            feature_point(END_FEATURE_ID, last, total),
        ),
        bbox=collection.bbox,
    )
    return RideFeatureCollection(
        collection=enriched,
        total_distance=total,
        start_point=first,
        end_point=last,
    )


class RideBuilder:
    def __init__(self, lookup: PlaceLookup, segmenter: WaySegmenter | None = None):
        self._lookup = lookup
        self._segmenter = segmenter or WaySegmenter(lookup)
        self._log = logging.getLogger(self.__class__.__name__)

    def create_ride(self, name: str, collection: FeatureCollection) -> Ride:
        built = build_ride_feature_collection(collection)
        self._log.info(
            "Ride %r: %.1f m from %s to %s",
            name,
            built.total_distance,
            built.start_point,
            built.end_point,
        )
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="ride-geocode") as executor:
            start_future = executor.submit(self._address_for, built.start_point)
            end_future = executor.submit(self._address_for, built.end_point)
            start_address = start_future.result()
            end_address = end_future.result()
        ways = self._segmenter.segment_route(collection)
        return Ride(
            name=name,
            geo_json=built.collection,
            total_distance=built.total_distance,
            ways=tuple(ways),
            start_address=start_address,
            end_address=end_address,
        )

    def _address_for(self, point: Point) -> Optional[Address]:
        address = self._lookup.lookup(point).address
        if address is None:
            _LOG.warning("No address found for %s", point)
        return address


__all__ = [
    "END_FEATURE_ID",
    "START_FEATURE_ID",
    "RideBuilder",
    "RideFeatureCollection",
    "build_ride_feature_collection",
    "feature_point",
]
