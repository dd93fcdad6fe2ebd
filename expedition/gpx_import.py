"""Convert GPX documents into ride feature collections."""

from __future__ import annotations

import logging
from typing import IO, Optional, Union

import gpxpy
import gpxpy.gpx

from .errors import MalformedGeometryError
from .geometry import (
    Feature,
    FeatureCollection,
    Geometry,
    MultiLineStringGeometry,
    Point,
    bounding_box,
    distance,
)

_LOG = logging.getLogger(__name__)


def gpx_to_feature_collection(source: Union[str, IO[str]]) -> FeatureCollection:
    """Parse GPX text (or an open file) into one Feature per track.

    Each feature carries a MultiLineString geometry with one line per track
    segment, the bounding box on both feature and geometry, and ``distance``
    and ``name`` properties. Tracks without any point are skipped.
    """

    try:
        document = gpxpy.parse(source)
    except gpxpy.gpx.GPXException as exc:
        raise MalformedGeometryError(f"Unable to parse GPX: {exc}") from exc
    _LOG.info("number of tracks in gpx: %d", len(document.tracks))

    features = []
    for track in document.tracks:
        feature = track_to_feature(track)
        if feature is None:
            _LOG.debug("Skipping empty track %r", track.name)
            continue
        features.append(feature)
    collection = FeatureCollection(features=tuple(features))
    bbox = bounding_box(collection)
    return FeatureCollection(
        features=collection.features, bbox=tuple(bbox) if bbox else None
    )


def track_to_feature(track: gpxpy.gpx.GPXTrack) -> Optional[Feature]:
    # Empty segments would hide the track's start/end point.
    lines = tuple(
        tuple(Point(p.longitude, p.latitude) for p in segment.points)
        for segment in track.segments
        if segment.points
    )
    if not lines:
        return None
    value = MultiLineStringGeometry(lines)
    bbox = bounding_box(value)
    box = tuple(bbox) if bbox else None
    return Feature(
        geometry=Geometry(value, box),
        bbox=box,
        properties={"distance": distance(value), "name": track.name},
    )


__all__ = ["gpx_to_feature_collection", "track_to_feature"]
