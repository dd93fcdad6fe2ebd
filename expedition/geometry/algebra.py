"""Operations over geometry trees: bounding box, distance, start/end, points.

Each operation is a single function dispatching over the closed variant set
from :mod:`expedition.geometry.models`; the wrappers (``Geometry``,
``Feature``, ``FeatureCollection``) delegate to their contents. Polygons are
area features, not traversable track, so they contribute no distance, no
points and no start/end point. They still count towards the bounding box.
"""

from __future__ import annotations

from itertools import chain
from typing import Iterator, List, Optional

from .geodesic import path_distance
from .models import (
    Feature,
    FeatureCollection,
    GeoObject,
    Geometry,
    GeometryCollection,
    LineStringGeometry,
    MultiLineStringGeometry,
    MultiPointGeometry,
    MultiPolygonGeometry,
    Point,
    PointGeometry,
    PolygonGeometry,
)


def _unwrap(obj: GeoObject) -> GeoObject:
    if isinstance(obj, Geometry):
        return obj.value
    return obj


def _unknown(obj: object) -> TypeError:
    return TypeError(f"Unsupported geometry object: {type(obj).__name__}")


def coordinates(obj: GeoObject) -> Iterator[Point]:
    """Yield every coordinate of ``obj``, polygon rings included."""

    obj = _unwrap(obj)
    if isinstance(obj, (PolygonGeometry, MultiPolygonGeometry)):
        rings = (
            obj.coordinates
            if isinstance(obj, PolygonGeometry)
            else chain.from_iterable(obj.coordinates)
        )
        return chain.from_iterable(rings)
    if isinstance(obj, FeatureCollection):
        return chain.from_iterable(coordinates(f) for f in obj.features)
    if isinstance(obj, Feature):
        return coordinates(obj.geometry) if obj.geometry is not None else iter(())
    if isinstance(obj, GeometryCollection):
        return chain.from_iterable(coordinates(g) for g in obj.geometries)
    return points(obj)


def bounding_box(obj: GeoObject) -> Optional[List[float]]:
    """Return ``[min_x, min_y, max_x, max_y]`` or ``None`` without coordinates."""

    min_x = min_y = float("inf")
    max_x = max_y = float("-inf")
    seen = False
    for point in coordinates(obj):
        seen = True
        if point.x < min_x:
            min_x = point.x
        if point.x > max_x:
            max_x = point.x
        if point.y < min_y:
            min_y = point.y
        if point.y > max_y:
            max_y = point.y
    if not seen:
        return None
    return [min_x, min_y, max_x, max_y]


def points(obj: GeoObject) -> Iterator[Point]:
    """Lazily yield the traversable points of ``obj`` depth first.

    A fresh iterator is returned on every call.
    """

    obj = _unwrap(obj)
    if isinstance(obj, PointGeometry):
        return iter((obj.coordinates,))
    if isinstance(obj, (MultiPointGeometry, LineStringGeometry)):
        return iter(obj.coordinates)
    if isinstance(obj, MultiLineStringGeometry):
        return chain.from_iterable(obj.coordinates)
    if isinstance(obj, (PolygonGeometry, MultiPolygonGeometry)):
        return iter(())
    if isinstance(obj, GeometryCollection):
        return chain.from_iterable(points(g) for g in obj.geometries)
    if isinstance(obj, Feature):
        return points(obj.geometry) if obj.geometry is not None else iter(())
    if isinstance(obj, FeatureCollection):
        return chain.from_iterable(points(f) for f in obj.features)
    raise _unknown(obj)


def distance(obj: GeoObject) -> float:
    """Return the geodesic length of ``obj`` in metres.

    Sub-lines of a MultiLineString and members of collections are measured
    independently and summed; they are never joined end to start.
    """

    obj = _unwrap(obj)
    if isinstance(obj, (PointGeometry, PolygonGeometry, MultiPolygonGeometry)):
        return 0.0
    if isinstance(obj, (MultiPointGeometry, LineStringGeometry)):
        return path_distance(obj.coordinates)
    if isinstance(obj, MultiLineStringGeometry):
        return sum((path_distance(line) for line in obj.coordinates), 0.0)
    if isinstance(obj, GeometryCollection):
        return sum((distance(g) for g in obj.geometries), 0.0)
    if isinstance(obj, Feature):
        return distance(obj.geometry) if obj.geometry is not None else 0.0
    if isinstance(obj, FeatureCollection):
        return sum((distance(f) for f in obj.features), 0.0)
    raise _unknown(obj)


def start_point(obj: GeoObject) -> Optional[Point]:
    """Return the first point in traversal order, if any."""

    obj = _unwrap(obj)
    if isinstance(obj, PointGeometry):
        return obj.coordinates
    if isinstance(obj, (MultiPointGeometry, LineStringGeometry)):
        return obj.coordinates[0] if obj.coordinates else None
    if isinstance(obj, MultiLineStringGeometry):
        if not obj.coordinates or not obj.coordinates[0]:
            return None
        return obj.coordinates[0][0]
    if isinstance(obj, (PolygonGeometry, MultiPolygonGeometry)):
        return None
    if isinstance(obj, GeometryCollection):
        # first child that has one; polygons are skipped
        for child in obj.geometries:
            found = start_point(child)
            if found is not None:
                return found
        return None
    if isinstance(obj, Feature):
        return start_point(obj.geometry) if obj.geometry is not None else None
    if isinstance(obj, FeatureCollection):
        return start_point(obj.features[0]) if obj.features else None
    raise _unknown(obj)


def end_point(obj: GeoObject) -> Optional[Point]:
    """Return the last point in traversal order, if any."""

    obj = _unwrap(obj)
    if isinstance(obj, PointGeometry):
        return obj.coordinates
    if isinstance(obj, (MultiPointGeometry, LineStringGeometry)):
        return obj.coordinates[-1] if obj.coordinates else None
    if isinstance(obj, MultiLineStringGeometry):
        if not obj.coordinates or not obj.coordinates[-1]:
            return None
        return obj.coordinates[-1][-1]
    if isinstance(obj, (PolygonGeometry, MultiPolygonGeometry)):
        return None
    if isinstance(obj, GeometryCollection):
        for child in reversed(obj.geometries):
            found = end_point(child)
            if found is not None:
                return found
        return None
    if isinstance(obj, Feature):
        return end_point(obj.geometry) if obj.geometry is not None else None
    if isinstance(obj, FeatureCollection):
        return end_point(obj.features[-1]) if obj.features else None
    raise _unknown(obj)


__all__ = [
    "bounding_box",
    "coordinates",
    "distance",
    "end_point",
    "points",
    "start_point",
]
