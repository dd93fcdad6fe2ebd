"""Dataclasses describing GeoJSON style geometry trees and their JSON codec.

The variant set is closed: a ``Geometry`` wraps exactly one of the seven
value classes below, and ``Feature``/``FeatureCollection`` wrap geometries.
Every operation in :mod:`expedition.geometry.algebra` dispatches over this
set exhaustively.
"""

from __future__ import annotations

from dataclasses import dataclass
from numbers import Real
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..errors import MalformedGeometryError

BBox = Tuple[float, ...]
FeatureId = Union[str, int]


@dataclass(frozen=True, slots=True)
class Point:
    """A single position: ``x`` is longitude, ``y`` is latitude (degrees)."""

    x: float
    y: float

    @property
    def lon(self) -> float:
        return self.x

    @property
    def lat(self) -> float:
        return self.y

    def to_list(self) -> List[float]:
        return [self.x, self.y]


Line = Tuple[Point, ...]
Ring = Tuple[Point, ...]


@dataclass(frozen=True, slots=True)
class PointGeometry:
    coordinates: Point


@dataclass(frozen=True, slots=True)
class MultiPointGeometry:
    coordinates: Tuple[Point, ...]


@dataclass(frozen=True, slots=True)
class LineStringGeometry:
    coordinates: Line


@dataclass(frozen=True, slots=True)
class MultiLineStringGeometry:
    coordinates: Tuple[Line, ...]


@dataclass(frozen=True, slots=True)
class PolygonGeometry:
    coordinates: Tuple[Ring, ...]


@dataclass(frozen=True, slots=True)
class MultiPolygonGeometry:
    coordinates: Tuple[Tuple[Ring, ...], ...]


@dataclass(frozen=True, slots=True)
class GeometryCollection:
    geometries: Tuple["Geometry", ...]


GeometryValue = Union[
    PointGeometry,
    MultiPointGeometry,
    LineStringGeometry,
    MultiLineStringGeometry,
    PolygonGeometry,
    MultiPolygonGeometry,
    GeometryCollection,
]


@dataclass(frozen=True, slots=True)
class Geometry:
    """A geometry value plus its optional precomputed bounding box."""

    value: GeometryValue
    bbox: Optional[BBox] = None


@dataclass(frozen=True, slots=True)
class Feature:
    geometry: Optional[Geometry] = None
    bbox: Optional[BBox] = None
    properties: Optional[Dict[str, Any]] = None
    id: Optional[FeatureId] = None


@dataclass(frozen=True, slots=True)
class FeatureCollection:
    features: Tuple[Feature, ...] = ()
    bbox: Optional[BBox] = None


GeoObject = Union[GeometryValue, Geometry, Feature, FeatureCollection]

_COORDINATE_KINDS = frozenset(
    {"Point", "MultiPoint", "LineString", "MultiLineString", "Polygon", "MultiPolygon"}
)


# ---------------------------------------------------------------------------
# Convenience constructors
# ---------------------------------------------------------------------------
def line_string(coords: Sequence[Sequence[float]]) -> Geometry:
    """Build a LineString geometry from ``[(lon, lat), ...]`` pairs."""

    return Geometry(LineStringGeometry(tuple(_position(c) for c in coords)))


def point_geometry(point: Point) -> Geometry:
    return Geometry(PointGeometry(point))


# ---------------------------------------------------------------------------
# GeoJSON decoding
# ---------------------------------------------------------------------------
def parse_geojson(obj: Mapping[str, Any]) -> Union[Geometry, Feature, FeatureCollection]:
    """Decode a GeoJSON object (geometry, Feature or FeatureCollection)."""

    if not isinstance(obj, Mapping):
        raise MalformedGeometryError("GeoJSON object must be a mapping")
    kind = obj.get("type")
    if kind == "FeatureCollection":
        return feature_collection_from_geojson(obj)
    if kind == "Feature":
        return feature_from_geojson(obj)
    return geometry_from_geojson(obj)


def feature_collection_from_geojson(obj: Mapping[str, Any]) -> FeatureCollection:
    raw_features = obj.get("features")
    if not isinstance(raw_features, Sequence) or isinstance(raw_features, str):
        raise MalformedGeometryError("FeatureCollection.features must be an array")
    return FeatureCollection(
        features=tuple(feature_from_geojson(f) for f in raw_features),
        bbox=_bbox(obj.get("bbox")),
    )


def feature_from_geojson(obj: Mapping[str, Any]) -> Feature:
    if not isinstance(obj, Mapping) or obj.get("type") != "Feature":
        raise MalformedGeometryError("Expected a GeoJSON Feature")
    raw_geometry = obj.get("geometry")
    properties = obj.get("properties")
    if properties is not None and not isinstance(properties, Mapping):
        raise MalformedGeometryError("Feature.properties must be an object or null")
    return Feature(
        geometry=geometry_from_geojson(raw_geometry) if raw_geometry is not None else None,
        bbox=_bbox(obj.get("bbox")),
        properties=dict(properties) if properties is not None else None,
        id=obj.get("id"),
    )


def geometry_from_geojson(obj: Mapping[str, Any]) -> Geometry:
    if not isinstance(obj, Mapping):
        raise MalformedGeometryError("Geometry must be a mapping")
    kind = obj.get("type")
    bbox = _bbox(obj.get("bbox"))
    if kind == "GeometryCollection":
        children = obj.get("geometries")
        if not isinstance(children, Sequence) or isinstance(children, str):
            raise MalformedGeometryError("GeometryCollection.geometries must be an array")
        return Geometry(
            GeometryCollection(tuple(geometry_from_geojson(g) for g in children)), bbox
        )
    if kind not in _COORDINATE_KINDS:
        raise MalformedGeometryError(f"Unsupported geometry type: {kind!r}")
    coords = obj.get("coordinates")
    try:
        if kind == "Point":
            value: GeometryValue = PointGeometry(_position(coords))
        elif kind == "MultiPoint":
            value = MultiPointGeometry(_positions(coords))
        elif kind == "LineString":
            value = LineStringGeometry(_positions(coords))
        elif kind == "MultiLineString":
            value = MultiLineStringGeometry(tuple(_positions(c) for c in _array(coords)))
        elif kind == "Polygon":
            value = PolygonGeometry(tuple(_positions(r) for r in _array(coords)))
        else:
            value = MultiPolygonGeometry(
                tuple(
                    tuple(_positions(r) for r in _array(poly))
                    for poly in _array(coords)
                )
            )
    except MalformedGeometryError as exc:
        raise MalformedGeometryError(f"Invalid {kind} coordinates: {exc}") from exc
    return Geometry(value, bbox)


def _array(raw: Any) -> Sequence[Any]:
    if not isinstance(raw, Sequence) or isinstance(raw, str):
        raise MalformedGeometryError(f"expected an array, got {type(raw).__name__}")
    return raw


def _position(raw: Any) -> Point:
    """Convert a raw ``[lon, lat(, alt)]`` position into a Point."""

    seq = _array(raw)
    if len(seq) < 2:
        raise MalformedGeometryError("position needs at least two values")
    lon, lat = seq[0], seq[1]
    if isinstance(lon, bool) or isinstance(lat, bool):
        raise MalformedGeometryError("position values must be numbers")
    if not isinstance(lon, Real) or not isinstance(lat, Real):
        raise MalformedGeometryError("position values must be numbers")
    return Point(float(lon), float(lat))


def _positions(raw: Any) -> Tuple[Point, ...]:
    return tuple(_position(p) for p in _array(raw))


def _bbox(raw: Any) -> Optional[BBox]:
    if raw is None:
        return None
    values = _array(raw)
    try:
        return tuple(float(v) for v in values)
    except (TypeError, ValueError) as exc:
        raise MalformedGeometryError("bbox values must be numbers") from exc


# ---------------------------------------------------------------------------
# GeoJSON encoding
# ---------------------------------------------------------------------------
def to_geojson(obj: Union[Geometry, Feature, FeatureCollection]) -> Dict[str, Any]:
    """Encode a geometry tree back into plain GeoJSON dictionaries."""

    if isinstance(obj, FeatureCollection):
        out: Dict[str, Any] = {
            "type": "FeatureCollection",
            "features": [to_geojson(f) for f in obj.features],
        }
    elif isinstance(obj, Feature):
        out = {
            "type": "Feature",
            "geometry": to_geojson(obj.geometry) if obj.geometry is not None else None,
            "properties": dict(obj.properties) if obj.properties is not None else None,
        }
        if obj.id is not None:
            out["id"] = obj.id
    elif isinstance(obj, Geometry):
        out = _value_to_geojson(obj.value)
    else:
        raise TypeError(f"Cannot encode {type(obj).__name__} as GeoJSON")
    if obj.bbox is not None:
        out["bbox"] = list(obj.bbox)
    return out


def _value_to_geojson(value: GeometryValue) -> Dict[str, Any]:
    if isinstance(value, PointGeometry):
        return {"type": "Point", "coordinates": value.coordinates.to_list()}
    if isinstance(value, MultiPointGeometry):
        return {"type": "MultiPoint", "coordinates": _lists(value.coordinates)}
    if isinstance(value, LineStringGeometry):
        return {"type": "LineString", "coordinates": _lists(value.coordinates)}
    if isinstance(value, MultiLineStringGeometry):
        return {
            "type": "MultiLineString",
            "coordinates": [_lists(line) for line in value.coordinates],
        }
    if isinstance(value, PolygonGeometry):
        return {
            "type": "Polygon",
            "coordinates": [_lists(ring) for ring in value.coordinates],
        }
    if isinstance(value, MultiPolygonGeometry):
        return {
            "type": "MultiPolygon",
            "coordinates": [
                [_lists(ring) for ring in poly] for poly in value.coordinates
            ],
        }
    if isinstance(value, GeometryCollection):
        return {
            "type": "GeometryCollection",
            "geometries": [to_geojson(g) for g in value.geometries],
        }
    raise TypeError(f"Unknown geometry variant: {type(value).__name__}")


def _lists(points: Sequence[Point]) -> List[List[float]]:
    return [p.to_list() for p in points]


__all__ = [
    "BBox",
    "Point",
    "PointGeometry",
    "MultiPointGeometry",
    "LineStringGeometry",
    "MultiLineStringGeometry",
    "PolygonGeometry",
    "MultiPolygonGeometry",
    "GeometryCollection",
    "GeometryValue",
    "Geometry",
    "Feature",
    "FeatureCollection",
    "GeoObject",
    "line_string",
    "point_geometry",
    "parse_geojson",
    "geometry_from_geojson",
    "feature_from_geojson",
    "feature_collection_from_geojson",
    "to_geojson",
]
