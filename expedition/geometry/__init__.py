"""Geometry algebra for ride tracks.

This package provides the GeoJSON style geometry model, the geodesic
distance engine and the recursive operations (bounding box, distance,
start/end point and point flattening) used to enrich rides.
"""

from .models import (
    BBox,
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
    line_string,
    parse_geojson,
    point_geometry,
    to_geojson,
)
from .algebra import bounding_box, coordinates, distance, end_point, points, start_point
from .geodesic import path_distance, vincenty_distance

__all__ = [
    "BBox",
    "Feature",
    "FeatureCollection",
    "GeoObject",
    "Geometry",
    "GeometryCollection",
    "LineStringGeometry",
    "MultiLineStringGeometry",
    "MultiPointGeometry",
    "MultiPolygonGeometry",
    "Point",
    "PointGeometry",
    "PolygonGeometry",
    "line_string",
    "parse_geojson",
    "point_geometry",
    "to_geojson",
    "bounding_box",
    "coordinates",
    "distance",
    "end_point",
    "points",
    "start_point",
    "path_distance",
    "vincenty_distance",
]
