"""Flatten geometry trees into the ordered point stream used for segmentation."""

from __future__ import annotations

from typing import Iterator

from .geometry import GeoObject, Point, points
from .models import WayPoint


def route_points(obj: GeoObject) -> Iterator[Point]:
    """Return the same point order the distance engine measures."""

    return points(obj)


def enumerate_route(obj: GeoObject) -> Iterator[WayPoint]:
    """Lazily pair each route point with its 0-based sequence index."""

    for seq, point in enumerate(points(obj)):
        yield WayPoint(seq=seq, point=point)


__all__ = ["enumerate_route", "route_points"]
