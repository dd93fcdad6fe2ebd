"""Expedition ride enrichment package."""

from .main import main
from .models import Address, Classification, Ride, Way, WayPoint
from .errors import (
    ExpeditionError,
    MalformedGeometryError,
    MissingGeometryError,
    PlaceLookupError,
    WaySegmentationError,
)

__all__ = [
    "main",
    "Address",
    "Classification",
    "Ride",
    "Way",
    "WayPoint",
    "ExpeditionError",
    "MalformedGeometryError",
    "MissingGeometryError",
    "PlaceLookupError",
    "WaySegmentationError",
]
