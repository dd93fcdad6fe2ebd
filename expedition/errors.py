"""Central error types used across the application."""

from __future__ import annotations


class ExpeditionError(RuntimeError):
    """Base error for ride enrichment failures."""


class MissingGeometryError(ExpeditionError):
    """Raised when a track has no start or end point (empty or polygon-only)."""


class MalformedGeometryError(ExpeditionError, ValueError):
    """Raised when coordinates or GeoJSON/GPX structure cannot be converted."""


class GeodesicConvergenceError(ExpeditionError, ArithmeticError):
    """Raised when the Vincenty inverse formula fails to converge for a pair."""


class PlaceLookupError(ExpeditionError):
    """Raised when the place lookup service fails (network, status, payload)."""


class WaySegmentationError(ExpeditionError):
    """Raised when any lookup fails while segmenting a route into ways."""


__all__ = [
    "ExpeditionError",
    "MissingGeometryError",
    "MalformedGeometryError",
    "GeodesicConvergenceError",
    "PlaceLookupError",
    "WaySegmentationError",
]
