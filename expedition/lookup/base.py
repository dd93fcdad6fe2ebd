"""Interface shared by place lookup implementations."""

from __future__ import annotations

from typing import Protocol

from ..geometry import Point
from ..models import Classification


class PlaceLookup(Protocol):
    """Classifies a single coordinate into a named place.

    Implementations raise ``PlaceLookupError`` on network or payload failures
    and apply their own timeout, retry and backoff policy.
    """

    def lookup(self, point: Point) -> Classification:
        ...


__all__ = ["PlaceLookup"]
