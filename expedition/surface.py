"""Surface composition summary for a segmented ride."""

from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable

from .models import Way

_SURFACE_GROUPS = {
    "gravel": "dirt",
    "unpaved": "dirt",
    "dirt": "dirt",
    "fine_gravel": "dirt",
    "rock": "dirt",
    "asphalt": "tarmac",
    "paved": "tarmac",
}


def aggregate_surface(surface: str) -> str:
    return _SURFACE_GROUPS.get(surface, surface)


def surface_composition(ways: Iterable[Way]) -> Dict[str, float]:
    """Return the share of way points per aggregated surface.

    Ways without a surface tag are ignored; the ratios of the remaining
    surfaces sum to 1. An empty dict means no surface is known.
    """

    counts: Counter[str] = Counter()
    for way in ways:
        if way.surface:
            counts[aggregate_surface(way.surface)] += len(way.points)
    total = sum(counts.values())
    if total == 0:
        return {}
    return {surface: count / total for surface, count in counts.items()}


__all__ = ["aggregate_surface", "surface_composition"]
