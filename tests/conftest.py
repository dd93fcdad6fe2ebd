"""Global pytest fixtures & helpers.

Adds project root to path and provides fake place lookups so segmentation
and ride assembly tests never touch the network.
"""
from __future__ import annotations

import os
import sys
import threading
from typing import Callable, Dict, List

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from expedition.geometry import Point
from expedition.models import Address, Classification


# --- Factory helpers -------------------------------------------------
def road(key: str, surface: str | None = None) -> Classification:
    return Classification(
        entity_kind="way",
        group_key=key,
        surface=surface,
        address=Address(road=key, city="Testville"),
        name=key,
    )


def building(key: str = "Town Hall") -> Classification:
    return Classification(entity_kind="node", group_key=key, name=key)


class FakeLookup:
    """Deterministic lookup driven by a classify function; records calls."""

    def __init__(self, classify: Callable[[Point], Classification]) -> None:
        self._classify = classify
        self._lock = threading.Lock()
        self.calls: List[Point] = []

    def lookup(self, point: Point) -> Classification:
        with self._lock:
            self.calls.append(point)
        return self._classify(point)


def by_latitude(mapping: Dict[float, Classification]) -> Callable[[Point], Classification]:
    """Classify points by exact latitude."""

    def _classify(point: Point) -> Classification:
        return mapping[point.y]

    return _classify


# --- Fixtures --------------------------------------------------------
@pytest.fixture
def make_lookup():
    return FakeLookup


@pytest.fixture
def main_street_line():
    return [(0.0, 0.0), (0.0, 0.001), (0.0, 0.002)]
