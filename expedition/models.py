from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .geometry import FeatureCollection, Point, to_geojson


@dataclass(frozen=True, slots=True)
class WayPoint:
    # Index within the flattened route; the only ordering key inside a Way.
    seq: int
    point: Point

    def to_dict(self) -> Dict[str, Any]:
        return {"seq": self.seq, "point": self.point.to_list()}


@dataclass(frozen=True, slots=True)
class Way:
    group_key: str
    seq: int
    distance: float
    points: Tuple[WayPoint, ...]
    name: str | None = None
    surface: str | None = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "group_key": self.group_key,
            "seq": self.seq,
            "distance": self.distance,
            "name": self.name,
            "surface": self.surface,
            "points": [wp.to_dict() for wp in self.points],
        }


@dataclass(frozen=True, slots=True)
class Address:
    road: str | None = None
    suburb: str | None = None
    town: str | None = None
    city: str | None = None
    state: str | None = None
    postcode: str | None = None
    country: str | None = None
    country_code: str | None = None
    # Any other components reported by the geocoder (hamlet, amenity, ...).
    extra: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = dict(self.extra)
        for key in (
            "road",
            "suburb",
            "town",
            "city",
            "state",
            "postcode",
            "country",
            "country_code",
        ):
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        return out


@dataclass(frozen=True, slots=True)
class Classification:
    """Result of classifying a single coordinate against the place lookup."""

    entity_kind: str
    group_key: str
    surface: str | None = None
    address: Address | None = None
    name: str | None = None

    @classmethod
    def unmatched(cls) -> "Classification":
        """Classification for a coordinate the service could not place."""

        return cls(entity_kind="", group_key="")


@dataclass(frozen=True, slots=True)
class Ride:
    name: str
    geo_json: FeatureCollection
    # Total distance in metres, measured before start/end markers were added.
    total_distance: float
    ways: Tuple[Way, ...]
    start_address: Optional[Address] = None
    end_address: Optional[Address] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "geo_json": to_geojson(self.geo_json),
            "total_distance": self.total_distance,
            "ways": [way.to_dict() for way in self.ways],
            "start_address": _address_dict(self.start_address),
            "end_address": _address_dict(self.end_address),
        }


def _address_dict(address: Optional[Address]) -> Optional[Dict[str, Any]]:
    return address.to_dict() if address is not None else None

