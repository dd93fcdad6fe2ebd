"""Way segmentation service.

Classifies every route point against the place lookup collaborator using a
bounded worker pool, groups accepted points by place identity and measures
each resulting way. Lookups complete in any order; ordering is restored
afterwards by sorting on the original sequence index.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
import logging
import threading
from typing import Dict, FrozenSet, Iterable, List

from ..config import LINE_ENTITY_KINDS, LOOKUP_MAX_CONCURRENT
from ..errors import WaySegmentationError
from ..geometry import GeoObject, Point, path_distance
from ..lookup.base import PlaceLookup
from ..models import Classification, Way, WayPoint
from ..route_points import enumerate_route


@dataclass(slots=True)
class WaySegmenterConfig:
    max_concurrent: int = LOOKUP_MAX_CONCURRENT
    line_entity_kinds: FrozenSet[str] = LINE_ENTITY_KINDS
    logger: logging.Logger | None = None


@dataclass(slots=True)
class _WayAccumulator:
    group_key: str
    first_seq: int
    name: str | None
    surface: str | None
    points: List[WayPoint] = field(default_factory=list)

    def add(self, way_point: WayPoint, classification: Classification) -> None:
        self.points.append(way_point)
        # Keep metadata from the earliest point regardless of completion order.
        if way_point.seq < self.first_seq:
            self.first_seq = way_point.seq
            self.name = classification.name
            self.surface = classification.surface

    def build(self) -> Way:
        ordered = tuple(sorted(self.points, key=lambda wp: wp.seq))
        return Way(
            group_key=self.group_key,
            seq=self.first_seq,
            distance=path_distance(wp.point for wp in ordered),
            points=ordered,
            name=self.name,
            surface=self.surface,
        )


class WaySegmenter:
    def __init__(
        self,
        lookup: PlaceLookup,
        config: WaySegmenterConfig | None = None,
    ) -> None:
        self.config = config or WaySegmenterConfig()
        if self.config.max_concurrent < 1:
            raise ValueError("max_concurrent must be positive")
        self._lookup = lookup
        self._log = self.config.logger or logging.getLogger(self.__class__.__name__)

    def segment_route(self, obj: GeoObject) -> List[Way]:
        """Flatten a geometry tree and segment its points."""

        return self._segment(list(enumerate_route(obj)))

    def segment(self, route: Iterable[Point]) -> List[Way]:
        """Group route points into ways, ordered by their first point."""

        return self._segment(
            [WayPoint(seq=seq, point=point) for seq, point in enumerate(route)]
        )

    def _segment(self, way_points: List[WayPoint]) -> List[Way]:
        if not way_points:
            return []
        accumulators: Dict[str, _WayAccumulator] = {}
        accumulators_lock = threading.Lock()
        line_kinds = self.config.line_entity_kinds
        matched = 0

        def classify(way_point: WayPoint) -> None:
            nonlocal matched
            classification = self._lookup.lookup(way_point.point)
            if classification.entity_kind not in line_kinds:
                return
            key = classification.group_key
            with accumulators_lock:
                acc = accumulators.get(key)
                if acc is None:
                    acc = _WayAccumulator(
                        group_key=key,
                        first_seq=way_point.seq,
                        name=classification.name,
                        surface=classification.surface,
                    )
                    accumulators[key] = acc
                acc.add(way_point, classification)
                matched += 1

        max_workers = min(self.config.max_concurrent, len(way_points))
        self._log.info(
            "Classifying %d route points (max_concurrent=%d)",
            len(way_points),
            max_workers,
        )
        executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="way-lookup"
        )
        try:
            future_map: Dict[Future, WayPoint] = {
                executor.submit(classify, wp): wp for wp in way_points
            }
            for future in as_completed(future_map):
                exc = future.exception()
                if exc is None:
                    continue
                failed = future_map[future]
                for pending in future_map:
                    pending.cancel()
                self._log.error(
                    "Place lookup failed for route point %d (%s); aborting segmentation",
                    failed.seq,
                    failed.point,
                )
                raise WaySegmentationError(
                    f"Place lookup failed for route point {failed.seq}: {exc}"
                ) from exc
        finally:
            executor.shutdown(wait=True, cancel_futures=True)

        ways = [acc.build() for acc in accumulators.values()]
        ways.sort(key=lambda way: way.seq)
        self._log.info(
            "Built %d ways from %d/%d matched route points",
            len(ways),
            matched,
            len(way_points),
        )
        return ways


__all__ = ["WaySegmenter", "WaySegmenterConfig"]
