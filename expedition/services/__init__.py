"""Service layer package.

Exports the segmentation and ride assembly services consumed by the CLI and
by persistence/presentation layers.
"""

from .way_segmenter import WaySegmenter, WaySegmenterConfig
from .ride_builder import RideBuilder, build_ride_feature_collection

__all__ = [
    "WaySegmenter",
    "WaySegmenterConfig",
    "RideBuilder",
    "build_ride_feature_collection",
]
