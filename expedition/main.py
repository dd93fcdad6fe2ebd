from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Optional, Sequence

from .config import LOOKUP_MAX_CONCURRENT, NOMINATIM_URL, OUTPUT_SUFFIX
from .errors import ExpeditionError
from .gpx_import import gpx_to_feature_collection
from .lookup import NominatimClient
from .services import RideBuilder, WaySegmenter, WaySegmenterConfig
from .surface import surface_composition


def _setup_logging(level: str = "INFO") -> None:
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(
            level=getattr(logging, level),
            format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="expedition",
        description="Enrich a GPX ride with distance, addresses and named ways.",
    )
    parser.add_argument("track", type=Path, help="Path to the GPX track")
    parser.add_argument("--name", help="Ride name (defaults to the file stem)")
    parser.add_argument(
        "--output",
        type=Path,
        help=f"Output JSON path (defaults to <track>{OUTPUT_SUFFIX})",
    )
    parser.add_argument(
        "--nominatim-url",
        default=NOMINATIM_URL,
        help="Nominatim base URL used for reverse lookups",
    )
    parser.add_argument(
        "--max-concurrent",
        type=int,
        default=LOOKUP_MAX_CONCURRENT,
        help="Maximum simultaneous place lookups",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser


def _resolve_output_path(track: Path, output: Optional[Path]) -> Path:
    if output is not None:
        return output
    return track.with_name(track.stem + OUTPUT_SUFFIX)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    _setup_logging(args.log_level)

    try:
        with open(args.track, "r", encoding="utf-8") as handle:
            collection = gpx_to_feature_collection(handle)
    except (ExpeditionError, OSError) as exc:
        logging.error("Failed to load track '%s': %s", args.track, exc)
        return 1

    client = NominatimClient(args.nominatim_url)
    try:
        segmenter = WaySegmenter(
            client, WaySegmenterConfig(max_concurrent=args.max_concurrent)
        )
    except ValueError as exc:
        logging.error("Invalid segmentation settings: %s", exc)
        return 1
    builder = RideBuilder(client, segmenter)
    try:
        ride = builder.create_ride(args.name or args.track.stem, collection)
    except ExpeditionError as exc:
        logging.error("Failed to enrich ride '%s': %s", args.track, exc)
        return 1

    record = ride.to_dict()
    record["surface_composition"] = surface_composition(ride.ways)
    output_path = _resolve_output_path(args.track, args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(record, f, indent=2)
    logging.info(
        "Ride saved to %s (%.1f m, ways=%d)",
        output_path,
        ride.total_distance,
        len(ride.ways),
    )
    return 0


__all__ = ["main"]
