#!/usr/bin/env python3
"""Print the planting and harvest timeline of a crop at a location."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

# Ensure project root is on the Python path when executed directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from scripts import configure_logging

from garden_engine.growing_profile import build_growing_profile
from garden_engine.planting_schedule import (get_crop_timeline,
                                             get_optimal_planting_window,
                                             list_growable_crops)
from garden_engine.utils import normalize_id


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Crop planting timeline")
    parser.add_argument("crop", nargs="?", help="crop id, e.g. tomato-cherry")
    parser.add_argument("latitude", type=float, nargs="?")
    parser.add_argument("longitude", type=float, nargs="?")
    parser.add_argument("--year", type=int, help="season year (default: profile year)")
    parser.add_argument("--list", action="store_true", help="list growable crop ids")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.list:
        for crop_id in list_growable_crops():
            print(crop_id)
        return
    if args.crop is None or args.latitude is None or args.longitude is None:
        parser.error("crop, latitude and longitude are required")

    try:
        profile = build_growing_profile(args.latitude, args.longitude, year=args.year)
    except ValueError as exc:
        parser.error(str(exc))

    crop_id = normalize_id(args.crop)
    year = args.year or profile.year
    timeline = get_crop_timeline(crop_id, profile, year)
    payload = timeline.as_dict()
    payload["zone"] = profile.zone
    optimal = get_optimal_planting_window(crop_id, profile, year)
    payload["optimal_window"] = optimal.as_dict() if optimal else None
    print(json.dumps(payload, indent=2))
    if timeline.not_suitable_reason:
        sys.exit(1)


if __name__ == "__main__":  # pragma: no cover
    main()
