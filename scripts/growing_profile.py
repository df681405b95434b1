#!/usr/bin/env python3
"""Print the growing profile of a location as JSON."""

from __future__ import annotations

import argparse
import json
import sys
from datetime import date
from pathlib import Path

# Ensure project root is on the Python path when executed directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from scripts import configure_logging

from garden_engine.frost_dates import format_frost_date, season_status
from garden_engine.growing_profile import (apply_manual_overrides,
                                           build_growing_profile)
from garden_engine.hardiness_zone import InvalidOverride, get_zone_description


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Build a growing profile for a coordinate")
    parser.add_argument("latitude", type=float)
    parser.add_argument("longitude", type=float)
    parser.add_argument("--year", type=int, help="frost date year (default: current year)")
    parser.add_argument("--zone", help="override the hardiness zone, e.g. 7a")
    parser.add_argument("--spring", type=date.fromisoformat, help="override last spring frost (YYYY-MM-DD)")
    parser.add_argument("--fall", type=date.fromisoformat, help="override first fall frost (YYYY-MM-DD)")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        profile = build_growing_profile(args.latitude, args.longitude, year=args.year)
        if args.zone or args.spring or args.fall:
            profile = apply_manual_overrides(
                profile,
                zone=args.zone,
                last_spring_frost=args.spring,
                first_fall_frost=args.fall,
            )
    except InvalidOverride as exc:
        parser.error(f"invalid override: {exc}")
    except ValueError as exc:
        parser.error(str(exc))

    payload = profile.as_dict()
    payload["zone_description"] = get_zone_description(profile.zone)
    payload["last_spring_frost_display"] = format_frost_date(profile.last_spring_frost)
    payload["first_fall_frost_display"] = format_frost_date(profile.first_fall_frost)
    payload["season_status"] = season_status(profile)
    print(json.dumps(payload, indent=2))


if __name__ == "__main__":  # pragma: no cover
    main()
