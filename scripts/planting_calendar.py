#!/usr/bin/env python3
"""Print what to plant and harvest in a month at a location."""

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

from garden_engine.growing_profile import build_growing_profile
from garden_engine.planting_calendar import calendar_df, get_monthly_calendar


def main(argv: list[str] | None = None) -> None:
    today = date.today()
    parser = argparse.ArgumentParser(description="Monthly planting calendar")
    parser.add_argument("latitude", type=float)
    parser.add_argument("longitude", type=float)
    parser.add_argument("--month", type=int, default=today.month, help="calendar month 1-12")
    parser.add_argument("--year", type=int, default=today.year, help="calendar year")
    parser.add_argument("--all-crops", action="store_true", help="include every crop, not only popular ones")
    parser.add_argument("--format", choices=("json", "table"), default="json", help="output format")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        profile = build_growing_profile(args.latitude, args.longitude, year=args.year)
        cal = get_monthly_calendar(profile, args.month, args.year, popular_only=not args.all_crops)
    except ValueError as exc:
        parser.error(str(exc))

    if args.format == "json":
        payload = cal.as_dict()
        payload["zone"] = profile.zone
        print(json.dumps(payload, indent=2))
        return

    df = calendar_df(cal)
    print(f"Zone {profile.zone} - {date(args.year, args.month, 1):%B %Y}")
    if df.empty:
        print("Nothing to plant or harvest this month")
        return
    df["start_date"] = df["start_date"].dt.strftime("%Y-%m-%d")
    df["end_date"] = df["end_date"].dt.strftime("%Y-%m-%d")
    print(df[["category", "crop_name", "start_date", "end_date"]].to_string(index=False))


if __name__ == "__main__":  # pragma: no cover
    main()
