#!/usr/bin/env python3
"""Encode and decode geohashes and bytes8 location tokens."""

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

from garden_engine.geocoding import approximate_location
from garden_engine.geohash import (decode_bounds, encode, from_bytes8_hex,
                                   geohash_prefixes, to_bytes8_hex)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Geohash utilities")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    enc = sub.add_parser("encode", help="encode a coordinate")
    enc.add_argument("latitude", type=float)
    enc.add_argument("longitude", type=float)
    enc.add_argument("--precision", type=int, default=6, help="geohash length")

    dec = sub.add_parser("decode", help="decode a geohash to its cell")
    dec.add_argument("geohash")

    b8 = sub.add_parser("bytes8", help="print the bytes8 hex token of a geohash")
    b8.add_argument("geohash")

    fb8 = sub.add_parser("from-bytes8", help="decode a bytes8 hex token")
    fb8.add_argument("value")

    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        if args.command == "encode":
            print(encode(args.latitude, args.longitude, args.precision))
        elif args.command == "decode":
            bounds = decode_bounds(args.geohash)
            latitude, longitude = bounds.center
            payload = {
                "geohash": args.geohash.lower(),
                "latitude": latitude,
                "longitude": longitude,
                "bounds": bounds.as_dict(),
                "prefixes": geohash_prefixes(args.geohash.lower()),
            }
            print(json.dumps(payload, indent=2))
        elif args.command == "bytes8":
            print(to_bytes8_hex(args.geohash))
        else:
            token = from_bytes8_hex(args.value)
            payload = token.as_dict()
            payload["approximate_location"] = approximate_location(token.geohash)
            print(json.dumps(payload, indent=2))
    except ValueError as exc:
        # InvalidGeohash and coordinate range errors are both ValueErrors
        parser.error(str(exc))


if __name__ == "__main__":  # pragma: no cover
    main()
