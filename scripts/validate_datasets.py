#!/usr/bin/env python3
"""Validate the bundled datasets against their JSON schemas."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Ensure project root is on the Python path when executed directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from scripts import configure_logging

from garden_engine.validators import DATASET_SCHEMAS, validate_datasets


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Validate dataset files")
    parser.add_argument("datasets", nargs="*", help="dataset names (default: all)")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    unknown = [name for name in args.datasets if name not in DATASET_SCHEMAS]
    if unknown:
        parser.error(f"no schema for: {', '.join(unknown)}")

    bad = validate_datasets(args.datasets or None)
    if bad:
        print("Invalid datasets:")
        for name, issues in bad.items():
            for issue in issues:
                print(f" - {name}: {issue}")
        sys.exit(1)
    print("All datasets valid")


if __name__ == "__main__":  # pragma: no cover
    main()
