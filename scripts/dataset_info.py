#!/usr/bin/env python3
"""List, search or dump the bundled reference datasets."""

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

from garden_engine.utils import dataset_file, list_dataset_files, load_dataset


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Dataset discovery utilities")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    list_parser = sub.add_parser("list", help="list available dataset files")
    list_parser.add_argument(
        "--paths",
        action="store_true",
        help="include the resolved file path of each dataset",
    )

    search_parser = sub.add_parser("search", help="search dataset names")
    search_parser.add_argument("term", help="search term")

    show_parser = sub.add_parser("show", help="print a merged dataset as JSON")
    show_parser.add_argument("name", help="dataset file name, e.g. growing_zones.json")

    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.command == "list":
        for name in list_dataset_files():
            print(f"{name}: {dataset_file(name)}" if args.paths else name)
        return

    if args.command == "search":
        term = args.term.lower()
        for name in list_dataset_files():
            if term in name.lower():
                print(name)
        return

    if args.command == "show":
        if args.name not in list_dataset_files():
            parser.error(f"unknown dataset {args.name!r}")
        print(json.dumps(load_dataset(args.name), indent=2, sort_keys=True))


if __name__ == "__main__":  # pragma: no cover
    main()
