"""JSON Schema validation for the bundled datasets."""
from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator

from .crop_data import parse_crops
from .utils import get_data_dir, load_data, load_dataset, parse_month_day

# Dataset file -> schema file under ``data/schema``.
DATASET_SCHEMAS: dict[str, str] = {
    "growing_zones.json": "growing_zones.schema.json",
    "hardiness_zone_temperatures.json": "hardiness_zone_temperatures.schema.json",
    "crop_growing_data.json": "crop_growing_data.schema.json",
    "perennial_harvest_months.yaml": "perennial_harvest_months.schema.json",
    "geohash_regions.json": "geohash_regions.schema.json",
    "engine_defaults.json": "engine_defaults.schema.json",
}

__all__ = [
    "DATASET_SCHEMAS",
    "schema_dir",
    "load_schema",
    "validate_payload",
    "validate_dataset",
    "validate_datasets",
]


def schema_dir() -> Path:
    return get_data_dir() / "schema"


def load_schema(name: str) -> dict[str, Any]:
    """Return the schema ``name`` from the schema directory."""
    return load_data(schema_dir() / name)


def validate_payload(payload: Any, schema: Mapping[str, Any]) -> list[str]:
    """Return human-readable schema errors for ``payload`` (empty if valid)."""

    validator = Draft202012Validator(schema)
    issues: list[str] = []
    for err in sorted(validator.iter_errors(payload), key=lambda e: list(e.absolute_path)):
        location = ".".join(str(part) for part in err.absolute_path) or "<root>"
        issues.append(f"{location}: {err.message}")
    return issues


def _semantic_errors(filename: str, payload: Any) -> list[str]:
    issues: list[str] = []
    if filename == "crop_growing_data.json" and isinstance(payload, Mapping):
        try:
            parse_crops(payload.get("crops") or {})
        except (ValueError, KeyError, TypeError) as exc:
            issues.append(f"crops: {exc}")
        crops = payload.get("crops") or {}
        for crop_id in payload.get("popular_crops") or ():
            if crop_id not in crops:
                issues.append(f"popular_crops: unknown crop {crop_id!r}")
    elif filename == "growing_zones.json" and isinstance(payload, Mapping):
        for zone, data in (payload.get("zone_data") or {}).items():
            spring = data.get("last_spring_frost")
            fall = data.get("first_fall_frost")
            if not spring or not fall:
                continue
            try:
                if parse_month_day(spring) >= parse_month_day(fall):
                    issues.append(f"zone_data.{zone}: last spring frost must precede first fall frost")
            except ValueError as exc:
                issues.append(f"zone_data.{zone}: {exc}")
    return issues


def validate_dataset(filename: str) -> list[str]:
    """Return schema and consistency errors for dataset ``filename``."""

    schema_name = DATASET_SCHEMAS.get(filename)
    if schema_name is None:
        raise KeyError(f"no schema registered for {filename}")
    payload = load_dataset(filename)
    issues = validate_payload(payload, load_schema(schema_name))
    if not issues:
        issues = _semantic_errors(filename, payload)
    return issues


def validate_datasets(filenames: list[str] | None = None) -> dict[str, list[str]]:
    """Validate several datasets and return only those with errors."""

    results: dict[str, list[str]] = {}
    for name in filenames or sorted(DATASET_SCHEMAS):
        issues = validate_dataset(name)
        if issues:
            results[name] = issues
    return results
