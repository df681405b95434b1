"""Resolve USDA-style hardiness zones from coordinates and geohashes."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

from .constants import load_engine_defaults
from .geohash import encode
from .reference_data import ZoneTables, get_zone_tables

_LOGGER = logging.getLogger(__name__)

ZONE_PATTERN = re.compile(r"^\d{1,2}[ab]$")
_ZONE_NUMBER = re.compile(r"^(\d{1,2})")

__all__ = [
    "InvalidOverride",
    "ZoneConfidence",
    "ZoneRecord",
    "resolve_zone",
    "zone_from_latitude",
    "is_valid_zone",
    "zone_number",
    "get_min_temperature",
    "get_zone_description",
    "list_zones",
    "suitable_zones",
]


class InvalidOverride(ValueError):
    """Raised when a manual zone or frost date override is malformed."""


class ZoneConfidence(str, Enum):
    """How directly a zone was determined."""

    PRECISE = "precise"
    ESTIMATED = "estimated"
    MANUAL = "manual"

    @property
    def rank(self) -> int:
        return {"estimated": 0, "precise": 1, "manual": 2}[self.value]


@dataclass(slots=True, frozen=True)
class ZoneRecord:
    zone: str
    confidence: ZoneConfidence
    source: str

    def as_dict(self) -> Dict[str, Any]:
        return {"zone": self.zone, "confidence": self.confidence.value, "source": self.source}


def is_valid_zone(zone: str) -> bool:
    """Return ``True`` if ``zone`` looks like ``"7a"`` or ``"10b"``."""
    return bool(ZONE_PATTERN.match(str(zone)))


def zone_number(zone: str) -> int:
    """Return the numeric part of ``zone`` or ``0`` when it has none."""
    match = _ZONE_NUMBER.match(str(zone).strip())
    return int(match.group(1)) if match else 0


def zone_from_latitude(latitude: float, tables: ZoneTables | None = None) -> ZoneRecord:
    """Estimate a zone from latitude alone using the band table."""

    tables = tables or get_zone_tables()
    defaults = load_engine_defaults()
    abs_lat = abs(latitude)
    for band in tables.latitude_bands:
        if band.contains(abs_lat):
            return ZoneRecord(band.default_zone, ZoneConfidence.ESTIMATED, "latitude")

    _LOGGER.debug("No latitude band covers %.4f; using boundary default", latitude)
    if abs_lat < defaults.tropical_zone_max_latitude:
        zone = defaults.tropical_zone
    elif abs_lat > defaults.polar_zone_min_latitude:
        zone = defaults.polar_zone
    else:
        zone = defaults.temperate_zone
    return ZoneRecord(zone, ZoneConfidence.ESTIMATED, "default")


def resolve_zone(
    latitude: float,
    longitude: float,
    geohash: str | None = None,
    *,
    manual_zone: str | None = None,
    tables: ZoneTables | None = None,
) -> ZoneRecord:
    """Return the hardiness zone for a location.

    Lookup order: explicit ``manual_zone``, exact 3-character geohash prefix
    (``precise``), 2-character regional prefix (``estimated``), then the
    latitude bands (``estimated``). Every path ends in a zone.
    """

    if manual_zone is not None:
        if not is_valid_zone(manual_zone):
            raise InvalidOverride(f"invalid zone {manual_zone!r}")
        return ZoneRecord(manual_zone, ZoneConfidence.MANUAL, "manual")

    tables = tables or get_zone_tables()
    if not geohash:
        geohash = encode(latitude, longitude, load_engine_defaults().geohash_precision)
    geohash = geohash.lower()

    hit = tables.geohash_zones.get(geohash[:3])
    if hit is not None:
        return ZoneRecord(hit["zone"], ZoneConfidence.PRECISE, "geohash")

    prefix = geohash[:2]
    candidates = sorted(k for k in tables.geohash_zones if k.startswith(prefix))
    if candidates:
        _LOGGER.debug("Regional zone match for %s via %s", geohash, candidates[0])
        return ZoneRecord(
            tables.geohash_zones[candidates[0]]["zone"], ZoneConfidence.ESTIMATED, "region"
        )

    return zone_from_latitude(latitude, tables)


def get_min_temperature(zone: str, tables: ZoneTables | None = None) -> float | None:
    """Return the minimum winter temperature (°F) bounding ``zone``."""
    temps = (tables or get_zone_tables()).zone_temperatures.get(str(zone))
    return float(temps[0]) if temps else None


def get_zone_description(zone: str, tables: ZoneTables | None = None) -> str:
    """Return a label such as ``"Zone 7a: 0 to 5°F"``."""
    temps = (tables or get_zone_tables()).zone_temperatures.get(str(zone))
    text = f"{temps[0]} to {temps[1]}°F" if temps else "Unknown"
    return f"Zone {zone}: {text}"


def list_zones(tables: ZoneTables | None = None) -> list[Dict[str, str]]:
    """Return zones 1a through 13b with their descriptions."""
    zones: list[Dict[str, str]] = []
    for num in range(1, 14):
        for half in ("a", "b"):
            zone = f"{num}{half}"
            zones.append({"zone": zone, "description": get_zone_description(zone, tables)})
    return zones


def suitable_zones(min_temp_f: float, tables: ZoneTables | None = None) -> list[str]:
    """Return zones whose minimum temperature is at least ``min_temp_f``."""
    temps = (tables or get_zone_tables()).zone_temperatures
    zones = [z for z, (low, _high) in temps.items() if low >= min_temp_f]
    zones.sort(key=lambda z: temps[z][0])
    return zones
