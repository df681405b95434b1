"""Immutable access to the zone and crop reference tables.

The tables are read once per process through :func:`get_zone_tables` and
:func:`get_crop_tables`. Engine functions accept a ``tables=``/``crops=``
argument so callers and tests can pass alternate data sources built with
:meth:`ZoneTables.from_dict` and :meth:`CropTables.from_dict`.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Dict, Mapping

from .crop_data import CropGrowingInfo, parse_crops
from .utils import clear_dataset_cache, load_dataset

# Mapping of logical keys to dataset file names. Entries can be replaced to
# point the engine at another copy of a table.
REFERENCE_FILES: dict[str, str] = {
    "growing_zones": "growing_zones.json",
    "zone_temperatures": "hardiness_zone_temperatures.json",
    "crop_growing_data": "crop_growing_data.json",
    "perennial_harvest_months": "perennial_harvest_months.yaml",
    "geohash_regions": "geohash_regions.json",
}

__all__ = [
    "REFERENCE_FILES",
    "LatitudeBand",
    "ZoneFrostData",
    "TropicalSeason",
    "ZoneTables",
    "CropTables",
    "get_reference_dataset",
    "get_zone_tables",
    "get_crop_tables",
    "refresh_reference_data",
]


@dataclass(slots=True, frozen=True)
class LatitudeBand:
    """Absolute latitude range ``[min_lat, max_lat)`` with its default zone."""

    min_lat: float
    max_lat: float
    default_zone: str
    description: str = ""
    is_tropical: bool = False

    def contains(self, abs_lat: float) -> bool:
        return self.min_lat <= abs_lat < self.max_lat


@dataclass(slots=True, frozen=True)
class ZoneFrostData:
    """Frost calendar of a zone as ``MM-DD`` strings; ``None`` when frost free."""

    last_spring_frost: str | None
    first_fall_frost: str | None
    growing_season_days: int

    @property
    def frost_free(self) -> bool:
        return not self.last_spring_frost or not self.first_fall_frost


@dataclass(slots=True, frozen=True)
class TropicalSeason:
    wet_season_start: int
    wet_season_end: int
    description: str = ""


@dataclass(slots=True, frozen=True)
class ZoneTables:
    """Zone lookup tables: geohash prefixes, latitude bands and frost data."""

    geohash_zones: Mapping[str, Mapping[str, str]]
    latitude_bands: tuple[LatitudeBand, ...]
    zone_data: Mapping[str, ZoneFrostData]
    tropical_seasons: Mapping[str, TropicalSeason]
    zone_temperatures: Mapping[str, tuple[int, int]]

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        temperatures: Mapping[str, Any] | None = None,
    ) -> "ZoneTables":
        geohash_zones = {
            str(k).lower(): MappingProxyType(dict(v))
            for k, v in (data.get("geohash_zones") or {}).items()
            if isinstance(v, Mapping) and v.get("zone")
        }
        bands = tuple(
            LatitudeBand(
                min_lat=float(b["min_lat"]),
                max_lat=float(b["max_lat"]),
                default_zone=str(b["default_zone"]),
                description=str(b.get("description", "")),
                is_tropical=bool(b.get("is_tropical", False)),
            )
            for b in data.get("latitude_zones") or ()
        )
        zone_data = {
            str(k): ZoneFrostData(
                last_spring_frost=v.get("last_spring_frost"),
                first_fall_frost=v.get("first_fall_frost"),
                growing_season_days=int(v.get("growing_season_days", 0)),
            )
            for k, v in (data.get("zone_data") or {}).items()
            if isinstance(v, Mapping)
        }
        seasons = {
            str(k): TropicalSeason(
                wet_season_start=int(v["wet_season_start"]),
                wet_season_end=int(v["wet_season_end"]),
                description=str(v.get("description", "")),
            )
            for k, v in (data.get("tropical_seasons") or {}).items()
            if isinstance(v, Mapping)
        }
        temps: Dict[str, tuple[int, int]] = {}
        for zone, value in (temperatures or {}).items():
            if isinstance(value, (list, tuple)) and len(value) == 2:
                temps[str(zone)] = (int(value[0]), int(value[1]))
        return cls(
            geohash_zones=MappingProxyType(geohash_zones),
            latitude_bands=bands,
            zone_data=MappingProxyType(zone_data),
            tropical_seasons=MappingProxyType(seasons),
            zone_temperatures=MappingProxyType(temps),
        )


@dataclass(slots=True, frozen=True)
class CropTables:
    """Parsed crop metadata with the popular and non-growing id lists."""

    crops: Mapping[str, CropGrowingInfo]
    popular_crops: tuple[str, ...]
    non_growing_items: frozenset[str]
    perennial_harvest_months: Mapping[str, int]

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        harvest_months: Mapping[str, Any] | None = None,
    ) -> "CropTables":
        months = {
            str(k): int(v)
            for k, v in (harvest_months or {}).items()
            if isinstance(v, int) and 1 <= v <= 12
        }
        return cls(
            crops=MappingProxyType(parse_crops(data.get("crops") or {})),
            popular_crops=tuple(str(c) for c in data.get("popular_crops") or ()),
            non_growing_items=frozenset(str(c) for c in data.get("non_growing_items") or ()),
            perennial_harvest_months=MappingProxyType(months),
        )

    def get(self, crop_id: str) -> CropGrowingInfo | None:
        return self.crops.get(crop_id)

    def is_growable(self, crop_id: str) -> bool:
        return crop_id in self.crops and crop_id not in self.non_growing_items


def get_reference_dataset(name: str) -> Dict[str, Any]:
    """Return the raw dataset registered under ``name`` in REFERENCE_FILES."""

    filename = REFERENCE_FILES.get(name)
    if filename is None:
        return {}
    data = load_dataset(filename)
    return data if isinstance(data, dict) else {}


@lru_cache(maxsize=None)
def get_zone_tables() -> ZoneTables:
    """Return the bundled zone tables, loaded once."""

    return ZoneTables.from_dict(
        get_reference_dataset("growing_zones"),
        get_reference_dataset("zone_temperatures"),
    )


@lru_cache(maxsize=None)
def get_crop_tables() -> CropTables:
    """Return the bundled crop tables, loaded once."""

    return CropTables.from_dict(
        get_reference_dataset("crop_growing_data"),
        get_reference_dataset("perennial_harvest_months"),
    )


def refresh_reference_data() -> None:
    """Clear cached tables so they are reloaded on next access."""

    get_zone_tables.cache_clear()
    get_crop_tables.cache_clear()
    clear_dataset_cache()
