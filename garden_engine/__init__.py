"""Convenient access to garden engine functionality."""

from __future__ import annotations

from importlib import import_module

from . import (crop_data, frost_dates, geohash, growing_profile, hardiness_zone,
               planting_calendar, planting_schedule, reference_data, utils)
from .frost_dates import *  # noqa: F401,F403
from .geohash import *  # noqa: F401,F403
from .growing_profile import *  # noqa: F401,F403
from .hardiness_zone import *  # noqa: F401,F403
from .planting_calendar import *  # noqa: F401,F403
from .planting_schedule import *  # noqa: F401,F403
from .reference_data import (CropTables, ZoneTables, get_crop_tables,
                             get_zone_tables, refresh_reference_data)
from .crop_data import CropCategory, CropGrowingInfo

__version__ = "0.1.0"

__all__ = sorted(
    set(frost_dates.__all__)
    | set(geohash.__all__)
    | set(growing_profile.__all__)
    | set(hardiness_zone.__all__)
    | set(planting_calendar.__all__)
    | set(planting_schedule.__all__)
    | {
        "CropTables",
        "ZoneTables",
        "get_crop_tables",
        "get_zone_tables",
        "refresh_reference_data",
        "CropCategory",
        "CropGrowingInfo",
    }
)

# Modules needing aiohttp or jsonschema are imported on first access.
_LAZY_MODULES = {"geocoding", "validators"}


def __getattr__(name: str):
    if name in _LAZY_MODULES:
        module = import_module(f".{name}", __name__)
        globals()[name] = module
        return module
    raise AttributeError(f"module 'garden_engine' has no attribute {name!r}")
