"""Central defaults used across the garden engine."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict

from .utils import lazy_dataset

DEFAULTS_FILE = "engine_defaults.json"

GEOHASH_ALPHABET = "0123456789bcdefghjkmnpqrstuvwxyz"
BYTES8_LENGTH = 8

_DEFAULTS_FALLBACK: dict[str, Any] = {
    "geohash_precision": 6,
    "tropic_latitude": 23.5,
    "fallback_last_spring_frost": "04-15",
    "fallback_first_fall_frost": "10-15",
    "tropical_zone": "13a",
    "tropical_zone_max_latitude": 10.0,
    "polar_zone": "2a",
    "polar_zone_min_latitude": 60.0,
    "temperate_zone": "6a",
    "default_latitude": 39.0,
    "default_longitude": -77.0,
    "default_harvest_month": 7,
}

_defaults = lazy_dataset(DEFAULTS_FILE)


@dataclass(slots=True, frozen=True)
class EngineDefaults:
    """Tunable constants for zone fallback and frost calculations."""

    geohash_precision: int
    tropic_latitude: float
    fallback_last_spring_frost: str
    fallback_first_fall_frost: str
    tropical_zone: str
    tropical_zone_max_latitude: float
    polar_zone: str
    polar_zone_min_latitude: float
    temperate_zone: str
    default_latitude: float
    default_longitude: float
    default_harvest_month: int

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_engine_defaults() -> EngineDefaults:
    """Return :class:`EngineDefaults` with dataset values over the fallbacks."""

    data = _defaults()
    values = dict(_DEFAULTS_FALLBACK)
    if isinstance(data, dict):
        values.update({k: v for k, v in data.items() if k in values})
    return EngineDefaults(
        geohash_precision=int(values["geohash_precision"]),
        tropic_latitude=float(values["tropic_latitude"]),
        fallback_last_spring_frost=str(values["fallback_last_spring_frost"]),
        fallback_first_fall_frost=str(values["fallback_first_fall_frost"]),
        tropical_zone=str(values["tropical_zone"]),
        tropical_zone_max_latitude=float(values["tropical_zone_max_latitude"]),
        polar_zone=str(values["polar_zone"]),
        polar_zone_min_latitude=float(values["polar_zone_min_latitude"]),
        temperate_zone=str(values["temperate_zone"]),
        default_latitude=float(values["default_latitude"]),
        default_longitude=float(values["default_longitude"]),
        default_harvest_month=int(values["default_harvest_month"]),
    )


__all__ = [
    "GEOHASH_ALPHABET",
    "BYTES8_LENGTH",
    "DEFAULTS_FILE",
    "EngineDefaults",
    "load_engine_defaults",
]
