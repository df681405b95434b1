"""Build the :class:`GrowingProfile` consumed by the planting scheduler."""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Any, Dict

from .constants import load_engine_defaults
from .frost_dates import add_years, get_frost_dates
from .geohash import encode, from_bytes8_hex, validate_coordinates
from .hardiness_zone import InvalidOverride, ZoneConfidence, is_valid_zone, resolve_zone
from .reference_data import TropicalSeason, ZoneTables, get_zone_tables

_LOGGER = logging.getLogger(__name__)

__all__ = [
    "GrowingProfile",
    "is_tropical_latitude",
    "get_tropical_season",
    "build_growing_profile",
    "profile_from_bytes8_hex",
    "default_growing_profile",
    "apply_manual_overrides",
    "profile_for_year",
]

_NORTHERN_WET = TropicalSeason(6, 10, "Wet season June-October")
_SOUTHERN_WET = TropicalSeason(11, 3, "Wet season November-March")


@dataclass(slots=True, frozen=True)
class GrowingProfile:
    """Zone, frost calendar and climate flags for one location and year."""

    zone: str
    last_spring_frost: date
    first_fall_frost: date
    growing_season_days: int
    is_tropical: bool
    is_southern_hemisphere: bool
    confidence: ZoneConfidence
    latitude: float
    longitude: float
    wet_season_start: int | None = None
    wet_season_end: int | None = None
    geohash: str | None = None

    @property
    def year(self) -> int:
        return self.last_spring_frost.year

    def as_dict(self) -> Dict[str, Any]:
        return {
            "zone": self.zone,
            "last_spring_frost": self.last_spring_frost.isoformat(),
            "first_fall_frost": self.first_fall_frost.isoformat(),
            "growing_season_days": self.growing_season_days,
            "is_tropical": self.is_tropical,
            "is_southern_hemisphere": self.is_southern_hemisphere,
            "wet_season_start": self.wet_season_start,
            "wet_season_end": self.wet_season_end,
            "confidence": self.confidence.value,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "geohash": self.geohash,
        }


def is_tropical_latitude(latitude: float) -> bool:
    """Return ``True`` between the tropics of Cancer and Capricorn."""
    return abs(latitude) <= load_engine_defaults().tropic_latitude


def get_tropical_season(latitude: float, tables: ZoneTables | None = None) -> TropicalSeason:
    """Return wet season months for the hemisphere of ``latitude``."""
    seasons = (tables or get_zone_tables()).tropical_seasons
    if latitude >= 0:
        return seasons.get("northern_tropics", _NORTHERN_WET)
    return seasons.get("southern_tropics", _SOUTHERN_WET)


def build_growing_profile(
    latitude: float,
    longitude: float,
    geohash: str | None = None,
    year: int | None = None,
    *,
    tables: ZoneTables | None = None,
) -> GrowingProfile:
    """Return the growing profile for a coordinate.

    Parameters
    ----------
    latitude, longitude : float
        Location in decimal degrees.
    geohash : str, optional
        Precomputed geohash; encoded at the default precision when omitted.
    year : int, optional
        Calendar year for the frost dates, defaults to the current year.
    tables : ZoneTables, optional
        Alternate zone tables.
    """

    validate_coordinates(latitude, longitude)
    tables = tables or get_zone_tables()
    year = year or date.today().year
    if not geohash:
        geohash = encode(latitude, longitude, load_engine_defaults().geohash_precision)

    southern = latitude < 0
    tropical = is_tropical_latitude(latitude)
    record = resolve_zone(latitude, longitude, geohash, tables=tables)
    window = get_frost_dates(record.zone, year, southern, tables=tables)

    wet_start = wet_end = None
    if tropical:
        season = get_tropical_season(latitude, tables)
        wet_start, wet_end = season.wet_season_start, season.wet_season_end

    return GrowingProfile(
        zone=record.zone,
        last_spring_frost=window.last_spring_frost,
        first_fall_frost=window.first_fall_frost,
        growing_season_days=window.season_days,
        is_tropical=tropical,
        is_southern_hemisphere=southern,
        confidence=record.confidence,
        latitude=latitude,
        longitude=longitude,
        wet_season_start=wet_start,
        wet_season_end=wet_end,
        geohash=geohash,
    )


def profile_from_bytes8_hex(
    value: str, year: int | None = None, *, tables: ZoneTables | None = None
) -> GrowingProfile:
    """Return the growing profile for a stored bytes8 location token."""
    token = from_bytes8_hex(value)
    return build_growing_profile(
        token.latitude, token.longitude, token.geohash, year, tables=tables
    )


def default_growing_profile(
    year: int | None = None, *, tables: ZoneTables | None = None
) -> GrowingProfile:
    """Return the profile used when no location is known."""
    defaults = load_engine_defaults()
    profile = build_growing_profile(
        defaults.default_latitude, defaults.default_longitude, year=year, tables=tables
    )
    return replace(profile, confidence=ZoneConfidence.ESTIMATED)


def apply_manual_overrides(
    profile: GrowingProfile,
    *,
    zone: str | None = None,
    last_spring_frost: date | None = None,
    first_fall_frost: date | None = None,
    tables: ZoneTables | None = None,
) -> GrowingProfile:
    """Return ``profile`` with user supplied zone and/or frost dates.

    A new zone recomputes whichever frost dates were not given. Explicit dates
    recompute the season length. The result always has ``manual`` confidence.
    Raises :class:`InvalidOverride` for a malformed zone or when the spring
    frost does not fall before the fall frost.
    """

    changes: Dict[str, Any] = {"confidence": ZoneConfidence.MANUAL}

    if zone is not None:
        if not is_valid_zone(zone):
            raise InvalidOverride(f"invalid zone {zone!r}")
        changes["zone"] = zone
        if last_spring_frost is None or first_fall_frost is None:
            window = get_frost_dates(
                zone, profile.year, profile.is_southern_hemisphere, tables=tables
            )
            changes["last_spring_frost"] = window.last_spring_frost
            changes["first_fall_frost"] = window.first_fall_frost
            changes["growing_season_days"] = window.season_days

    if last_spring_frost is not None:
        changes["last_spring_frost"] = last_spring_frost
    if first_fall_frost is not None:
        changes["first_fall_frost"] = first_fall_frost

    spring = changes.get("last_spring_frost", profile.last_spring_frost)
    fall = changes.get("first_fall_frost", profile.first_fall_frost)
    if spring >= fall:
        raise InvalidOverride(
            f"last spring frost {spring.isoformat()} must precede first fall frost {fall.isoformat()}"
        )
    if last_spring_frost is not None or first_fall_frost is not None:
        changes["growing_season_days"] = (fall - spring).days

    _LOGGER.debug("Applying manual overrides %s", sorted(changes))
    return replace(profile, **changes)


def profile_for_year(profile: GrowingProfile, year: int) -> GrowingProfile:
    """Return ``profile`` with its frost calendar moved to ``year``.

    Frost dates keep their month and day, so manual overrides carry over. A
    southern season that ends in the following year still does.
    """

    if year == profile.year:
        return profile
    offset = year - profile.year
    spring = add_years(profile.last_spring_frost, offset)
    fall = add_years(profile.first_fall_frost, offset)
    days = profile.growing_season_days
    # frost-free profiles report a fixed season length
    if days == (profile.first_fall_frost - profile.last_spring_frost).days:
        days = (fall - spring).days
    return replace(profile, last_spring_frost=spring, first_fall_frost=fall, growing_season_days=days)
