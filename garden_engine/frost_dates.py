"""Frost calendar calculations for hardiness zones.

Zones without frost get a full-year window (Jan 1 to Dec 31, 365 days) so
downstream date arithmetic never has to deal with missing dates. Southern
hemisphere windows rotate each month by six and roll the fall frost into the
next year when needed, keeping the window forward in time.
"""
from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import TYPE_CHECKING, Any, Dict

from .constants import load_engine_defaults
from .reference_data import ZoneFrostData, ZoneTables, get_zone_tables
from .utils import parse_month_day

if TYPE_CHECKING:  # pragma: no cover
    from .growing_profile import GrowingProfile

_LOGGER = logging.getLogger(__name__)

__all__ = [
    "FrostWindow",
    "get_frost_dates",
    "get_zone_frost_data",
    "shift_month",
    "add_days",
    "add_weeks",
    "add_years",
    "calculate_planting_date",
    "is_in_growing_season",
    "season_status",
    "format_frost_date",
]


@dataclass(slots=True, frozen=True)
class FrostWindow:
    last_spring_frost: date
    first_fall_frost: date
    season_days: int
    frost_free: bool = False

    def as_dict(self) -> Dict[str, Any]:
        return {
            "last_spring_frost": self.last_spring_frost.isoformat(),
            "first_fall_frost": self.first_fall_frost.isoformat(),
            "season_days": self.season_days,
            "frost_free": self.frost_free,
        }


def shift_month(month: int, months: int = 6) -> int:
    """Return ``month`` moved forward by ``months`` within 1-12."""
    return (month - 1 + months) % 12 + 1


def add_days(day: date, days: int) -> date:
    return day + timedelta(days=days)


def add_weeks(day: date, weeks: int) -> date:
    return day + timedelta(weeks=weeks)


def add_years(day: date, years: int) -> date:
    """Return ``day`` moved by whole years; Feb 29 becomes Feb 28 when needed."""
    return _clamped_date(day.year + years, day.month, day.day)


def calculate_planting_date(frost_date: date, weeks: int, before: bool = True) -> date:
    """Return the date ``weeks`` before (or after) ``frost_date``."""
    return add_weeks(frost_date, -weeks if before else weeks)


def _clamped_date(year: int, month: int, day: int) -> date:
    # Rotated months can lack the source day (08-31 becomes Feb 31).
    return date(year, month, min(day, calendar.monthrange(year, month)[1]))


def get_zone_frost_data(zone: str, tables: ZoneTables | None = None) -> ZoneFrostData:
    """Return frost data for ``zone`` following the fallback chain.

    Exact id first, then the zone number with ``a`` and ``b``, then the
    configured fallback dates.
    """

    tables = tables or get_zone_tables()
    data = tables.zone_data.get(zone)
    if data is None:
        number = str(zone).strip().rstrip("abAB")
        data = tables.zone_data.get(f"{number}a") or tables.zone_data.get(f"{number}b")
    if data is None:
        defaults = load_engine_defaults()
        _LOGGER.debug("No frost data for zone %s; using fallback dates", zone)
        data = ZoneFrostData(
            defaults.fallback_last_spring_frost,
            defaults.fallback_first_fall_frost,
            180,
        )
    return data


def get_frost_dates(
    zone: str,
    year: int,
    is_southern_hemisphere: bool = False,
    *,
    tables: ZoneTables | None = None,
) -> FrostWindow:
    """Return the frost window of ``zone`` for ``year``.

    ``season_days`` is always the day difference between the returned dates.
    """

    data = get_zone_frost_data(zone, tables)
    if data.frost_free:
        return FrostWindow(date(year, 1, 1), date(year, 12, 31), 365, frost_free=True)

    spring_month, spring_day = parse_month_day(data.last_spring_frost)
    fall_month, fall_day = parse_month_day(data.first_fall_frost)

    if is_southern_hemisphere:
        spring_month = shift_month(spring_month)
        fall_month = shift_month(fall_month)

    last_spring = _clamped_date(year, spring_month, spring_day)
    first_fall = _clamped_date(year, fall_month, fall_day)
    if is_southern_hemisphere and first_fall < last_spring:
        first_fall = _clamped_date(year + 1, fall_month, fall_day)

    return FrostWindow(last_spring, first_fall, (first_fall - last_spring).days)


def is_in_growing_season(day: date, profile: "GrowingProfile") -> bool:
    """Return ``True`` if ``day`` falls between the profile's frost dates."""
    if profile.is_tropical:
        return True
    return profile.last_spring_frost <= day <= profile.first_fall_frost


def season_status(profile: "GrowingProfile", today: date | None = None) -> str:
    """Return ``pre-season``, ``growing``, ``post-season`` or ``year-round``."""
    if profile.is_tropical:
        return "year-round"
    today = today or date.today()
    if today < profile.last_spring_frost:
        return "pre-season"
    if today > profile.first_fall_frost:
        return "post-season"
    return "growing"


def format_frost_date(day: date) -> str:
    """Return ``day`` as ``"April 1"``."""
    return f"{calendar.month_name[day.month]} {day.day}"
