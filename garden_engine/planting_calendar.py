"""Monthly planting calendars built from crop timelines."""
from __future__ import annotations

import calendar as _calendar
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterable, List

from .growing_profile import GrowingProfile
from .planting_schedule import PlantingAction, PlantingEvent, get_crop_timeline
from .reference_data import CropTables, get_crop_tables

__all__ = [
    "MonthlyCalendar",
    "month_bounds",
    "get_monthly_calendar",
    "get_year_calendar",
    "get_crops_to_plant_this_month",
    "get_crops_to_harvest_this_month",
    "calendar_df",
]

_BUCKETS = {
    PlantingAction.START_INDOORS: "start_indoors",
    PlantingAction.DIRECT_SOW: "direct_sow",
    PlantingAction.TRANSPLANT: "transplant",
    PlantingAction.HARVEST: "harvest",
}


@dataclass(slots=True)
class MonthlyCalendar:
    """Events touching one calendar month, grouped by action."""

    month: int
    year: int
    start_indoors: List[PlantingEvent] = field(default_factory=list)
    direct_sow: List[PlantingEvent] = field(default_factory=list)
    transplant: List[PlantingEvent] = field(default_factory=list)
    harvest: List[PlantingEvent] = field(default_factory=list)

    def bucket(self, action: PlantingAction) -> List[PlantingEvent]:
        return getattr(self, _BUCKETS[action])

    def planting_events(self) -> List[PlantingEvent]:
        return [*self.start_indoors, *self.direct_sow, *self.transplant]

    def is_empty(self) -> bool:
        return not (self.start_indoors or self.direct_sow or self.transplant or self.harvest)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "month": self.month,
            "year": self.year,
            **{name: [e.as_dict() for e in self.bucket(action)] for action, name in _BUCKETS.items()},
        }


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return the first and last day of ``month``."""
    if not 1 <= month <= 12:
        raise ValueError(f"month must be between 1 and 12, got {month}")
    return date(year, month, 1), date(year, month, _calendar.monthrange(year, month)[1])


def _dedupe_sorted(events: Iterable[PlantingEvent]) -> List[PlantingEvent]:
    seen: set[str] = set()
    unique: List[PlantingEvent] = []
    for event in events:
        if event.crop_id in seen:
            continue
        seen.add(event.crop_id)
        unique.append(event)
    unique.sort(key=lambda e: e.start_date)
    return unique


def get_monthly_calendar(
    profile: GrowingProfile,
    month: int,
    year: int,
    popular_only: bool = True,
    *,
    crops: CropTables | None = None,
) -> MonthlyCalendar:
    """Return the planting calendar for ``month`` of ``year``.

    Only popular crops are considered unless ``popular_only`` is ``False``.
    Events are kept when their date range overlaps the month; each category
    lists a crop once, ordered by start date.
    """

    first, last = month_bounds(year, month)
    tables = crops or get_crop_tables()
    crop_ids = tables.popular_crops if popular_only else tuple(tables.crops)
    result = MonthlyCalendar(month=month, year=year)

    for crop_id in crop_ids:
        if not tables.is_growable(crop_id):
            continue
        timeline = get_crop_timeline(crop_id, profile, year, crops=tables)
        if timeline.not_suitable_reason:
            continue
        for event in timeline.events:
            if event.overlaps(first, last):
                result.bucket(event.action).append(event)

    for name in _BUCKETS.values():
        setattr(result, name, _dedupe_sorted(getattr(result, name)))
    return result


def get_year_calendar(
    profile: GrowingProfile,
    year: int,
    popular_only: bool = True,
    *,
    crops: CropTables | None = None,
) -> List[MonthlyCalendar]:
    """Return twelve monthly calendars for ``year``."""
    return [
        get_monthly_calendar(profile, month, year, popular_only, crops=crops)
        for month in range(1, 13)
    ]


def get_crops_to_plant_this_month(
    profile: GrowingProfile,
    month: int | None = None,
    year: int | None = None,
    *,
    crops: CropTables | None = None,
) -> List[Dict[str, Any]]:
    """Return crops with any planting action in the month and those actions."""

    today = date.today()
    cal = get_monthly_calendar(profile, month or today.month, year or today.year, crops=crops)
    actions: Dict[str, Dict[str, Any]] = {}
    for event in cal.planting_events():
        entry = actions.setdefault(event.crop_id, {"crop_name": event.crop_name, "actions": []})
        if event.action.value not in entry["actions"]:
            entry["actions"].append(event.action.value)
    return [{"crop_id": cid, **data} for cid, data in actions.items()]


def get_crops_to_harvest_this_month(
    profile: GrowingProfile,
    month: int | None = None,
    year: int | None = None,
    *,
    crops: CropTables | None = None,
) -> List[Dict[str, Any]]:
    """Return crops whose harvest window touches the month."""

    today = date.today()
    cal = get_monthly_calendar(profile, month or today.month, year or today.year, crops=crops)
    return [
        {"crop_id": e.crop_id, "crop_name": e.crop_name, "notes": e.notes}
        for e in cal.harvest
    ]


def calendar_df(cal: MonthlyCalendar) -> "pd.DataFrame":
    """Return ``cal`` as a :class:`pandas.DataFrame` with a ``category`` column."""

    import pandas as pd

    rows = []
    for action, name in _BUCKETS.items():
        for event in cal.bucket(action):
            rows.append({"category": name, **event.as_dict()})
    if not rows:
        return pd.DataFrame(
            columns=["category", "crop_id", "crop_name", "action", "start_date", "end_date", "notes"]
        )
    df = pd.DataFrame(rows)
    df["start_date"] = pd.to_datetime(df["start_date"])
    df["end_date"] = pd.to_datetime(df["end_date"])
    return df
