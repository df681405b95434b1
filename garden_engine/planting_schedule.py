"""Per-crop planting and harvest timelines.

Each crop category has its own handler:

* ``indoor`` crops are available all year.
* ``fall_planted`` crops (garlic and similar) are sown ahead of the first fall
  frost and harvested the following summer.
* ``perennial_fruit`` crops are already in the ground, so only a harvest window
  is produced.
* ``annual`` crops combine start-indoors, direct-sow, transplant and fall-sow
  windows anchored on the frost dates, plus a harvest window derived from the
  first planting event.

A harvest window is only produced when it can be anchored on a planting date.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Callable, Dict, List

from .constants import load_engine_defaults
from .crop_data import CropCategory, CropGrowingInfo, SowingWindow
from .frost_dates import add_days, add_weeks, calculate_planting_date
from .growing_profile import GrowingProfile, profile_for_year
from .hardiness_zone import zone_number
from .reference_data import CropTables, get_crop_tables

_LOGGER = logging.getLogger(__name__)

CROP_NOT_FOUND = "Crop data not available"
NOT_TROPICAL = "Not suitable for tropical climates"

# Weeks between the end of a fall planting window and the first fall frost.
FALL_PLANTING_WEEKS = (4, 2)
# Month/day bounds of the harvest that follows a fall planting.
FALL_PLANTED_HARVEST = ((6, 15), (7, 31))

__all__ = [
    "PlantingAction",
    "PlantingEvent",
    "CropTimeline",
    "get_crop_timeline",
    "get_optimal_planting_window",
    "get_crop_growing_info",
    "is_valid_crop",
    "list_growable_crops",
    "timeline_df",
    "CROP_NOT_FOUND",
    "NOT_TROPICAL",
]


class PlantingAction(str, Enum):
    START_INDOORS = "start-indoors"
    DIRECT_SOW = "direct-sow"
    TRANSPLANT = "transplant"
    HARVEST = "harvest"

    @property
    def label(self) -> str:
        return self.value.replace("-", " ").title()

    @property
    def color(self) -> str:
        return _ACTION_COLORS[self]


_ACTION_COLORS = {
    PlantingAction.START_INDOORS: "purple",
    PlantingAction.DIRECT_SOW: "green",
    PlantingAction.TRANSPLANT: "blue",
    PlantingAction.HARVEST: "orange",
}


@dataclass(slots=True, frozen=True)
class PlantingEvent:
    crop_id: str
    crop_name: str
    action: PlantingAction
    start_date: date
    end_date: date
    notes: str | None = None

    def __post_init__(self) -> None:
        if self.start_date > self.end_date:
            raise ValueError(
                f"{self.crop_id} {self.action.value}: start {self.start_date} after end {self.end_date}"
            )

    def overlaps(self, start: date, end: date) -> bool:
        """Return ``True`` if the event intersects ``[start, end]``."""
        return self.start_date <= end and self.end_date >= start

    def as_dict(self) -> Dict[str, Any]:
        return {
            "crop_id": self.crop_id,
            "crop_name": self.crop_name,
            "action": self.action.value,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "notes": self.notes,
        }


@dataclass(slots=True, frozen=True)
class CropTimeline:
    crop_id: str
    crop_name: str
    events: tuple[PlantingEvent, ...]
    is_perennial: bool
    not_suitable_reason: str | None = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "crop_id": self.crop_id,
            "crop_name": self.crop_name,
            "events": [e.as_dict() for e in self.events],
            "is_perennial": self.is_perennial,
            "not_suitable_reason": self.not_suitable_reason,
        }


def _event(crop: CropGrowingInfo, action: PlantingAction, start: date, end: date, notes: str | None) -> PlantingEvent:
    return PlantingEvent(crop.crop_id, crop.name, action, start, end, notes)


def _indoor_events(crop: CropGrowingInfo, profile: GrowingProfile, year: int, tables: CropTables) -> List[PlantingEvent]:
    start, end = date(year, 1, 1), date(year, 12, 31)
    return [
        _event(crop, PlantingAction.START_INDOORS, start, end, "Year-round indoor growing"),
        _event(crop, PlantingAction.HARVEST, start, end, "Year-round harvest"),
    ]


def _fall_planted_events(crop: CropGrowingInfo, profile: GrowingProfile, year: int, tables: CropTables) -> List[PlantingEvent]:
    frost = profile.first_fall_frost
    early, late = FALL_PLANTING_WEEKS
    (start_m, start_d), (end_m, end_d) = FALL_PLANTED_HARVEST
    return [
        _event(
            crop,
            PlantingAction.DIRECT_SOW,
            calculate_planting_date(frost, early),
            calculate_planting_date(frost, late),
            "Fall planting for summer harvest",
        ),
        _event(
            crop,
            PlantingAction.HARVEST,
            date(year + 1, start_m, start_d),
            date(year + 1, end_m, end_d),
            "Harvest following summer",
        ),
    ]


def _perennial_fruit_events(crop: CropGrowingInfo, profile: GrowingProfile, year: int, tables: CropTables) -> List[PlantingEvent]:
    month = tables.perennial_harvest_months.get(
        crop.crop_id, load_engine_defaults().default_harvest_month
    )
    if profile.is_southern_hemisphere:
        month = (month + 5) % 12 + 1
    start = date(year, month, 1)
    notes = "Harvest when fruit is colored and fragrant" if crop.citrus else "Check daily for ripeness"
    return [
        _event(crop, PlantingAction.HARVEST, start, add_weeks(start, crop.harvest_window.duration), notes)
    ]


def _soil_note(window: SowingWindow) -> str | None:
    if window.min_soil_temp_f is None:
        return None
    return f"Soil temp: {window.min_soil_temp_f}°F minimum"


def _start_indoors_event(crop: CropGrowingInfo, frost: date) -> PlantingEvent | None:
    block = crop.start_indoors
    if block is None or block.year_round or block.weeks_before_last_frost is None:
        return None
    weeks = block.weeks_before_last_frost
    weeks_max = block.weeks_before_last_frost_max or weeks
    # the larger offset is the earlier date, so it opens the window
    early, late = max(weeks, weeks_max), min(weeks, weeks_max)
    return _event(
        crop,
        PlantingAction.START_INDOORS,
        calculate_planting_date(frost, early),
        calculate_planting_date(frost, late),
        f"Start {early}-{late} weeks before last frost",
    )


def _direct_sow_event(crop: CropGrowingInfo, frost: date) -> PlantingEvent | None:
    block = crop.direct_sow
    if block is None:
        return None
    if block.weeks_before_last_frost:
        before = block.weeks_before_last_frost
        start = calculate_planting_date(frost, before)
        end = calculate_planting_date(frost, max(0, before - 4))
    elif block.weeks_after_last_frost is not None:
        after = block.weeks_after_last_frost
        start = calculate_planting_date(frost, after, before=False)
        end = calculate_planting_date(frost, after + 4, before=False)
    else:
        start, end = frost, add_weeks(frost, 2)
    return _event(crop, PlantingAction.DIRECT_SOW, start, end, _soil_note(block))


def _transplant_event(crop: CropGrowingInfo, frost: date) -> PlantingEvent | None:
    block = crop.transplant
    if block is None:
        return None
    if block.weeks_before_last_frost:
        start = calculate_planting_date(frost, block.weeks_before_last_frost)
        end = frost
    elif block.weeks_after_last_frost is not None:
        after = block.weeks_after_last_frost
        start = calculate_planting_date(frost, after, before=False)
        end = calculate_planting_date(frost, after + 3, before=False)
    else:
        start, end = frost, add_weeks(frost, 2)
    return _event(crop, PlantingAction.TRANSPLANT, start, end, _soil_note(block))


def _fall_sow_event(crop: CropGrowingInfo, profile: GrowingProfile) -> PlantingEvent | None:
    block = crop.fall_sow
    if block is None or zone_number(profile.zone) < block.min_zone:
        return None
    early = max(block.weeks_before_first_frost, block.weeks_end)
    late = min(block.weeks_before_first_frost, block.weeks_end)
    return _event(
        crop,
        PlantingAction.DIRECT_SOW,
        calculate_planting_date(profile.first_fall_frost, early),
        calculate_planting_date(profile.first_fall_frost, late),
        block.notes or "Fall planting",
    )


def _harvest_event(crop: CropGrowingInfo, profile: GrowingProfile, events: List[PlantingEvent]) -> PlantingEvent | None:
    anchor = next((e for e in events if e.action is PlantingAction.TRANSPLANT), None)
    if anchor is None:
        anchor = next((e for e in events if e.action is PlantingAction.DIRECT_SOW), None)
    if anchor is None:
        return None

    maturity = crop.days_to_maturity
    start = add_days(anchor.start_date, maturity.min)
    end = add_weeks(start, crop.harvest_window.duration)
    if crop.frost_tolerance == "none":
        end = min(end, profile.first_fall_frost)
    if end < start:
        _LOGGER.debug(
            "%s cannot mature before the first fall frost %s", crop.crop_id, profile.first_fall_frost
        )
        return None
    return _event(
        crop,
        PlantingAction.HARVEST,
        start,
        end,
        f"{maturity.min}-{maturity.max} days from planting",
    )


def _annual_events(crop: CropGrowingInfo, profile: GrowingProfile, year: int, tables: CropTables) -> List[PlantingEvent]:
    frost = profile.last_spring_frost
    candidates = (
        _start_indoors_event(crop, frost),
        _direct_sow_event(crop, frost),
        _transplant_event(crop, frost),
        _fall_sow_event(crop, profile),
    )
    events = [e for e in candidates if e is not None]
    harvest = _harvest_event(crop, profile, events)
    if harvest is not None:
        events.append(harvest)
    return events


_HANDLERS: Dict[CropCategory, Callable[[CropGrowingInfo, GrowingProfile, int, CropTables], List[PlantingEvent]]] = {
    CropCategory.INDOOR: _indoor_events,
    CropCategory.FALL_PLANTED: _fall_planted_events,
    CropCategory.PERENNIAL_FRUIT: _perennial_fruit_events,
    CropCategory.ANNUAL: _annual_events,
}


def get_crop_timeline(
    crop_id: str,
    profile: GrowingProfile,
    year: int,
    *,
    crops: CropTables | None = None,
) -> CropTimeline:
    """Return the dated planting and harvest events of ``crop_id``.

    Unknown crops and crops unsuited to a tropical profile return an empty
    timeline with ``not_suitable_reason`` set instead of raising. Frost dates
    are moved to ``year`` when it differs from the profile year.
    """

    tables = crops or get_crop_tables()
    crop = tables.get(crop_id)
    if crop is None:
        return CropTimeline(crop_id, crop_id, (), False, CROP_NOT_FOUND)

    if profile.is_tropical and crop.tropical_suitable is False:
        return CropTimeline(crop_id, crop.name, (), crop.is_perennial, NOT_TROPICAL)

    events = _HANDLERS[crop.schedule](crop, profile_for_year(profile, year), year, tables)
    is_perennial = crop.is_perennial or crop.schedule is CropCategory.PERENNIAL_FRUIT
    return CropTimeline(crop_id, crop.name, tuple(events), is_perennial)


def get_optimal_planting_window(
    crop_id: str,
    profile: GrowingProfile,
    year: int | None = None,
    *,
    crops: CropTables | None = None,
) -> PlantingEvent | None:
    """Return the preferred planting event: transplant, direct-sow, start-indoors."""

    timeline = get_crop_timeline(crop_id, profile, year or profile.year, crops=crops)
    if timeline.not_suitable_reason:
        return None
    for action in (PlantingAction.TRANSPLANT, PlantingAction.DIRECT_SOW, PlantingAction.START_INDOORS):
        for event in timeline.events:
            if event.action is action:
                return event
    return None


def get_crop_growing_info(crop_id: str, *, crops: CropTables | None = None) -> CropGrowingInfo | None:
    return (crops or get_crop_tables()).get(crop_id)


def is_valid_crop(crop_id: str, *, crops: CropTables | None = None) -> bool:
    """Return ``True`` if ``crop_id`` has growing data and is a growable item."""
    return (crops or get_crop_tables()).is_growable(crop_id)


def list_growable_crops(*, crops: CropTables | None = None) -> list[str]:
    tables = crops or get_crop_tables()
    return [cid for cid in tables.crops if tables.is_growable(cid)]


def timeline_df(timeline: CropTimeline) -> "pd.DataFrame":
    """Return ``timeline`` events as a :class:`pandas.DataFrame`."""

    import pandas as pd

    if not timeline.events:
        return pd.DataFrame()
    df = pd.DataFrame([e.as_dict() for e in timeline.events])
    df["start_date"] = pd.to_datetime(df["start_date"])
    df["end_date"] = pd.to_datetime(df["end_date"])
    return df
