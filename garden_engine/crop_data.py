"""Typed crop growing metadata parsed from ``crop_growing_data.json``.

Every crop belongs to exactly one :class:`CropCategory`. The category decides
which scheduling rule applies and is fixed when the record is parsed, so a crop
can never be picked up by two rules at once. A record whose flags point at two
categories must name one explicitly with a ``schedule`` key.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping

__all__ = [
    "CropCategory",
    "StartIndoors",
    "SowingWindow",
    "FallSow",
    "DaysToMaturity",
    "HarvestWindow",
    "CropGrowingInfo",
    "classify_crop",
    "parse_crops",
]


class CropCategory(str, Enum):
    """Scheduling variants a crop can belong to."""

    INDOOR = "indoor"
    FALL_PLANTED = "fall_planted"
    PERENNIAL_FRUIT = "perennial_fruit"
    ANNUAL = "annual"


def _opt_int(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(value)


@dataclass(slots=True, frozen=True)
class StartIndoors:
    weeks_before_last_frost: int | None = None
    weeks_before_last_frost_max: int | None = None
    year_round: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StartIndoors":
        return cls(
            weeks_before_last_frost=_opt_int(data.get("weeks_before_last_frost")),
            weeks_before_last_frost_max=_opt_int(data.get("weeks_before_last_frost_max")),
            year_round=bool(data.get("year_round", False)),
        )


@dataclass(slots=True, frozen=True)
class SowingWindow:
    """Direct-sow or transplant timing relative to the last spring frost."""

    weeks_before_last_frost: int | None = None
    weeks_after_last_frost: int | None = None
    min_soil_temp_f: int | None = None
    fall_planting: bool = False
    dormant_planting: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SowingWindow":
        return cls(
            weeks_before_last_frost=_opt_int(data.get("weeks_before_last_frost")),
            weeks_after_last_frost=_opt_int(data.get("weeks_after_last_frost")),
            min_soil_temp_f=_opt_int(data.get("min_soil_temp_f")),
            fall_planting=bool(data.get("fall_planting", False)),
            dormant_planting=bool(data.get("dormant_planting", False)),
        )


@dataclass(slots=True, frozen=True)
class FallSow:
    """Second, cool-season sowing counted back from the first fall frost."""

    weeks_before_first_frost: int
    weeks_end: int
    min_zone: int
    notes: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FallSow":
        return cls(
            weeks_before_first_frost=int(data["weeks_before_first_frost"]),
            weeks_end=int(data["weeks_end"]),
            min_zone=int(data["min_zone"]),
            notes=data.get("notes"),
        )


@dataclass(slots=True, frozen=True)
class DaysToMaturity:
    min: int
    max: int


@dataclass(slots=True, frozen=True)
class HarvestWindow:
    weeks_from_maturity: int = 0
    duration: int = 4


@dataclass(slots=True, frozen=True)
class CropGrowingInfo:
    """Static growing metadata for one crop."""

    crop_id: str
    name: str
    schedule: CropCategory
    days_to_maturity: DaysToMaturity
    harvest_window: HarvestWindow
    group: str = ""
    frost_tolerance: str = "none"
    is_perennial: bool = False
    start_indoors: StartIndoors | None = None
    direct_sow: SowingWindow | None = None
    transplant: SowingWindow | None = None
    fall_sow: FallSow | None = None
    tree_fruit: bool = False
    citrus: bool = False
    indoor_crop: bool = False
    tropical_suitable: bool | None = None
    fall_planting: bool = False
    requirements: Dict[str, Any] = field(default_factory=dict)
    companions: tuple[str, ...] = ()
    avoid: tuple[str, ...] = ()
    tips: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, crop_id: str, data: Mapping[str, Any]) -> "CropGrowingInfo":
        """Parse one dataset record, resolving its scheduling category."""

        maturity = data.get("days_to_maturity") or {}
        low = int(maturity.get("min", 0))
        harvest = data.get("harvest_window") or {}
        start = data.get("start_indoors")
        sow = data.get("direct_sow")
        transplant = data.get("transplant")
        fall = data.get("fall_sow")
        tropical = data.get("tropical_suitable")

        info = dict(
            crop_id=crop_id,
            name=str(data.get("name", crop_id)),
            days_to_maturity=DaysToMaturity(low, int(maturity.get("max", low))),
            harvest_window=HarvestWindow(
                weeks_from_maturity=int(harvest.get("weeks_from_maturity", 0)),
                duration=int(harvest.get("duration", 4)),
            ),
            group=str(data.get("category", "")),
            frost_tolerance=str(data.get("frost_tolerance", "none")),
            is_perennial=bool(data.get("is_perennial", False)),
            start_indoors=StartIndoors.from_dict(start) if isinstance(start, Mapping) else None,
            direct_sow=SowingWindow.from_dict(sow) if isinstance(sow, Mapping) else None,
            transplant=SowingWindow.from_dict(transplant) if isinstance(transplant, Mapping) else None,
            fall_sow=FallSow.from_dict(fall) if isinstance(fall, Mapping) else None,
            tree_fruit=bool(data.get("tree_fruit", False)),
            citrus=bool(data.get("citrus", False)),
            indoor_crop=bool(data.get("indoor_crop", False)),
            tropical_suitable=None if tropical is None else bool(tropical),
            fall_planting=bool(data.get("fall_planting", False)),
            requirements=dict(data.get("requirements") or {}),
            companions=tuple(data.get("companions") or ()),
            avoid=tuple(data.get("avoid") or ()),
            tips=tuple(data.get("tips") or ()),
        )
        explicit = data.get("schedule")
        schedule = CropCategory(explicit) if explicit else classify_crop(crop_id, data)
        return cls(schedule=schedule, **info)

    def as_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result["schedule"] = self.schedule.value
        return result


def classify_crop(crop_id: str, data: Mapping[str, Any]) -> CropCategory:
    """Return the single scheduling category implied by a record's flags.

    Raises ``ValueError`` when the flags match more than one category.
    """

    sow = data.get("direct_sow")
    matches: list[CropCategory] = []
    if data.get("indoor_crop"):
        matches.append(CropCategory.INDOOR)
    if data.get("fall_planting") or (isinstance(sow, Mapping) and sow.get("fall_planting")):
        matches.append(CropCategory.FALL_PLANTED)
    if data.get("is_perennial") and (data.get("tree_fruit") or data.get("citrus")):
        matches.append(CropCategory.PERENNIAL_FRUIT)

    if len(matches) > 1:
        names = ", ".join(m.value for m in matches)
        raise ValueError(
            f"crop {crop_id!r} matches several schedules ({names}); set 'schedule' explicitly"
        )
    return matches[0] if matches else CropCategory.ANNUAL


def parse_crops(records: Mapping[str, Any]) -> Dict[str, CropGrowingInfo]:
    """Parse the ``crops`` mapping of the crop dataset."""

    crops: Dict[str, CropGrowingInfo] = {}
    for crop_id, data in records.items():
        if isinstance(data, Mapping):
            crops[str(crop_id)] = CropGrowingInfo.from_dict(str(crop_id), data)
    return crops
