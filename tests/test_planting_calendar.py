from datetime import date

import pytest

from garden_engine.planting_calendar import (calendar_df,
                                             get_crops_to_harvest_this_month,
                                             get_crops_to_plant_this_month,
                                             get_monthly_calendar,
                                             get_year_calendar, month_bounds)
from garden_engine.reference_data import CropTables


def _ids(events):
    return [e.crop_id for e in events]


@pytest.fixture
def small_crops() -> CropTables:
    return CropTables.from_dict(
        {
            "popular_crops": ["bean-test", "honey", "missing-crop"],
            "non_growing_items": ["honey"],
            "crops": {
                "bean-test": {
                    "name": "Test Bean",
                    "days_to_maturity": {"min": 30, "max": 40},
                    "direct_sow": {"weeks_before_last_frost": 4},
                    "fall_sow": {"weeks_before_first_frost": 30, "weeks_end": 29, "min_zone": 1},
                },
                "honey": {
                    "name": "Honey",
                    "days_to_maturity": {"min": 1, "max": 1},
                    "direct_sow": {"weeks_before_last_frost": 4},
                },
            },
        }
    )


def test_february_start_indoors(profile_7a):
    cal = get_monthly_calendar(profile_7a, 2, 2025)
    assert (cal.month, cal.year) == (2, 2025)
    assert _ids(cal.start_indoors) == [
        "pepper-bell-green",
        "jalapeno",
        "tomato-cherry",
        "tomato-beefsteak",
        "broccoli",
        "lettuce-romaine",
        "basil",
        "kale",
    ]
    assert "onion-yellow" not in _ids(cal.start_indoors)


def test_buckets_sorted_and_unique(profile_7a):
    for cal in get_year_calendar(profile_7a, 2025, popular_only=False):
        for name in ("start_indoors", "direct_sow", "transplant", "harvest"):
            events = getattr(cal, name)
            ids = _ids(events)
            assert len(ids) == len(set(ids))
            starts = [e.start_date for e in events]
            assert starts == sorted(starts)


def test_events_overlap_their_month(profile_7a):
    cal = get_monthly_calendar(profile_7a, 6, 2025)
    first, last = date(2025, 6, 1), date(2025, 6, 30)
    for event in cal.start_indoors + cal.direct_sow + cal.transplant + cal.harvest:
        assert event.start_date <= last and event.end_date >= first


def test_fall_planting_in_october(profile_7a):
    cal = get_monthly_calendar(profile_7a, 10, 2025)
    assert "garlic" in _ids(cal.direct_sow)


def test_overlap_compares_years(profile_7a):
    # garlic planted in fall 2025 is harvested in June 2026, not June 2025
    june = get_monthly_calendar(profile_7a, 6, 2025)
    assert "tomato-cherry" in _ids(june.harvest)
    assert "garlic" not in _ids(june.harvest)


def test_popular_only(profile_7a):
    popular = get_monthly_calendar(profile_7a, 8, 2025)
    everything = get_monthly_calendar(profile_7a, 8, 2025, popular_only=False)
    assert "apple" not in _ids(popular.harvest)
    assert "apple" in _ids(everything.harvest)


def test_unsuitable_crops_are_skipped(tropical_profile):
    for cal in get_year_calendar(tropical_profile, 2025):
        for events in (cal.start_indoors, cal.direct_sow, cal.transplant, cal.harvest):
            assert "lettuce-romaine" not in _ids(events)


def test_duplicate_events_keep_first(profile_7a, small_crops):
    # spring sowing ends April 1 and fall sowing runs April 3-10
    cal = get_monthly_calendar(profile_7a, 4, 2025, crops=small_crops)
    assert _ids(cal.direct_sow) == ["bean-test"]
    assert cal.direct_sow[0].start_date == date(2025, 3, 4)


def test_non_growing_and_missing_crops_skipped(profile_7a, small_crops):
    cal = get_monthly_calendar(profile_7a, 3, 2025, crops=small_crops)
    assert _ids(cal.direct_sow) == ["bean-test"]


@pytest.mark.parametrize("month", [0, 13, -1])
def test_invalid_month(profile_7a, month):
    with pytest.raises(ValueError):
        get_monthly_calendar(profile_7a, month, 2025)


def test_month_bounds():
    assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_bounds(2025, 12) == (date(2025, 12, 1), date(2025, 12, 31))


def test_year_calendar(profile_7a):
    calendars = get_year_calendar(profile_7a, 2025)
    assert [c.month for c in calendars] == list(range(1, 13))


def test_crops_to_plant(profile_7a):
    feb = {c["crop_id"]: c for c in get_crops_to_plant_this_month(profile_7a, 2, 2025)}
    assert feb["tomato-cherry"]["actions"] == ["start-indoors"]
    assert feb["tomato-cherry"]["crop_name"] == "Cherry Tomato"
    march = {c["crop_id"]: c for c in get_crops_to_plant_this_month(profile_7a, 3, 2025)}
    assert march["lettuce-romaine"]["actions"] == ["start-indoors", "direct-sow", "transplant"]


def test_crops_to_harvest(profile_7a):
    june = get_crops_to_harvest_this_month(profile_7a, 6, 2025)
    assert "tomato-cherry" in [c["crop_id"] for c in june]


def test_calendar_as_dict(profile_7a):
    data = get_monthly_calendar(profile_7a, 2, 2025).as_dict()
    assert data["month"] == 2
    assert data["start_indoors"][0]["crop_id"] == "pepper-bell-green"
    assert data["start_indoors"][0]["start_date"] == "2025-01-21"


def test_calendar_df(profile_7a):
    df = calendar_df(get_monthly_calendar(profile_7a, 2, 2025))
    assert "category" in df.columns
    assert set(df["category"]) >= {"start_indoors", "direct_sow"}
    assert (df[df["category"] == "start_indoors"]["crop_id"] == "tomato-cherry").any()


def test_empty_calendar_df(profile_7a):
    cal = get_monthly_calendar(profile_7a, 2, 2025, crops=CropTables.from_dict({}))
    assert cal.is_empty()
    df = calendar_df(cal)
    assert df.empty
    assert "category" in df.columns


def test_calendar_for_later_year_keeps_annuals(profile_7a):
    this_year = get_monthly_calendar(profile_7a, 4, 2025)
    next_year = get_monthly_calendar(profile_7a, 4, 2026)
    assert next_year.transplant
    assert _ids(next_year.transplant) == _ids(this_year.transplant)
    assert all(e.start_date.year == 2026 for e in next_year.transplant)


def test_crops_to_plant_default_year(profile_7a):
    today = date.today()
    plants = get_crops_to_plant_this_month(profile_7a, 4)
    expected = get_monthly_calendar(profile_7a, 4, today.year)
    assert {c["crop_id"] for c in plants} == set(_ids(expected.planting_events()))
    assert plants
