from datetime import date

import pytest

from garden_engine.frost_dates import (add_days, add_weeks, add_years,
                                       calculate_planting_date,
                                       format_frost_date, get_frost_dates,
                                       get_zone_frost_data,
                                       is_in_growing_season, season_status,
                                       shift_month)
from garden_engine.reference_data import get_zone_tables


def test_northern_frost_dates():
    window = get_frost_dates("7a", 2025)
    assert window.last_spring_frost == date(2025, 4, 1)
    assert window.first_fall_frost == date(2025, 10, 30)
    assert window.season_days == 212
    assert not window.frost_free


def test_southern_frost_dates_roll_into_next_year():
    window = get_frost_dates("7a", 2025, True)
    assert window.last_spring_frost == date(2025, 10, 1)
    assert window.first_fall_frost == date(2026, 4, 30)
    assert window.season_days == 211


def test_southern_rotation_clamps_missing_day():
    # 1a fall frost 08-31 rotates to February, which has no 31st
    window = get_frost_dates("1a", 2025, True)
    assert window.last_spring_frost == date(2025, 12, 1)
    assert window.first_fall_frost == date(2026, 2, 28)
    assert window.season_days == 89


@pytest.mark.parametrize("southern", [False, True])
def test_frost_free_zone(southern):
    window = get_frost_dates("11a", 2024, southern)
    assert window.frost_free
    assert window.last_spring_frost == date(2024, 1, 1)
    assert window.first_fall_frost == date(2024, 12, 31)
    assert window.season_days == 365


def test_zone_number_fallback():
    assert get_frost_dates("7", 2025) == get_frost_dates("7a", 2025)


def test_unknown_zone_uses_fallback_dates():
    window = get_frost_dates("20a", 2025)
    assert window.last_spring_frost == date(2025, 4, 15)
    assert window.first_fall_frost == date(2025, 10, 15)
    assert get_zone_frost_data("20a").growing_season_days == 180


@pytest.mark.parametrize("southern", [False, True])
@pytest.mark.parametrize("year", [2024, 2025])
def test_season_length_matches_dates(southern, year):
    for zone in get_zone_tables().zone_data:
        window = get_frost_dates(zone, year, southern)
        assert window.last_spring_frost < window.first_fall_frost
        if not window.frost_free:
            assert window.season_days == (window.first_fall_frost - window.last_spring_frost).days


def test_shift_month():
    assert shift_month(1) == 7
    assert shift_month(7) == 1
    assert shift_month(12) == 6
    assert shift_month(3, 1) == 4


def test_date_arithmetic():
    frost = date(2025, 4, 1)
    assert calculate_planting_date(frost, 2) == date(2025, 3, 18)
    assert calculate_planting_date(frost, 2, before=False) == date(2025, 4, 15)
    assert add_days(frost, 30) == date(2025, 5, 1)
    assert add_weeks(frost, -1) == date(2025, 3, 25)


def test_format_frost_date():
    assert format_frost_date(date(2025, 4, 1)) == "April 1"
    assert format_frost_date(date(2025, 10, 30)) == "October 30"


def test_growing_season_helpers(profile_7a, tropical_profile):
    assert is_in_growing_season(date(2025, 6, 1), profile_7a)
    assert not is_in_growing_season(date(2025, 12, 1), profile_7a)
    assert is_in_growing_season(date(2025, 12, 1), tropical_profile)

    assert season_status(profile_7a, date(2025, 3, 1)) == "pre-season"
    assert season_status(profile_7a, date(2025, 7, 1)) == "growing"
    assert season_status(profile_7a, date(2025, 11, 15)) == "post-season"
    assert season_status(tropical_profile, date(2025, 1, 1)) == "year-round"


def test_frost_window_as_dict():
    assert get_frost_dates("7a", 2025).as_dict() == {
        "last_spring_frost": "2025-04-01",
        "first_fall_frost": "2025-10-30",
        "season_days": 212,
        "frost_free": False,
    }


def test_add_years_clamps_leap_day():
    assert add_years(date(2024, 2, 29), 1) == date(2025, 2, 28)
    assert add_years(date(2025, 4, 1), -1) == date(2024, 4, 1)
