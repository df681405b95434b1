import pytest

from garden_engine.hardiness_zone import (InvalidOverride, ZoneConfidence,
                                          get_min_temperature,
                                          get_zone_description, is_valid_zone,
                                          list_zones, resolve_zone,
                                          suitable_zones, zone_from_latitude,
                                          zone_number)
from garden_engine.reference_data import ZoneTables


def test_precise_geohash_match():
    record = resolve_zone(37.7749, -122.4194)
    assert record.zone == "10b"
    assert record.confidence is ZoneConfidence.PRECISE
    assert record.source == "geohash"


def test_precise_match_uses_supplied_geohash():
    record = resolve_zone(0.0, 0.0, "DQCJQ")
    assert record.zone == "7a"
    assert record.confidence is ZoneConfidence.PRECISE


def test_regional_match_picks_first_sorted_candidate():
    # "9qz" is not listed; "9q5" sorts before "9q8"
    record = resolve_zone(36.0, -119.0, "9qzzzz")
    assert record.zone == "10b"
    assert record.confidence is ZoneConfidence.ESTIMATED
    assert record.source == "region"


def test_regional_match_with_alternate_tables():
    tables = ZoneTables.from_dict(
        {"geohash_zones": {"9qb": {"zone": "9b"}, "9q5": {"zone": "10a"}}}
    )
    assert resolve_zone(36.0, -119.0, "9qzz", tables=tables).zone == "10a"
    assert resolve_zone(36.0, -119.0, "9qbz", tables=tables).zone == "9b"


@pytest.mark.parametrize(
    "lat,lon,zone",
    [
        (45.5, 10.0, "5a"),
        (-33.8688, 151.2093, "9a"),
        (0.0, 0.0, "13a"),
        (52.0, 20.0, "4a"),
        (-5.0, 120.0, "13a"),
    ],
)
def test_latitude_band_fallback(lat, lon, zone):
    record = resolve_zone(lat, lon)
    assert record.zone == zone
    assert record.confidence is ZoneConfidence.ESTIMATED
    assert record.source == "latitude"


def test_polar_default_zone():
    record = resolve_zone(70.0, 20.0)
    assert record.zone == "2a"
    assert record.source == "default"


def test_band_upper_bound_is_exclusive():
    # 60 is outside [55, 60) and not above the polar threshold
    record = zone_from_latitude(60.0)
    assert record.zone == "6a"
    assert record.source == "default"


def test_zone_from_latitude_without_bands_uses_defaults():
    empty = ZoneTables.from_dict({})
    assert zone_from_latitude(5.0, empty).zone == "13a"
    assert zone_from_latitude(-75.0, empty).zone == "2a"
    assert zone_from_latitude(40.0, empty).zone == "6a"


def test_every_coordinate_resolves():
    for lat in range(-90, 91, 15):
        for lon in range(-180, 181, 45):
            assert is_valid_zone(resolve_zone(float(lat), float(lon)).zone)


def test_manual_zone():
    record = resolve_zone(37.7749, -122.4194, manual_zone="8b")
    assert record.zone == "8b"
    assert record.confidence is ZoneConfidence.MANUAL
    assert record.source == "manual"


@pytest.mark.parametrize("zone", ["14c", "7", "a7", ""])
def test_manual_zone_is_validated(zone):
    with pytest.raises(InvalidOverride):
        resolve_zone(37.7749, -122.4194, manual_zone=zone)


def test_confidence_ranking():
    ranked = sorted(ZoneConfidence, key=lambda c: c.rank)
    assert ranked == [ZoneConfidence.ESTIMATED, ZoneConfidence.PRECISE, ZoneConfidence.MANUAL]


def test_zone_helpers():
    assert is_valid_zone("10b")
    assert not is_valid_zone("10c")
    assert zone_number("10b") == 10
    assert zone_number("7a") == 7
    assert zone_number("unknown") == 0


def test_zone_descriptions_and_temperatures():
    assert get_zone_description("7a") == "Zone 7a: 0 to 5°F"
    assert get_zone_description("99z") == "Zone 99z: Unknown"
    assert get_min_temperature("7a") == 0.0
    assert get_min_temperature("1a") == -60.0
    assert get_min_temperature("nope") is None


def test_list_zones():
    zones = list_zones()
    assert len(zones) == 26
    assert zones[0]["zone"] == "1a"
    assert zones[-1] == {"zone": "13b", "description": "Zone 13b: 65 to 70°F"}


def test_suitable_zones():
    assert suitable_zones(60) == ["13a", "13b"]
    assert suitable_zones(-100)[0] == "1a"


def test_record_as_dict():
    assert resolve_zone(37.7749, -122.4194).as_dict() == {
        "zone": "10b",
        "confidence": "precise",
        "source": "geohash",
    }
