import json
import shutil
from pathlib import Path

import pytest

from garden_engine.reference_data import refresh_reference_data
from garden_engine.validators import (DATASET_SCHEMAS, load_schema,
                                      validate_dataset, validate_datasets,
                                      validate_payload)

DATA = Path(__file__).resolve().parents[1] / "data"


@pytest.fixture
def data_copy(monkeypatch, tmp_path):
    target = tmp_path / "data"
    shutil.copytree(DATA, target)
    monkeypatch.setenv("GARDEN_ENGINE_DATA_DIR", str(target))
    refresh_reference_data()
    return target


def _edit(path: Path, change) -> None:
    data = json.loads(path.read_text())
    change(data)
    path.write_text(json.dumps(data))


def test_bundled_datasets_are_valid():
    assert validate_datasets() == {}


def test_every_schema_exists():
    for schema in DATASET_SCHEMAS.values():
        assert (DATA / "schema" / schema).is_file()


def test_payload_errors_name_their_location():
    schema = load_schema("growing_zones.schema.json")
    payload = {
        "geohash_zones": {"9q8": {"zone": "10z"}},
        "latitude_zones": [],
        "zone_data": {},
    }
    issues = validate_payload(payload, schema)
    assert len(issues) == 1
    assert issues[0].startswith("geohash_zones.9q8.zone:")


def test_missing_required_key_reported_at_root():
    issues = validate_payload({}, load_schema("crop_growing_data.schema.json"))
    assert issues == ["<root>: 'crops' is a required property"]


def test_harvest_month_out_of_range():
    issues = validate_payload({"apple": 13}, load_schema("perennial_harvest_months.schema.json"))
    assert issues and issues[0].startswith("apple:")


def test_frost_order_checked(data_copy):
    def swap(data):
        data["zone_data"]["7a"]["last_spring_frost"] = "11-01"

    _edit(data_copy / "growing_zones.json", swap)
    issues = validate_dataset("growing_zones.json")
    assert issues == ["zone_data.7a: last spring frost must precede first fall frost"]


def test_conflicting_crop_flags(data_copy):
    def conflict(data):
        data["crops"]["apple"]["fall_planting"] = True

    _edit(data_copy / "crop_growing_data.json", conflict)
    issues = validate_dataset("crop_growing_data.json")
    assert len(issues) == 1
    assert issues[0].startswith("crops:")


def test_unknown_popular_crop(data_copy):
    def add(data):
        data["popular_crops"].append("dragonfruit")

    _edit(data_copy / "crop_growing_data.json", add)
    bad = validate_datasets(["crop_growing_data.json", "growing_zones.json"])
    assert bad == {"crop_growing_data.json": ["popular_crops: unknown crop 'dragonfruit'"]}


def test_unknown_dataset():
    with pytest.raises(KeyError):
        validate_dataset("weather.json")
