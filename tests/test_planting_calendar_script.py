import json
import subprocess
import sys
from pathlib import Path

SCRIPT = Path(__file__).resolve().parents[1] / "scripts/planting_calendar.py"

WASHINGTON_DC = ("38.9072", "-77.0369")


def _run(*args, check=True):
    return subprocess.run(
        [sys.executable, str(SCRIPT), *args],
        capture_output=True,
        text=True,
        check=check,
    )


def test_calendar_json_cli():
    data = json.loads(_run(*WASHINGTON_DC, "--month", "2", "--year", "2025").stdout)
    assert data["zone"] == "7a"
    assert data["month"] == 2
    ids = [e["crop_id"] for e in data["start_indoors"]]
    assert "tomato-cherry" in ids


def test_calendar_table_cli():
    out = _run(*WASHINGTON_DC, "--month", "2", "--year", "2025", "--format", "table").stdout
    assert out.splitlines()[0] == "Zone 7a - February 2025"
    assert "Cherry Tomato" in out


def test_all_crops_cli():
    data = json.loads(_run(*WASHINGTON_DC, "--month", "8", "--year", "2025", "--all-crops").stdout)
    assert "apple" in [e["crop_id"] for e in data["harvest"]]


def test_invalid_month_cli():
    result = _run(*WASHINGTON_DC, "--month", "13", check=False)
    assert result.returncode == 2
