import json
import subprocess
import sys
from pathlib import Path

SCRIPT = Path(__file__).resolve().parents[1] / "scripts/dataset_info.py"


def _run(*args, check=True):
    return subprocess.run(
        [sys.executable, str(SCRIPT), *args],
        capture_output=True,
        text=True,
        check=check,
    )


def test_list_cli():
    lines = [line.strip() for line in _run("list").stdout.splitlines() if line.strip()]
    assert "growing_zones.json" in lines
    assert "crop_growing_data.json" in lines


def test_list_paths_cli():
    out = _run("list", "--paths").stdout
    assert "growing_zones.json: " in out


def test_search_cli():
    out = _run("search", "ZONE").stdout
    assert "growing_zones.json" in out
    assert "crop_growing_data.json" not in out


def test_show_cli():
    data = json.loads(_run("show", "perennial_harvest_months.yaml").stdout)
    assert data["apple"] == 8


def test_show_unknown_cli():
    result = _run("show", "missing.json", check=False)
    assert result.returncode == 2
