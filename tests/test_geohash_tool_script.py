import json
import subprocess
import sys
from pathlib import Path

SCRIPT = Path(__file__).resolve().parents[1] / "scripts/geohash_tool.py"


def _run(*args, check=True):
    return subprocess.run(
        [sys.executable, str(SCRIPT), *args],
        capture_output=True,
        text=True,
        check=check,
    )


def test_encode_cli():
    result = _run("encode", "37.7749", "-122.4194", "--precision", "5")
    assert result.stdout.strip() == "9q8yy"


def test_bytes8_cli():
    assert _run("bytes8", "djq").stdout.strip() == "0x646a710000000000"


def test_from_bytes8_cli():
    data = json.loads(_run("from-bytes8", "0x646a710000000000").stdout)
    assert data["geohash"] == "djq"
    assert data["approximate_location"] == "South Carolina / Georgia"


def test_decode_cli():
    data = json.loads(_run("decode", "9Q8YYK").stdout)
    assert data["geohash"] == "9q8yyk"
    assert data["prefixes"] == {"city": "9q8y", "neighborhood": "9q8yy", "block": "9q8yyk"}
    assert data["bounds"]["min_lat"] <= data["latitude"] <= data["bounds"]["max_lat"]


def test_invalid_geohash_cli():
    result = _run("decode", "abc", check=False)
    assert result.returncode == 2
    assert "invalid geohash character" in result.stderr
