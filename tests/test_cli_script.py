import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]


def _run(*args, check=True):
    return subprocess.run(
        [sys.executable, "-m", "scripts", *args],
        capture_output=True,
        text=True,
        check=check,
        cwd=ROOT,
    )


def test_list_commands():
    out = _run("--list").stdout
    assert "geohash-tool" in out
    assert "planting-calendar" in out
    assert "Encode and decode geohashes" in out
    assert "cli" not in out.split()


def test_dispatch_to_script():
    assert _run("geohash-tool", "bytes8", "djq").stdout.strip() == "0x646a710000000000"


def test_unknown_command():
    assert _run("nope", check=False).returncode == 2


def test_command_required():
    assert _run(check=False).returncode == 2
