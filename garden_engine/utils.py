"""Dataset loading and small parsing helpers shared by the garden engine."""

from __future__ import annotations

import json
import os
import re
import time
from functools import lru_cache
from os import PathLike
from pathlib import Path
from typing import Any, Dict, Mapping, TextIO, Union

import yaml

__all__ = [
    "load_data",
    "load_dataset",
    "lazy_dataset",
    "clear_dataset_cache",
    "dataset_file",
    "dataset_paths",
    "get_data_dir",
    "get_extra_dirs",
    "overlay_dir",
    "deep_update",
    "normalize_id",
    "parse_month_day",
    "list_dataset_files",
]


PathType = Union[str, PathLike]

DATA_ENV = "GARDEN_ENGINE_DATA_DIR"
OVERLAY_ENV = "GARDEN_ENGINE_OVERLAY_DIR"
EXTRA_ENV = "GARDEN_ENGINE_EXTRA_DATA_DIRS"

# Bundled datasets live in the repository ``data`` folder. Extra directories are
# merged after it and the overlay directory is merged last, so a single file can
# be overridden without copying the whole tree.
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[1] / "data"

_MONTH_DAY = re.compile(r"^\s*(\d{1,2})-(\d{1,2})\s*$")

_PATH_CACHE: tuple[Path, ...] | None = None
_ENV_STATE: tuple[str | None, str | None] | None = None


def _open_text(path: Path) -> TextIO:
    return open(path, "r", encoding="utf-8")


def load_data(path: PathType) -> Any:
    """Return the parsed contents of ``path`` supporting JSON or YAML."""

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(p)

    try:
        with _open_text(p) as f:
            if p.suffix.lower() in {".yaml", ".yml"}:
                return yaml.safe_load(f) or {}
            return json.load(f)
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {p}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {p}: {exc}") from exc


def deep_update(base: Dict[str, Any], other: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``other`` into ``base`` and return ``base``."""

    for key, value in other.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, Mapping):
            deep_update(base[key], value)
        else:
            base[key] = value
    return base


def get_data_dir() -> Path:
    """Return the base dataset directory honoring ``GARDEN_ENGINE_DATA_DIR``."""

    env = os.getenv(DATA_ENV)
    return Path(env).expanduser() if env else DEFAULT_DATA_DIR


def overlay_dir() -> Path | None:
    """Return the overlay directory from ``GARDEN_ENGINE_OVERLAY_DIR`` if set."""

    env = os.getenv(OVERLAY_ENV)
    return Path(env).expanduser() if env else None


def get_extra_dirs() -> tuple[Path, ...]:
    """Return existing directories listed in ``GARDEN_ENGINE_EXTRA_DATA_DIRS``."""

    env = os.getenv(EXTRA_ENV)
    if not env:
        return ()
    dirs: list[Path] = []
    for part in env.split(os.pathsep):
        path = Path(part).expanduser()
        if path.is_dir():
            dirs.append(path)
    return tuple(dirs)


def dataset_paths() -> tuple[Path, ...]:
    """Return directories searched when loading datasets.

    The result is cached and refreshed automatically when the relevant
    environment variables change between calls.
    """

    global _PATH_CACHE, _ENV_STATE
    env_state = (os.getenv(DATA_ENV), os.getenv(EXTRA_ENV))
    if _PATH_CACHE is None or _ENV_STATE != env_state:
        _PATH_CACHE = (get_data_dir(), *get_extra_dirs())
        _ENV_STATE = env_state
    return _PATH_CACHE


@lru_cache(maxsize=None)
def dataset_file(filename: str) -> Path | None:
    """Return the highest priority path for ``filename`` or ``None``."""

    search = list(dataset_paths())
    ov = overlay_dir()
    if ov:
        search.insert(0, ov)
    for base in search:
        path = base / filename
        if path.exists():
            return path
    return None


@lru_cache(maxsize=None)
def load_dataset(filename: str) -> Any:
    """Return dataset ``filename`` merged across data, extra and overlay dirs.

    Missing files yield an empty ``dict`` so optional datasets never break
    callers; invalid files raise ``ValueError``.
    """

    data: Any = {}
    search = list(dataset_paths())
    ov = overlay_dir()
    if ov:
        search.append(ov)
    for base in search:
        path = base / filename
        if not path.exists():
            continue
        extra = load_data(path)
        if isinstance(extra, dict) and isinstance(data, dict):
            deep_update(data, extra)
        else:
            data = extra
    return data


def lazy_dataset(filename: str, *, ttl: float | None = None):
    """Return a cached loader callable for dataset ``filename``.

    When ``ttl`` is given the dataset is reloaded once that many seconds have
    passed. A change of the file's modification time always triggers a reload.
    """

    cache_data: Any = None
    cache_mtime: float | None = None
    cache_timestamp: float | None = None

    def _loader() -> Any:
        nonlocal cache_data, cache_mtime, cache_timestamp
        path = dataset_file(filename)
        mtime = path.stat().st_mtime if path else None
        now = time.time()
        if (
            cache_data is None
            or (ttl is not None and cache_timestamp is not None and now - cache_timestamp > ttl)
            or mtime != cache_mtime
        ):
            load_dataset.cache_clear()
            cache_data = load_dataset(filename)
            cache_mtime = mtime
            cache_timestamp = now
        return cache_data

    return _loader


def clear_dataset_cache() -> None:
    """Clear cached dataset lookups so files are re-read on next access."""

    global _PATH_CACHE, _ENV_STATE
    load_dataset.cache_clear()
    dataset_file.cache_clear()
    list_dataset_files.cache_clear()
    _PATH_CACHE = None
    _ENV_STATE = None


def normalize_id(key: str) -> str:
    """Return ``key`` as a lower-case, hyphen separated identifier.

    ``"Tomato Cherry"``, ``"tomato_cherry"`` and ``"TOMATO-cherry"`` all map to
    ``"tomato-cherry"``, the form used by the crop dataset.
    """

    value = str(key).casefold()
    for sep in ("_", "-"):
        value = value.replace(sep, " ")
    return "-".join(p for p in value.split() if p)


def parse_month_day(value: str) -> tuple[int, int]:
    """Return ``(month, day)`` parsed from an ``MM-DD`` string."""

    match = _MONTH_DAY.match(str(value))
    if not match:
        raise ValueError(f"expected MM-DD, got {value!r}")
    month, day = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12 or not 1 <= day <= 31:
        raise ValueError(f"month/day out of range in {value!r}")
    return month, day


@lru_cache(maxsize=None)
def list_dataset_files() -> list[str]:
    """Return sorted dataset files available across all search paths."""

    files: set[str] = set()
    search = list(dataset_paths())
    ov = overlay_dir()
    if ov:
        search.append(ov)
    for base in search:
        if not base.is_dir():
            continue
        for path in base.rglob("*"):
            if path.suffix.lower() in {".json", ".yaml", ".yml"} and path.is_file():
                rel = path.relative_to(base).as_posix()
                if not rel.startswith("schema/"):
                    files.add(rel)
    return sorted(files)
