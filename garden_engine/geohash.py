"""Geohash encoding plus the fixed 8-byte token used by external stores.

Encoding and decoding are delegated to :mod:`pygeohash`. This module adds
strict validation, cell bounds and the bytes8 token. Longer geohashes describe
smaller cells.

The bytes8 token is the ASCII text of the first eight characters, right padded
with zero bytes. It is an interchange contract with byte-oriented stores and
must not change: ``"djq"`` is always ``0x646a710000000000``.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict

import pygeohash as pgh

from .constants import BYTES8_LENGTH, GEOHASH_ALPHABET

_LOGGER = logging.getLogger(__name__)

_ALPHABET = frozenset(GEOHASH_ALPHABET)

__all__ = [
    "InvalidGeohash",
    "GeohashBounds",
    "DecodedToken",
    "encode",
    "decode",
    "decode_bounds",
    "cell_size",
    "to_bytes8",
    "to_bytes8_hex",
    "from_bytes8_hex",
    "geohash_prefixes",
    "approximate_distance_km",
    "validate_coordinates",
]


class InvalidGeohash(ValueError):
    """Raised for empty or malformed geohash strings and bytes8 tokens."""


@dataclass(slots=True, frozen=True)
class GeohashBounds:
    """Latitude/longitude box covered by a geohash cell."""

    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    @property
    def center(self) -> tuple[float, float]:
        return (self.min_lat + self.max_lat) / 2, (self.min_lon + self.max_lon) / 2

    def contains(self, latitude: float, longitude: float) -> bool:
        return (
            self.min_lat <= latitude <= self.max_lat
            and self.min_lon <= longitude <= self.max_lon
        )

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True, frozen=True)
class DecodedToken:
    """Result of decoding a bytes8 token."""

    geohash: str
    latitude: float
    longitude: float

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def validate_coordinates(latitude: float, longitude: float) -> None:
    """Raise ``ValueError`` unless the coordinate lies on the globe."""

    if not -90.0 <= latitude <= 90.0:
        raise ValueError(f"latitude must be between -90 and 90, got {latitude}")
    if not -180.0 <= longitude <= 180.0:
        raise ValueError(f"longitude must be between -180 and 180, got {longitude}")


def encode(latitude: float, longitude: float, precision: int = 6) -> str:
    """Return the geohash of ``precision`` characters for a coordinate."""

    validate_coordinates(latitude, longitude)
    if precision < 1:
        raise ValueError("precision must be at least 1")
    return pgh.encode(latitude, longitude, precision=precision)


def _checked(geohash: str) -> str:
    if not geohash:
        raise InvalidGeohash("geohash must not be empty")
    value = geohash.lower()
    for ch in value:
        if ch not in _ALPHABET:
            raise InvalidGeohash(f"invalid geohash character {ch!r} in {geohash!r}")
    return value


def decode_bounds(geohash: str) -> GeohashBounds:
    """Return the cell covered by ``geohash``.

    Raises :class:`InvalidGeohash` for an empty string or any character
    outside the base-32 alphabet.
    """

    latitude, longitude, lat_err, lon_err = pgh.decode_exactly(_checked(geohash))
    return GeohashBounds(
        latitude - lat_err, latitude + lat_err, longitude - lon_err, longitude + lon_err
    )


def decode(geohash: str) -> tuple[float, float]:
    """Return ``(latitude, longitude)`` of the centre of the ``geohash`` cell."""

    latitude, longitude, _, _ = pgh.decode_exactly(_checked(geohash))
    return latitude, longitude


def cell_size(precision: int) -> tuple[float, float]:
    """Return ``(lat_degrees, lon_degrees)`` spanned by a cell of ``precision``."""

    if precision < 1:
        raise ValueError("precision must be at least 1")
    _, _, lat_err, lon_err = pgh.decode_exactly("0" * precision)
    return 2 * lat_err, 2 * lon_err


def to_bytes8(geohash: str) -> bytes:
    """Return the zero padded 8-byte ASCII token for ``geohash``."""

    head = geohash[:BYTES8_LENGTH]
    try:
        raw = head.encode("ascii")
    except UnicodeEncodeError as exc:
        raise InvalidGeohash(f"geohash {geohash!r} is not ASCII") from exc
    return raw.ljust(BYTES8_LENGTH, b"\x00")


def to_bytes8_hex(geohash: str) -> str:
    """Return the bytes8 token as a ``0x`` prefixed hex string."""

    return "0x" + to_bytes8(geohash).hex()


def from_bytes8_hex(value: str) -> DecodedToken:
    """Decode a ``0x`` prefixed bytes8 token back to geohash and coordinate.

    Reading stops at the first zero byte or after eight bytes. Bytes outside
    the geohash alphabet are dropped rather than rejected, so a token written
    with stray characters still resolves to the nearest valid cell.
    """

    text = value[2:] if value[:2].lower() == "0x" else value
    try:
        raw = bytes.fromhex(text)
    except ValueError as exc:
        raise InvalidGeohash(f"malformed bytes8 hex {value!r}") from exc

    chars: list[str] = []
    for byte in raw[:BYTES8_LENGTH]:
        if byte == 0:
            break
        ch = chr(byte)
        if ch in _ALPHABET:
            chars.append(ch)
        else:
            _LOGGER.debug("Dropping invalid geohash byte 0x%02x from %s", byte, value)

    geohash = "".join(chars)
    if not geohash:
        raise InvalidGeohash(f"bytes8 token {value!r} holds no geohash characters")
    latitude, longitude = decode(geohash)
    return DecodedToken(geohash, latitude, longitude)


def geohash_prefixes(geohash: str) -> Dict[str, str]:
    """Return city (4), neighborhood (5) and block (6) prefixes of ``geohash``."""

    return {
        "city": geohash[:4],
        "neighborhood": geohash[:5],
        "block": geohash[:6],
    }


def approximate_distance_km(geohash_a: str, geohash_b: str) -> float:
    """Return the haversine distance between two geohash cell centres."""

    return pgh.geohash_haversine_distance(_checked(geohash_a), _checked(geohash_b)) / 1000.0
