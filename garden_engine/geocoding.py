"""Reverse geocoding of approximate garden locations.

The scheduling engine never calls this module. It turns coordinates or stored
bytes8 tokens into display names through a Nominatim compatible service and
falls back to formatted coordinates whenever the lookup fails.
"""
from __future__ import annotations

import asyncio
import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Dict, Mapping

import aiohttp

from .geohash import InvalidGeohash, decode, from_bytes8_hex
from .reference_data import get_reference_dataset

_LOGGER = logging.getLogger(__name__)

BASE_URL = "https://nominatim.openstreetmap.org"
USER_AGENT = "garden-engine/0.1 (+https://github.com/garden-engine)"
CITY_ZOOM = 10
NEIGHBORHOOD_ZOOM = 18
UNKNOWN_LOCATION = "Unknown Location"
_TIMEOUT = aiohttp.ClientTimeout(total=10)

_LOCALITY_KEYS = ("city", "town", "village", "hamlet", "municipality")
_NEIGHBORHOOD_KEYS = ("neighbourhood", "suburb", "city_district")

__all__ = [
    "GeocodingError",
    "GeocodeCache",
    "NeighborhoodResult",
    "ReverseGeocoder",
    "format_coordinates",
    "format_neighborhood_display",
    "state_abbreviation",
    "region_from_coordinates",
    "approximate_location",
]


class GeocodingError(Exception): ...


class GeocodeCache:
    """Small LRU cache keyed by coordinates rounded to three decimals."""

    def __init__(self, maxsize: int = 256, ttl: float | None = None) -> None:
        self.maxsize = maxsize
        self.ttl = ttl
        self._data: OrderedDict[str, tuple[Any, float]] = OrderedDict()

    @staticmethod
    def key(latitude: float, longitude: float) -> str:
        return f"{latitude:.3f},{longitude:.3f}"

    def get(self, latitude: float, longitude: float) -> Any | None:
        key = self.key(latitude, longitude)
        item = self._data.get(key)
        if item is None:
            return None
        value, stored = item
        if self.ttl is not None and time.monotonic() - stored > self.ttl:
            del self._data[key]
            return None
        self._data.move_to_end(key)
        return value

    def set(self, latitude: float, longitude: float, value: Any) -> None:
        key = self.key(latitude, longitude)
        self._data[key] = (value, time.monotonic())
        self._data.move_to_end(key)
        while len(self._data) > self.maxsize:
            self._data.popitem(last=False)

    def clear(self) -> None:
        self._data.clear()

    def __len__(self) -> int:
        return len(self._data)


@dataclass(slots=True, frozen=True)
class NeighborhoodResult:
    neighborhood: str | None = None
    city: str = ""
    state: str = ""

    def as_dict(self) -> Dict[str, Any]:
        return {"neighborhood": self.neighborhood, "city": self.city, "state": self.state}


def format_coordinates(latitude: float, longitude: float) -> str:
    """Return ``"37.7749N, 122.4194W"`` style text."""
    lat_dir = "N" if latitude >= 0 else "S"
    lon_dir = "E" if longitude >= 0 else "W"
    return f"{abs(latitude):.4f}{lat_dir}, {abs(longitude):.4f}{lon_dir}"


def format_neighborhood_display(result: NeighborhoodResult) -> str:
    """Return the most specific label available for ``result``."""
    if result.neighborhood and result.city:
        return f"{result.neighborhood}, {result.city}"
    if result.neighborhood:
        return result.neighborhood
    if result.city and result.state:
        return f"{result.city}, {result.state}"
    return result.city or result.state or ""


def state_abbreviation(state: str) -> str | None:
    """Return the postal abbreviation for a US state name."""
    states = get_reference_dataset("geohash_regions").get("us_states") or {}
    return states.get(state)


def region_from_coordinates(latitude: float, longitude: float) -> str:
    """Return a coarse US region for coordinates inside the contiguous US."""

    if latitude < 25 or latitude > 50 or longitude < -130 or longitude > -65:
        return UNKNOWN_LOCATION
    north = latitude > 40
    if longitude > -80:
        return "Northeast US" if north else "Southeast US"
    if longitude > -100:
        return "Midwest US" if north else "South Central US"
    if longitude > -115:
        return "Mountain West US" if north else "Southwest US"
    return "Pacific West US"


def approximate_location(geohash: str) -> str:
    """Return a state-level label for ``geohash`` without any network access."""

    regions = get_reference_dataset("geohash_regions").get("prefixes") or {}
    prefix = geohash[:2].lower()
    if prefix in regions:
        return regions[prefix]
    try:
        latitude, longitude = decode(geohash)
    except InvalidGeohash:
        return UNKNOWN_LOCATION
    return region_from_coordinates(latitude, longitude)


def _first(address: Mapping[str, Any], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        value = address.get(key)
        if value:
            return str(value)
    return None


class ReverseGeocoder:
    """Resolve coordinates to place names using an injected aiohttp session."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        *,
        cache: GeocodeCache | None = None,
        neighborhood_cache: GeocodeCache | None = None,
        base_url: str = BASE_URL,
        user_agent: str = USER_AGENT,
    ) -> None:
        self._s = session
        self.cache = cache if cache is not None else GeocodeCache()
        self.neighborhood_cache = (
            neighborhood_cache if neighborhood_cache is not None else GeocodeCache()
        )
        self._base_url = base_url.rstrip("/")
        self._h = {"User-Agent": user_agent}

    async def _reverse(self, latitude: float, longitude: float, zoom: int) -> Dict[str, Any]:
        params = {
            "format": "json",
            "lat": str(latitude),
            "lon": str(longitude),
            "zoom": str(zoom),
            "addressdetails": "1",
        }
        url = f"{self._base_url}/reverse"
        try:
            async with self._s.get(url, params=params, headers=self._h, timeout=_TIMEOUT) as r:
                if r.status != 200:
                    raise GeocodingError(f"request failed: {r.status}")
                try:
                    data = await r.json()
                except aiohttp.ContentTypeError as err:
                    raise GeocodingError("invalid response") from err
        except (asyncio.TimeoutError, aiohttp.ClientError) as err:
            raise GeocodingError(str(err)) from err
        if not isinstance(data, dict):
            raise GeocodingError("unexpected response payload")
        address = data.get("address")
        return address if isinstance(address, dict) else {}

    async def reverse_geocode(self, latitude: float, longitude: float) -> str:
        """Return ``"City, ST"`` for the coordinate or formatted coordinates."""

        cached = self.cache.get(latitude, longitude)
        if cached is not None:
            return cached

        try:
            address = await self._reverse(latitude, longitude, CITY_ZOOM)
        except GeocodingError as err:
            _LOGGER.warning("Reverse geocoding failed for %.3f,%.3f: %s", latitude, longitude, err)
            result = format_coordinates(latitude, longitude)
        else:
            parts: list[str] = []
            locality = _first(address, _LOCALITY_KEYS)
            if locality:
                parts.append(locality)
            state = address.get("state")
            if state:
                parts.append(state_abbreviation(state) or state)
            elif address.get("country") and not locality:
                parts.append(str(address["country"]))
            result = ", ".join(parts) if parts else format_coordinates(latitude, longitude)

        self.cache.set(latitude, longitude, result)
        return result

    async def reverse_geocode_with_neighborhood(
        self, latitude: float, longitude: float
    ) -> NeighborhoodResult:
        """Return neighbourhood, city and state for the coordinate."""

        cached = self.neighborhood_cache.get(latitude, longitude)
        if cached is not None:
            return cached

        try:
            address = await self._reverse(latitude, longitude, NEIGHBORHOOD_ZOOM)
        except GeocodingError as err:
            _LOGGER.warning(
                "Neighborhood lookup failed for %.3f,%.3f: %s", latitude, longitude, err
            )
            result = NeighborhoodResult()
        else:
            state = str(address.get("state") or "")
            result = NeighborhoodResult(
                neighborhood=_first(address, _NEIGHBORHOOD_KEYS),
                city=_first(address, _LOCALITY_KEYS) or "",
                state=state_abbreviation(state) or state,
            )

        self.neighborhood_cache.set(latitude, longitude, result)
        return result

    async def location_from_bytes8_hex(self, value: str) -> str:
        """Return the place name of a stored bytes8 location token."""
        token = from_bytes8_hex(value)
        return await self.reverse_geocode(token.latitude, token.longitude)
