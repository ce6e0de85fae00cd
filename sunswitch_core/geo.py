# sunswitch_core/geo.py
"""
Approximate geolocation for sunswitch.

`GeoResolver` asks an IP geolocation service where this machine is.
`ManualLocation` returns coordinates taken from the configuration file.
Both expose `resolve() -> (latitude, longitude)`.
"""

import logging
import math
from typing import Any, Optional

import requests

from . import helpers
from .exceptions import NetworkError, ParseError, ValidationError

log = logging.getLogger(__name__)

DEFAULT_PROVIDER_URL = "https://ipinfo.io/json"
DEFAULT_TIMEOUT = 10.0

# Field name pairs understood in a provider response, in lookup order.
_COORDINATE_KEYS = (
    ("latitude", "longitude"),
    ("lat", "lon"),
    ("lat", "lng"),
)
# Combined "lat,lon" strings (ipinfo.io uses "loc").
_COMBINED_KEYS = ("loc", "latlng")
_MAX_NESTING = 2


def _to_float(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise ParseError(f"Field '{field}' is not a number: {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ParseError(f"Field '{field}' is not a number: {value!r}")
    if not math.isfinite(number):
        raise ParseError(f"Field '{field}' is not a finite number: {value!r}")
    return number


def _extract(data: Any, depth: int = 0) -> Optional[tuple[float, float]]:
    if not isinstance(data, dict):
        return None

    for lat_key, lon_key in _COORDINATE_KEYS:
        if lat_key in data and lon_key in data:
            return _to_float(data[lat_key], lat_key), _to_float(data[lon_key], lon_key)

    for key in _COMBINED_KEYS:
        combined = data.get(key)
        if isinstance(combined, str):
            parts = combined.split(",")
            if len(parts) != 2:
                raise ParseError(f"Field '{key}' is not a 'lat,lon' pair: {combined!r}")
            return _to_float(parts[0].strip(), key), _to_float(parts[1].strip(), key)

    if depth < _MAX_NESTING:
        for value in data.values():
            found = _extract(value, depth + 1)
            if found is not None:
                return found
    return None


def parse_coordinates(payload: Any) -> tuple[float, float]:
    """
    Pulls (latitude, longitude) out of a decoded geolocation response.

    Flat fields, a combined "lat,lon" string, or either of those nested
    inside an object are accepted.

    Raises:
        ParseError: If no usable coordinate fields are present.
    """
    coords = _extract(payload)
    if coords is None:
        raise ParseError("Geolocation response has no latitude/longitude fields.")
    return coords


class GeoResolver:
    """One-shot IP geolocation lookup. No retries, no authentication."""

    def __init__(self, url: str = DEFAULT_PROVIDER_URL, timeout: float = DEFAULT_TIMEOUT):
        self.url = url
        self.timeout = timeout

    def resolve(self) -> tuple[float, float]:
        """
        Returns the approximate (latitude, longitude) of this machine.

        Raises:
            NetworkError: If the service is unreachable, times out, or answers
                          with a non-success status.
            ParseError: If the response body lacks usable coordinates.
        """
        log.debug(f"Requesting location from {self.url} (timeout={self.timeout}s)")
        try:
            response = requests.get(self.url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            log.error(f"Geolocation request to {self.url} failed: {e}")
            raise NetworkError(f"Could not reach geolocation service {self.url}: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            log.error(f"Bad response from geolocation service: {e}")
            raise ParseError(f"Geolocation response is not valid JSON: {e}") from e

        latitude, longitude = parse_coordinates(payload)
        log.info(f"Resolved approximate location: lat={latitude}, lon={longitude}")
        return latitude, longitude


class ManualLocation:
    """Fixed coordinates from the configuration file."""

    def __init__(self, latitude: str, longitude: str):
        try:
            self.latitude = helpers.latlon_str_to_float(latitude)
            self.longitude = helpers.latlon_str_to_float(longitude)
        except ValidationError as e:
            raise ParseError(f"Configured coordinates are invalid: {e}") from e

    def resolve(self) -> tuple[float, float]:
        log.debug(f"Using configured location: lat={self.latitude}, lon={self.longitude}")
        return self.latitude, self.longitude
