# sunswitch_core/cache.py
"""
Persistence of the last computed LocationInfo.

The cache holds a single line, `HH:MM:SS,HH:MM:SS` (sunset, then sunrise).
It is read once at startup so that a theme can be applied before the
geolocation round trip finishes. Any problem reading it is a cache miss.
"""

import logging
import os
import pathlib
import tempfile
from datetime import datetime, time
from typing import Optional

from .exceptions import CacheReadError, CacheWriteError, ValidationError
from .models import LocationInfo

log = logging.getLogger(__name__)

APP_NAME = "sunswitch"
TIME_FORMAT = "%H:%M:%S"


def default_cache_path() -> pathlib.Path:
    """`$XDG_CACHE_HOME/sunswitch/location`, falling back to ~/.cache."""
    base = os.environ.get("XDG_CACHE_HOME")
    cache_home = pathlib.Path(base) if base else pathlib.Path.home() / ".cache"
    return cache_home / APP_NAME / "location"


def serialize(info: LocationInfo) -> str:
    return f"{info.sunset.strftime(TIME_FORMAT)},{info.sunrise.strftime(TIME_FORMAT)}"


def _parse_time(value: str) -> time:
    try:
        return datetime.strptime(value.strip(), TIME_FORMAT).time()
    except ValueError as e:
        raise CacheReadError(f"Invalid time '{value}' in cache: {e}") from e


def deserialize(text: str) -> LocationInfo:
    """
    Parses the cache file format.

    Raises:
        CacheReadError: On a wrong field count or an unparsable time.
    """
    fields = text.strip().split(",")
    if len(fields) != 2:
        raise CacheReadError(f"Expected 2 fields in cache, found {len(fields)}")
    try:
        return LocationInfo(sunset=_parse_time(fields[0]), sunrise=_parse_time(fields[1]))
    except ValidationError as e:
        raise CacheReadError(str(e)) from e


class LocationCache:
    """Single-writer file cache for one LocationInfo."""

    def __init__(self, path: Optional[pathlib.Path] = None):
        self.path = pathlib.Path(path) if path else default_cache_path()

    def _read(self) -> LocationInfo:
        if not self.path.is_file():
            raise CacheReadError(f"No cache file at {self.path}")
        try:
            content = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise CacheReadError(f"Could not read cache file {self.path}: {e}") from e
        return deserialize(content)

    def load(self) -> Optional[LocationInfo]:
        """Returns the cached LocationInfo, or None on any kind of cache miss."""
        try:
            info = self._read()
        except CacheReadError as e:
            log.debug(f"Location cache miss: {e}")
            return None
        log.info(f"Loaded cached location from {self.path}: {info}")
        return info

    def store(self, info: LocationInfo) -> None:
        """
        Atomically replaces the cache file with `info`.

        Raises:
            CacheWriteError: If the directory or file cannot be written.
        """
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(serialize(info))
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name is not None:
                pathlib.Path(tmp_name).unlink(missing_ok=True)
            raise CacheWriteError(f"Failed to write location cache {self.path}: {e}") from e
        log.debug(f"Stored location {info} in {self.path}")

    def clear(self) -> bool:
        """Deletes the cache file. Returns True if a file was removed."""
        try:
            existed = self.path.exists()
            self.path.unlink(missing_ok=True)
        except OSError as e:
            raise CacheWriteError(f"Failed to remove location cache {self.path}: {e}") from e
        if existed:
            log.info(f"Removed location cache {self.path}")
        return existed
