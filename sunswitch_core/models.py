# sunswitch_core/models.py
"""
Value types shared across the sunswitch core: the `Theme` classification
and the `LocationInfo` sunrise/sunset pair.
"""

import enum
from dataclasses import dataclass
from datetime import time

from .exceptions import ValidationError

# Substituted when the sun never rises or never sets on the requested date.
# With these bounds the decision engine always answers Day.
SENTINEL_SUNSET = time(23, 59, 59)
SENTINEL_SUNRISE = time(0, 0, 0)


class Theme(enum.Enum):
    """The two appearance states sunswitch can select."""

    DAY = "day"
    NIGHT = "night"

    @property
    def is_day(self) -> bool:
        return self is Theme.DAY

    @classmethod
    def from_str(cls, value: str) -> "Theme":
        """Parses 'day' or 'night' (case-insensitive)."""
        try:
            return cls(value.strip().lower())
        except (AttributeError, ValueError):
            raise ValidationError(
                f"Invalid theme '{value}'. Expected 'day' or 'night'."
            )

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class LocationInfo:
    """
    Local sunset and sunrise times of day for one location.

    Both values are wall-clock times without a date. Microseconds are
    dropped so that a value survives a round trip through the cache file.
    """

    sunset: time
    sunrise: time

    def __post_init__(self):
        for name in ("sunset", "sunrise"):
            value = getattr(self, name)
            if not isinstance(value, time):
                raise ValidationError(
                    f"LocationInfo.{name} must be a datetime.time, got {type(value).__name__}"
                )
            if value.microsecond or value.tzinfo is not None:
                object.__setattr__(
                    self, name, value.replace(microsecond=0, tzinfo=None)
                )

    @classmethod
    def sentinel(cls) -> "LocationInfo":
        """The 'always day' value used for polar day and polar night."""
        return cls(sunset=SENTINEL_SUNSET, sunrise=SENTINEL_SUNRISE)

    @property
    def is_sentinel(self) -> bool:
        return self.sunset == SENTINEL_SUNSET and self.sunrise == SENTINEL_SUNRISE

    def __str__(self) -> str:
        return (
            f"sunrise={self.sunrise.strftime('%H:%M:%S')}, "
            f"sunset={self.sunset.strftime('%H:%M:%S')}"
        )
