# sunswitch_core/decision.py
"""Day/night classification of a time of day."""

import logging
from datetime import datetime, time
from typing import Callable, Optional

from .models import LocationInfo, Theme

log = logging.getLogger(__name__)


def classify(info: LocationInfo, now: time) -> Theme:
    """
    Returns NIGHT when `now` is after sunset or before sunrise, DAY otherwise.

    Only times of day are compared, so sunrise is assumed to precede sunset.
    The exact sunrise and sunset instants count as day.
    """
    if now > info.sunset or now < info.sunrise:
        return Theme.NIGHT
    return Theme.DAY


def local_clock() -> time:
    """Current local wall-clock time, truncated to seconds."""
    return datetime.now().time().replace(microsecond=0)


def current_theme(
    info: LocationInfo, clock: Optional[Callable[[], time]] = None
) -> Theme:
    """Classifies the current moment for `info`."""
    now = (clock or local_clock)()
    theme = classify(info, now)
    log.debug(f"Classified {now.strftime('%H:%M:%S')} as {theme} ({info})")
    return theme
