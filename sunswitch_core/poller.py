# sunswitch_core/poller.py
"""
The transition poller: keeps the desktop theme in step with the sun.

On start it applies the cached location's theme right away, then resolves
a fresh location and re-applies if that changed anything. Afterwards it
re-classifies the clock on a fixed interval and calls the applier only
when the classification changes. Two interchangeable schedulers are
provided: a blocking loop (`run`) and an asyncio coroutine (`run_async`).
"""

import asyncio
import logging
import math
import threading
from datetime import time
from typing import Callable, Optional

from .applier import ThemeApplier
from .cache import LocationCache
from .decision import classify, local_clock
from .exceptions import (
    AstronomicalCalculationError,
    CacheWriteError,
    NetworkError,
    ParseError,
    SunSwitchError,
    ValidationError,
)
from .models import LocationInfo, Theme

log = logging.getLogger(__name__)

_RESOLUTION_ERRORS = (NetworkError, ParseError, AstronomicalCalculationError)


class TransitionPoller:
    """Applies a theme at startup and on every day/night transition afterwards."""

    def __init__(
        self,
        applier: ThemeApplier,
        estimator: Callable[[], LocationInfo],
        cache: Optional[LocationCache] = None,
        interval: float = 30.0,
        clock: Optional[Callable[[], time]] = None,
    ):
        if not math.isfinite(interval) or interval <= 0:
            raise ValidationError(f"Poll interval must be a positive number, got {interval}")
        self.applier = applier
        self.estimator = estimator
        self.cache = cache
        self.interval = interval
        self.clock = clock or local_clock
        self.location: Optional[LocationInfo] = None
        self.current_theme: Optional[Theme] = None

    # --- Startup ---

    def _apply(self, theme: Theme):
        self.applier.apply(theme)
        self.current_theme = theme

    def _apply_cached(self) -> Optional[LocationInfo]:
        if self.cache is None:
            return None
        cached = self.cache.load()
        if cached is not None:
            self.location = cached
            theme = classify(cached, self.clock())
            log.info(f"Applying {theme} theme from cached location ({cached})")
            self._apply(theme)
        return cached

    def _resolve(self, cached: Optional[LocationInfo]) -> Optional[LocationInfo]:
        try:
            return self.estimator()
        except _RESOLUTION_ERRORS as e:
            if cached is None:
                log.error(f"Could not determine sunrise/sunset times: {e}")
                raise
            log.error(f"Location refresh failed, keeping cached location: {e}")
            return None

    def _adopt(self, fresh: Optional[LocationInfo], cached: Optional[LocationInfo]):
        if fresh is None or fresh == cached:
            log.debug("Cached location is current; nothing to re-apply.")
            return

        if self.cache is not None:
            try:
                self.cache.store(fresh)
            except CacheWriteError as e:
                log.warning(f"{e}; continuing with in-memory location.")

        self.location = fresh
        theme = classify(fresh, self.clock())
        log.info(f"Applying {theme} theme for location ({fresh})")
        self._apply(theme)

    def start(self) -> LocationInfo:
        """
        Performs the startup sequence and returns the location in use.

        Raises:
            NetworkError, ParseError, AstronomicalCalculationError: If fresh
                data cannot be obtained and nothing was cached.
            ApplierError: If applying a theme fails.
        """
        cached = self._apply_cached()
        fresh = self._resolve(cached)
        self._adopt(fresh, cached)
        return self.location

    # --- Running ---

    def tick(self, now: Optional[time] = None) -> Optional[Theme]:
        """
        Re-classifies `now` (default: the clock) and applies on a transition.

        Returns the newly applied theme, or None when nothing changed.
        """
        if self.location is None:
            raise SunSwitchError("Poller has no location; call start() first.")
        theme = classify(self.location, now if now is not None else self.clock())
        if theme == self.current_theme:
            return None
        log.info(f"Transition detected: {self.current_theme} -> {theme}")
        self._apply(theme)
        return theme

    def run(self, stop_event: Optional[threading.Event] = None):
        """Blocking poll loop. Returns once `stop_event` is set."""
        stop_event = stop_event or threading.Event()
        self.start()
        log.info(f"Polling every {self.interval:g}s (threaded scheduler)")
        while not stop_event.wait(timeout=self.interval):
            self.tick()
        log.info("Poller stopped.")

    async def run_async(self, stop_event: Optional[asyncio.Event] = None):
        """Asyncio poll loop. Returns once `stop_event` is set."""
        stop_event = stop_event or asyncio.Event()
        cached = self._apply_cached()
        fresh = await asyncio.to_thread(self._resolve, cached)
        self._adopt(fresh, cached)
        log.info(f"Polling every {self.interval:g}s (asyncio scheduler)")
        while not stop_event.is_set():
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                self.tick()
        log.info("Poller stopped.")
