# sunswitch_core/api.py
"""
Public facade of the sunswitch core.

Wires configuration, geolocation, the solar calculator, the cache, the
applier and the poller together so that front ends (the CLI) only deal
with a handful of functions.
"""

import asyncio
import configparser
import logging
from datetime import date, timedelta, tzinfo
from typing import Any, Optional

from . import config as cfg
from . import exceptions as exc
from . import geo, sun
from . import systemd as sysd
from .applier import CommandApplier
from .cache import LocationCache
from .decision import classify, local_clock
from .models import LocationInfo, Theme
from .poller import TransitionPoller

try:
    from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
except ImportError:
    raise ImportError(
        "Required module 'zoneinfo' not found. sunswitch requires Python 3.9+."
    )

log = logging.getLogger(__name__)

_cfg_mgr = cfg.ConfigManager()


# --- Configuration ---


def get_current_config() -> configparser.ConfigParser:
    """Loads config.ini with defaults applied in memory."""
    log.debug("API: get_current_config called")
    return _cfg_mgr.load_config()


def save_configuration(config_obj: configparser.ConfigParser) -> bool:
    log.debug("API: save_configuration called")
    return _cfg_mgr.save_config(config_obj)


def load_settings() -> cfg.Settings:
    """Loads config.ini and validates it into Settings."""
    return _cfg_mgr.build_settings(get_current_config())


# --- Component factories ---


def resolve_timezone(settings: cfg.Settings) -> Optional[tzinfo]:
    """Returns the configured zone, or None for the system local zone."""
    if not settings.timezone:
        return None
    try:
        return ZoneInfo(settings.timezone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise exc.ValidationError(f"Invalid or unknown IANA Timezone Name: '{settings.timezone}'") from e


def build_resolver(settings: cfg.Settings):
    if settings.manual_location:
        return geo.ManualLocation(settings.latitude, settings.longitude)
    return geo.GeoResolver(settings.provider_url, settings.timeout)


def build_cache(settings: cfg.Settings) -> Optional[LocationCache]:
    if not settings.cache_enabled:
        return None
    return LocationCache(settings.cache_path)


def build_applier(settings: cfg.Settings) -> CommandApplier:
    try:
        return CommandApplier(settings.applier_command_set, timeout=settings.command_timeout)
    except exc.ValidationError as e:
        raise exc.ConfigError(f"Invalid [Applier] configuration: {e}") from e


def build_poller(
    settings: cfg.Settings,
    interval: Optional[float] = None,
    use_cache: bool = True,
) -> TransitionPoller:
    resolver = build_resolver(settings)
    tz = resolve_timezone(settings)
    return TransitionPoller(
        applier=build_applier(settings),
        estimator=lambda: sun.estimate(resolver, tz=tz),
        cache=build_cache(settings) if use_cache else None,
        interval=interval or settings.interval,
    )


# --- Operations ---


def estimate_location(settings: Optional[cfg.Settings] = None) -> LocationInfo:
    """Resolves coordinates and computes today's LocationInfo (no caching)."""
    settings = settings or load_settings()
    return sun.estimate(build_resolver(settings), tz=resolve_timezone(settings))


def refresh_location(settings: Optional[cfg.Settings] = None) -> LocationInfo:
    """Re-estimates the location now and writes it to the cache."""
    settings = settings or load_settings()
    info = estimate_location(settings)
    cache = build_cache(settings)
    if cache is None:
        log.warning("Location cache is disabled; refreshed value was not stored.")
    else:
        cache.store(info)
        log.info(f"Cached location updated at {cache.path}")
    return info


def clear_cache(settings: Optional[cfg.Settings] = None) -> bool:
    settings = settings or load_settings()
    cache = build_cache(settings)
    if cache is None:
        log.info("Location cache is disabled; nothing to clear.")
        return False
    return cache.clear()


def apply_theme(mode: str, settings: Optional[cfg.Settings] = None) -> Theme:
    """Applies 'day' or 'night' once through the configured applier."""
    theme = Theme.from_str(mode)
    settings = settings or load_settings()
    build_applier(settings).apply(theme)
    return theme


def run_scheduler(
    settings: Optional[cfg.Settings] = None,
    interval: Optional[float] = None,
    use_cache: bool = True,
):
    """
    Runs the poller in the foreground until interrupted.

    Raises:
        ApplierError: If a theme cannot be applied.
        NetworkError, ParseError, AstronomicalCalculationError: If no
            location can be obtained at startup.
    """
    settings = settings or load_settings()
    poller = build_poller(settings, interval=interval, use_cache=use_cache)
    poller.applier.verify()
    log.info(f"Starting sunswitch poller ({settings.scheduler} scheduler)")
    if settings.scheduler == "async":
        asyncio.run(poller.run_async())
    else:
        poller.run()


def get_status(settings: Optional[cfg.Settings] = None) -> dict[str, Any]:
    """Collects cached location, current theme and paths for display."""
    settings = settings or load_settings()
    status: dict[str, Any] = {
        "config_file": str(_cfg_mgr.config_file),
        "cache_path": str(settings.cache_path) if settings.cache_path else None,
        "location_source": (
            f"manual ({settings.latitude}, {settings.longitude})"
            if settings.manual_location
            else settings.provider_url
        ),
        "scheduler": settings.scheduler,
        "interval": settings.interval,
        "location": None,
        "theme": None,
        "now": None,
    }
    cache = build_cache(settings)
    info = cache.load() if cache else None
    if info is not None:
        now = local_clock()
        status["location"] = info
        status["theme"] = classify(info, now)
        status["now"] = now
    return status


def sun_times(days: int, settings: Optional[cfg.Settings] = None) -> list[dict[str, Any]]:
    """Sunrise/sunset for `days` days from today, using the configured location."""
    if days <= 0:
        raise exc.ValidationError("Number of days must be a positive integer.")
    settings = settings or load_settings()
    latitude, longitude = build_resolver(settings).resolve()
    tz = resolve_timezone(settings)
    today = date.today()
    rows = []
    for i in range(days):
        target_date = today + timedelta(days=i)
        times = sun.get_sun_times(latitude, longitude, target_date, tz)
        rows.append({"date": target_date, **times})
    return rows


# --- Service management ---


def install_service(script_path: str, python_executable: Optional[str] = None) -> bool:
    return sysd.SystemdManager().install_service(script_path, python_executable)


def uninstall_service() -> bool:
    return sysd.SystemdManager().remove_service()
