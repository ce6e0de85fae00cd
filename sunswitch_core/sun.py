# sunswitch_core/sun.py

import logging
import math
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Dict, Optional, Tuple

# Import custom exceptions from within the same package
from .exceptions import AstronomicalCalculationError
from .models import LocationInfo

log = logging.getLogger(__name__)


class _PolarCondition(Exception):
    """Raised internally when the sun does not cross the horizon on a date."""


# --- Internal Sun Calculation Algorithm ---


def _noaa_sunrise_sunset(
    *, lat: float, lon: float, target_date: date
) -> Tuple[float, float]:
    """
    Internal NOAA algorithm to calculate UTC sunrise/sunset times in minutes past midnight.

    Based on NOAA Javascript: www.esrl.noaa.gov/gmd/grad/solcalc/calcdetails.html

    Args:
        lat: Latitude in decimal degrees (-90 to 90).
        lon: Longitude in decimal degrees (-180 to 180).
        target_date: The specific (UTC) date for calculation.

    Returns:
        A tuple (sunrise_utc_minutes, sunset_utc_minutes).

    Raises:
        AstronomicalCalculationError: If latitude/longitude are out of range
                                      or the hour angle cannot be computed.
        _PolarCondition: If the sun never rises or never sets on that date.
    """
    log.debug(
        f"Calculating NOAA sun times for lat={lat}, lon={lon}, date={target_date}"
    )
    if not (-90 <= lat <= 90):
        raise AstronomicalCalculationError(
            f"Invalid latitude for calculation: {lat}. Must be between -90 and 90."
        )
    if not (-180 <= lon <= 180):
        raise AstronomicalCalculationError(
            f"Invalid longitude for calculation: {lon}. Must be between -180 and 180."
        )

    n = target_date.timetuple().tm_yday  # Day of year

    # Equation of Time and Declination (approximation)
    gamma = (2 * math.pi / 365) * (n - 1 + (12 - (lon / 15)) / 24)  # Fractional year
    eqtime = 229.18 * (
        0.000075
        + 0.001868 * math.cos(gamma)
        - 0.032077 * math.sin(gamma)
        - 0.014615 * math.cos(2 * gamma)
        - 0.040849 * math.sin(2 * gamma)
    )
    decl = (
        0.006918
        - 0.399912 * math.cos(gamma)
        + 0.070257 * math.sin(gamma)
        - 0.006758 * math.cos(2 * gamma)
        + 0.000907 * math.sin(2 * gamma)
        - 0.002697 * math.cos(3 * gamma)
        + 0.00148 * math.sin(3 * gamma)
    )

    # Hour Angle Calculation
    lat_rad = math.radians(lat)
    # Zenith for sunrise/sunset - 90.833 degrees
    # includes refraction and sun radius adjustment
    cos_zenith = math.cos(math.radians(90.833))
    try:
        cos_h_arg = (cos_zenith - math.sin(lat_rad) * math.sin(decl)) / (
            math.cos(lat_rad) * math.cos(decl)
        )
    except ZeroDivisionError:
        raise AstronomicalCalculationError(
            "Division by zero encountered during hour angle calculation (likely near poles)."
        )

    if math.isnan(cos_h_arg):
        raise AstronomicalCalculationError(
            f"Hour angle did not converge for lat={lat}, lon={lon} on {target_date}."
        )
    if cos_h_arg > 1.0:
        raise _PolarCondition(f"Sun never rises on {target_date} at lat {lat} (polar night).")
    if cos_h_arg < -1.0:
        raise _PolarCondition(f"Sun never sets on {target_date} at lat {lat} (polar day).")

    ha_minutes = 4 * math.degrees(math.acos(cos_h_arg))  # 15 deg/hour -> 4 min/deg

    # Solar noon (in minutes from UTC midnight)
    solar_noon_utc_min = 720 - 4 * lon - eqtime  # 720 = 12 * 60

    sunrise_utc_min = solar_noon_utc_min - ha_minutes
    sunset_utc_min = solar_noon_utc_min + ha_minutes

    log.debug(
        f"Calculated UTC times (minutes from midnight): sunrise={sunrise_utc_min:.2f}, sunset={sunset_utc_min:.2f}"
    )
    return sunrise_utc_min, sunset_utc_min


def _to_local(target_date: date, minutes: float, tz: Optional[tzinfo]) -> datetime:
    utc_midnight = datetime(
        target_date.year, target_date.month, target_date.day, tzinfo=timezone.utc
    )
    event_utc = utc_midnight + timedelta(minutes=minutes)
    # astimezone(None) converts to the system local zone
    return event_utc.astimezone(tz)


# --- Public API for Sun Times ---


def get_sun_times(
    lat: float, lon: float, target_date: date, tz: Optional[tzinfo] = None
) -> Dict[str, Optional[datetime]]:
    """
    Calculates sunrise and sunset times as timezone-aware datetimes.

    Args:
        lat: Latitude in decimal degrees (-90 to 90).
        lon: Longitude in decimal degrees (-180 to 180).
        target_date: The date for which to calculate times.
        tz: Target timezone. None means the system local zone.

    Returns:
        A dictionary {'sunrise': datetime_obj, 'sunset': datetime_obj}. Both
        values are None when the sun does not rise or set on that date.

    Raises:
        AstronomicalCalculationError: For invalid coordinates or a failed
                                      hour angle computation.
    """
    try:
        sunrise_min, sunset_min = _noaa_sunrise_sunset(
            lat=lat, lon=lon, target_date=target_date
        )
    except _PolarCondition as e:
        log.info(str(e))
        return {"sunrise": None, "sunset": None}

    sunrise_local = _to_local(target_date, sunrise_min, tz)
    sunset_local = _to_local(target_date, sunset_min, tz)
    log.debug(
        f"Calculated local times: sunrise={sunrise_local.isoformat()}, sunset={sunset_local.isoformat()}"
    )
    return {"sunrise": sunrise_local, "sunset": sunset_local}


def compute(
    target_date: date, latitude: float, longitude: float, tz: Optional[tzinfo] = None
) -> Tuple[time, time]:
    """
    Returns the local (sunset, sunrise) times of day for a UTC calendar date.

    On polar day or polar night the sentinel pair (23:59:59, 00:00:00) is
    returned instead, which the decision engine always classifies as Day.
    """
    times = get_sun_times(latitude, longitude, target_date, tz)
    if times["sunrise"] is None or times["sunset"] is None:
        sentinel = LocationInfo.sentinel()
        log.warning(
            f"No sunrise/sunset at lat={latitude} on {target_date}; using always-day boundaries."
        )
        return sentinel.sunset, sentinel.sunrise

    sunset = times["sunset"].time().replace(microsecond=0)
    sunrise = times["sunrise"].time().replace(microsecond=0)
    return sunset, sunrise


def estimate(resolver, today: Optional[date] = None, tz: Optional[tzinfo] = None) -> LocationInfo:
    """
    Resolves coordinates with `resolver` and computes today's LocationInfo.

    `today` defaults to the current UTC date. Resolver errors (NetworkError,
    ParseError) and AstronomicalCalculationError propagate to the caller.
    """
    latitude, longitude = resolver.resolve()
    target_date = today or datetime.now(timezone.utc).date()
    sunset, sunrise = compute(target_date, latitude, longitude, tz)
    info = LocationInfo(sunset=sunset, sunrise=sunrise)
    log.info(f"Estimated location ({latitude:.2f}, {longitude:.2f}): {info}")
    return info
