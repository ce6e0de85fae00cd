from datetime import date, time, timedelta, timezone

import pytest

from sunswitch_core import sun
from sunswitch_core.exceptions import AstronomicalCalculationError
from sunswitch_core.models import LocationInfo

EDT = timezone(timedelta(hours=-4))


class StaticResolver:
    def __init__(self, lat, lon):
        self.coords = (lat, lon)

    def resolve(self):
        return self.coords


def test_equator_equinox_in_utc():
    sunset, sunrise = sun.compute(date(2024, 3, 20), 0.0, 0.0, timezone.utc)
    assert time(6, 0) <= sunrise <= time(6, 10)
    assert time(18, 5) <= sunset <= time(18, 15)


def test_returns_sunset_first_in_local_time():
    sunset, sunrise = sun.compute(date(2024, 6, 21), 43.65, -79.38, EDT)
    assert time(5, 25) <= sunrise <= time(5, 50)
    assert time(20, 50) <= sunset <= time(21, 15)
    assert sunrise.microsecond == 0 and sunset.microsecond == 0


@pytest.mark.parametrize("target_date", [date(2024, 6, 21), date(2024, 12, 21)])
def test_polar_day_and_night_return_sentinel(target_date):
    sunset, sunrise = sun.compute(target_date, 80.0, 15.0, timezone.utc)
    assert (sunset, sunrise) == (time(23, 59, 59), time(0, 0, 0))


@pytest.mark.parametrize("lat, lon", [(91.0, 0.0), (-90.5, 0.0), (45.0, 180.5), (45.0, -181.0)])
def test_invalid_coordinates_raise(lat, lon):
    with pytest.raises(AstronomicalCalculationError):
        sun.compute(date(2024, 3, 20), lat, lon)


def test_get_sun_times_polar_has_no_events():
    times = sun.get_sun_times(-85.0, 0.0, date(2024, 6, 21), timezone.utc)
    assert times == {"sunrise": None, "sunset": None}


def test_get_sun_times_are_timezone_aware():
    times = sun.get_sun_times(43.65, -79.38, date(2024, 6, 21), EDT)
    assert times["sunrise"].utcoffset() == timedelta(hours=-4)
    assert times["sunrise"] < times["sunset"]


def test_estimate_builds_location_info():
    info = sun.estimate(StaticResolver(0.0, 0.0), today=date(2024, 3, 20), tz=timezone.utc)
    assert isinstance(info, LocationInfo)
    assert time(6, 0) <= info.sunrise <= time(6, 10)
    assert not info.is_sentinel


def test_estimate_polar_location_is_sentinel():
    info = sun.estimate(StaticResolver(78.2, 15.6), today=date(2024, 6, 21), tz=timezone.utc)
    assert info.is_sentinel
