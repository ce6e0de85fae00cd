from datetime import time

import pytest

from sunswitch_core.decision import classify, current_theme
from sunswitch_core.models import LocationInfo, Theme


@pytest.mark.parametrize(
    "now, expected",
    [
        (time(0, 0, 0), Theme.NIGHT),
        (time(5, 59, 59), Theme.NIGHT),
        (time(6, 0, 0), Theme.DAY),
        (time(12, 0, 0), Theme.DAY),
        (time(18, 0, 0), Theme.DAY),
        (time(18, 0, 1), Theme.NIGHT),
        (time(23, 59, 59), Theme.NIGHT),
    ],
)
def test_boundaries_resolve_to_day(six_to_six, now, expected):
    assert classify(six_to_six, now) is expected


def test_day_iff_between_sunrise_and_sunset():
    info = LocationInfo(sunset=time(20, 15, 30), sunrise=time(4, 45, 10))
    for hour in range(24):
        for minute in (0, 15, 45, 59):
            now = time(hour, minute, 30)
            expected = Theme.DAY if info.sunrise <= now <= info.sunset else Theme.NIGHT
            assert classify(info, now) is expected


@pytest.mark.parametrize(
    "now", [time(0, 0, 0), time(0, 0, 1), time(3, 30), time(12, 0), time(23, 59, 58), time(23, 59, 59)]
)
def test_sentinel_is_always_day(now):
    assert classify(LocationInfo.sentinel(), now) is Theme.DAY


def test_current_theme_uses_injected_clock(six_to_six):
    assert current_theme(six_to_six, clock=lambda: time(22, 0)) is Theme.NIGHT
    assert current_theme(six_to_six, clock=lambda: time(9, 0)) is Theme.DAY
