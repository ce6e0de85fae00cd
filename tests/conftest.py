from datetime import time

import pytest

from sunswitch_core.applier import ThemeApplier
from sunswitch_core.exceptions import ApplierError
from sunswitch_core.models import LocationInfo


class RecordingApplier(ThemeApplier):
    """Remembers every theme it was asked to apply."""

    def __init__(self, fail_on=None, on_apply=None):
        self.applied = []
        self.fail_on = fail_on
        self.on_apply = on_apply

    def apply(self, theme):
        if theme is self.fail_on:
            raise ApplierError(f"cannot apply {theme}")
        self.applied.append(theme)
        if self.on_apply is not None:
            self.on_apply(theme)


class FixedClock:
    """Clock that returns `now` until it is moved."""

    def __init__(self, now: time):
        self.now = now

    def __call__(self) -> time:
        return self.now


@pytest.fixture
def applier():
    return RecordingApplier()


@pytest.fixture
def six_to_six():
    return LocationInfo(sunset=time(18, 0, 0), sunrise=time(6, 0, 0))
