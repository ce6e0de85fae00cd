from datetime import time

import pytest

from sunswitch_core import api, helpers
from sunswitch_core.cache import LocationCache
from sunswitch_core.config import Settings
from sunswitch_core.exceptions import ConfigError, ValidationError
from sunswitch_core.geo import GeoResolver, ManualLocation
from sunswitch_core.models import LocationInfo, Theme


@pytest.fixture
def settings(tmp_path):
    return Settings(
        cache_path=tmp_path / "location",
        applier_command_set={"day": ["echo day"], "night": ["echo night"]},
        latitude="0N",
        longitude="0E",
    )


def test_build_resolver_prefers_manual_location(settings):
    assert isinstance(api.build_resolver(settings), ManualLocation)
    settings.latitude = settings.longitude = None
    resolver = api.build_resolver(settings)
    assert isinstance(resolver, GeoResolver)
    assert resolver.timeout == settings.timeout


def test_build_cache_respects_strategy(settings):
    assert isinstance(api.build_cache(settings), LocationCache)
    settings.cache_path = None
    assert api.build_cache(settings) is None


def test_build_applier_wraps_bad_commands(settings):
    settings.applier_command_set = {"day": ["echo 'unterminated"]}
    with pytest.raises(ConfigError):
        api.build_applier(settings)


def test_build_poller_interval_override(settings):
    assert api.build_poller(settings).interval == settings.interval
    assert api.build_poller(settings, interval=5).interval == 5
    assert api.build_poller(settings, use_cache=False).cache is None


def test_resolve_timezone(settings):
    assert api.resolve_timezone(settings) is None
    settings.timezone = "Not/AZone"
    with pytest.raises(ValidationError):
        api.resolve_timezone(settings)


def test_refresh_location_stores_in_cache(settings):
    info = api.refresh_location(settings)
    assert isinstance(info, LocationInfo)
    assert LocationCache(settings.cache_path).load() == info


def test_status_and_clear_cache(settings):
    assert api.get_status(settings)["location"] is None
    LocationCache(settings.cache_path).store(LocationInfo.sentinel())

    status = api.get_status(settings)
    assert status["location"].is_sentinel
    assert status["theme"] is Theme.DAY
    assert status["location_source"] == "manual (0N, 0E)"

    assert api.clear_cache(settings) is True
    assert api.get_status(settings)["location"] is None


def test_clear_cache_when_disabled(settings):
    settings.cache_path = None
    assert api.clear_cache(settings) is False


def test_apply_theme(settings, monkeypatch):
    calls = []
    monkeypatch.setattr(helpers, "run_command", lambda cmd, **kw: calls.append(cmd) or (0, "", ""))
    assert api.apply_theme("Night", settings) is Theme.NIGHT
    assert calls == [["echo", "night"]]


def test_apply_theme_rejects_unknown_mode(settings):
    with pytest.raises(ValidationError):
        api.apply_theme("dusk", settings)


def test_sun_times(settings):
    rows = api.sun_times(3, settings)
    assert len(rows) == 3
    assert all(row["sunrise"] is not None for row in rows)
    assert rows[1]["date"] > rows[0]["date"]
    assert rows[0]["sunrise"] < rows[0]["sunset"]


def test_sun_times_requires_positive_days(settings):
    with pytest.raises(ValidationError):
        api.sun_times(0, settings)
