from datetime import time

import pytest

from sunswitch_core import cache as cache_mod
from sunswitch_core.cache import LocationCache
from sunswitch_core.exceptions import CacheReadError, CacheWriteError
from sunswitch_core.models import LocationInfo


@pytest.fixture
def cache(tmp_path):
    return LocationCache(tmp_path / "sunswitch" / "location")


@pytest.mark.parametrize(
    "info",
    [
        LocationInfo(sunset=time(18, 0, 0), sunrise=time(6, 0, 0)),
        LocationInfo(sunset=time(21, 3, 59), sunrise=time(5, 36, 1)),
        LocationInfo.sentinel(),
    ],
)
def test_store_then_load_round_trips(cache, info):
    cache.store(info)
    assert cache.load() == info


def test_file_format(cache):
    cache.store(LocationInfo(sunset=time(19, 5, 7), sunrise=time(6, 4, 3)))
    assert cache.path.read_text(encoding="utf-8") == "19:05:07,06:04:03"


def test_store_overwrites_previous_value(cache):
    cache.store(LocationInfo(sunset=time(18), sunrise=time(6)))
    cache.store(LocationInfo(sunset=time(20), sunrise=time(5)))
    assert cache.load() == LocationInfo(sunset=time(20), sunrise=time(5))
    assert [p.name for p in cache.path.parent.iterdir()] == ["location"]


def test_load_missing_file_is_none(cache):
    assert cache.load() is None


@pytest.mark.parametrize(
    "content",
    [
        "",
        "\n",
        "garbage",
        "18:00:00",
        "18:00:00,06:00:00,07:00:00",
        "25:00:00,06:00:00",
        "18:00,06:00",
        "18:00:00;06:00:00",
    ],
)
def test_load_malformed_file_is_none(cache, content):
    cache.path.parent.mkdir(parents=True)
    cache.path.write_text(content, encoding="utf-8")
    assert cache.load() is None


def test_load_tolerates_trailing_newline(cache):
    cache.path.parent.mkdir(parents=True)
    cache.path.write_text("18:30:00,06:15:00\n", encoding="utf-8")
    assert cache.load() == LocationInfo(sunset=time(18, 30), sunrise=time(6, 15))


def test_load_binary_garbage_is_none(cache):
    cache.path.parent.mkdir(parents=True)
    cache.path.write_bytes(b"\xff\xfe\x00\x01")
    assert cache.load() is None


def test_load_directory_is_none(tmp_path):
    assert LocationCache(tmp_path).load() is None


def test_deserialize_raises_read_error():
    with pytest.raises(CacheReadError):
        cache_mod.deserialize("1,2,3")


def test_store_failure_raises_write_error(tmp_path):
    target = tmp_path / "occupied"
    target.mkdir()
    (target / "child").write_text("x")
    with pytest.raises(CacheWriteError):
        LocationCache(target).store(LocationInfo(sunset=time(18), sunrise=time(6)))
    assert not [p for p in tmp_path.iterdir() if p.name.endswith(".tmp")]


def test_clear(cache):
    assert cache.clear() is False
    cache.store(LocationInfo(sunset=time(18), sunrise=time(6)))
    assert cache.clear() is True
    assert cache.load() is None


def test_default_path_honours_xdg_cache_home(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path))
    assert cache_mod.default_cache_path() == tmp_path / "sunswitch" / "location"
    assert LocationCache().path == tmp_path / "sunswitch" / "location"
