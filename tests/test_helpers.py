import pytest

from sunswitch_core import helpers
from sunswitch_core.exceptions import DependencyError, SunSwitchError, ValidationError


@pytest.mark.parametrize(
    "text, expected",
    [
        ("43.65N", 43.65),
        ("79.38W", -79.38),
        (" 33.87s ", -33.87),
        ("151.21E", 151.21),
        ("-12.5", -12.5),
        ("0", 0.0),
    ],
)
def test_latlon_str_to_float(text, expected):
    assert helpers.latlon_str_to_float(text) == pytest.approx(expected)


@pytest.mark.parametrize("text", ["", "north", "91N", "181E", "200", "43.65X"])
def test_latlon_str_to_float_rejects(text):
    with pytest.raises(ValidationError):
        helpers.latlon_str_to_float(text)


def test_latlon_requires_string():
    with pytest.raises(ValidationError):
        helpers.latlon_str_to_float(43.65)


def test_check_dependencies_reports_missing():
    with pytest.raises(DependencyError, match="sunswitch-no-such-tool"):
        helpers.check_dependencies(["sunswitch-no-such-tool"])


def test_run_command_missing_executable():
    with pytest.raises(FileNotFoundError):
        helpers.run_command(["sunswitch-no-such-tool", "--version"])


def test_run_command_timeout_is_sunswitch_error():
    with pytest.raises(SunSwitchError, match="timed out"):
        helpers.run_command(["sleep", "5"], timeout=0.2)
