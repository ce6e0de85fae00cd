# sunswitch_core/exceptions.py
"""
Custom exception classes for the sunswitch core library.

Every error raised by the core derives from `SunSwitchError`, so callers
(the CLI, the poller) can catch the whole family in one place while still
handling the specific cases they care about.
"""


class SunSwitchError(Exception):
    """Base exception for sunswitch core errors."""

    pass


class ConfigError(SunSwitchError):
    """Errors related to configuration loading, saving, or validation."""

    pass


class ValidationError(SunSwitchError):
    """Errors for invalid user input or data formats."""

    pass


class DependencyError(SunSwitchError):
    """Errors due to missing external command dependencies."""

    pass


class NetworkError(SunSwitchError):
    """The geolocation service could not be reached or returned a failure status."""

    pass


class ParseError(SunSwitchError):
    """The geolocation response did not contain usable coordinates."""

    pass


class AstronomicalCalculationError(SunSwitchError):
    """Invalid coordinates or a non-convergent sunrise/sunset calculation."""

    pass


class CacheError(SunSwitchError):
    """Errors reading or writing the location cache."""

    pass


class CacheReadError(CacheError):
    """The cache file is missing, unreadable, or malformed. Treated as a cache miss."""

    pass


class CacheWriteError(CacheError):
    """The cache file could not be written. Logged, never fatal."""

    pass


class ApplierError(SunSwitchError):
    """Applying a theme failed; external state may no longer match the decision."""

    pass


class SystemdError(SunSwitchError):
    """Errors interacting with systemctl."""

    pass
