# sunswitch_core/config.py
"""
Configuration management for sunswitch.

This module handles loading, saving, and default values for the
`config.ini` file, and turns a loaded parser into the `Settings` object
that the rest of the core is built from.
"""

import configparser
import logging
import math
import pathlib
from dataclasses import dataclass, field
from typing import Literal, Optional

from . import geo
from .applier import DEFAULT_COMMAND_SET, DEFAULT_COMMAND_TIMEOUT
from .cache import default_cache_path
from .exceptions import ConfigError

log = logging.getLogger(__name__)

# --- Constants ---
APP_NAME = "sunswitch"
CONFIG_DIR = pathlib.Path.home() / ".config" / APP_NAME
CONFIG_FILE = CONFIG_DIR / "config.ini"

SCHEDULERS = ("thread", "async")
DEFAULT_INTERVAL = 30.0

# Default configuration values
DEFAULT_CONFIG: dict[str, dict[str, str]] = {
    "Location": {
        "PROVIDER_URL": geo.DEFAULT_PROVIDER_URL,
        "TIMEOUT": str(geo.DEFAULT_TIMEOUT),
        "LATITUDE": "",
        "LONGITUDE": "",
        "TIMEZONE": "",
    },
    "Cache": {
        "ENABLED": "true",
        "PATH": "",
    },
    "Poller": {
        "INTERVAL": str(DEFAULT_INTERVAL),
        "SCHEDULER": "thread",
    },
    "Applier": {
        "DAY_COMMANDS": "\n".join(DEFAULT_COMMAND_SET["day"]),
        "NIGHT_COMMANDS": "\n".join(DEFAULT_COMMAND_SET["night"]),
        "COMMAND_TIMEOUT": str(DEFAULT_COMMAND_TIMEOUT),
    },
}


@dataclass
class Settings:
    """Everything the core needs, resolved from config.ini."""

    cache_path: Optional[pathlib.Path] = field(default_factory=default_cache_path)
    applier_command_set: dict[str, list[str]] = field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_COMMAND_SET.items()}
    )
    provider_url: str = geo.DEFAULT_PROVIDER_URL
    timeout: float = geo.DEFAULT_TIMEOUT
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    timezone: Optional[str] = None
    interval: float = DEFAULT_INTERVAL
    scheduler: Literal["thread", "async"] = "thread"
    command_timeout: float = DEFAULT_COMMAND_TIMEOUT

    @property
    def cache_enabled(self) -> bool:
        return self.cache_path is not None

    @property
    def manual_location(self) -> bool:
        return bool(self.latitude and self.longitude)


def _split_lines(value: str) -> list[str]:
    return [line.strip() for line in value.splitlines() if line.strip()]


class ConfigManager:
    """Handles reading/writing config.ini."""

    def __init__(self, config_file: Optional[pathlib.Path] = None):
        self.config_file = pathlib.Path(config_file) if config_file else CONFIG_FILE
        self.config_dir = self.config_file.parent

    def _ensure_dir(self):
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            log.debug(f"Configuration directory ensured: {self.config_dir}")
        except OSError as e:
            raise ConfigError(f"Failed to create configuration directory {self.config_dir}: {e}") from e

    def _load_ini(self, file_path: pathlib.Path) -> configparser.ConfigParser:
        parser = configparser.ConfigParser(interpolation=None)
        parser.optionxform = str.upper
        if file_path.exists():
            try:
                if file_path.stat().st_size > 0:
                    parser.read(file_path, encoding="utf-8")
                else:
                    log.warning(f"Config file {file_path} is empty.")
            except configparser.Error as e:
                raise ConfigError(f"Could not parse config file {file_path}: {e}") from e
            except OSError as e:
                raise ConfigError(f"Could not read config file {file_path}: {e}") from e
        return parser

    def _save_ini(self, parser: configparser.ConfigParser, file_path: pathlib.Path) -> bool:
        self._ensure_dir()
        try:
            with file_path.open("w", encoding="utf-8") as f:
                parser.write(f)
            log.debug(f"Saved configuration to {file_path}")
            return True
        except OSError as e:
            raise ConfigError(f"Failed to write configuration to {file_path}: {e}") from e

    def load_config(self) -> configparser.ConfigParser:
        parser = self._load_ini(self.config_file)
        made_changes = False
        for section, defaults in DEFAULT_CONFIG.items():
            if not parser.has_section(section):
                parser.add_section(section)
                made_changes = True
            for key, value in defaults.items():
                if not parser.has_option(section, key):
                    parser.set(section, key, value)
                    made_changes = True
        if made_changes:
            log.debug("Default values applied in memory to the loaded configuration.")
        return parser

    def save_config(self, config: configparser.ConfigParser) -> bool:
        log.info(f"Saving configuration to {self.config_file}")
        return self._save_ini(config, self.config_file)

    def get_setting(self, config: configparser.ConfigParser, section: str, key: str, default: Optional[str] = None) -> Optional[str]:
        return config.get(section, key, fallback=default)

    def set_setting(self, config: configparser.ConfigParser, section: str, key: str, value: str):
        if not config.has_section(section):
            config.add_section(section)
        config.set(section, key, value)

    def build_settings(self, config: configparser.ConfigParser) -> Settings:
        """
        Validates a loaded config and converts it to Settings.

        Raises:
            ConfigError: If a value has the wrong type or is out of range.
        """
        try:
            timeout = config.getfloat("Location", "TIMEOUT")
            interval = config.getfloat("Poller", "INTERVAL")
            command_timeout = config.getfloat("Applier", "COMMAND_TIMEOUT")
            cache_enabled = config.getboolean("Cache", "ENABLED")
        except ValueError as e:
            raise ConfigError(f"Invalid value in {self.config_file}: {e}") from e

        if not math.isfinite(timeout) or timeout <= 0:
            raise ConfigError(f"[Location] TIMEOUT must be a positive number, got {timeout}")
        if not math.isfinite(interval) or interval <= 0:
            raise ConfigError(f"[Poller] INTERVAL must be a positive number, got {interval}")
        if not math.isfinite(command_timeout) or command_timeout <= 0:
            raise ConfigError(
                f"[Applier] COMMAND_TIMEOUT must be a positive number, got {command_timeout}"
            )

        scheduler = config.get("Poller", "SCHEDULER").strip().lower()
        if scheduler not in SCHEDULERS:
            raise ConfigError(
                f"[Poller] SCHEDULER must be one of {', '.join(SCHEDULERS)}, got '{scheduler}'"
            )

        cache_path = None
        if cache_enabled:
            path_str = config.get("Cache", "PATH").strip()
            cache_path = pathlib.Path(path_str).expanduser() if path_str else default_cache_path()

        latitude = config.get("Location", "LATITUDE").strip() or None
        longitude = config.get("Location", "LONGITUDE").strip() or None
        if bool(latitude) != bool(longitude):
            log.warning("Only one of LATITUDE/LONGITUDE is set; using IP geolocation instead.")
            latitude = longitude = None

        return Settings(
            cache_path=cache_path,
            applier_command_set={
                "day": _split_lines(config.get("Applier", "DAY_COMMANDS")),
                "night": _split_lines(config.get("Applier", "NIGHT_COMMANDS")),
            },
            provider_url=config.get("Location", "PROVIDER_URL").strip() or geo.DEFAULT_PROVIDER_URL,
            timeout=timeout,
            latitude=latitude,
            longitude=longitude,
            timezone=config.get("Location", "TIMEZONE").strip() or None,
            interval=interval,
            scheduler=scheduler,
            command_timeout=command_timeout,
        )
