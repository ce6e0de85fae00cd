# sunswitch_core/__init__.py

# Make exceptions available directly
from .exceptions import (
    ApplierError,
    AstronomicalCalculationError,
    CacheError,
    CacheReadError,
    CacheWriteError,
    ConfigError,
    DependencyError,
    NetworkError,
    ParseError,
    SunSwitchError,
    SystemdError,
    ValidationError,
)

# Core value types and the decision engine
from .models import LocationInfo, Theme
from .decision import classify

# Make public API functions (via the api.py facade) available
from .api import (
    apply_theme,
    clear_cache,
    estimate_location,
    get_current_config,
    get_status,
    install_service,
    load_settings,
    refresh_location,
    run_scheduler,
    save_configuration,
    sun_times,
    uninstall_service,
)

# --- Make core constants accessible ---
from .config import CONFIG_DIR, CONFIG_FILE, DEFAULT_CONFIG
from .systemd import SERVICE_NAME

__all__ = [
    # Constants
    "CONFIG_DIR",
    "CONFIG_FILE",
    "DEFAULT_CONFIG",
    "SERVICE_NAME",
    # Exceptions
    "ApplierError",
    "AstronomicalCalculationError",
    "CacheError",
    "CacheReadError",
    "CacheWriteError",
    "ConfigError",
    "DependencyError",
    "NetworkError",
    "ParseError",
    "SunSwitchError",
    "SystemdError",
    "ValidationError",
    # Types and decision
    "LocationInfo",
    "Theme",
    "classify",
    # API Functions (from api.py facade)
    "apply_theme",
    "clear_cache",
    "estimate_location",
    "get_current_config",
    "get_status",
    "install_service",
    "load_settings",
    "refresh_location",
    "run_scheduler",
    "save_configuration",
    "sun_times",
    "uninstall_service",
]
