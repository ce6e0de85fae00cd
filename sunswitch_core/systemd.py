# sunswitch_core/systemd.py
"""
Systemd user unit management for sunswitch.

Installs a single user service that runs `sunswitch run` for the lifetime
of the graphical session, and removes it again on uninstall.
"""

import logging
import pathlib
import sys
from typing import Optional

from . import helpers
from .exceptions import DependencyError, SystemdError

log = logging.getLogger(__name__)

# --- Constants ---
_APP_NAME = "sunswitch"
SYSTEMD_USER_DIR = pathlib.Path.home() / ".config" / "systemd" / "user"

SERVICE_NAME = f"{_APP_NAME}.service"

_SERVICE_TEMPLATE = """\
[Unit]
Description={app_name}: Switch desktop theme at sunrise and sunset
PartOf=graphical-session.target
After=graphical-session.target network-online.target

[Service]
Type=simple
ExecStart={python_executable} "{script_path}" run
Restart=on-failure
RestartSec=30
StandardOutput=journal
StandardError=journal

[Install]
WantedBy=graphical-session.target
"""


def render_service(script_path: str, python_executable: str) -> str:
    return _SERVICE_TEMPLATE.format(
        app_name=_APP_NAME,
        python_executable=python_executable,
        script_path=script_path,
    )


class SystemdManager:
    """Handles creation, installation, and removal of the sunswitch user service."""

    def __init__(self, unit_dir: Optional[pathlib.Path] = None):
        """Check for systemctl dependency."""
        self.app_name = _APP_NAME
        self.unit_dir = pathlib.Path(unit_dir) if unit_dir else SYSTEMD_USER_DIR
        self.service_file = self.unit_dir / SERVICE_NAME
        try:
            helpers.check_dependencies(["systemctl"])
        except DependencyError as e:
            log.error(f"SystemdManager initialization failed: {e}")
            raise SystemdError(f"Cannot initialize SystemdManager: {e}") from e

    def _run_systemctl(
        self, args: list[str], check_errors: bool = True, capture_output: bool = True
    ) -> tuple[int, str, str]:
        """Runs a systemctl --user command."""
        cmd = ["systemctl", "--user", *args]
        try:
            code, stdout, stderr = helpers.run_command(cmd, check=False, capture=capture_output)
        except FileNotFoundError:
            log.error(f"systemctl command not found when trying to run: systemctl --user {' '.join(args)}")
            raise DependencyError("systemctl command not found.")
        if code != 0 and check_errors:
            err_details = stderr.strip() if stderr else stdout.strip()
            log.error(
                f"systemctl --user {' '.join(args)} failed (code {code}). Details: '{err_details}'"
            )
        return code, stdout, stderr

    def install_service(
        self, script_path: str, python_executable: Optional[str] = None
    ) -> bool:
        """Writes the service unit, reloads systemd and enables it with --now."""
        log.info(f"Installing systemd user service for {self.app_name}...")
        py_exe = python_executable or sys.executable
        script_abs_path = str(pathlib.Path(script_path).resolve())

        if not pathlib.Path(script_abs_path).is_file():
            raise FileNotFoundError(f"Target script for systemd unit not found: {script_abs_path}")

        try:
            self.unit_dir.mkdir(parents=True, exist_ok=True)
            self.service_file.write_text(
                render_service(script_abs_path, py_exe), encoding="utf-8"
            )
            log.info(f"Written systemd unit file: {self.service_file}")
        except OSError as e:
            raise SystemdError(f"Failed to write systemd unit file {self.service_file}: {e}") from e

        reload_code, _, reload_err = self._run_systemctl(["daemon-reload"])
        if reload_code != 0:
            raise SystemdError(f"systemctl daemon-reload failed: {reload_err.strip()}")

        enable_code, _, enable_err = self._run_systemctl(["enable", "--now", SERVICE_NAME])
        if enable_code != 0:
            raise SystemdError(f"Failed to enable {SERVICE_NAME}: {enable_err.strip()}")

        log.info(f"Enabled and started systemd unit: {SERVICE_NAME}")
        return True

    def remove_service(self) -> bool:
        """Stops, disables, and removes the sunswitch user service."""
        log.info(f"Removing {self.app_name} systemd user service...")
        self._run_systemctl(["disable", "--now", SERVICE_NAME], check_errors=False)

        try:
            self.service_file.unlink(missing_ok=True)
            log.debug(f"Removed unit file: {self.service_file} (if it existed)")
        except OSError as e:
            log.warning(f"Error removing unit file {self.service_file}: {e} (continuing)")

        reload_code, _, reload_err = self._run_systemctl(["daemon-reload"], check_errors=False)
        if reload_code != 0:
            log.warning(f"systemctl daemon-reload failed during unit removal: {reload_err.strip()}.")

        self._run_systemctl(["reset-failed", SERVICE_NAME], check_errors=False)
        log.info(f"{self.app_name} systemd unit removed.")
        return True
