# sunswitch_core/helpers.py

import logging
import re
import shutil
import subprocess
from typing import Optional

# Import custom exceptions from within the same package
from .exceptions import DependencyError, SunSwitchError, ValidationError

# Setup a logger specific to this module for internal debugging
log = logging.getLogger(__name__)

# --- Command Execution ---


def run_command(
    cmd_list: list[str],
    check: bool = False,
    capture: bool = True,
    timeout: Optional[float] = None,
) -> tuple[int, str, str]:
    """
    Runs an external command and returns its status, stdout, and stderr.

    Args:
        cmd_list: The command and its arguments as a list of strings.
        check: If True, raise CalledProcessError if the command returns non-zero.
               Callers generally use check=False and map the return code to
               a more specific exception type themselves.
        capture: If True (default), capture stdout and stderr. If False, they are
                 not captured (sent to system stdout/stderr).
        timeout: Optional limit in seconds; the command is killed when it is exceeded.

    Returns:
        A tuple containing: (return_code, stdout_str, stderr_str).
        stdout_str and stderr_str will be empty if capture=False.

    Raises:
        FileNotFoundError: If the command executable is not found.
        subprocess.CalledProcessError: If check=True and the command fails.
        SunSwitchError: If the command times out, or for other unexpected
                        subprocess errors.
    """
    log.debug(f"Running command: {' '.join(cmd_list)}")
    stdout_pipe = subprocess.PIPE if capture else None
    stderr_pipe = subprocess.PIPE if capture else None

    try:
        process = subprocess.run(
            cmd_list,
            check=check,
            timeout=timeout,
            stdout=stdout_pipe,
            stderr=stderr_pipe,
            text=True,
            encoding="utf-8",
        )
        stdout = process.stdout.strip() if process.stdout and capture else ""
        stderr = process.stderr.strip() if process.stderr and capture else ""
        log.debug(f"Command '{cmd_list[0]}' finished with code {process.returncode}")
        if stdout:
            log.debug(f"stdout: {stdout[:200]}...")  # Log truncated stdout
        if stderr:
            log.debug(f"stderr: {stderr[:200]}...")
        return process.returncode, stdout, stderr
    except FileNotFoundError as e:
        log.error(f"Command not found: {cmd_list[0]} - {e}")
        raise FileNotFoundError(
            f"Required command '{cmd_list[0]}' not found in PATH."
        ) from e
    except subprocess.CalledProcessError as e:
        stdout = e.stdout.strip() if e.stdout and capture else ""
        stderr = e.stderr.strip() if e.stderr and capture else ""
        log.warning(
            f"Command failed with exit code {e.returncode}: {' '.join(cmd_list)}"
        )
        if stdout:
            log.warning(f"stdout: {stdout[:200]}...")
        if stderr:
            log.warning(f"stderr: {stderr[:200]}...")
        raise
    except subprocess.TimeoutExpired as e:
        log.warning(f"Command timed out after {e.timeout}s: {' '.join(cmd_list)}")
        raise SunSwitchError(
            f"Command '{cmd_list[0]}' timed out after {e.timeout}s"
        ) from e
    except OSError as e:
        log.exception(
            f"An unexpected error occurred running command: {' '.join(cmd_list)} - {e}"
        )
        raise SunSwitchError(
            f"Unexpected error running command '{cmd_list[0]}': {e}"
        ) from e


# --- Dependency Checks ---


def check_dependencies(deps: list[str]) -> bool:
    """
    Checks if required external commands exist in PATH using shutil.which.

    Args:
        deps: A list of command names to check (e.g., ['systemctl', 'gsettings']).

    Returns:
        True if all dependencies are found.

    Raises:
        DependencyError: If one or more dependencies are not found.
    """
    log.debug(f"Checking for dependencies: {', '.join(deps)}")
    missing = [dep for dep in deps if shutil.which(dep) is None]

    if missing:
        error_msg = (
            f"Missing required command(s): {', '.join(missing)}. Please install them."
        )
        log.error(error_msg)
        raise DependencyError(error_msg)

    log.debug(f"All dependencies checked successfully: {', '.join(deps)}")
    return True


# --- Data Validation ---


def latlon_str_to_float(coord_str: str) -> float:
    """
    Converts a Lat/Lon string to float degrees.

    Accepts hemisphere notation ('43.65N', '79.38W') as well as plain signed
    decimal degrees ('-33.87').

    Raises:
        ValidationError: If the format is invalid or the value is out of range.
    """
    if not isinstance(coord_str, str):
        raise ValidationError(
            f"Invalid input type for coordinate: expected string, got {type(coord_str)}"
        )

    coord_strip = coord_str.strip().upper()
    match = re.match(r"^(\d+(\.\d+)?)([NSEW])$", coord_strip)
    if not match:
        try:
            value = float(coord_strip)
        except ValueError:
            raise ValidationError(
                f"Invalid coordinate format: '{coord_str}'. Use format like '43.65N', '79.38W' or '-79.38'."
            )
        if not (-180 <= value <= 180):
            raise ValidationError(f"Coordinate out of range (-180 to 180): {value}")
        return value

    value = float(match.group(1))
    direction = match.group(3)
    if direction in ("S", "W"):
        value = -value

    if direction in ("N", "S") and not (-90 <= value <= 90):
        raise ValidationError(
            f"Latitude out of range (-90 to 90): {value} ({coord_str})"
        )
    if direction in ("E", "W") and not (-180 <= value <= 180):
        raise ValidationError(
            f"Longitude out of range (-180 to 180): {value} ({coord_str})"
        )

    log.debug(f"Converted coordinate '{coord_str}' to {value}")
    return value


# --- Logging Setup (Simplified for Core Library) ---


def setup_library_logging(level=logging.WARNING):
    """
    Configures basic logging for the sunswitch_core library components.

    By default only warnings and errors are shown so that the consuming
    application (the CLI) controls its own output.
    """
    package_logger = logging.getLogger("sunswitch_core")

    # Avoid adding multiple handlers if called repeatedly
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    package_logger.setLevel(level)
    log.info(f"sunswitch_core logging configured to level: {logging.getLevelName(level)}")
