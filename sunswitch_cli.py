#!/usr/bin/env python3

"""
sunswitch (CLI) - Day/Night Desktop Theme Scheduler

Command-line interface for running the sunrise/sunset theme poller and
inspecting or managing its state through the sunswitch_core library.
"""

import argparse
import logging
import math
import pathlib
import sys

# Import the core library API and exceptions
try:
    import sunswitch_core
    from sunswitch_core import exceptions as core_exc
    from sunswitch_core import helpers as core_helpers
except ImportError as e:
    print(f"Error: Failed to import the sunswitch_core library: {e}", file=sys.stderr)
    print("Ensure sunswitch_core is installed or available in your Python path.", file=sys.stderr)
    sys.exit(1)

# --- Global Variables ---
SCRIPT_PATH = str(pathlib.Path(__file__).resolve())
PYTHON_EXECUTABLE = sys.executable

log = logging.getLogger("sunswitch_cli")

# --- ANSI Color Codes for Terminal Output ---
IS_TTY = sys.stdout.isatty()


class AnsiColors:
    GREEN = "\033[92m" if IS_TTY else ""
    RED = "\033[91m" if IS_TTY else ""
    YELLOW = "\033[93m" if IS_TTY else ""
    RESET = "\033[0m" if IS_TTY else ""


# --- CLI Logging Setup ---
def setup_cli_logging(verbose: bool):
    """Configures logging for the CLI based on verbosity."""
    cli_log_level = logging.DEBUG if verbose else logging.INFO

    log.setLevel(cli_log_level)
    if log.hasHandlers():
        log.handlers.clear()

    # The poller reports transitions at INFO; keep them visible for `run`.
    core_helpers.setup_library_logging(logging.DEBUG if verbose else logging.INFO)

    if cli_log_level <= logging.INFO:
        info_handler = logging.StreamHandler(sys.stdout)
        info_handler.setFormatter(logging.Formatter("%(message)s"))
        info_handler.setLevel(logging.INFO)
        info_handler.addFilter(lambda record: record.levelno == logging.INFO)
        log.addHandler(info_handler)

    error_handler = logging.StreamHandler(sys.stderr)
    error_handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    error_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    log.addHandler(error_handler)

    log.propagate = False
    if verbose:
        log.debug("Verbose logging enabled for sunswitch_cli.")


# --- Output Formatting ---
def print_status(status_data: dict):
    """Formats and prints the status dictionary with colors."""
    log.info("--- sunswitch Status ---")
    log.info(f"  Config File:     {status_data['config_file']}")
    log.info(f"  Cache File:      {status_data['cache_path'] or '(disabled)'}")
    log.info(f"  Location Source: {status_data['location_source']}")
    log.info(f"  Scheduler:       {status_data['scheduler']} (every {status_data['interval']:g}s)")

    info = status_data.get("location")
    if info is None:
        log.info(f"\n  {AnsiColors.YELLOW}No cached location.{AnsiColors.RESET} Run 'sunswitch refresh' to compute one.")
        return

    log.info("\n[Cached Location]")
    if info.is_sentinel:
        log.info("  No sunrise/sunset today (polar day or night); treated as always day.")
    else:
        log.info(f"  Sunrise: {info.sunrise.strftime('%H:%M:%S')}")
        log.info(f"  Sunset:  {info.sunset.strftime('%H:%M:%S')}")

    theme = status_data["theme"]
    color = AnsiColors.GREEN if theme.is_day else AnsiColors.YELLOW
    log.info(f"\n  Theme at {status_data['now'].strftime('%H:%M:%S')}: {color}{theme.value.capitalize()}{AnsiColors.RESET}")


def print_sun_times(rows: list):
    """Prints tab-separated sunrise/sunset lines, one per event."""
    print("Type\tDate\tTime")
    print("----\t----\t----")
    for row in rows:
        date_str = row["date"].isoformat()
        if row["sunrise"] is None:
            log.warning(f"No sunrise/sunset on {date_str} (polar day/night)")
            continue
        print(f"Sunrise\t{date_str}\t{row['sunrise'].strftime('%H:%M:%S%z')}")
        print(f"Sunset\t{date_str}\t{row['sunset'].strftime('%H:%M:%S%z')}")


# --- Main Execution Logic ---
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="sunswitch (CLI): Switch desktop appearance at sunrise and sunset.",
        formatter_class=argparse.RawTextHelpFormatter,
        epilog="""
Examples:
  sunswitch run              # Keep the theme in sync with the sun (foreground)
  sunswitch status           # Show cached sunrise/sunset and the current theme
  sunswitch night            # Apply the Night theme once
  sunswitch refresh          # Re-detect location and update the cache
  sunswitch sun-times 7      # Sunrise/sunset for the next 7 days
  sunswitch install          # Run sunswitch as a systemd user service
""",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable detailed logging output.")
    subparsers = parser.add_subparsers(dest="command", title="Commands", required=True)

    parser_run = subparsers.add_parser("run", help="Run the day/night poller in the foreground.")
    parser_run.add_argument("--interval", type=float, default=None, help="Seconds between checks (overrides config).")
    parser_run.add_argument("--no-cache", action="store_true", help="Ignore and do not write the location cache.")

    subparsers.add_parser("status", help="Show config paths, cached location and current theme.")
    subparsers.add_parser("day", help="Apply the Day theme now.")
    subparsers.add_parser("night", help="Apply the Night theme now.")
    subparsers.add_parser("refresh", help="Re-estimate sunrise/sunset now and store them in the cache.")
    subparsers.add_parser("clear-cache", help="Delete the cached location.")

    parser_sun = subparsers.add_parser("sun-times", help="Print sunrise/sunset for N days.")
    parser_sun.add_argument("days", type=int, metavar="N", help="Number of days (starting from today).")

    subparsers.add_parser("install", help="Install and start the systemd user service.")
    subparsers.add_parser("uninstall", help="Stop and remove the systemd user service.")
    return parser


def main(argv=None):
    """Parses command-line arguments and dispatches to appropriate command handlers."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_cli_logging(args.verbose)
    exit_code = 0

    try:
        log.debug(f"Running command: {args.command}")

        if args.command == "run":
            if args.interval is not None and (not math.isfinite(args.interval) or args.interval <= 0):
                raise core_exc.ValidationError("--interval must be a positive number.")
            sunswitch_core.run_scheduler(interval=args.interval, use_cache=not args.no_cache)

        elif args.command == "status":
            print_status(sunswitch_core.get_status())

        elif args.command in ("day", "night"):
            log.info(f"Applying {args.command.capitalize()} theme...")
            sunswitch_core.apply_theme(args.command)
            log.info(f"{AnsiColors.GREEN}{args.command.capitalize()} theme applied.{AnsiColors.RESET}")

        elif args.command == "refresh":
            info = sunswitch_core.refresh_location()
            log.info(f"Location refreshed: {info}")

        elif args.command == "clear-cache":
            if sunswitch_core.clear_cache():
                log.info("Cached location removed.")
            else:
                log.info("No cached location to remove.")

        elif args.command == "sun-times":
            print_sun_times(sunswitch_core.sun_times(args.days))

        elif args.command == "install":
            sunswitch_core.install_service(script_path=SCRIPT_PATH, python_executable=PYTHON_EXECUTABLE)
            log.info(f"{AnsiColors.GREEN}{sunswitch_core.SERVICE_NAME} installed and started.{AnsiColors.RESET}")

        elif args.command == "uninstall":
            sunswitch_core.uninstall_service()
            log.info(f"{sunswitch_core.SERVICE_NAME} removed.")

        else:
            log.error(f"Unknown command: {args.command}")
            parser.print_help(sys.stderr)
            exit_code = 1

    except KeyboardInterrupt:
        log.info("\nInterrupted, exiting.")
    except core_exc.SunSwitchError as e:
        log.error(f"{AnsiColors.RED}sunswitch Error: {e}{AnsiColors.RESET}", exc_info=args.verbose)
        exit_code = 1
    except FileNotFoundError as e:
        log.error(f"{AnsiColors.RED}{e}{AnsiColors.RESET}")
        exit_code = 1

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
