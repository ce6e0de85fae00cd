# sunswitch_core/applier.py
"""
Theme appliers: the side-effecting end of sunswitch.

The core never looks at what an applier does, only whether `apply()`
succeeded. `CommandApplier` runs a configured list of commands per theme.
"""
import logging
import shlex
from typing import Mapping, Sequence

from . import helpers
from .exceptions import ApplierError, DependencyError, SunSwitchError, ValidationError
from .models import Theme

log = logging.getLogger(__name__)

# A leading "-" marks a command whose failure is only logged.
OPTIONAL_PREFIX = "-"
DEFAULT_COMMAND_TIMEOUT = 30.0

DEFAULT_COMMAND_SET: dict[str, list[str]] = {
    "day": ["systemctl --user set-environment IS_DAY={is_day}"],
    "night": ["systemctl --user set-environment IS_DAY={is_day}"],
}


class ThemeApplier:
    """Interface for anything that can put the desktop into a Theme."""

    def apply(self, theme: Theme) -> None:
        """Applies `theme`. Raises ApplierError on failure."""
        raise NotImplementedError


class _Command:
    def __init__(self, line: str):
        line = line.strip()
        self.optional = line.startswith(OPTIONAL_PREFIX)
        if self.optional:
            line = line[len(OPTIONAL_PREFIX):].lstrip()
        try:
            self.argv = shlex.split(line)
        except ValueError as e:
            raise ValidationError(f"Cannot parse command '{line}': {e}") from e
        if not self.argv:
            raise ValidationError("Empty command in applier configuration.")
        self.line = line

    def render(self, theme: Theme) -> list[str]:
        is_day = "true" if theme.is_day else "false"
        return [
            arg.replace("{theme}", theme.value).replace("{is_day}", is_day)
            for arg in self.argv
        ]


class CommandApplier(ThemeApplier):
    """Runs the commands configured for a theme, in order."""

    def __init__(
        self,
        command_set: Mapping[str, Sequence[str]],
        timeout: float = DEFAULT_COMMAND_TIMEOUT,
    ):
        self.timeout = timeout
        self.commands: dict[Theme, list[_Command]] = {}
        for theme in Theme:
            lines = command_set.get(theme.value, [])
            self.commands[theme] = [_Command(line) for line in lines if line.strip()]
            if not self.commands[theme]:
                log.warning(f"No commands configured for {theme} theme.")

    def verify(self) -> bool:
        """Checks that every non-optional executable is available in PATH."""
        required = sorted(
            {cmd.argv[0] for cmds in self.commands.values() for cmd in cmds if not cmd.optional}
        )
        if not required:
            return True
        try:
            return helpers.check_dependencies(required)
        except DependencyError as e:
            raise ApplierError(f"Cannot apply themes: {e}") from e

    def apply(self, theme: Theme) -> None:
        log.info(f"Applying {theme} theme ({len(self.commands[theme])} command(s))")
        for cmd in self.commands[theme]:
            argv = cmd.render(theme)
            try:
                code, _, stderr = helpers.run_command(
                    argv, capture=True, check=False, timeout=self.timeout
                )
                reason = f"exit code {code}"
            except (FileNotFoundError, SunSwitchError) as e:
                code, stderr, reason = None, str(e), "could not run"

            if code == 0:
                continue
            message = f"Command '{' '.join(argv)}' failed ({reason}): {stderr}"
            if cmd.optional:
                log.warning(f"{message} (ignored)")
                continue
            log.error(message)
            raise ApplierError(message)
        log.debug(f"{theme} theme applied.")
