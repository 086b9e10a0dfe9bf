"""
Shell command adapter — spawn processes and run hook command lists.

This is the most fundamental adapter: docker and git go through it, and
project hooks (``on_install``, ``on_up``, ``after_up``) are executed by it.

Hook strings are split into words with shell quoting rules and run
without a shell. The only interpolation is an enumerated substitution
table applied to each argument; there is no general variable expansion.
"""

from __future__ import annotations

import logging
import re
import shlex
import shutil
import subprocess
import time
from collections.abc import Mapping, Sequence
from pathlib import Path

from docat.adapters.base import Adapter
from docat.core.errors import CommandError
from docat.core.models.command import CommandResult

logger = logging.getLogger(__name__)


def default_substitutions() -> dict[str, str]:
    """Variables replaced inside hook arguments."""
    home = str(Path.home())
    return {"${HOME}": home, "$HOME": home}


def parse_command(command: str, substitutions: Mapping[str, str] | None = None) -> list[str]:
    """Split a hook string into argv.

    Returns an empty list for blank commands.

    Raises:
        CommandError: If the string cannot be tokenised (e.g. open quote).
    """
    try:
        words = shlex.split(command)
    except ValueError as e:
        raise CommandError(f"Cannot parse command {command!r}: {e}") from e

    if not words:
        return []

    table = default_substitutions() if substitutions is None else substitutions
    program, args = words[0], words[1:]
    for variable, value in table.items():
        pattern = _variable_pattern(variable)
        args = [pattern.sub(lambda _match, value=value: value, arg) for arg in args]
    return [program, *args]


def _variable_pattern(variable: str) -> re.Pattern[str]:
    """Match ``variable`` only as a whole name: ``$HOME`` but not ``$HOMEDIR``."""
    pattern = re.escape(variable)
    if variable[-1:].isalnum() or variable.endswith("_"):
        pattern += r"(?![A-Za-z0-9_])"
    return re.compile(pattern)


class ShellCommandAdapter(Adapter):
    """Run external programs, inheriting or capturing their output."""

    def __init__(self, substitutions: Mapping[str, str] | None = None):
        self._substitutions = substitutions

    @property
    def name(self) -> str:
        return "shell"

    def is_available(self) -> bool:
        return shutil.which("sh") is not None

    def run(
        self,
        args: Sequence[str],
        cwd: Path | None = None,
        capture: bool = False,
        check: bool = True,
        timeout: int | None = None,
    ) -> CommandResult:
        """Run ``args`` to completion.

        Args:
            args: Program and arguments.
            cwd: Working directory (default: the process cwd).
            capture: Capture stdout/stderr instead of inheriting them.
            check: Raise CommandError on a non-zero exit.
            timeout: Optional timeout in seconds.

        Raises:
            CommandError: If the program cannot be spawned, times out,
                or (with ``check``) exits non-zero.
        """
        argv = list(args)
        logger.debug("Executing: %s (cwd=%s)", shlex.join(argv), cwd)
        start = time.monotonic()

        try:
            proc = subprocess.run(
                argv,
                cwd=cwd,
                capture_output=capture,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise CommandError(f"Command timed out after {timeout}s: {shlex.join(argv)}", argv) from e
        except OSError as e:
            raise CommandError(f"Could not run {shlex.join(argv)}: {e}", argv) from e

        result = CommandResult(
            args=argv,
            cwd=str(cwd or ""),
            return_code=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
            duration_ms=int((time.monotonic() - start) * 1000),
        )

        if check and result.failed:
            detail = result.stderr.strip() or f"exited with code {result.return_code}"
            raise CommandError(
                f"Command failed: {result.command_line}: {detail}",
                argv,
                result.return_code,
            )
        return result

    def run_hooks(self, commands: Sequence[str], cwd: Path | None) -> list[CommandResult]:
        """Run hook commands in order, stopping at the first failure."""
        results = []
        for command in commands:
            argv = parse_command(command, self._substitutions)
            if not argv:
                continue
            logger.info("Running hook: %s", command)
            results.append(self.run(argv, cwd=cwd))
        return results
