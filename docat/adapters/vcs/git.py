"""
Git adapter — clone checkouts and read repository config.

Uses the git CLI — never raw API calls.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from docat.adapters.base import VcsDriver
from docat.adapters.shell.command import ShellCommandAdapter
from docat.core.errors import CommandError
from docat.core.models.command import CommandResult

logger = logging.getLogger(__name__)


class GitAdapter(VcsDriver):
    """VcsDriver backed by the ``git`` CLI."""

    def __init__(self, shell: ShellCommandAdapter | None = None, binary: str = "git"):
        self._shell = shell or ShellCommandAdapter()
        self._binary = binary

    @property
    def name(self) -> str:
        return "git"

    def is_available(self) -> bool:
        return shutil.which(self._binary) is not None

    def clone(self, remote: str, into_dir: Path) -> CommandResult:
        into_dir.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Cloning %s into %s", remote, into_dir)
        return self._shell.run(
            [self._binary, "clone", remote, str(into_dir)],
            cwd=into_dir.parent,
        )

    def get_config_value(self, key: str, directory: Path) -> str:
        try:
            result = self._shell.run(
                [self._binary, "config", "--get", key],
                cwd=directory,
                capture=True,
                check=False,
            )
        except CommandError as e:
            logger.debug("git config --get %s: %s", key, e)
            return ""
        if result.failed:
            return ""
        return result.stdout.strip()
