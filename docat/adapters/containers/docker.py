"""
Docker adapter — networks, volumes and compose operations.

Uses the docker CLI — never the Docker API directly.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from docat.adapters.base import ContainerDriver
from docat.adapters.shell.command import ShellCommandAdapter
from docat.core.errors import CommandError
from docat.core.models.command import CommandResult

logger = logging.getLogger(__name__)


def compose_file_args(files: list[str]) -> list[str]:
    """``-f`` arguments for an ordered compose file list."""
    args: list[str] = []
    for file in files:
        args.extend(["-f", file])
    return args


class DockerComposeAdapter(ContainerDriver):
    """ContainerDriver backed by ``docker`` and ``docker compose``."""

    def __init__(self, shell: ShellCommandAdapter | None = None, binary: str = "docker"):
        self._shell = shell or ShellCommandAdapter()
        self._binary = binary

    @property
    def name(self) -> str:
        return "docker"

    def is_available(self) -> bool:
        return shutil.which(self._binary) is not None

    # ── Networks & volumes ──────────────────────────────────────

    def create_network(self, name: str) -> CommandResult:
        result = self._docker(["network", "create", name], capture=True, check=False)
        if result.failed:
            # Usually "already exists"
            logger.debug("network create %s: %s", name, result.stderr.strip())
        return result

    def create_volume(self, name: str) -> CommandResult:
        result = self._docker(["volume", "create", name], capture=True, check=False)
        if result.failed:
            logger.debug("volume create %s: %s", name, result.stderr.strip())
        return result

    # ── Compose ─────────────────────────────────────────────────

    def compose_up(self, files: list[str], services: list[str], directory: Path) -> CommandResult:
        return self._compose(files, ["up", "-d", *services], directory)

    def compose_down(self, files: list[str], directory: Path) -> CommandResult:
        return self._compose(files, ["down"], directory)

    def compose_list_services(self, files: list[str], directory: Path) -> str:
        return self._query(files, ["ps", "--format", "json"], directory)

    def compose_config_services(self, files: list[str], directory: Path) -> str:
        return self._query(files, ["config", "--services"], directory)

    def compose_exec(
        self, service: str, files: list[str], command: list[str], directory: Path
    ) -> CommandResult:
        return self._compose(files, ["exec", "-T", service, *command], directory)

    def compose_run(
        self, service: str, files: list[str], command: list[str], directory: Path
    ) -> CommandResult:
        return self._compose(files, ["run", "--rm", "--no-deps", service, *command], directory)

    # ── Helpers ─────────────────────────────────────────────────

    def _docker(
        self,
        args: list[str],
        directory: Path | None = None,
        capture: bool = False,
        check: bool = True,
    ) -> CommandResult:
        return self._shell.run([self._binary, *args], cwd=directory, capture=capture, check=check)

    def _compose(self, files: list[str], args: list[str], directory: Path) -> CommandResult:
        return self._docker(["compose", *compose_file_args(files), *args], directory)

    def _query(self, files: list[str], args: list[str], directory: Path) -> str:
        """Captured stdout of a read-only compose command; empty on failure."""
        try:
            result = self._docker(
                ["compose", *compose_file_args(files), *args],
                directory,
                capture=True,
                check=False,
            )
        except CommandError as e:
            logger.warning("docker compose %s failed in %s: %s", args[0], directory, e)
            return ""
        if result.failed:
            logger.debug("docker compose %s in %s: %s", args[0], directory, result.stderr.strip())
            return ""
        return result.stdout
