"""
Driver registry — the set of drivers a lifecycle operation runs against.

Lifecycle code never constructs drivers itself; it receives a Drivers
bundle. The CLI builds the real one, tests build one from mocks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from docat.adapters.base import ContainerDriver, VcsDriver
from docat.adapters.containers.docker import DockerComposeAdapter
from docat.adapters.shell.command import ShellCommandAdapter
from docat.adapters.vcs.git import GitAdapter

logger = logging.getLogger(__name__)


@dataclass
class Drivers:
    """Docker, git and hook execution for one invocation."""

    containers: ContainerDriver
    vcs: VcsDriver
    shell: ShellCommandAdapter = field(default_factory=ShellCommandAdapter)

    @classmethod
    def default(cls) -> Drivers:
        """Drivers backed by the real docker and git CLIs."""
        shell = ShellCommandAdapter()
        return cls(
            containers=DockerComposeAdapter(shell),
            vcs=GitAdapter(shell),
            shell=shell,
        )

    def status(self) -> dict[str, bool]:
        """Availability of each underlying tool."""
        return {
            driver.name: driver.is_available()
            for driver in (self.containers, self.vcs, self.shell)
        }

    def warn_unavailable(self) -> None:
        for name, available in self.status().items():
            if not available:
                logger.warning("%s is not installed or not on PATH", name)
