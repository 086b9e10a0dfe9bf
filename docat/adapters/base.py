"""
Driver base — the contract between lifecycle operations and tools.

Lifecycle code only talks to docker and git through these interfaces,
never by spawning processes itself. Real drivers wrap the CLIs; the
mock drivers in ``docat.adapters.mock`` record calls for tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from docat.core.models.command import CommandResult


class Adapter(ABC):
    """Common surface of every driver."""

    @property
    @abstractmethod
    def name(self) -> str:
        """The driver identifier (e.g., 'docker', 'git')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the underlying tool is installed. Never raises."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


class ContainerDriver(Adapter):
    """Networks, volumes and compose stacks.

    ``files`` is always the project's ordered compose file list; later
    files override earlier ones. Commands that change state raise
    CommandError on failure.
    """

    @abstractmethod
    def create_network(self, name: str) -> CommandResult:
        """Create a network. An existing network is not an error."""

    @abstractmethod
    def create_volume(self, name: str) -> CommandResult:
        """Create a volume. An existing volume is not an error."""

    @abstractmethod
    def compose_up(self, files: list[str], services: list[str], directory: Path) -> CommandResult:
        """Bring the stack (or just ``services``) up, detached."""

    @abstractmethod
    def compose_down(self, files: list[str], directory: Path) -> CommandResult:
        """Stop and remove the stack."""

    @abstractmethod
    def compose_list_services(self, files: list[str], directory: Path) -> str:
        """Raw ``compose ps --format json`` output; empty on failure."""

    @abstractmethod
    def compose_config_services(self, files: list[str], directory: Path) -> str:
        """Declared service names, one per line; empty on failure."""

    @abstractmethod
    def compose_exec(
        self, service: str, files: list[str], command: list[str], directory: Path
    ) -> CommandResult:
        """Run a command in a running service container."""

    @abstractmethod
    def compose_run(
        self, service: str, files: list[str], command: list[str], directory: Path
    ) -> CommandResult:
        """Run a command in a fresh container, without dependencies."""


class VcsDriver(Adapter):
    """Version control: cloning checkouts and reading config."""

    @abstractmethod
    def clone(self, remote: str, into_dir: Path) -> CommandResult:
        """Clone ``remote`` so that the checkout is ``into_dir``."""

    @abstractmethod
    def get_config_value(self, key: str, directory: Path) -> str:
        """Value of a config key in ``directory``; empty when unset."""
