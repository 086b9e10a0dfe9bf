"""
Mock drivers — test doubles for docker, git and hook commands.

They never spawn processes. Every call is recorded in ``call_log`` so
tests can assert on what a lifecycle operation would have done, and
failures can be injected per operation.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from docat.adapters.base import ContainerDriver, VcsDriver
from docat.adapters.shell.command import ShellCommandAdapter
from docat.core.errors import CommandError
from docat.core.models.command import CommandResult


class _CallRecorder:
    def __init__(self) -> None:
        self._call_log: list[tuple[str, dict[str, Any]]] = []
        self._failures: dict[str, str] = {}

    @property
    def call_log(self) -> list[tuple[str, dict[str, Any]]]:
        """Every (operation, arguments) pair received, in order."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def calls(self, operation: str) -> list[dict[str, Any]]:
        """Arguments of every call to ``operation``."""
        return [args for op, args in self._call_log if op == operation]

    def set_failure(self, operation: str, error: str = "Mock failure") -> None:
        """Make every call to ``operation`` raise CommandError."""
        self._failures[operation] = error

    def reset(self) -> None:
        """Clear call log and injected failures."""
        self._call_log.clear()
        self._failures.clear()

    def _record(self, operation: str, **args: Any) -> CommandResult:
        self._call_log.append((operation, args))
        if operation in self._failures:
            raise CommandError(self._failures[operation], [operation], 1)
        return CommandResult(args=[operation], return_code=0)


class MockContainerDriver(_CallRecorder, ContainerDriver):
    """ContainerDriver that reports configured service state.

    ``declared`` maps a project directory to its compose services and
    ``running`` maps a project directory to ``{service: state}``.
    """

    def __init__(self, available: bool = True):
        super().__init__()
        self._available = available
        self.declared: dict[Path, list[str]] = {}
        self.running: dict[Path, dict[str, str]] = {}
        self.raw_ps: dict[Path, str] = {}

    @property
    def name(self) -> str:
        return "mock-docker"

    def is_available(self) -> bool:
        return self._available

    def set_services(
        self,
        directory: Path,
        declared: Sequence[str],
        running: dict[str, str] | None = None,
    ) -> None:
        """Configure what ``directory``'s compose project reports."""
        self.declared[Path(directory)] = list(declared)
        self.running[Path(directory)] = dict(running or {})

    def create_network(self, name: str) -> CommandResult:
        return self._record("create_network", name=name)

    def create_volume(self, name: str) -> CommandResult:
        return self._record("create_volume", name=name)

    def compose_up(self, files: list[str], services: list[str], directory: Path) -> CommandResult:
        result = self._record("compose_up", files=list(files), services=list(services), directory=directory)
        declared = self.declared.get(Path(directory), [])
        self.running[Path(directory)] = {service: "running" for service in declared}
        return result

    def compose_down(self, files: list[str], directory: Path) -> CommandResult:
        result = self._record("compose_down", files=list(files), directory=directory)
        self.running.pop(Path(directory), None)
        return result

    def compose_list_services(self, files: list[str], directory: Path) -> str:
        self._call_log.append(("compose_list_services", {"files": list(files), "directory": directory}))
        if "compose_list_services" in self._failures:
            return ""
        if Path(directory) in self.raw_ps:
            return self.raw_ps[Path(directory)]
        running = self.running.get(Path(directory), {})
        return json.dumps([{"Service": name, "State": state} for name, state in running.items()])

    def compose_config_services(self, files: list[str], directory: Path) -> str:
        self._call_log.append(("compose_config_services", {"files": list(files), "directory": directory}))
        if "compose_config_services" in self._failures:
            return ""
        return "\n".join(self.declared.get(Path(directory), []))

    def compose_exec(
        self, service: str, files: list[str], command: list[str], directory: Path
    ) -> CommandResult:
        return self._record(
            "compose_exec", service=service, files=list(files), command=list(command), directory=directory
        )

    def compose_run(
        self, service: str, files: list[str], command: list[str], directory: Path
    ) -> CommandResult:
        return self._record(
            "compose_run", service=service, files=list(files), command=list(command), directory=directory
        )


class MockVcsDriver(_CallRecorder, VcsDriver):
    """VcsDriver whose clone just creates the checkout directory."""

    def __init__(self, available: bool = True, create_dirs: bool = True):
        super().__init__()
        self._available = available
        self._create_dirs = create_dirs
        self.config_values: dict[str, str] = {}

    @property
    def name(self) -> str:
        return "mock-git"

    def is_available(self) -> bool:
        return self._available

    def clone(self, remote: str, into_dir: Path) -> CommandResult:
        result = self._record("clone", remote=remote, into_dir=into_dir)
        if self._create_dirs:
            Path(into_dir).mkdir(parents=True, exist_ok=True)
        return result

    def get_config_value(self, key: str, directory: Path) -> str:
        self._call_log.append(("get_config_value", {"key": key, "directory": directory}))
        return self.config_values.get(key, "")


class MockShellAdapter(_CallRecorder, ShellCommandAdapter):
    """Hook runner that records argv instead of executing it."""

    def __init__(self, substitutions: dict[str, str] | None = None):
        _CallRecorder.__init__(self)
        ShellCommandAdapter.__init__(self, substitutions)
        self._failing_programs: set[str] = set()

    @property
    def name(self) -> str:
        return "mock-shell"

    def is_available(self) -> bool:
        return True

    def fail_program(self, program: str) -> None:
        """Make any command whose argv[0] is ``program`` exit non-zero."""
        self._failing_programs.add(program)

    @property
    def commands(self) -> list[list[str]]:
        """argv of every command run, in order."""
        return [args["args"] for op, args in self._call_log if op == "run"]

    def run(
        self,
        args: Sequence[str],
        cwd: Path | None = None,
        capture: bool = False,
        check: bool = True,
        timeout: int | None = None,
    ) -> CommandResult:
        argv = list(args)
        self._call_log.append(("run", {"args": argv, "cwd": cwd}))
        code = 1 if argv and argv[0] in self._failing_programs else 0
        if check and code:
            raise CommandError(f"Command failed: {' '.join(argv)}", argv, code)
        return CommandResult(args=argv, cwd=str(cwd or ""), return_code=code)

    def reset(self) -> None:
        super().reset()
        self._failing_programs.clear()
