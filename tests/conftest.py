"""
Shared test fixtures and configuration.
"""

import logging
import textwrap
from pathlib import Path

import pytest

from docat.adapters.mock import MockContainerDriver, MockShellAdapter, MockVcsDriver
from docat.adapters.registry import Drivers
from docat.core import context
from docat.core.models import App, Config
from docat.core.persistence.cache_store import MemoryCacheStore


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Keep tests away from the real ~/.docat and environment."""
    monkeypatch.setenv("DOCAT_HOME", str(tmp_path / ".docat"))
    monkeypatch.delenv("DOCAT_APP", raising=False)
    monkeypatch.delenv("DOCAT_LOG_LEVEL", raising=False)
    monkeypatch.delenv("DOCAT_LOG_FILE", raising=False)
    context.set_working_dir(None)
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    context.set_working_dir(None)
    # the CLI reconfigures the root logger
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def shared_dir(tmp_path: Path) -> Path:
    """Directory holding every checkout of the test app."""
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def install_dir(shared_dir: Path) -> Path:
    path = shared_dir / "root"
    path.mkdir()
    return path


@pytest.fixture
def app(shared_dir: Path, install_dir: Path) -> App:
    """An app with an install project, a named project and an unmanaged one."""
    return Config.from_document({
        "myapp": {
            "config": {
                "shared_network": "myapp",
                "install_dir": str(install_dir),
                "shared_dir": str(shared_dir),
            },
            "projects": {
                "root": {"is_install": True, "dir": str(install_dir)},
                "api": {
                    "name": "backend",
                    "git": "git@example.com:me/api.git",
                    "dir": str(shared_dir / "api"),
                    "networks": ["api-net"],
                    "volumes": ["api-data"],
                    "on_up": ["make build"],
                    "after_up": ["make migrate"],
                    "on_install": ["cp .env.example .env"],
                    "compose_files": ["docker-compose.yml", "docker-compose.dev.yml"],
                },
                "web": {"dir": str(shared_dir / "web")},
            },
        }
    }).apps["myapp"]


@pytest.fixture
def store() -> MemoryCacheStore:
    return MemoryCacheStore()


@pytest.fixture
def containers() -> MockContainerDriver:
    return MockContainerDriver()


@pytest.fixture
def vcs() -> MockVcsDriver:
    return MockVcsDriver()


@pytest.fixture
def shell() -> MockShellAdapter:
    return MockShellAdapter(substitutions={"$HOME": "/home/test"})


@pytest.fixture
def drivers(containers: MockContainerDriver, vcs: MockVcsDriver, shell: MockShellAdapter) -> Drivers:
    return Drivers(containers=containers, vcs=vcs, shell=shell)


@pytest.fixture
def write_yaml():
    """Write a docat.yml into a directory (created if missing)."""

    def _write(directory: Path, content: str) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / "docat.yml"
        path.write_text(textwrap.dedent(content))
        return path

    return _write
