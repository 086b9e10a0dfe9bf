"""
Init use case — generate docat.yml for the current checkout.

The first project initialised for an app becomes its install root: the
app's install_dir is the checkout and shared_dir is its parent.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from docat.adapters.base import VcsDriver
from docat.core.config.loader import config_file, dump_config, write_config
from docat.core.models.app import App
from docat.core.models.app_config import AppConfig
from docat.core.models.config import Config
from docat.core.models.project import Project
from docat.core.persistence.cache_store import CacheStore

logger = logging.getLogger(__name__)

# git config key used to prefill the project's remote
REMOTE_URL_KEY = "remote.origin.url"


def default_remote(dir_name: str) -> str:
    """Placeholder remote for a checkout without an origin."""
    return f"https://git@github.com:name/{dir_name}.git"


@dataclass
class InitResult:
    """Outcome of ``docat init``."""

    status: Literal["exists", "created", "aborted"]
    config_path: Path
    project_config: Config | None = None
    cached_config: Config | None = None

    @property
    def project_yaml(self) -> str:
        return dump_config(self.project_config) if self.project_config else ""


def build_project_config(app_name: str, directory: Path, vcs: VcsDriver) -> Config:
    """The docat.yml generated for ``directory``."""
    dir_name = directory.name
    remote = vcs.get_config_value(REMOTE_URL_KEY, directory) or default_remote(dir_name)
    app = App(
        config=AppConfig(shared_network=app_name),
        projects={dir_name: Project(git=remote)},
    )
    return Config(apps={app_name: app})


def init_project(
    app_name: str,
    store: CacheStore,
    vcs: VcsDriver,
    directory: Path,
    confirm: Callable[[str], bool],
) -> InitResult:
    """Create docat.yml in ``directory`` and register it in the cache.

    Args:
        app_name: App the checkout belongs to.
        store: The cache to update.
        vcs: Used to read the checkout's origin URL.
        directory: The checkout to initialise.
        confirm: Asked before anything is written; False aborts.
    """
    path = config_file(directory)
    if path.exists():
        logger.info("%s already exists, skipping", path)
        return InitResult(status="exists", config_path=path)

    if store.exists():
        cached = store.load()
    else:
        logger.info("No cache yet, creating one")
        cached = Config()

    if app_name not in cached.apps:
        cached = cached.with_app(app_name, App(config=AppConfig().initialized_at(directory)))

    project_config = build_project_config(app_name, directory, vcs)
    cached = cached.merge(project_config)

    result = InitResult(
        status="aborted",
        config_path=path,
        project_config=project_config,
        cached_config=cached,
    )
    if not confirm(f"Confirm generating {path.name}?"):
        return result

    write_config(project_config, path)
    store.save(cached)
    result.status = "created"
    logger.info("Wrote %s", path)
    return result
