"""
Config resolution — fold the three config layers into one App.

Precedence, lowest first:

    1. the cache (every app docat has seen, see CacheStore)
    2. the app's install directory  (<install_dir>/docat.yml)
    3. each project checkout        (<project.dir>/docat.yml)

The fully merged Config (all apps, not just the target) is written back
to the cache before the target App is returned.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from docat.core.config.loader import CONFIG_FILENAME, config_file, load_optional
from docat.core.context import get_working_dir
from docat.core.errors import AppNotFoundError, ConfigError
from docat.core.models.app import App
from docat.core.models.config import Config
from docat.core.persistence.cache_store import CacheStore

logger = logging.getLogger(__name__)

# Environment fallback for the app name
APP_ENV_VAR = "DOCAT_APP"


def resolve_app_name(
    explicit: str | None,
    local_config: Config | None,
    cached_config: Config,
    cwd: Path,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Pick the app for this invocation.

    Order: ``--app`` flag, first app of the cwd config, the cached app
    owning a project checked out at ``cwd``, then ``$DOCAT_APP``.

    Raises:
        AppNotFoundError: If none of those yields a name.
    """
    if explicit:
        return explicit

    if local_config is not None and local_config.apps:
        return next(iter(local_config.apps))

    for app_name, app in cached_config.apps.items():
        if any(project.dir == cwd for project in app.projects.values()):
            return app_name

    env = os.environ if environ is None else environ
    from_env = env.get(APP_ENV_VAR, "")
    if from_env:
        return from_env

    raise AppNotFoundError(
        "Could not determine app name, try passing it in with --app "
        f"(or set {APP_ENV_VAR})"
    )


def _install_dir_name(config: Config) -> str | None:
    """Directory name of the install project declared in ``config``, if any."""
    found = None
    for app in config.apps.values():
        install = app.install_project
        if install is not None:
            found = install.dir_name
    return found


def load_cache(store: CacheStore, local_config: Config | None, cwd: Path) -> Config:
    """Load the cache, seeding it from the cwd when cwd is an install root.

    Raises:
        ConfigError: If there is no cache and cwd cannot seed one.
    """
    if store.exists():
        return store.load()

    if local_config is not None and _install_dir_name(local_config) == cwd.name:
        logger.info("No cache yet, seeding it from %s", config_file(cwd))
        return store.seed_from(config_file(cwd))
    raise ConfigError(
        "No cached config found. Run 'docat init <app>' in the install project, "
        f"or run docat from a directory whose {CONFIG_FILENAME} marks it as the install project."
    )


def ensure_install_dir(app: App, cwd: Path) -> App:
    """Give an app without an install dir (or shared dir) one.

    The install project's checkout is used when known, otherwise cwd.
    The shared dir defaults to the install dir's parent.
    """
    config = app.config
    if config.install_dir is not None and config.shared_dir is not None:
        return app

    if config.install_dir is None:
        install = app.install_project
        install_dir = install.dir if install is not None and install.dir is not None else cwd
        logger.debug("Install dir unset, using %s", install_dir)
        config = config.model_copy(update={"install_dir": install_dir})
    if config.shared_dir is None:
        config = config.model_copy(update={"shared_dir": config.install_dir.parent})
    return app.with_config(config)


def combine(
    app_name: str | None,
    store: CacheStore,
    cwd: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> App:
    """Resolve the App for this invocation and refresh the cache."""
    return combine_named(app_name, store, cwd, environ)[1]


def combine_named(
    app_name: str | None,
    store: CacheStore,
    cwd: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> tuple[str, App]:
    """Resolve the app name and the merged App, refreshing the cache.

    Args:
        app_name: Explicit app name (``--app``), or None to infer it.
        store: Where the cached config lives.
        cwd: Invocation directory (default: the registered working dir).
        environ: Environment used for the ``DOCAT_APP`` fallback.

    Returns:
        (app name, fully merged App).
    """
    cwd = cwd or get_working_dir()

    local_config = load_optional(cwd)
    cached = load_cache(store, local_config, cwd)
    name = resolve_app_name(app_name, local_config, cached, cwd, environ)
    logger.info("Resolving app '%s'", name)

    app = ensure_install_dir(cached.get(name), cwd)
    cached = cached.with_app(name, app)

    install_config = load_optional(app.config.install_dir)
    merged = cached.merge(install_config or Config())

    for project in merged.get(name).projects.values():
        if project.dir is None or not project.dir.is_dir():
            logger.debug("Skipping %s: not checked out", project.dir_name)
            continue
        project_config = load_optional(project.dir)
        if project_config is not None:
            logger.debug("Merging config from %s", project.dir)
            merged = merged.merge(project_config)

    store.save(merged)
    return name, merged.get(name)
