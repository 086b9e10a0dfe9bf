"""
Parameters use case — resolve the app and the projects to act on.

Every multi-project command starts here: combine the config layers,
then narrow the app's projects to the requested selection.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from docat.core.config.resolver import combine, combine_named
from docat.core.context import get_working_dir
from docat.core.models.app import App
from docat.core.models.project import Project
from docat.core.persistence.cache_store import CacheStore, FileCacheStore
from docat.core.services.selection import find_project, select_projects


@dataclass
class Parameters:
    """A resolved app plus the projects an operation targets."""

    app: App
    projects: dict[str, Project] = field(default_factory=dict)
    app_name: str = ""


def get_parameters(
    app_name: str | None,
    names: Sequence[str],
    all_: bool = False,
    include_install: bool = False,
    store: CacheStore | None = None,
    cwd: Path | None = None,
) -> Parameters:
    """Resolve the app and select projects.

    Raises:
        DocatError: Any resolution or selection failure.
    """
    cwd = cwd or get_working_dir()
    name, app = combine_named(app_name, store or FileCacheStore(), cwd)
    projects = select_projects(app, names, all_=all_, include_install=include_install, cwd=cwd)
    return Parameters(app=app, projects=projects, app_name=name)


def get_project(
    app_name: str | None,
    project_name: str | None,
    store: CacheStore | None = None,
    cwd: Path | None = None,
) -> Project:
    """Resolve the single project for run/exec."""
    cwd = cwd or get_working_dir()
    app = combine(app_name, store or FileCacheStore(), cwd)
    return find_project(app, project_name, cwd)
