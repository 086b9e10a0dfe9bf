"""
Project selection — turn a command-line project list into projects.

Names are matched against directory names first, then display names.
Unknown names are dropped with a warning rather than failing the
command.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from docat.core.errors import SelectionError
from docat.core.models.app import App
from docat.core.models.project import Project

logger = logging.getLogger(__name__)


def filter_projects(
    app: App,
    names: Sequence[str],
    include_install: bool = False,
) -> dict[str, Project]:
    """Select projects by directory or display name.

    Args:
        app: The resolved app.
        names: Directory names or display names. Empty selects everything.
        include_install: Also select the install project when it was not
            named, so its networks, volumes and hooks are provisioned.

    Returns:
        Selected projects keyed by directory name, sorted by key.
    """
    if not names:
        return dict(app.projects)

    remaining = dict(app.projects)
    selected: dict[str, Project] = {}

    for name in names:
        project = remaining.pop(name, None)
        if project is None:
            match = next(
                (key for key, candidate in remaining.items() if candidate.display_name == name),
                None,
            )
            project = remaining.pop(match, None) if match is not None else None

        if project is None:
            if name not in selected and not any(p.display_name == name for p in selected.values()):
                logger.warning("Unknown project '%s', skipping", name)
            continue
        selected[project.dir_name] = project

    if include_install:
        install = next((project for project in remaining.values() if project.is_install), None)
        if install is not None:
            selected[install.dir_name] = install

    return dict(sorted(selected.items()))


def projects_in_dir(app: App, directory: Path) -> list[Project]:
    """Projects checked out at ``directory``."""
    return [project for project in app.projects.values() if project.dir == directory]


def select_projects(
    app: App,
    names: Sequence[str],
    all_: bool = False,
    include_install: bool = False,
    cwd: Path | None = None,
) -> dict[str, Project]:
    """Resolve the operation set for a multi-project command.

    With no names, running inside a project's checkout selects just that
    project (and never adds the install project on top of it); anywhere
    else every project is selected.

    Raises:
        SelectionError: If ``--all`` is combined with a project list.
    """
    if all_:
        if names:
            raise SelectionError("--all flag is not compatible with a project list")
        return dict(app.projects)

    if names:
        return filter_projects(app, names, include_install)

    local = projects_in_dir(app, cwd) if cwd is not None else []
    if not local:
        return filter_projects(app, [], include_install)

    logger.debug("Narrowing selection to %s", ", ".join(p.dir_name for p in local))
    return filter_projects(app, [p.dir_name for p in local], include_install=False)


def find_project(app: App, project_name: str | None, cwd: Path | None = None) -> Project:
    """Resolve the single project for run/exec.

    An explicit ``--project`` wins; otherwise the project checked out at
    ``cwd`` is used.

    Raises:
        SelectionError: If neither identifies a project.
    """
    if project_name:
        project = app.find_by_name(project_name)
        if project is None:
            raise SelectionError(
                f"Unknown project '{project_name}', consider passing a directory name to --project"
            )
        return project

    if cwd is not None:
        local = projects_in_dir(app, cwd)
        if local:
            return local[0]

    raise SelectionError("Could not determine project, consider passing the --project flag")
