"""
Lifecycle operations — install, run-install, up, down, restart, run, exec.

Each operation receives an already-selected set of projects and a
Drivers bundle. Everything runs sequentially; the first failing command
raises CommandError and aborts the operation. Side effects already
applied to earlier projects are not rolled back.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from docat.adapters.registry import Drivers
from docat.core.errors import ConfigError, SelectionError
from docat.core.models.app import App
from docat.core.models.project import Project
from docat.core.models.service import Service
from docat.core.services.status import is_down, statuses

logger = logging.getLogger(__name__)


def checkout_dir(app: App, project: Project) -> Path:
    """Where a project is (or will be) checked out."""
    if project.dir is not None:
        return project.dir
    if app.config.shared_dir is None:
        raise ConfigError(
            f"Cannot locate project '{project.dir_name}': app has no shared_dir configured"
        )
    return app.config.shared_dir / project.dir_name


def provision(project: Project, drivers: Drivers) -> None:
    """Create the networks and volumes a project expects to exist."""
    for network in project.networks:
        drivers.containers.create_network(network)
    for volume in project.volumes:
        drivers.containers.create_volume(volume)


def needs_clone(project: Project) -> bool:
    """Whether a project has a remote and no checkout yet."""
    if not project.git:
        return False
    return project.dir is None or not project.dir.exists()


def install(app: App, projects: Mapping[str, Project], drivers: Drivers) -> list[str]:
    """Clone missing checkouts, then provision and run ``on_install``.

    Projects that are already checked out, or have no git remote, are
    left alone.

    Returns:
        Directory names of the projects that were installed.
    """
    installed = []
    for dir_name, project in projects.items():
        if not needs_clone(project):
            logger.debug("Skipping install of %s", dir_name)
            continue

        target = checkout_dir(app, project)
        logger.info("Installing %s into %s", project.display_name, target)
        drivers.vcs.clone(project.git, target)
        provision(project, drivers)
        drivers.shell.run_hooks(project.on_install, target)
        installed.append(dir_name)
    return installed


def run_install(app: App, projects: Mapping[str, Project], drivers: Drivers) -> list[str]:
    """Re-run provisioning and ``on_install`` for existing checkouts.

    Raises:
        SelectionError: If no projects were selected.
    """
    if not projects:
        raise SelectionError("Must provide projects to run install steps on")

    for dir_name, project in projects.items():
        logger.info("Re-running install steps for %s", project.display_name)
        provision(project, drivers)
        drivers.shell.run_hooks(project.on_install, checkout_dir(app, project))
    return list(projects)


def up(app: App, projects: Mapping[str, Project], drivers: Drivers) -> list[str]:
    """Bring up every selected project that has a service down.

    Missing checkouts are installed first. Projects whose declared
    services are all running are left untouched.

    Returns:
        Directory names of the projects that were brought up.
    """
    install(app, projects, drivers)

    current = statuses(_refreshed(app, projects), drivers.containers)
    down_projects = [dir_name for dir_name, services in current.items() if is_down(services)]

    if app.config.shared_network:
        drivers.containers.create_network(app.config.shared_network)

    for dir_name in down_projects:
        project = projects[dir_name]
        directory = checkout_dir(app, project)
        logger.info("Bringing up %s", project.display_name)
        provision(project, drivers)
        drivers.shell.run_hooks(project.on_up, directory)
        drivers.containers.compose_up(project.compose_files, [], directory)
        drivers.shell.run_hooks(project.after_up, directory)

    if not down_projects:
        logger.info("All selected projects are already up")
    return down_projects


def down(app: App, projects: Mapping[str, Project], drivers: Drivers) -> list[str]:
    """Bring down every selected project that is checked out."""
    brought_down = []
    for dir_name, project in projects.items():
        directory = checkout_dir(app, project)
        if not directory.is_dir():
            logger.debug("Skipping %s: not checked out", dir_name)
            continue
        logger.info("Bringing down %s", project.display_name)
        drivers.containers.compose_down(project.compose_files, directory)
        brought_down.append(dir_name)
    return brought_down


def restart(app: App, projects: Mapping[str, Project], drivers: Drivers) -> list[str]:
    """Down, then up, on the same selection."""
    down(app, projects, drivers)
    return up(app, projects, drivers)


def status(projects: Mapping[str, Project], drivers: Drivers) -> dict[str, list[Service]]:
    return statuses(projects, drivers.containers)


def run(service: str, command: list[str], project: Project, drivers: Drivers) -> None:
    """Run a command in a new container of ``service``, without dependencies."""
    if project.dir is None:
        raise SelectionError(f"Project '{project.display_name}' is not checked out")
    drivers.containers.compose_run(service, project.compose_files, command, project.dir)


def exec_(service: str, command: list[str], project: Project, drivers: Drivers) -> None:
    """Run a command in the running container of ``service``."""
    if project.dir is None:
        raise SelectionError(f"Project '{project.display_name}' is not checked out")
    drivers.containers.compose_exec(service, project.compose_files, command, project.dir)


def _refreshed(app: App, projects: Mapping[str, Project]) -> dict[str, Project]:
    """Selected projects with a checkout location filled in."""
    return {
        dir_name: project if project.dir is not None
        else project.model_copy(update={"dir": checkout_dir(app, project)})
        for dir_name, project in projects.items()
    }
