"""
Status reconciler — declared compose services joined with live state.

The declared service list drives the result, so every declared service
is reported exactly once, in declaration order, whether or not it is
running. Services that are running but no longer declared are dropped.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping

from docat.adapters.base import ContainerDriver
from docat.core.models.project import Project
from docat.core.models.service import Service, Status

logger = logging.getLogger(__name__)


def parse_ps_output(raw: str) -> dict[str, Status]:
    """Parse ``docker compose ps --format json`` into ``{service: status}``.

    Older compose releases print one JSON array, newer ones print one
    object per line; both are accepted. Unparseable output yields an
    empty mapping, which reconciles every service as down.
    """
    text = raw.strip()
    if not text:
        return {}

    entries: list = []
    try:
        data = json.loads(text)
        entries = data if isinstance(data, list) else [data]
    except json.JSONDecodeError:
        for line in text.splitlines():
            line = line.strip()
            if not line:
                continue
            try:
                entries.append(json.loads(line))
            except json.JSONDecodeError:
                logger.debug("Ignoring unparseable compose ps output")
                return {}

    states: dict[str, Status] = {}
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        service = Service.from_ps_entry(entry)
        if service is None:
            continue
        # A scaled service is up if any replica is running.
        if states.get(service.name) is not Status.UP:
            states[service.name] = service.status
    return states


def parse_declared_services(raw: str) -> list[str]:
    """Service names from ``docker compose config --services``."""
    names: list[str] = []
    for line in raw.splitlines():
        name = line.strip()
        if name and name not in names:
            names.append(name)
    return names


def reconcile(declared: list[str], running: Mapping[str, Status]) -> list[Service]:
    """One Service per declared name, down unless reported running."""
    return [Service(name=name, status=running.get(name, Status.DOWN)) for name in declared]


def project_services(project: Project, containers: ContainerDriver) -> list[Service]:
    """Reconciled services of a single project."""
    if project.dir is None:
        return []
    running = parse_ps_output(containers.compose_list_services(project.compose_files, project.dir))
    declared = parse_declared_services(
        containers.compose_config_services(project.compose_files, project.dir)
    )
    return reconcile(declared, running)


def statuses(
    projects: Mapping[str, Project],
    containers: ContainerDriver,
) -> dict[str, list[Service]]:
    """Reconciled services for every project, keyed by directory name."""
    return {
        dir_name: project_services(project, containers)
        for dir_name, project in projects.items()
    }


def is_down(services: list[Service]) -> bool:
    """Whether any declared service is not running."""
    return any(service.status is Status.DOWN for service in services)
