"""
Status use case — reconciled service state for the selected projects.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from docat.adapters.registry import Drivers
from docat.core.models.service import Service
from docat.core.services.lifecycle import status as project_statuses
from docat.core.use_cases.parameters import Parameters


@dataclass
class ProjectStatus:
    """One project's display name and its services."""

    dir_name: str
    name: str
    services: list[Service] = field(default_factory=list)

    @property
    def up_count(self) -> int:
        return sum(1 for service in self.services if service.is_up)


@dataclass
class StatusResult:
    """Aggregated status for a selection."""

    app_name: str = ""
    projects: list[ProjectStatus] = field(default_factory=list)

    @property
    def service_count(self) -> int:
        return sum(len(p.services) for p in self.projects)

    @property
    def up_count(self) -> int:
        return sum(p.up_count for p in self.projects)

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "app": self.app_name,
            "projects": {
                p.dir_name: {
                    "name": p.name,
                    "services": [service.model_dump(mode="json") for service in p.services],
                }
                for p in self.projects
            },
            "services": {"total": self.service_count, "up": self.up_count},
        }


def get_status(params: Parameters, drivers: Drivers) -> StatusResult:
    """Reconcile every selected project's services."""
    result = StatusResult(app_name=params.app_name)
    for dir_name, services in project_statuses(params.projects, drivers).items():
        project = params.app.projects.get(dir_name) or params.projects[dir_name]
        result.projects.append(
            ProjectStatus(dir_name=dir_name, name=project.display_name, services=services)
        )
    return result
