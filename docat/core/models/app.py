"""
App model — a named collection of projects plus their shared settings.

The merge here is where project locations are derived: a project's
``dir`` always comes from the app layout, never from the file that
declared the project.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from docat.core.models.app_config import AppConfig
from docat.core.models.project import Project


def is_install_project(project: Project, config: AppConfig) -> bool:
    """Whether ``project`` lives in the app's install directory."""
    if project.dir is None or config.install_dir is None:
        return False
    return Path(project.dir) == Path(config.install_dir)


def resolve_location(dir_name: str, project: Project, config: AppConfig) -> Project:
    """Derive ``dir_name``, ``dir`` and the install flag for a merged project.

    The install project sits at ``install_dir``; every other project sits
    at ``shared_dir / dir_name``, or stays unresolved while the app has
    no shared dir. A project that lands on the install directory is
    flagged as the install project.
    """
    update: dict = {"dir_name": dir_name}
    if project.is_install and config.install_dir is not None:
        update["dir"] = config.install_dir
    elif config.shared_dir is not None:
        update["dir"] = config.shared_dir / dir_name
    elif not project.is_install:
        update["dir"] = None

    resolved = project.model_copy(update=update)
    if is_install_project(resolved, config):
        resolved = resolved.model_copy(update={"is_install": True})
    return resolved


class App(BaseModel):
    """One named application: projects keyed by directory name."""

    projects: dict[str, Project] = Field(default_factory=dict)
    config: AppConfig = Field(default_factory=AppConfig)

    @field_validator("projects", mode="before")
    @classmethod
    def _empty_projects(cls, value: Any) -> Any:
        # "worker:" with nothing under it parses as None
        if value is None:
            return {}
        if isinstance(value, dict):
            return {str(key): {} if entry is None else entry for key, entry in value.items()}
        return value

    @field_validator("config", mode="before")
    @classmethod
    def _empty_config(cls, value: Any) -> Any:
        return {} if value is None else value

    @model_validator(mode="after")
    def _sync_dir_names(self) -> App:
        # Keys are the identity; keep dir_name in step and order by key.
        for dir_name, project in self.projects.items():
            if project.dir_name != dir_name:
                project.dir_name = dir_name
        self.projects = dict(sorted(self.projects.items()))
        return self

    @property
    def install_project(self) -> Project | None:
        """The project flagged as the install root (first by key)."""
        for project in self.projects.values():
            if project.is_install:
                return project
        return None

    def find_by_name(self, name: str) -> Project | None:
        """Look up a project by directory name, then by display name."""
        if name in self.projects:
            return self.projects[name]
        for project in self.projects.values():
            if project.display_name == name:
                return project
        return None

    def with_config(self, config: AppConfig) -> App:
        return self.model_copy(update={"config": config}, deep=True)

    def merge(self, incoming: App) -> App:
        """Union the project maps, right-biased per field.

        Projects only present here are kept verbatim. Projects present in
        ``incoming`` are merged (or taken) and then re-located against the
        merged app config.
        """
        config = self.config.merge(incoming.config)

        projects = {key: project.model_copy(deep=True) for key, project in self.projects.items()}
        for dir_name, project in incoming.projects.items():
            base = self.projects.get(dir_name)
            merged = base.merge(project) if base is not None else project.model_copy(deep=True)
            projects[dir_name] = resolve_location(dir_name, merged, config)

        return App(projects=projects, config=config)
