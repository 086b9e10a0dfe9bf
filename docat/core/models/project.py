"""
Project model — one checked-out, containerised unit of an app.

A project is keyed by its directory name inside the app. Everything
else is optional; empty values mean "not declared at this layer" and
lose against any non-empty value during a merge.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from docat.core.models.app_config import OptionalPath

# Fields replaced wholesale by a non-empty incoming list.
_LIST_FIELDS = (
    "networks",
    "volumes",
    "on_install",
    "on_up",
    "after_up",
    "compose_files",
)


class Project(BaseModel):
    """A docker compose project checked out under the app's shared dir."""

    name: str | None = None          # display label, falls back to dir_name
    git: str = ""                    # remote URL, empty = unmanaged
    dir_name: str = ""               # always equal to the key in App.projects
    dir: OptionalPath = None         # None until resolved

    networks: list[str] = Field(default_factory=list)
    volumes: list[str] = Field(default_factory=list)
    compose_files: list[str] = Field(default_factory=list)

    # ── Hooks (shell command strings, run in order) ─────────────
    on_install: list[str] = Field(default_factory=list)
    on_up: list[str] = Field(default_factory=list)
    after_up: list[str] = Field(default_factory=list)

    is_install: bool = False

    @property
    def display_name(self) -> str:
        return self.name or self.dir_name

    def merge(self, incoming: Project) -> Project:
        """Return a copy with ``incoming``'s non-empty fields applied.

        ``is_install`` is the exception: it always takes the incoming
        value. ``dir`` is never merged; it is derived by the owning app.
        """
        update: dict[str, Any] = {}
        if incoming.name is not None:
            update["name"] = incoming.name
        if incoming.git:
            update["git"] = incoming.git
        if incoming.dir_name:
            update["dir_name"] = incoming.dir_name
        for field in _LIST_FIELDS:
            value = getattr(incoming, field)
            if value:
                update[field] = list(value)
        update["is_install"] = incoming.is_install
        return self.model_copy(update=update, deep=True)
