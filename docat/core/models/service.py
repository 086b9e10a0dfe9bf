"""
Service model — one compose service and whether it is running.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel


class Status(str, Enum):
    UP = "up"
    DOWN = "down"

    @classmethod
    def from_state(cls, state: Any) -> Status:
        """Map a compose state string to a status.

        Only "running" counts as up; exited, restarting, dead, paused and
        anything unparseable are down.
        """
        if isinstance(state, str) and state.strip().lower() == "running":
            return cls.UP
        return cls.DOWN


class Service(BaseModel):
    """A declared compose service with its reconciled status."""

    name: str
    status: Status = Status.DOWN

    @property
    def is_up(self) -> bool:
        return self.status is Status.UP

    @classmethod
    def from_ps_entry(cls, entry: dict[str, Any]) -> Service | None:
        """Build from one ``docker compose ps --format json`` entry."""
        name = entry.get("Service") or entry.get("Name")
        if not isinstance(name, str) or not name:
            return None
        return cls(name=name, status=Status.from_state(entry.get("State")))
