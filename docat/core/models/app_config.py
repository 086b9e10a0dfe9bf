"""
AppConfig model — settings shared by every project of an app.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator


def _blank_to_none(value: Any) -> Any:
    """Treat an empty string as the unset path sentinel."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


# Path("") is Path("."), so "unset" has to be None rather than an empty path.
OptionalPath = Annotated[Path | None, BeforeValidator(_blank_to_none)]


class AppConfig(BaseModel):
    """App-wide settings: the shared network and the install layout."""

    shared_network: str = ""
    install_dir: OptionalPath = None
    shared_dir: OptionalPath = None

    @property
    def is_empty(self) -> bool:
        return not self.shared_network and self.install_dir is None and self.shared_dir is None

    def initialized_at(self, directory: Path) -> AppConfig:
        """Return a copy whose install root is ``directory``.

        The shared directory becomes the install root's parent.
        """
        return self.model_copy(update={"install_dir": directory, "shared_dir": directory.parent})

    def merge(self, incoming: AppConfig) -> AppConfig:
        """Right-biased merge: non-empty incoming values win.

        An unset path never blanks a path that is already set.
        """
        update: dict[str, Any] = {}
        if incoming.shared_network:
            update["shared_network"] = incoming.shared_network
        if incoming.install_dir is not None:
            update["install_dir"] = incoming.install_dir
        if incoming.shared_dir is not None:
            update["shared_dir"] = incoming.shared_dir
        return self.model_copy(update=update)
