"""
Config model — the root document, one per configuration source.

On disk the document is the apps mapping itself::

    myapp:
      config:
        shared_network: myapp
      projects:
        api:
          git: git@github.com:me/api.git
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator

from docat.core.errors import ConfigError
from docat.core.models.app import App


class Config(BaseModel):
    """All apps known to one configuration source."""

    apps: dict[str, App] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _sort_apps(self) -> Config:
        self.apps = dict(sorted(self.apps.items()))
        return self

    @classmethod
    def from_document(cls, data: dict[str, Any] | None) -> Config:
        """Build a Config from a parsed YAML mapping (app name → app)."""
        apps = {str(name): (app or {}) for name, app in (data or {}).items()}
        return cls.model_validate({"apps": apps})

    def to_document(self) -> dict[str, Any]:
        """Serialise to the YAML shape, omitting empty fields.

        ``dir_name`` is left out because it is always the project key.
        """
        document: dict[str, Any] = {}
        for name, app in self.apps.items():
            data: dict[str, Any] = {}
            if app.projects:
                data["projects"] = {
                    dir_name: project.model_dump(
                        mode="json", exclude_defaults=True, exclude={"dir_name"}
                    )
                    for dir_name, project in app.projects.items()
                }
            if not app.config.is_empty:
                data["config"] = app.config.model_dump(mode="json", exclude_defaults=True)
            document[name] = data
        return document

    @property
    def is_empty(self) -> bool:
        return not self.apps

    def get(self, name: str) -> App:
        """Return the named app or raise ConfigError."""
        try:
            return self.apps[name]
        except KeyError:
            known = ", ".join(self.apps) or "none"
            raise ConfigError(f"App '{name}' not found in config (known apps: {known})") from None

    def with_app(self, name: str, app: App) -> Config:
        """Return a copy with ``name`` set to ``app``."""
        apps = {key: value.model_copy(deep=True) for key, value in self.apps.items()}
        apps[name] = app
        return Config(apps=apps)

    def merge(self, incoming: Config) -> Config:
        """Union of apps; apps present on both sides are merged."""
        apps = {key: value.model_copy(deep=True) for key, value in self.apps.items()}
        for name, app in incoming.apps.items():
            # A new app still goes through App.merge so its projects get located.
            apps[name] = self.apps.get(name, App()).merge(app)
        return Config(apps=apps)
