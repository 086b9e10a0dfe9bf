"""
Domain models — pydantic types for apps, projects and services.

    from docat.core.models import App, AppConfig, Config, Project, Service
"""

from docat.core.models.app import App, is_install_project, resolve_location
from docat.core.models.app_config import AppConfig
from docat.core.models.command import CommandResult
from docat.core.models.config import Config
from docat.core.models.project import Project
from docat.core.models.service import Service, Status

__all__ = [
    # app.py
    "App",
    # app_config.py
    "AppConfig",
    # command.py
    "CommandResult",
    # config.py
    "Config",
    # project.py
    "Project",
    # service.py
    "Service",
    "Status",
    "is_install_project",
    "resolve_location",
]
