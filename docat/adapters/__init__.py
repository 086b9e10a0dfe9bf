"""Adapters — bindings for docker, git and hook commands.

Public re-exports for convenient access.
"""

from docat.adapters.base import Adapter, ContainerDriver, VcsDriver
from docat.adapters.mock import MockContainerDriver, MockVcsDriver
from docat.adapters.registry import Drivers

__all__ = [
    "Adapter",
    "ContainerDriver",
    "Drivers",
    "MockContainerDriver",
    "MockVcsDriver",
    "VcsDriver",
]
