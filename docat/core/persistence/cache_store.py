"""
Cache store — the durable, merged configuration for every app.

The cache is read at the start of each invocation and rewritten at the
end. Resolution only talks to the CacheStore interface, so tests use
the in-memory store and the file store stays the only thing that
touches ``~/.docat``.

There is no locking: two invocations against the same cache file can
race, and the last writer wins.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path

from docat.core.config.loader import CONFIG_FILENAME, load_file, write_config
from docat.core.errors import ConfigNotFound
from docat.core.models.config import Config

logger = logging.getLogger(__name__)

# Default cache directory (relative to the user's home)
DEFAULT_CACHE_DIR = ".docat"


def default_cache_dir() -> Path:
    """Cache directory: ``$DOCAT_HOME`` or ``~/.docat``."""
    override = os.environ.get("DOCAT_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / DEFAULT_CACHE_DIR


def default_cache_path() -> Path:
    return default_cache_dir() / CONFIG_FILENAME


class CacheStore(ABC):
    """Read-modify-write storage for the cached Config."""

    @abstractmethod
    def exists(self) -> bool:
        """Whether a cached config has been saved."""

    @abstractmethod
    def load(self) -> Config:
        """Return the cached config.

        Raises:
            ConfigNotFound: If nothing has been cached yet.
            ConfigError: If the cache exists but is invalid.
        """

    @abstractmethod
    def save(self, config: Config) -> None:
        """Replace the cached config."""

    def seed_from(self, path: Path) -> Config:
        """Initialise the cache from an existing config file."""
        config = load_file(path)
        self.save(config)
        logger.info("Seeded cache from %s", path)
        return config


class FileCacheStore(CacheStore):
    """Cache stored as a docat.yml file (default ``~/.docat/docat.yml``)."""

    def __init__(self, path: Path | None = None):
        self.path = path or default_cache_path()

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> Config:
        return load_file(self.path)

    def save(self, config: Config) -> None:
        write_config(config, self.path)

    def __repr__(self) -> str:
        return f"<FileCacheStore path={str(self.path)!r}>"


class MemoryCacheStore(CacheStore):
    """In-process cache, for tests and dry runs."""

    def __init__(self, config: Config | None = None):
        self._config = config
        self.save_count = 0

    def exists(self) -> bool:
        return self._config is not None

    def load(self) -> Config:
        if self._config is None:
            raise ConfigNotFound("No cached config")
        return self._config.model_copy(deep=True)

    def save(self, config: Config) -> None:
        self._config = config.model_copy(deep=True)
        self.save_count += 1
