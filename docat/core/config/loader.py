"""
Configuration loader — reads docat.yml into domain models.

Every layer (cache, install root, project checkout) uses the same
filename and schema. A missing file is a recoverable ConfigNotFound;
a file that exists but cannot be used is a fatal ConfigError.
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

import yaml
from pydantic import ValidationError

from docat.core.errors import ConfigError, ConfigNotFound
from docat.core.models.config import Config

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILENAME = "docat.yml"


def config_file(directory: Path) -> Path:
    """Path of the config file inside ``directory``."""
    return Path(directory) / CONFIG_FILENAME


def load_file(path: Path) -> Config:
    """Load and validate a config document.

    Raises:
        ConfigNotFound: If the file does not exist.
        ConfigError: If the file is unreadable or invalid.
    """
    if not path.is_file():
        raise ConfigNotFound(f"Config file not found: {path}")

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return Config()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        config = Config.from_document(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    logger.debug("Loaded %d app(s) from %s", len(config.apps), path)
    return config


def load_from(directory: Path) -> Config:
    """Load ``directory/docat.yml``."""
    return load_file(config_file(directory))


def load_optional(directory: Path | None) -> Config | None:
    """Load ``directory/docat.yml``, or None when there is nothing to load."""
    if directory is None:
        return None
    try:
        return load_from(directory)
    except ConfigNotFound:
        logger.debug("No %s in %s", CONFIG_FILENAME, directory)
        return None


def dump_config(config: Config) -> str:
    """Serialise a Config to YAML text."""
    document = config.to_document()
    if not document:
        return ""
    return yaml.safe_dump(document, sort_keys=False, default_flow_style=False)


def write_config(config: Config, path: Path) -> None:
    """Write a Config to ``path`` (atomic write).

    Uses write-to-temp-then-rename so a crash never leaves half a file.
    """
    content = dump_config(config)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        _fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=".docat_", suffix=".tmp")
    except OSError as e:
        raise ConfigError(f"Cannot write {path}: {e}") from e

    tmp = Path(tmp_path)
    try:
        with open(_fd, "w", encoding="utf-8") as fh:
            fh.write(content)
        tmp.replace(path)
        logger.debug("Config written to %s", path)
    except OSError as e:
        tmp.unlink(missing_ok=True)
        raise ConfigError(f"Cannot write {path}: {e}") from e
