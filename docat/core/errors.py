"""
Error taxonomy — every failure the CLI reports derives from DocatError.

The CLI layer is the only place these are turned into exit codes.
"""

from __future__ import annotations


class DocatError(Exception):
    """Base class for all errors surfaced to the user."""


class ConfigError(DocatError):
    """Raised when configuration is malformed, missing or inconsistent."""


class ConfigNotFound(ConfigError):
    """Raised when a directory has no config file.

    Callers that treat absence as "contributes nothing" catch this one
    explicitly; anything else lets it surface as a ConfigError.
    """


class AppNotFoundError(DocatError):
    """Raised when no app name can be determined for the invocation."""


class SelectionError(DocatError):
    """Raised when a project selection is invalid or cannot be resolved."""


class CommandError(DocatError):
    """Raised when an external command fails or cannot be spawned."""

    def __init__(self, message: str, args: list[str] | None = None, return_code: int | None = None):
        super().__init__(message)
        self.command = list(args or [])
        self.return_code = return_code
