"""
CommandResult model — the outcome of one external process.

Drivers return these for every invocation. Whether a non-zero exit is
fatal is decided by the caller, not the model.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class CommandResult(BaseModel):
    """Exit status and (optionally captured) output of a process."""

    args: list[str] = Field(default_factory=list)
    cwd: str = ""
    return_code: int = 0
    stdout: str = ""                 # empty when output was inherited
    stderr: str = ""
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.return_code == 0

    @property
    def failed(self) -> bool:
        return self.return_code != 0

    @property
    def command_line(self) -> str:
        return " ".join(self.args)
