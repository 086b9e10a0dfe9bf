"""
Invocation context — the directory docat was started from.

Resolution and project selection both depend on "where am I": the cwd
config names the default app, and a project whose checkout is the cwd
narrows the default selection. The directory is registered once at
startup:

    - CLI:    main.py  → context.set_working_dir(Path.cwd())
    - Tests:  conftest → context.set_working_dir(tmp_path)

When nothing has been registered, the process cwd is used.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


_working_dir: Optional[Path] = None


def set_working_dir(directory: Path | None) -> None:
    """Register the invocation directory for the current process."""
    global _working_dir
    _working_dir = Path(directory).resolve() if directory is not None else None


def get_working_dir() -> Path:
    """Return the invocation directory (defaults to the process cwd)."""
    return _working_dir if _working_dir is not None else Path.cwd()
