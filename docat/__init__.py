"""docat — run commands on multiple docker compose projects at the same time."""

__version__ = "0.1.0"
