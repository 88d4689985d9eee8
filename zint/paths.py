"""Home and parent directory resolution for navigation."""

from __future__ import annotations

from pathlib import Path

ROOT_FALLBACK = "/"


def home_directory() -> str:
    """Return the user's home directory, or ``/`` when it cannot be resolved."""
    try:
        return str(Path.home())
    except (KeyError, RuntimeError):
        return ROOT_FALLBACK


def parent_directory(path: Path | str) -> str | None:
    """Return the parent of ``path``, or ``None`` at a filesystem root."""
    current = Path(path)
    parent = current.parent
    if parent == current:
        return None
    return str(parent)
