"""Directory listing snapshots.

Enumerates the immediate children of one directory, drops dotfiles unless
asked not to, and sorts directories ahead of files by case-folded name.
Every call re-reads the filesystem; nothing is cached.
"""

from __future__ import annotations

import os
import stat
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path

from loguru import logger

from .classify import extension_of

HIDDEN_PREFIX = "."
MODIFIED_FORMAT = "%Y-%m-%d %H:%M"


@dataclass(frozen=True)
class FileEntry:
    name: str
    path: str
    is_dir: bool
    is_symlink: bool
    is_hidden: bool
    size: int
    modified: str
    extension: str | None = None

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


@dataclass(frozen=True)
class DirectoryContents:
    """Result of listing one directory.

    ``error`` and ``entries`` are mutually exclusive: a failed listing always
    carries an empty ``entries`` tuple.
    """

    path: str
    entries: tuple[FileEntry, ...] = ()
    error: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "path": self.path,
            "entries": [entry.to_dict() for entry in self.entries],
            "error": self.error,
        }


def format_modified(mtime: float) -> str:
    """Format a POSIX timestamp as local time with minute precision."""
    try:
        return datetime.fromtimestamp(mtime).strftime(MODIFIED_FORMAT)
    except (OverflowError, OSError, ValueError):
        return "-"


def is_hidden_name(name: str) -> bool:
    return name.startswith(HIDDEN_PREFIX)


def entry_sort_key(entry: FileEntry, dirs_first: bool = True) -> tuple[bool, str, str]:
    """Sort key: directories first, then case-folded name, then exact name."""
    group = not entry.is_dir if dirs_first else False
    return (group, entry.name.casefold(), entry.name)


def _entry_from_scandir(child: os.DirEntry[str]) -> FileEntry:
    st = child.stat(follow_symlinks=False)
    # Links to directories list as directories; dangling links keep the lstat view.
    try:
        is_dir = child.is_dir()
    except OSError:
        is_dir = stat.S_ISDIR(st.st_mode)
    return FileEntry(
        name=child.name,
        path=child.path,
        is_dir=is_dir,
        is_symlink=stat.S_ISLNK(st.st_mode),
        is_hidden=is_hidden_name(child.name),
        size=st.st_size,
        modified=format_modified(st.st_mtime),
        extension=extension_of(child.name),
    )


def list_directory(
    path: Path | str,
    show_hidden: bool = False,
    dirs_first: bool = True,
) -> DirectoryContents:
    """List the immediate children of ``path``.

    Never raises for filesystem conditions. A missing directory and one that
    cannot be opened are reported through ``DirectoryContents.error``;
    children whose metadata cannot be read are skipped.
    """
    raw_path = str(path)
    directory = Path(raw_path)
    if not directory.exists():
        return DirectoryContents(path=raw_path, error="Directory does not exist")

    entries: list[FileEntry] = []
    try:
        with os.scandir(directory.absolute()) as children:
            for child in children:
                if not show_hidden and is_hidden_name(child.name):
                    continue
                try:
                    entries.append(_entry_from_scandir(child))
                except OSError as exc:
                    logger.debug("Skipping {}: {}", child.path, exc)
                    continue
    except OSError as exc:
        logger.debug("Cannot list {}: {}", raw_path, exc)
        return DirectoryContents(path=raw_path, error=f"Permission denied: {exc}")

    entries.sort(key=lambda entry: entry_sort_key(entry, dirs_first))
    return DirectoryContents(path=raw_path, entries=tuple(entries))


__all__ = [
    "DirectoryContents",
    "FileEntry",
    "entry_sort_key",
    "format_modified",
    "is_hidden_name",
    "list_directory",
]
