"""Copy, move and trash operations over lists of paths.

Sources are processed strictly in input order and processing stops at the
first failure. Items handled before the failure stay handled; nothing is
rolled back and later items are not touched.
"""

from __future__ import annotations

import os
import shutil
from collections.abc import Iterable
from pathlib import Path

from loguru import logger
from send2trash import send2trash

DESTINATION_NOT_DIRECTORY = "Destination must be a directory"
INVALID_SOURCE_PATH = "Invalid source path"


class BulkOperationError(Exception):
    """A bulk operation stopped at ``path`` because of ``cause``.

    ``path`` is ``None`` when the call was rejected before any source was
    processed (for example an invalid destination).
    """

    def __init__(self, message: str, path: str | None = None, cause: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        self.cause = cause

    def to_dict(self) -> dict[str, object]:
        return {"error": self.message, "path": self.path, "cause": self.cause}


def _require_directory(destination: Path | str) -> Path:
    dest_dir = Path(destination)
    if not dest_dir.is_dir():
        raise BulkOperationError(DESTINATION_NOT_DIRECTORY)
    return dest_dir


def _target_for(source: str, dest_dir: Path) -> Path:
    name = Path(source).name
    if name in ("", ".", ".."):
        logger.warning("Rejecting source without a file name: {!r}", source)
        raise BulkOperationError(INVALID_SOURCE_PATH, path=source)
    return dest_dir / name


def _is_within(path: Path, parent: Path) -> bool:
    try:
        return path.resolve().is_relative_to(parent.resolve())
    except OSError:
        return False


def _same_path(first: Path, second: Path) -> bool:
    try:
        return first.resolve() == second.resolve()
    except OSError:
        return False


def _raise_copy_conflict(source: str, reason: str) -> None:
    logger.warning("Copy stopped at {}: {}", source, reason)
    raise BulkOperationError(f"Failed to copy {source}: {reason}", path=source, cause=reason)


def copy_file(src: Path | str, dest: Path) -> None:
    """Copy contents and permission bits to exactly ``dest``.

    Unlike ``shutil.copy``, an existing directory at ``dest`` is an error
    rather than a folder to copy into.
    """
    shutil.copyfile(src, dest)
    shutil.copymode(src, dest)


def copy_tree(src: Path, dest: Path) -> None:
    """Recreate ``src`` under ``dest``, raising the first ``OSError`` hit.

    Nested symlinks are recreated as links rather than followed.
    """
    with os.scandir(src) as entries:
        children = list(entries)
    dest.mkdir(parents=True, exist_ok=True)
    for child in children:
        child_dest = dest / child.name
        if child.is_symlink():
            os.symlink(os.readlink(child.path), child_dest)
        elif child.is_dir(follow_symlinks=False):
            copy_tree(Path(child.path), child_dest)
        else:
            copy_file(child.path, child_dest)


def copy_paths(sources: Iterable[Path | str], destination: Path | str) -> None:
    """Copy every source into ``destination``, recursing into directories.

    Each source lands at exactly ``destination / basename(source)``; an
    existing directory there makes a file copy fail. Symlinks nested in a
    copied tree are recreated as links, so copying over an existing tree that
    already holds those links fails with ``FileExistsError``.

    Raises ``BulkOperationError`` naming the first source that failed.
    """
    dest_dir = _require_directory(destination)
    for raw_source in sources:
        source = str(raw_source)
        target = _target_for(source, dest_dir)
        src_path = Path(source)
        if src_path.is_dir() and _same_path(target, src_path):
            _raise_copy_conflict(source, "source and destination are the same")
        if src_path.is_dir() and _is_within(target, src_path):
            _raise_copy_conflict(source, "destination is inside the source directory")
        try:
            if src_path.is_dir():
                copy_tree(src_path, target)
            else:
                copy_file(src_path, target)
        except OSError as exc:
            logger.warning("Copy stopped at {}: {}", source, exc)
            raise BulkOperationError(f"Failed to copy {source}: {exc}", path=source, cause=str(exc)) from exc
        logger.info("Copied {} -> {}", source, target)


def move_paths(sources: Iterable[Path | str], destination: Path | str) -> None:
    """Rename every source into ``destination``.

    Uses ``os.rename`` only: a move across filesystems fails instead of
    falling back to copy and delete, so a failed move never leaves the item
    in both places.
    """
    dest_dir = _require_directory(destination)
    for raw_source in sources:
        source = str(raw_source)
        target = _target_for(source, dest_dir)
        try:
            os.rename(source, target)
        except OSError as exc:
            logger.warning("Move stopped at {}: {}", source, exc)
            raise BulkOperationError(f"Failed to move {source}: {exc}", path=source, cause=str(exc)) from exc
        logger.info("Moved {} -> {}", source, target)


def delete_paths(paths: Iterable[Path | str]) -> None:
    """Send every path to the platform trash, stopping at the first failure."""
    for raw_path in paths:
        path = str(raw_path)
        try:
            send2trash(path)
        except OSError as exc:
            logger.warning("Delete stopped at {}: {}", path, exc)
            raise BulkOperationError(f"Failed to delete {path}: {exc}", path=path, cause=str(exc)) from exc
        logger.info("Trashed {}", path)


__all__ = [
    "BulkOperationError",
    "copy_file",
    "copy_paths",
    "copy_tree",
    "delete_paths",
    "move_paths",
]
