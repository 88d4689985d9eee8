"""External application launchers.

Opens paths with the platform default handler or the configured editor.
Both return an error message string instead of raising, for UI-friendly
handling, and never wait for the launched process.
"""

from __future__ import annotations

import os
import shlex
import subprocess
import sys
from pathlib import Path

from loguru import logger

from .config import load_config


def default_opener_command(target: str) -> list[str]:
    if sys.platform == "darwin":
        return ["open", target]
    return ["xdg-open", target]


def open_file(path: Path | str) -> str | None:
    target = str(path)
    try:
        if sys.platform == "win32":
            os.startfile(target)  # type: ignore[attr-defined]
        else:
            subprocess.Popen(
                default_opener_command(target),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
    except OSError as exc:
        logger.warning("Failed to open {}: {}", target, exc)
        return f"Failed to open file: {exc}"
    logger.info("Opened {}", target)
    return None


def open_with_editor(path: Path | str, command: str | None = None) -> str | None:
    """Spawn the editor on ``path``.

    ``command`` defaults to the configured ``editor.command`` and may carry
    arguments, e.g. ``"code --new-window"``.
    """
    editor = command if command is not None else load_config().editor.command
    try:
        cmd = shlex.split(editor)
    except ValueError as exc:
        return f"Cannot edit: invalid editor command: {exc}"
    if not cmd:
        return "Cannot edit: editor command is empty."
    try:
        subprocess.Popen([*cmd, str(path)], start_new_session=True)
    except OSError as exc:
        logger.warning("Failed to open {} with {}: {}", path, editor, exc)
        return f"Failed to open with {editor}: {exc}"
    logger.info("Opened {} with {}", path, editor)
    return None
