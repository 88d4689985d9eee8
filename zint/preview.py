"""Bounded previews for files and directories.

Directories preview as a short child listing, media files hand their path
back for external rendering, and everything else is sniffed as UTF-8 text
from a fixed-size head read. Failures are embedded in the result.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass
from pathlib import Path

from loguru import logger

from .classify import BINARY, CODE, DIRECTORY, MEDIA_CATEGORIES, UNKNOWN, classify, extension_of

DIR_PREVIEW_MAX_ENTRIES = 20
PREVIEW_READ_BYTES = 8_192
PREVIEW_MAX_LINES = 50
DIR_MARKER = "📁 "
FILE_MARKER = "📄 "


@dataclass(frozen=True)
class PreviewContent:
    """Result of previewing one path. ``error`` set implies ``content`` is None."""

    file_type: str
    content: str | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


def build_directory_preview(directory: Path, max_entries: int = DIR_PREVIEW_MAX_ENTRIES) -> PreviewContent:
    lines: list[str] = []
    try:
        with os.scandir(directory) as entries:
            for child in entries:
                if len(lines) >= max_entries:
                    break
                try:
                    is_dir = child.is_dir()
                except OSError:
                    is_dir = False
                marker = DIR_MARKER if is_dir else FILE_MARKER
                lines.append(f"{marker}{child.name}")
    except OSError as exc:
        return PreviewContent(file_type=DIRECTORY, error=f"Cannot read directory: {exc}")
    return PreviewContent(file_type=DIRECTORY, content="\n".join(lines))


def decode_text_head(data: bytes) -> str | None:
    """Decode a head sample as strict UTF-8, or return ``None`` for non-text bytes.

    A sample cut in the middle of a multi-byte character does not decode.
    """
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return None


def first_lines(text: str, limit: int = PREVIEW_MAX_LINES) -> str:
    """Return the first ``limit`` lines of ``text`` joined by newlines.

    Lines end at ``\\n``; a trailing ``\\r`` is stripped and a final newline
    does not start an extra empty line.
    """
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return "\n".join(line.removesuffix("\r") for line in lines[:limit])


def build_file_preview(
    target: Path,
    raw_path: str,
    read_bytes: int = PREVIEW_READ_BYTES,
    max_lines: int = PREVIEW_MAX_LINES,
) -> PreviewContent:
    file_type = classify(extension_of(target))
    if file_type in MEDIA_CATEGORIES:
        return PreviewContent(file_type=file_type, content=raw_path)

    try:
        handle = target.open("rb")
    except OSError as exc:
        logger.debug("Cannot open {} for preview: {}", raw_path, exc)
        return PreviewContent(file_type=file_type, error=f"Cannot open file: {exc}")
    with handle:
        try:
            sample = handle.read(read_bytes)
        except OSError as exc:
            logger.debug("Cannot read {} for preview: {}", raw_path, exc)
            return PreviewContent(file_type=file_type, error=f"Cannot read file: {exc}")

    text = decode_text_head(sample)
    if text is None:
        return PreviewContent(file_type=BINARY)
    # Readable text previews as code whatever the extension said.
    return PreviewContent(file_type=CODE, content=first_lines(text, max_lines))


def preview_path(path: Path | str) -> PreviewContent:
    """Build the preview for ``path``; never raises for filesystem conditions."""
    raw_path = str(path)
    target = Path(raw_path)
    if not target.exists():
        return PreviewContent(file_type=UNKNOWN, error="File does not exist")
    if target.is_dir():
        return build_directory_preview(target)
    return build_file_preview(target, raw_path)


__all__ = [
    "DIR_PREVIEW_MAX_ENTRIES",
    "PREVIEW_MAX_LINES",
    "PREVIEW_READ_BYTES",
    "PreviewContent",
    "build_directory_preview",
    "build_file_preview",
    "decode_text_head",
    "first_lines",
    "preview_path",
]
