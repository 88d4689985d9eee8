"""Extension-based preview categories.

Maps a lowercase file extension to the category the previewer uses to pick
a rendering strategy. Pure table lookup, no filesystem access.
"""

from __future__ import annotations

from pathlib import Path

IMAGE = "image"
VIDEO = "video"
AUDIO = "audio"
PDF = "pdf"
CODE = "code"
BINARY = "binary"
DIRECTORY = "directory"
UNKNOWN = "unknown"

IMAGE_EXTENSIONS = frozenset({"png", "jpg", "jpeg", "gif", "webp", "svg", "bmp", "ico"})
VIDEO_EXTENSIONS = frozenset({"mp4", "webm", "mkv", "avi", "mov"})
AUDIO_EXTENSIONS = frozenset({"mp3", "wav", "ogg", "flac", "m4a"})
CODE_EXTENSIONS = frozenset(
    {
        "rs", "js", "ts", "tsx", "jsx", "py", "go", "c", "cpp", "h", "hpp",
        "java", "kt", "swift", "rb", "php", "sh", "bash", "zsh", "fish",
        "css", "scss", "less", "html", "xml", "json", "yaml", "yml", "toml",
        "md", "markdown", "txt", "log", "conf", "cfg", "ini", "env",
        "sql", "graphql", "vue", "svelte",
    }
)

# Previewed by handing the path back to the caller instead of reading bytes.
MEDIA_CATEGORIES = frozenset({IMAGE, VIDEO, AUDIO, PDF})

_CATEGORY_TABLE: tuple[tuple[frozenset[str], str], ...] = (
    (IMAGE_EXTENSIONS, IMAGE),
    (VIDEO_EXTENSIONS, VIDEO),
    (AUDIO_EXTENSIONS, AUDIO),
    (frozenset({"pdf"}), PDF),
    (CODE_EXTENSIONS, CODE),
)


def extension_of(path: Path | str) -> str | None:
    """Return the lowercase extension of ``path`` without the dot.

    Dotfiles such as ``.bashrc`` have no extension, matching ``Path.suffix``.
    """
    suffix = Path(path).suffix
    if not suffix:
        return None
    return suffix[1:].lower() or None


def classify(extension: str | None) -> str:
    """Map an extension to a preview category; unknown extensions are ``binary``."""
    if not extension:
        return BINARY
    for extensions, category in _CATEGORY_TABLE:
        if extension in extensions:
            return category
    return BINARY


__all__ = [
    "AUDIO",
    "BINARY",
    "CODE",
    "DIRECTORY",
    "IMAGE",
    "MEDIA_CATEGORIES",
    "PDF",
    "UNKNOWN",
    "VIDEO",
    "classify",
    "extension_of",
]
