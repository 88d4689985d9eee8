"""Persistent JSON config and user style sheet helpers.

Config lives in ``config.json`` under the platform config directory. All
access is defensive: missing or malformed files fall back to defaults, and
a commented default is written on first use.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path

from loguru import logger
from platformdirs import user_config_dir

APP_NAME = "zint"
CONFIG_FILENAME = "config.json"
STYLE_FILENAME = "style.css"
CONFIG_DIR = Path(user_config_dir(APP_NAME, appauthor=False))

DEFAULT_EDITOR = "code"

EXAMPLE_CSS = """/* Zint Custom Styles
 * This file is loaded on startup and reloaded whenever it changes.
 *
 * Examples:
 *
 * Change background color:
 * .bg-bg-primary { background-color: #1a1a2e !important; }
 *
 * Change accent color:
 * .file-item.cursor { background-color: #e94560 !important; }
 *
 * Customize scrollbar:
 * ::-webkit-scrollbar-thumb { background: #e94560; }
 */
"""


@dataclass(frozen=True)
class WindowConfig:
    decorations: bool = True
    width: int = 1200
    height: int = 800


@dataclass(frozen=True)
class BehaviorConfig:
    show_hidden: bool = False
    sort_directories_first: bool = True
    default_directory: str | None = None


@dataclass(frozen=True)
class EditorConfig:
    command: str = DEFAULT_EDITOR


@dataclass(frozen=True)
class ZintConfig:
    window: WindowConfig = field(default_factory=WindowConfig)
    behavior: BehaviorConfig = field(default_factory=BehaviorConfig)
    editor: EditorConfig = field(default_factory=EditorConfig)

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


def config_dir() -> Path:
    return CONFIG_DIR


def config_path() -> Path:
    return CONFIG_DIR / CONFIG_FILENAME


def style_css_path() -> Path:
    return CONFIG_DIR / STYLE_FILENAME


def _write_default(path: Path, text: str) -> None:
    """Write a starter file, ignoring filesystem errors."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        logger.debug("Could not write {}: {}", path, exc)


def _section(data: dict[str, object], key: str) -> dict[str, object]:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def _bool(section: dict[str, object], key: str, default: bool) -> bool:
    value = section.get(key)
    return value if isinstance(value, bool) else default


def _positive_int(section: dict[str, object], key: str, default: int) -> int:
    """Accept only real positive integers; booleans count as invalid."""
    value = section.get(key)
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return default
    return value


def _nonempty_str(section: dict[str, object], key: str, default: str | None) -> str | None:
    value = section.get(key)
    if isinstance(value, str) and value.strip():
        return value
    return default


def parse_config(data: dict[str, object]) -> ZintConfig:
    """Build a ``ZintConfig`` from decoded JSON, field by field.

    Unknown keys are ignored and values of the wrong type keep their
    defaults, so a partially valid file still applies what it can.
    """
    window = _section(data, "window")
    behavior = _section(data, "behavior")
    editor = _section(data, "editor")
    return ZintConfig(
        window=WindowConfig(
            decorations=_bool(window, "decorations", True),
            width=_positive_int(window, "width", 1200),
            height=_positive_int(window, "height", 800),
        ),
        behavior=BehaviorConfig(
            show_hidden=_bool(behavior, "show_hidden", False),
            sort_directories_first=_bool(behavior, "sort_directories_first", True),
            default_directory=_nonempty_str(behavior, "default_directory", None),
        ),
        editor=EditorConfig(
            command=_nonempty_str(editor, "command", DEFAULT_EDITOR) or DEFAULT_EDITOR,
        ),
    )


def load_config() -> ZintConfig:
    """Load config, creating the default file when none exists."""
    path = config_path()
    if not path.exists():
        _write_default(path, json.dumps(ZintConfig().to_dict(), indent=2) + "\n")
        return ZintConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable config {}: {}", path, exc)
        return ZintConfig()
    if not isinstance(data, dict):
        return ZintConfig()
    return parse_config(data)


def load_user_css() -> str | None:
    """Return the user style sheet, or write an example one and return ``None``."""
    path = style_css_path()
    if not path.exists():
        _write_default(path, EXAMPLE_CSS)
        return None
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Could not read {}: {}", path, exc)
        return None
