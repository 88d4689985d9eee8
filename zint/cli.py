"""Command-line front door for zint.

Parses CLI options and dispatches to the listing, preview, bulk and launch
helpers, printing JSON results. Also hosts the file/directory picker modes
and the style-sheet watch loop.
"""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence
from pathlib import Path

from loguru import logger

from .bulk import BulkOperationError, copy_paths, delete_paths, move_paths
from .config import load_config, load_user_css, style_css_path
from .launch import open_file, open_with_editor
from .listing import list_directory
from .paths import home_directory, parent_directory
from .preview import preview_path
from .watch import StyleWatcher

LOG_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}"
STYLE_RELOAD_EVENT = "css-reload"


def setup_logging(verbose: bool = False) -> None:
    """Route loguru output to stderr; debug level when ``verbose``."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING", format=LOG_FORMAT)


def _emit(payload: object) -> None:
    sys.stdout.write(json.dumps(payload, ensure_ascii=False, indent=2) + "\n")


def _fail(message: str) -> None:
    sys.stderr.write(message + "\n")
    raise SystemExit(1)


def _pick(path: str, want_dir: bool) -> None:
    """Print the resolved path when it is of the requested kind, else exit 1."""
    target = Path(path).expanduser()
    ok = target.is_dir() if want_dir else target.is_file()
    if not ok:
        kind = "directory" if want_dir else "file"
        _fail(f"Not a {kind}: {target}")
    sys.stdout.write(f"{target.resolve()}\n")


def _cmd_ls(args: argparse.Namespace) -> None:
    config = load_config()
    path = args.path or config.behavior.default_directory or home_directory()
    show_hidden = args.all or config.behavior.show_hidden
    contents = list_directory(
        Path(path).expanduser(),
        show_hidden=show_hidden,
        dirs_first=config.behavior.sort_directories_first,
    )
    _emit(contents.to_dict())


def _cmd_preview(args: argparse.Namespace) -> None:
    _emit(preview_path(args.path).to_dict())


def _run_bulk(operation, *operands) -> None:
    try:
        operation(*operands)
    except BulkOperationError as exc:
        _fail(exc.message)
    _emit({"ok": True})


def _cmd_cp(args: argparse.Namespace) -> None:
    _run_bulk(copy_paths, args.sources, args.destination)


def _cmd_mv(args: argparse.Namespace) -> None:
    _run_bulk(move_paths, args.sources, args.destination)


def _cmd_rm(args: argparse.Namespace) -> None:
    _run_bulk(delete_paths, args.paths)


def _cmd_home(args: argparse.Namespace) -> None:
    _emit(home_directory())


def _cmd_parent(args: argparse.Namespace) -> None:
    _emit(parent_directory(args.path))


def _cmd_config(args: argparse.Namespace) -> None:
    _emit(load_config().to_dict())


def _cmd_open(args: argparse.Namespace) -> None:
    error = open_file(args.path)
    if error is not None:
        _fail(error)


def _cmd_edit(args: argparse.Namespace) -> None:
    error = open_with_editor(args.path, args.editor)
    if error is not None:
        _fail(error)


def _cmd_watch_style(args: argparse.Namespace) -> None:
    """Print the style sheet once, then one JSON line per change."""
    css = load_user_css()
    if css is not None:
        _print_style_event(css)

    watcher = StyleWatcher(style_css_path(), _print_style_event)
    if not watcher.start():
        _fail(f"Style sheet not found: {style_css_path()}")
    try:
        while watcher.running:
            watcher.join(timeout=watcher.receive_timeout)
    except KeyboardInterrupt:
        pass
    finally:
        watcher.stop()
        watcher.join(timeout=watcher.receive_timeout)


def _print_style_event(content: str) -> None:
    sys.stdout.write(json.dumps({"event": STYLE_RELOAD_EVENT, "content": content}) + "\n")
    sys.stdout.flush()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zint",
        description="Browse, preview and manage local files.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging on stderr.")
    picker = parser.add_mutually_exclusive_group()
    picker.add_argument("--pick-file", metavar="PATH", help="Print PATH if it is a file and exit.")
    picker.add_argument("--pick-dir", metavar="PATH", help="Print PATH if it is a directory and exit.")

    sub = parser.add_subparsers(dest="command")

    ls = sub.add_parser("ls", help="List a directory.")
    ls.add_argument("path", nargs="?", default=None, help="Directory (default: configured or home).")
    ls.add_argument("-a", "--all", action="store_true", help="Include hidden entries.")
    ls.set_defaults(handler=_cmd_ls)

    preview = sub.add_parser("preview", help="Preview a file or directory.")
    preview.add_argument("path")
    preview.set_defaults(handler=_cmd_preview)

    cp = sub.add_parser("cp", help="Copy paths into a directory.")
    cp.add_argument("sources", nargs="+")
    cp.add_argument("destination")
    cp.set_defaults(handler=_cmd_cp)

    mv = sub.add_parser("mv", help="Move paths into a directory.")
    mv.add_argument("sources", nargs="+")
    mv.add_argument("destination")
    mv.set_defaults(handler=_cmd_mv)

    rm = sub.add_parser("rm", help="Send paths to the trash.")
    rm.add_argument("paths", nargs="+")
    rm.set_defaults(handler=_cmd_rm)

    home = sub.add_parser("home", help="Print the home directory.")
    home.set_defaults(handler=_cmd_home)

    parent = sub.add_parser("parent", help="Print the parent directory of PATH.")
    parent.add_argument("path")
    parent.set_defaults(handler=_cmd_parent)

    config = sub.add_parser("config", help="Print the effective configuration.")
    config.set_defaults(handler=_cmd_config)

    open_parser = sub.add_parser("open", help="Open PATH with the default application.")
    open_parser.add_argument("path")
    open_parser.set_defaults(handler=_cmd_open)

    edit = sub.add_parser("edit", help="Open PATH with the configured editor.")
    edit.add_argument("path")
    edit.add_argument("--editor", default=None, help="Editor command (default: from config).")
    edit.set_defaults(handler=_cmd_edit)

    watch = sub.add_parser("watch-style", help="Stream style sheet changes as JSON lines.")
    watch.set_defaults(handler=_cmd_watch_style)
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Parse CLI arguments and run one command."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if args.pick_file is not None:
        _pick(args.pick_file, want_dir=False)
        return
    if args.pick_dir is not None:
        _pick(args.pick_dir, want_dir=True)
        return
    if args.command is None:
        parser.print_help()
        raise SystemExit(2)
    args.handler(args)


if __name__ == "__main__":
    main()
