"""Command-line entry: config, logging and the board application."""

import logging
import sys
from importlib.metadata import PackageNotFoundError, version as pkg_version
from pathlib import Path
from typing import List, Optional

from config import load_config
from interface.cli_parser import build_parser
from interface.kanban_app import KanbanApp
from interface.tui_themes import THEMES

logger = logging.getLogger("ttkb")


def configure_logging(log_file: Optional[str], debug: bool) -> None:
    """Logs go to a file or nowhere; the board owns the terminal."""
    root = logging.getLogger("ttkb")
    root.propagate = False
    if not log_file:
        root.addHandler(logging.NullHandler())
        return
    handler = logging.FileHandler(Path(log_file).expanduser(), encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug else logging.INFO)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser(THEMES.keys())
    args = parser.parse_args(argv)
    if args.version:
        try:
            print(pkg_version("ttkb"))
        except PackageNotFoundError:
            print("0.0.0")
        return 0
    configure_logging(args.log_file, args.debug)

    config = load_config()
    todo_path = Path(args.file).expanduser() if args.file else config.todo_file_path
    theme = args.theme or config.theme
    logger.debug("todo file %s (config: %s)", todo_path, config.source)

    KanbanApp(
        todo_path,
        theme=theme,
        cursor_style=config.cursor_style,
        cursor_blink=config.cursor_blink,
    ).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
