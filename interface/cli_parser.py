"""CLI parser construction for the ttkb board."""

import argparse
from typing import Iterable, Optional


def build_parser(themes: Iterable[str], default_theme: Optional[str] = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ttkb",
        description="ttkb: kanban board for a todo.txt file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Config: config.json / config.yaml / config.yml in ~/.config/ttkb "
            "(or $XDG_CONFIG_HOME/ttkb, $TTKB_CONFIG)."
        ),
    )
    parser.add_argument("--file", "-f", dest="file", metavar="PATH", help="todo.txt to open (overrides config)")
    parser.add_argument(
        "--theme",
        choices=sorted(themes),
        default=default_theme,
        help="color palette (default: config value or built-in)",
    )
    parser.add_argument("--log-file", metavar="PATH", help="write debug/warning logs to this file")
    parser.add_argument("--debug", action="store_true", help="log at DEBUG level (with --log-file)")
    parser.add_argument("--version", action="store_true", help="print version and exit")
    return parser
