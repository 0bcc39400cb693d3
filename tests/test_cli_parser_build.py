import pytest

from interface.cli_parser import build_parser
from interface.tui_themes import THEMES


def test_build_parser_has_core_options():
    parser = build_parser(THEMES.keys())
    help_text = parser.format_help()
    assert "--file" in help_text
    assert "--theme" in help_text
    assert "--log-file" in help_text


def test_parse_file_and_theme():
    args = build_parser(THEMES.keys()).parse_args(["-f", "notes/todo.txt", "--theme", "dark-contrast"])

    assert args.file == "notes/todo.txt"
    assert args.theme == "dark-contrast"
    assert args.debug is False


def test_defaults():
    args = build_parser(THEMES.keys()).parse_args([])

    assert args.file is None
    assert args.theme is None
    assert args.version is False


def test_unknown_theme_is_rejected():
    with pytest.raises(SystemExit):
        build_parser(THEMES.keys()).parse_args(["--theme", "neon"])
