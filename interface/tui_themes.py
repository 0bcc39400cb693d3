"""TUI themes and styling."""

from typing import Dict

from prompt_toolkit.styles import Style


THEMES: Dict[str, Dict[str, str]] = {
    "dark-olive": {
        "": "#d7dfe6",
        "text": "#d7dfe6",
        "text.dim": "#97a0a9",
        "header": "#ffb347 bold",
        "header.active": "#ffb347 bold underline",
        "border": "#4b525a",
        "border.selected": "#9ad974 bold",
        "selected": "bg:#3b3b3b #d7dfe6 bold",
        "tag.project": "#61afef",
        "tag.context": "#c678dd",
        "tag.meta": "#7a7f85",
        "done": "#6d717a",
        "error": "#e06c75 bold",
        "error.text": "#e06c75",
        "status": "#9ad974",
        "prompt": "#ffb347 bold",
        "table.header": "#ffb347 bold underline",
    },
    "dark-contrast": {
        "": "#e8eaec",
        "text": "#e8eaec",
        "text.dim": "#a7b0ba",
        "header": "#ffb347 bold",
        "header.active": "#ffb347 bold underline",
        "border": "#5a6169",
        "border.selected": "#b8f171 bold",
        "selected": "bg:#3d4047 #e8eaec bold",
        "tag.project": "#79c0ff",
        "tag.context": "#d2a8ff",
        "tag.meta": "#8a9097",
        "done": "#6f757d",
        "error": "#ff6b6b bold",
        "error.text": "#ff6b6b",
        "status": "#b8f171",
        "prompt": "#ffb347 bold",
        "table.header": "#ffb347 bold underline",
    },
}

DEFAULT_THEME = "dark-olive"


def get_theme_palette(theme: str) -> Dict[str, str]:
    """Get theme palette, falling back to default if theme not found."""
    base = THEMES.get(theme)
    if not base:
        base = THEMES[DEFAULT_THEME]
    return dict(base)


def build_style(theme: str) -> Style:
    palette = get_theme_palette(theme)
    return Style.from_dict(palette)
