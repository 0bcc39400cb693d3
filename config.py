"""User configuration: todo file location, cursor appearance, theme.

Config files are JSON or YAML (`config.json`, `config.yaml`, `config.yml`),
looked up in the platform's config directories; `TTKB_CONFIG` points at an
explicit file instead. Anything missing or invalid falls back to defaults.
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

logger = logging.getLogger("ttkb.config")

APP_DIR_NAME = "ttkb"
CONFIG_FILE_NAMES = ("config.json", "config.yaml", "config.yml")
CONFIG_ENV_VAR = "TTKB_CONFIG"
TODO_FILE_NAME = "todo.txt"
CURSOR_STYLES = ("native", "block", "bar", "underline")
DEFAULT_CURSOR_STYLE = "native"
DEFAULT_THEME = "dark-olive"


@dataclass(frozen=True)
class AppConfig:
    todo_file_path: Path
    cursor_style: str = DEFAULT_CURSOR_STYLE
    cursor_blink: bool = False
    theme: str = DEFAULT_THEME
    source: Optional[Path] = None


def default_todo_file_path() -> Path:
    return Path.home() / TODO_FILE_NAME


def config_directories(environ: Optional[Mapping[str, str]] = None, platform: Optional[str] = None) -> List[Path]:
    """Candidate config directories, most specific first; `~/.config/ttkb` is always last."""
    env = os.environ if environ is None else environ
    platform = platform or sys.platform
    home = Path.home()
    dirs: List[Path] = []
    if platform.startswith("win"):
        for var in ("APPDATA", "LOCALAPPDATA"):
            value = env.get(var, "").strip()
            if value:
                dirs.append(Path(value) / APP_DIR_NAME)
        dirs.append(home / "AppData" / "Roaming" / APP_DIR_NAME)
    elif platform == "darwin":
        dirs.append(home / "Library" / "Application Support" / APP_DIR_NAME)
    else:
        xdg = env.get("XDG_CONFIG_HOME", "").strip()
        if xdg:
            dirs.append(Path(xdg) / APP_DIR_NAME)
    dirs.append(home / ".config" / APP_DIR_NAME)
    unique: List[Path] = []
    for directory in dirs:
        if directory not in unique:
            unique.append(directory)
    return unique


def find_config_file(environ: Optional[Mapping[str, str]] = None, platform: Optional[str] = None) -> Optional[Path]:
    env = os.environ if environ is None else environ
    explicit = env.get(CONFIG_ENV_VAR, "").strip()
    if explicit:
        path = Path(explicit).expanduser()
        return path if path.is_file() else None
    for directory in config_directories(env, platform):
        for name in CONFIG_FILE_NAMES:
            candidate = directory / name
            if candidate.is_file():
                return candidate
    return None


def _load_config_file(path: Path) -> Dict[str, Any]:
    # JSON is a subset of YAML, so one loader reads every supported file.
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        logger.warning("ignoring unreadable config %s: %s", path, exc)
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("ignoring config %s: top level must be a mapping", path)
        return {}
    return data


def _non_empty_string(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def resolve_todo_file_path(value: str) -> Path:
    """`.../todo.txt` is taken as-is, a trailing separator means a directory, any other path gets `todo.txt` beside it."""
    path = Path(value).expanduser()
    if path.name == TODO_FILE_NAME:
        return path
    if value.endswith(("/", "\\")):
        return path / TODO_FILE_NAME
    return path.parent / TODO_FILE_NAME


def todo_path_from(data: Mapping[str, Any]) -> Path:
    directory = _non_empty_string(data.get("todoDirectoryPath"))
    if directory:
        return Path(directory).expanduser() / TODO_FILE_NAME
    file_path = _non_empty_string(data.get("todoFilePath"))
    if file_path:
        return resolve_todo_file_path(file_path)
    return default_todo_file_path()


def sanitize_config(data: Mapping[str, Any], source: Optional[Path] = None) -> AppConfig:
    cursor_style = data.get("cursorStyle")
    if cursor_style not in CURSOR_STYLES:
        cursor_style = DEFAULT_CURSOR_STYLE
    cursor_blink = data.get("cursorBlink")
    theme = _non_empty_string(data.get("theme")) or DEFAULT_THEME
    return AppConfig(
        todo_file_path=todo_path_from(data),
        cursor_style=cursor_style,
        cursor_blink=cursor_blink if isinstance(cursor_blink, bool) else False,
        theme=theme,
        source=source,
    )


def load_config(environ: Optional[Mapping[str, str]] = None, platform: Optional[str] = None) -> AppConfig:
    path = find_config_file(environ, platform)
    if path is None:
        return sanitize_config({})
    logger.debug("loading config from %s", path)
    return sanitize_config(_load_config_file(path), source=path)
