from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional


APP_NAME = "lowkeytype"


# ---------------------------
# Locations
# ---------------------------

def sys_platform() -> str:
    # os.uname exists on Unix only
    try:
        return os.uname().sysname.lower()
    except AttributeError:
        return os.name.lower()


def _default_data_dir() -> Path:
    """
    Local-only profile storage:
    - macOS: ~/Library/Application Support/lowkeytype
    - Linux: $XDG_DATA_HOME/lowkeytype or ~/.local/share/lowkeytype
    """
    home = Path.home()
    if sys_platform() == "darwin":
        return home / "Library" / "Application Support" / APP_NAME
    xdg = os.environ.get("XDG_DATA_HOME")
    if xdg:
        return Path(xdg) / APP_NAME
    return home / ".local" / "share" / APP_NAME


DATA_DIR = _default_data_dir()
CONFIG_PATH = DATA_DIR / "config.json"
PACKAGE_DATA = Path(__file__).resolve().parent / "data"


# ---------------------------
# Game constants
# ---------------------------

BUFFER_CAPACITY = 1000
MAX_TARGET_LENGTH = BUFFER_CAPACITY - 1
MAX_NAME_LEN = 49
MAX_WORD_LEN = 19
DEFAULT_WIDTH = 80

ROUND_WORDS = 10
RAW_SPEED_MIN_WORDS = 15
RAW_SPEED_MAX_WORDS = 50

ENDURANCE_ACCURACY_THRESHOLD = 85.0
ENDURANCE_WPM_THRESHOLD = 30.0
DYNAMIC_COMPLEXITY_THRESHOLD = 95.0

LEADERBOARD_SIZE = 5

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]

THEMES: Dict[str, Dict[str, str]] = {
    "classic": {
        "correct": "green",
        "incorrect": "red",
        "info": "cyan",
        "warning": "yellow",
        "default": "",
    },
    "bright": {
        "correct": "bold bright_green",
        "incorrect": "bold bright_red",
        "info": "bright_cyan",
        "warning": "bright_yellow",
        "default": "",
    },
    "ember": {
        "correct": "#fcd34d",
        "incorrect": "#f87171",
        "info": "#fbbf24",
        "warning": "#f97316",
        "default": "",
    },
}


def load_config(path: Optional[Path] = None) -> Dict[str, object]:
    path = path or CONFIG_PATH
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        # a broken config must not stop the game; fall back to defaults
        return {}
    return data if isinstance(data, dict) else {}


@dataclass
class Settings:
    data_dir: Path = DATA_DIR
    users_file: Path = DATA_DIR / "users.txt"
    words_dir: Path = PACKAGE_DATA
    title_file: Path = PACKAGE_DATA / "title.txt"
    log_file: Path = DATA_DIR / f"{APP_NAME}.log"
    log_level: str = "INFO"
    theme: str = "classic"
    palette: Dict[str, str] = field(default_factory=lambda: dict(THEMES["classic"]))

    @property
    def level(self) -> int:
        return getattr(logging, self.log_level, logging.INFO)


def _path_option(config: Dict[str, object], key: str, default: Path) -> Path:
    value = config.get(key)
    if isinstance(value, str) and value.strip():
        return Path(value).expanduser()
    return default


def load_settings(path: Optional[Path] = None, data_dir: Optional[Path] = None) -> Settings:
    data_dir = data_dir or DATA_DIR
    config = load_config(path or data_dir / "config.json")

    palettes = {name: dict(colors) for name, colors in THEMES.items()}
    extra_themes = config.get("themes")
    if isinstance(extra_themes, dict):
        for name, colors in extra_themes.items():
            if isinstance(colors, dict):
                palettes[name] = {**palettes["classic"], **{k: str(v) for k, v in colors.items()}}
    theme = str(config.get("theme", "classic"))
    if theme not in palettes:
        theme = "classic"

    log_level = str(config.get("log_level", "INFO")).upper()
    if log_level not in LOG_LEVELS:
        log_level = "INFO"

    return Settings(
        data_dir=data_dir,
        users_file=_path_option(config, "users_file", data_dir / "users.txt"),
        words_dir=_path_option(config, "words_dir", PACKAGE_DATA),
        title_file=_path_option(config, "title_file", PACKAGE_DATA / "title.txt"),
        log_file=_path_option(config, "log_file", data_dir / f"{APP_NAME}.log"),
        log_level=log_level,
        theme=theme,
        palette=palettes[theme],
    )
