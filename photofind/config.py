from __future__ import annotations

import os
import platform
from pathlib import Path
from typing import Dict


def get_app_data_dir() -> Path:
    """
    Get the platform-specific application data directory.

    Returns:
    - macOS: ~/Library/Application Support/PhotoFind
    - Windows: %APPDATA%/PhotoFind
    - Linux: ~/.local/share/PhotoFind (or $XDG_DATA_HOME/PhotoFind)

    Can be overridden with PHOTOFIND_DATA_DIR environment variable.
    """
    if env_dir := os.environ.get("PHOTOFIND_DATA_DIR"):
        return Path(env_dir).resolve()

    system = platform.system()

    if system == "Darwin":  # macOS
        base = Path.home() / "Library" / "Application Support"
    elif system == "Windows":
        appdata = os.environ.get("APPDATA")
        if appdata:
            base = Path(appdata)
        else:
            base = Path.home() / "AppData" / "Roaming"
    else:  # Linux and others
        xdg_data = os.environ.get("XDG_DATA_HOME")
        if xdg_data:
            base = Path(xdg_data)
        else:
            base = Path.home() / ".local" / "share"

    return base / "PhotoFind"


APP_NAME = "PhotoFind"
APP_VERSION = "1.0.0"

APP_DATA_DIR = get_app_data_dir()
APP_DATA_DIR.mkdir(parents=True, exist_ok=True)

DB_PATH = APP_DATA_DIR / "photofind.db"
LOG_DIR = APP_DATA_DIR / "logs"

if env_db := os.environ.get("PHOTOFIND_DB_PATH"):
    DB_PATH = Path(env_db).resolve()
if env_log := os.environ.get("PHOTOFIND_LOG_DIR"):
    LOG_DIR = Path(env_log).resolve()

LOG_DIR.mkdir(parents=True, exist_ok=True)

# Root log level name, e.g. DEBUG or WARNING
LOG_LEVEL = os.environ.get("PHOTOFIND_LOG_LEVEL", "INFO").upper()

API_HOST = os.environ.get("PHOTOFIND_HOST", "127.0.0.1")
API_PORT = int(os.environ.get("PHOTOFIND_PORT", "8000"))

SEARCH_DEFAULT_LIMIT = 20
SEARCH_MAX_LIMIT = 100

# Tag origins, mirrors how tags get attached to an image
TAG_TYPES = ("AUTO_EXIF", "AUTO_AI", "CUSTOM")

# Parser confidence heuristic
CONFIDENCE_BASE = 0.3
CONFIDENCE_PER_CATEGORY_TERM = 0.15
CONFIDENCE_DATE_BONUS = 0.10
CONFIDENCE_LOCATION_BONUS = 0.10
CONFIDENCE_PER_KEYWORD = 0.05
CONFIDENCE_KEYWORD_CAP = 0.15
CONFIDENCE_MAX = 0.95

# Ranker weights
RELEVANCE_WEIGHTS: Dict[str, float] = {
    "scene": 5.0,
    "object": 5.0,
    "emotion": 3.0,
    "tag": 3.0,
    "text_field": 2.0,
    "date": 1.0,
}
