"""Pre-DB bootstrap configuration. Zero imports from the rest of the app
except constants.

Stores user preferences that must be known before opening the DB (db_folder,
log_level). Config lives in ~/.family_budget/config.json to avoid a
bootstrapping problem. The FAMILY_BUDGET_DB environment variable, when set,
wins over everything else for the database location.
"""
import json
import logging
import os
from pathlib import Path

from utils.constants import DB_ENV_VAR, DB_FILE

CONFIG_DIR = Path.home() / ".family_budget"
CONFIG_FILE = CONFIG_DIR / "config.json"

DEFAULT_LOG_LEVEL = "INFO"


def load_config(path: Path = CONFIG_FILE) -> dict:
    """Returns {} on missing or corrupt file; never raises."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(config: dict, path: Path = CONFIG_FILE) -> None:
    """Creates the config dir if needed; atomic write via .tmp + os.replace()."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        os.replace(tmp, path)
    finally:
        tmp.unlink(missing_ok=True)


def get_db_folder(path: Path = CONFIG_FILE) -> str | None:
    """Return config["db_folder"] or None if not set."""
    return load_config(path).get("db_folder")


def set_db_folder(folder: str | None, path: Path = CONFIG_FILE) -> None:
    """Update db_folder in config and save."""
    config = load_config(path)
    if folder is None:
        config.pop("db_folder", None)
    else:
        config["db_folder"] = folder
    save_config(config, path)


def get_log_level(path: Path = CONFIG_FILE) -> str | int:
    """Level name or number from config; unknown values fall back to INFO."""
    level = load_config(path).get("log_level", DEFAULT_LOG_LEVEL)
    if isinstance(level, int) and not isinstance(level, bool):
        return level
    name = str(level).upper()
    # getLevelName maps registered names to their number, anything else to a str
    if isinstance(logging.getLevelName(name), int):
        return name
    return DEFAULT_LOG_LEVEL


def resolve_db_path(path: Path = CONFIG_FILE) -> str:
    """Environment override, else db_folder from config, else CWD."""
    env_path = os.getenv(DB_ENV_VAR)
    if env_path:
        return env_path
    folder = get_db_folder(path)
    if folder:
        return os.path.join(folder, DB_FILE)
    return DB_FILE
