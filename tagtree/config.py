"""Persistent JSON config helpers.

Stores tag-tree settings and the expanded-folder set.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from platformdirs import user_config_dir

from .settings import TagTreeSettings
from .tree_model.expansion import sorted_expanded_folders

logger = logging.getLogger(__name__)

APP_NAME = "tagtree"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_path = path or CONFIG_PATH
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", config_path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object], path: Path | None = None) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem and serialization errors are logged and otherwise ignored so a
    read-only config directory never breaks a session.
    """
    config_path = path or CONFIG_PATH
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        logger.warning("could not save config %s: %s", config_path, exc)


def load_settings(path: Path | None = None) -> TagTreeSettings:
    """Return persisted settings; invalid values fall back to defaults."""
    value = load_config(path).get("settings")
    return TagTreeSettings.from_mapping(value if isinstance(value, dict) else None)


def save_settings(settings: TagTreeSettings, path: Path | None = None) -> None:
    config = load_config(path)
    config["settings"] = settings.to_dict()
    save_config(config, path)


def load_expanded_folders(path: Path | None = None) -> list[str]:
    """Load expanded folder keys, dropping anything that is not a non-empty string."""
    value = load_config(path).get("expanded_folders")
    if not isinstance(value, list):
        return []
    return sorted_expanded_folders(key for key in value if isinstance(key, str) and key)


def save_expanded_folders(expanded_folders: list[str], path: Path | None = None) -> None:
    config = load_config(path)
    config["expanded_folders"] = sorted_expanded_folders(expanded_folders)
    save_config(config, path)


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "load_config",
    "save_config",
    "load_settings",
    "save_settings",
    "load_expanded_folders",
    "save_expanded_folders",
]
