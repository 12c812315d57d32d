# File: pgtozod/config.py
"""
pgtozod - Connection Settings Persistence
==========================================
Loads, prompts for and saves the PostgreSQL connection details kept in
``~/.pgtozod/config.json``.

The file uses the ``DB_USER`` / ``DB_HOST`` / ``DB_NAME`` / ``DB_PASSWORD`` /
``DB_PORT`` keys.  A ``.yaml`` / ``.yml`` path is read and written as YAML.
"""

from __future__ import annotations

import getpass
import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import yaml
from pydantic import ValidationError

from pgtozod.models import ConnectionSettings
from pgtozod.utils import atomic_write, ensure_directory

logger: logging.Logger = logging.getLogger("pgtozod.config")

CONFIG_DIR: Path = Path.home() / ".pgtozod"
CONFIG_PATH: Path = CONFIG_DIR / "config.json"

_YAML_SUFFIXES: tuple = (".yaml", ".yml")


# ---------------------------------------------------------------------------
# File loaders
# ---------------------------------------------------------------------------


def _load_json_file(path: Path) -> Dict[str, Any]:
    """Load and parse a JSON file. Raises ValueError on parse errors."""
    try:
        data: Any = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a JSON object at top level, got {type(data).__name__}."
        )
    return data


def _load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML file. Raises ValueError on parse errors."""
    try:
        data: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a YAML mapping at top level, got {type(data).__name__}."
        )
    return data


def load_config_file(path: Path) -> Dict[str, Any]:
    """
    Read the raw config mapping, or ``{}`` if the file does not exist.

    Raises:
        ValueError: If the file exists but can't be parsed.
    """
    if not path.exists():
        return {}
    logger.info("Reading config file: %s", path)
    if path.suffix.lower() in _YAML_SUFFIXES:
        return _load_yaml_file(path)
    return _load_json_file(path)


def load_connection_settings(path: Path = CONFIG_PATH) -> Optional[ConnectionSettings]:
    """
    Connection settings from *path*, or ``None`` when the file is missing
    or incomplete (which triggers the interactive prompts).
    """
    raw: Dict[str, Any] = load_config_file(path)
    if not raw:
        return None
    try:
        return ConnectionSettings.model_validate(raw)
    except ValidationError as exc:
        logger.warning("Config file %s is incomplete: %d problem(s).", path, exc.error_count())
        return None


def save_connection_settings(
    settings: ConnectionSettings, path: Path = CONFIG_PATH
) -> Path:
    """Write *settings* to *path*, creating the config directory if needed."""
    if not path.parent.exists():
        logger.info("Creating config directory: %s", path.parent)
    ensure_directory(path.parent)

    data: Dict[str, Any] = settings.to_file_dict()
    if path.suffix.lower() in _YAML_SUFFIXES:
        content: str = yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
    else:
        content = json.dumps(data, indent=2)
    atomic_write(path, content.encode("utf-8"))
    logger.info("Saved config file: %s", path)
    return path


# ---------------------------------------------------------------------------
# Interactive prompts
# ---------------------------------------------------------------------------


def prompt_connection_settings(
    input_fn: Optional[Callable[[str], str]] = None,
    password_fn: Optional[Callable[[str], str]] = None,
) -> ConnectionSettings:
    """
    Ask for the connection details on the terminal.

    *input_fn* and *password_fn* default to ``input`` and ``getpass.getpass``.

    Raises:
        pydantic.ValidationError: if an answer is invalid (e.g. a bad port).
    """
    ask: Callable[[str], str] = input_fn or input
    ask_secret: Callable[[str], str] = password_fn or getpass.getpass
    print("You first need to provide your PostgreSQL database connection details.\n")
    answers: Dict[str, Any] = {
        "DB_USER": ask("Enter your PostgreSQL user: ").strip(),
        "DB_HOST": ask("Enter your PostgreSQL host: ").strip(),
        "DB_NAME": ask("Enter your PostgreSQL database name: ").strip(),
        "DB_PASSWORD": ask_secret("Enter your PostgreSQL password: "),
        "DB_PORT": ask("Enter your PostgreSQL port [5432]: ").strip() or 5432,
    }
    return ConnectionSettings.model_validate(answers)


def resolve_connection_settings(
    path: Path = CONFIG_PATH,
    *,
    reset: bool = False,
    input_fn: Optional[Callable[[str], str]] = None,
    password_fn: Optional[Callable[[str], str]] = None,
) -> ConnectionSettings:
    """
    Stored settings, or freshly prompted ones when *reset* is set or the
    stored file is missing or incomplete.  Prompted settings are saved.
    """
    settings: Optional[ConnectionSettings] = None
    if not reset:
        settings = load_connection_settings(path)
    if settings is None:
        settings = prompt_connection_settings(input_fn, password_fn)
        save_connection_settings(settings, path)
    return settings


__all__: List[str] = [
    "CONFIG_DIR",
    "CONFIG_PATH",
    "load_config_file",
    "load_connection_settings",
    "save_connection_settings",
    "prompt_connection_settings",
    "resolve_connection_settings",
]
