"""Application configuration management."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from lifetrack.models import AppConfig

log = logging.getLogger(__name__)

_CONFIG_DIR = Path.home() / ".config" / "lifetrack"
_DATA_DIR = Path.home() / ".local" / "share" / "lifetrack"

_CONFIG_FILE = _CONFIG_DIR / "config.json"

DB_FILENAME = "lifetrack.db"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_LOG_LEVEL = "WARNING"


def normalize_log_level(level: str) -> Optional[str]:
    """Return the upper-cased level name, or None if it isn't one we accept."""
    name = level.strip().upper()
    return name if name in LOG_LEVELS else None


def load_config() -> AppConfig:
    """Load config from disk, returning defaults if none exists."""
    if _CONFIG_FILE.exists():
        try:
            data = json.loads(_CONFIG_FILE.read_text())
            return AppConfig(**data)
        except (json.JSONDecodeError, TypeError, ValidationError):
            log.warning("Ignoring unreadable config file %s", _CONFIG_FILE)
    return AppConfig()


def save_config(config: AppConfig) -> Path:
    """Write config to disk. Returns the config file path."""
    _CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    _CONFIG_FILE.write_text(config.model_dump_json(indent=2))
    return _CONFIG_FILE


def get_db_path() -> Path:
    """Resolve the store file path from config (or default)."""
    config = load_config()
    data_dir = Path(config.data_dir) if config.data_dir is not None else _DATA_DIR
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir / DB_FILENAME


def set_data_dir(path: str) -> AppConfig:
    """Keep the store in a custom directory and save config."""
    resolved = Path(path).expanduser().resolve()
    resolved.mkdir(parents=True, exist_ok=True)
    config = load_config()
    config.data_dir = str(resolved)
    save_config(config)
    return config


def set_log_level(level: str) -> AppConfig:
    """Persist the default log level. Raises ValueError for an unknown level."""
    name = normalize_log_level(level)
    if name is None:
        raise ValueError(f"Unknown log level {level!r}; use one of {', '.join(LOG_LEVELS)}.")
    config = load_config()
    config.log_level = name
    save_config(config)
    return config


def reset_data_dir() -> AppConfig:
    """Reset to the default local data directory."""
    config = load_config()
    config.data_dir = None
    save_config(config)
    return config
