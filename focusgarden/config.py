"""Application configuration management."""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

from pydantic import ValidationError

from focusgarden.models import AppConfig, NotifierKind


def _is_android() -> bool:
    """Return True when running inside an Android (p4a) environment."""
    return "ANDROID_ARGUMENT" in os.environ or hasattr(sys, "getandroidapilevel")


def _android_data_dir() -> Path:
    """Return the writable app-private directory on Android."""
    for var in ("ANDROID_PRIVATE", "ANDROID_APP_PATH"):
        val = os.environ.get(var)
        if val:
            return Path(val)
    return Path(".")


if _is_android():
    _DATA_DIR = _android_data_dir() / "data"
    _CONFIG_DIR = _DATA_DIR / "config"
    _STORE_DIR = _DATA_DIR / "store"
else:
    _CONFIG_DIR = Path.home() / ".config" / "focusgarden"
    _STORE_DIR = Path.home() / ".local" / "share" / "focusgarden"

_CONFIG_FILE = _CONFIG_DIR / "config.json"
_STORE_NAME = "focusgarden.db"


def load_config() -> AppConfig:
    """Load config from disk, returning defaults if none exists."""
    if _CONFIG_FILE.exists():
        try:
            data = json.loads(_CONFIG_FILE.read_text())
            return AppConfig(**data)
        except (OSError, json.JSONDecodeError, TypeError, ValidationError):
            pass
    return AppConfig()


def save_config(config: AppConfig) -> Path:
    """Write config to disk. Returns the config file path."""
    _CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    _CONFIG_FILE.write_text(config.model_dump_json(indent=2))
    return _CONFIG_FILE


def get_store_path() -> Path:
    """Resolve the store path from config (or default)."""
    config = load_config()
    if config.store_path is not None:
        p = Path(config.store_path)
        p.parent.mkdir(parents=True, exist_ok=True)
        return p
    _STORE_DIR.mkdir(parents=True, exist_ok=True)
    return _STORE_DIR / _STORE_NAME


def set_store_path(path: str) -> AppConfig:
    """Set a custom store path and save config."""
    resolved = Path(path).expanduser().resolve()
    if resolved.is_dir():
        resolved = resolved / _STORE_NAME
    resolved.parent.mkdir(parents=True, exist_ok=True)
    config = load_config()
    config.store_path = str(resolved)
    save_config(config)
    return config


def reset_store_path() -> AppConfig:
    """Reset to the default local store path."""
    config = load_config()
    config.store_path = None
    save_config(config)
    return config


def set_notifier(kind: NotifierKind) -> AppConfig:
    """Choose how the session-complete sound is played."""
    config = load_config()
    config.notifier = kind
    save_config(config)
    return config


def set_sound_dir(path: str) -> AppConfig:
    """Point the external player at a directory of ``<ringtone>.mp3`` files."""
    config = load_config()
    config.sound_dir = str(Path(path).expanduser().resolve())
    save_config(config)
    return config
