"""Utility helpers: XDG paths, file I/O, app configuration."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

log = logging.getLogger(__name__)

APP_ID = "com.github.displaymap"

DEFAULT_MONITORS_CONFIG_PATH = "~/.config/hypr/hyprland/monitors.conf"


class ConfigError(Exception):
    """The app configuration file is unreadable or malformed."""


def config_dir() -> Path:
    """Return ~/.config/displaymap, creating it if needed."""
    base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    d = base / "displaymap"
    d.mkdir(parents=True, exist_ok=True)
    return d


def config_path() -> Path:
    """Return the path to the app configuration file."""
    return config_dir() / "config.json"


def state_path() -> Path:
    """Return the path to the saved monitor layout."""
    return config_dir() / "monitor_state.json"


def expand_path(path: str | Path) -> Path:
    """Expand a leading ``~`` to the home directory."""
    return Path(os.path.expanduser(str(path)))


def read_json(path: Path) -> dict | list | None:
    """Read and parse a JSON file, returning None on failure."""
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return None


def write_json(path: Path, data: dict | list) -> None:
    """Write data as formatted JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def write_text(path: Path, text: str) -> None:
    """Write text to a file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


# ── App configuration ────────────────────────────────────────────────────

@dataclass
class Configuration:
    monitors_config_path: str = DEFAULT_MONITORS_CONFIG_PATH

    def to_dict(self) -> dict:
        return {"monitors_config_path": self.monitors_config_path}

    @classmethod
    def get(cls, path: Path | None = None) -> Configuration:
        """Load the app configuration, writing the default one on first run."""
        path = path or config_path()
        if not path.exists():
            return cls.create_default(path)
        return cls.load(path)

    @classmethod
    def create_default(cls, path: Path) -> Configuration:
        config = cls()
        try:
            write_json(path, config.to_dict())
        except OSError as e:
            raise ConfigError(f"Cannot write default config {path}: {e}") from e
        log.info("Created default config at %s", path)
        return config

    @classmethod
    def load(cls, path: Path) -> Configuration:
        """Strictly load *path*; any problem raises ConfigError."""
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise ConfigError(f"Cannot read config {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"Cannot parse config {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config {path} must contain a JSON object")
        monitors_path = data.get("monitors_config_path")
        if not isinstance(monitors_path, str) or not monitors_path:
            raise ConfigError(f"Config {path} has no 'monitors_config_path'")
        return cls(monitors_config_path=monitors_path)
