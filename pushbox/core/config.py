from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from pushbox.core.errors import ConfigError
from pushbox.core.session import Command

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent.parent / "data"
DEFAULT_CONFIG = DATA_DIR / "config.yaml"
CONFIG_NAME = "config.yaml"

_INT_KEYS = ("window_width", "window_height", "status_bar_height", "frame_interval_ms")


def home_dir() -> Path:
    """Per-user directory for the score file and config overrides."""
    override = os.environ.get("PUSHBOX_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".pushbox"


@dataclass
class GameConfig:
    levels_file: Path
    scores_file: Path
    window_width: int = 640
    window_height: int = 400
    status_bar_height: int = 16
    frame_interval_ms: int = 16
    debug: bool = False
    key_bindings: Dict[str, Command] = field(default_factory=dict)

    def command_for(self, key_name: str) -> Optional[Command]:
        return self.key_bindings.get(key_name)


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"{path}: {e}") from e
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: expected a YAML mapping")
    return raw


def _parse_bindings(path: Path, raw: Any) -> Dict[str, Command]:
    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: 'key_bindings' must be a mapping")
    bindings: Dict[str, Command] = {}
    for key, name in raw.items():
        try:
            bindings[str(key)] = Command(str(name))
        except ValueError:
            raise ConfigError(f"{path}: unknown command '{name}' for key '{key}'") from None
    return bindings


def load_config(path: Optional[Path] = None, home: Optional[Path] = None) -> GameConfig:
    """Load the packaged defaults, then apply the user's overrides on top.

    ``path`` replaces the user file location (``<home>/config.yaml``).
    Overrides are shallow: a user ``key_bindings`` mapping replaces the
    default one entirely.
    """
    home = home_dir() if home is None else Path(home)
    values = _read_yaml(DEFAULT_CONFIG)
    user_path = Path(path) if path is not None else home / CONFIG_NAME
    if user_path.exists():
        logger.info("Using config overrides from %s", user_path)
        values.update(_read_yaml(user_path))
    elif path is not None:
        raise ConfigError(f"Config file not found: {user_path}")

    for key in _INT_KEYS:
        if key in values and (not isinstance(values[key], int) or values[key] < 0):
            raise ConfigError(f"{user_path}: '{key}' must be a non-negative integer")

    levels_file = Path(str(values.get("levels_file", "levels/levels.txt"))).expanduser()
    if not levels_file.is_absolute():
        levels_file = DATA_DIR / levels_file
    scores_file = Path(str(values.get("scores_file", "scores.txt"))).expanduser()
    if not scores_file.is_absolute():
        scores_file = home / scores_file

    return GameConfig(
        levels_file=levels_file,
        scores_file=scores_file,
        window_width=values.get("window_width", 640),
        window_height=values.get("window_height", 400),
        status_bar_height=values.get("status_bar_height", 16),
        frame_interval_ms=values.get("frame_interval_ms", 16),
        debug=bool(values.get("debug", False)) or os.environ.get("PUSHBOX_DEBUG") == "1",
        key_bindings=_parse_bindings(user_path, values.get("key_bindings", {})),
    )
