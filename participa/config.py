"""Configuration management."""

import yaml
from pathlib import Path
from typing import Any, Dict

_config: Dict[str, Any] = {}
_base_path: Path = None


def load_config(config_path: str = None) -> Dict[str, Any]:
    """Load configuration from YAML file."""
    global _config, _base_path

    if config_path is None:
        # Try to find config in common locations
        possible_paths = [
            Path("config/config.yaml"),
            Path("config.yaml"),
            Path.home() / ".config" / "participa" / "config.yaml",
        ]
        for path in possible_paths:
            if path.exists():
                config_path = str(path)
                break
        else:
            raise FileNotFoundError(
                "No config.yaml found. Copy config/config.example.yaml to config/config.yaml "
                "and fill in your values."
            )

    config_path = Path(config_path)
    _base_path = config_path.resolve().parent.parent  # Project root

    with open(config_path) as f:
        _config = yaml.safe_load(f) or {}

    _resolve_paths()

    return _config


def _resolve_paths():
    """Resolve relative paths in config to absolute paths."""
    global _config

    for section, key in (("database", "path"), ("logging", "file")):
        value = _config.get(section, {}).get(key)
        if not value:
            continue
        path = Path(value)
        if not path.is_absolute():
            _config[section][key] = str(_base_path / path)


def set_config(config: Dict[str, Any]):
    """Replace the loaded configuration (used by tests and scripts)."""
    global _config
    _config = config


def get(key: str, default: Any = None) -> Any:
    """Get a config value by dot-notation key (e.g., 'database.path')."""
    if not _config:
        try:
            load_config()
        except FileNotFoundError:
            return default

    keys = key.split(".")
    value = _config
    for k in keys:
        if isinstance(value, dict) and k in value:
            value = value[k]
        else:
            return default
    return value
