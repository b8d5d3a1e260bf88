"""Configuration loading utilities."""

from pathlib import Path
from typing import Any

import yaml

from schemaledger.config.models import Config

# (section, key) pairs holding filesystem paths
_PATH_KEYS = (
    ("database", "sqlite_path"),
    ("migrations", "directory"),
    ("logging", "file"),
)


def load_config(config_path: Path | str | None) -> Config:
    """
    Load configuration from YAML file or return defaults.

    Relative paths in the file are resolved against the file's own
    directory, so a project config works from any working directory.
    Without a file, ``SCHEMALEDGER_`` environment variables fill in
    the settings.

    Args:
        config_path: Path to YAML config file, or None for defaults.

    Returns:
        Validated Config object.

    Raises:
        FileNotFoundError: If config_path doesn't exist.
        ValueError: If YAML is invalid or a value fails validation.
    """
    if config_path is None:
        return Config()

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    data = _read_yaml(config_path)
    _resolve_paths(data, config_path.parent)
    return Config(**data)


def _read_yaml(config_path: Path) -> dict[str, Any]:
    try:
        with config_path.open() as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {e}") from e

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ValueError(f"YAML root must be a mapping, not {type(data).__name__}")

    return data


def _resolve_paths(data: dict[str, Any], base: Path) -> None:
    for section, key in _PATH_KEYS:
        values = data.get(section)
        if not isinstance(values, dict) or values.get(key) is None:
            continue
        path = Path(values[key]).expanduser()
        if not path.is_absolute():
            values[key] = base / path
