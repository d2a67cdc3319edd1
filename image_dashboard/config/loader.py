"""
Configuration management and loading.

Handles dashboard settings read from a YAML file.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

import yaml


@dataclass(frozen=True)
class StorageConfig:
    """Locations of the two JSON collections."""
    presets_path: Path = Path("data/presets.json")
    usage_path: Path = Path("data/usage.json")


@dataclass(frozen=True)
class PresetConfig:
    """Preset store behaviour."""
    seed_defaults: bool = True


@dataclass(frozen=True)
class UsageConfig:
    """Default limits for usage listings."""
    recent_limit: int = 50
    export_limit: int = 1000

    def __post_init__(self):
        """Validate limits are positive."""
        if self.recent_limit <= 0:
            raise ValueError("recent_limit must be > 0")
        if self.export_limit <= 0:
            raise ValueError("export_limit must be > 0")


@dataclass(frozen=True)
class DashboardConfig:
    """Complete dashboard configuration."""
    storage: StorageConfig = field(default_factory=StorageConfig)
    presets: PresetConfig = field(default_factory=PresetConfig)
    usage: UsageConfig = field(default_factory=UsageConfig)


def load_dashboard_config(path: str) -> DashboardConfig:
    """Load and validate dashboard configuration from a YAML file.

    Every section is optional; omitted values keep their defaults.
    Relative storage paths are resolved against the config file's directory.

    Args:
        path: Path to YAML configuration file

    Returns:
        Validated DashboardConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If configuration is invalid
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Dashboard config file not found: {path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in config file {path}: {e}")

    if not raw_config:
        raise ValueError("Configuration file is empty")
    if not isinstance(raw_config, dict):
        raise ValueError("Configuration must be a dictionary")

    allowed_top_keys = {'storage', 'presets', 'usage'}
    unknown_keys = set(raw_config.keys()) - allowed_top_keys
    if unknown_keys:
        raise ValueError(f"Unknown configuration keys: {unknown_keys}")

    base_dir = config_path.resolve().parent

    storage_data = _section(raw_config, 'storage', {'presets_path', 'usage_path'})
    storage_kwargs = {}
    for key, value in storage_data.items():
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"'storage.{key}' must be a non-empty string")
        storage_kwargs[key] = _resolve(base_dir, value)

    presets_data = _section(raw_config, 'presets', {'seed_defaults'})
    if 'seed_defaults' in presets_data and not isinstance(presets_data['seed_defaults'], bool):
        raise ValueError("'presets.seed_defaults' must be true or false")

    usage_data = _section(raw_config, 'usage', {'recent_limit', 'export_limit'})
    for key, value in usage_data.items():
        # bool is a subclass of int
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"'usage.{key}' must be an integer")

    return DashboardConfig(
        storage=StorageConfig(**storage_kwargs),
        presets=PresetConfig(**presets_data),
        usage=UsageConfig(**usage_data)
    )


def _section(raw_config: Dict, name: str, allowed_keys: set) -> Dict[str, Any]:
    """Extract an optional section and reject unknown keys.

    Args:
        raw_config: Parsed YAML document
        name: Section name
        allowed_keys: Keys permitted in the section

    Returns:
        The section contents, empty if absent

    Raises:
        ValueError: If the section is not a dictionary or has unknown keys
    """
    data = raw_config.get(name)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"'{name}' must be a dictionary")

    unknown_keys = set(data.keys()) - allowed_keys
    if unknown_keys:
        raise ValueError(f"Unknown keys in {name}: {unknown_keys}")
    return data


def _resolve(base_dir: Path, value: str) -> Path:
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = base_dir / path
    return path
