"""YAML configuration loader with environment variable overrides.

Configuration is loaded in layers (later layers override earlier):

    1. config/config.yaml  — Static defaults checked into the repo
    2. .env file           — Local developer overrides (not committed)
    3. Environment vars    — Set at deploy time

``load_config()`` reads the YAML file first, then deep-merges the
environment-based values on top.
"""

from pathlib import Path

import yaml

from promodesk.config.settings import Settings
from promodesk.utils.errors import ConfigurationError

# Used when config.yaml is missing or leaves a key out.
DEFAULTS: dict = {
    "dashboard": {
        "upcoming_release_days": 30,
        "release_reminder_days": 7,
    },
    "backup": {
        "filename_prefix": "promodesk-backup",
    },
}


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Environment variables (via Settings) override YAML values where keys overlap.

    Args:
        path: Path to the YAML configuration file.
        settings: Pre-built settings; a fresh ``Settings()`` is read otherwise.

    Returns:
        Fully resolved configuration dictionary.

    Raises:
        ConfigurationError: If the YAML file cannot be read or parsed, or
            its top level is not a mapping.
    """
    config: dict = {}
    _deep_merge(config, DEFAULTS)

    config_path = Path(path)
    if config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigurationError(message=f"Cannot load {config_path}: {exc}") from exc
        if not isinstance(yaml_config, dict):
            raise ConfigurationError(message=f"{config_path} must contain a mapping at the top level")
        _deep_merge(config, yaml_config)

    settings = settings or Settings()
    env_overrides = {
        "app": {
            "host": settings.app_host,
            "port": settings.app_port,
            "env": settings.app_env,
        },
    }

    _deep_merge(config, env_overrides)
    return config


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        elif isinstance(value, dict):
            base[key] = {}
            _deep_merge(base[key], value)
        else:
            base[key] = value
