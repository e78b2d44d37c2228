"""Unit tests for the YAML configuration loader."""

from __future__ import annotations

from pathlib import Path

import pytest

from promodesk.config.loader import load_config
from promodesk.config.settings import Settings
from promodesk.utils.errors import ConfigurationError


def _write(tmp_path: Path, text: str) -> str:
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return str(path)


class TestLoadConfig:
    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        config = load_config(str(tmp_path / "absent.yaml"), settings=Settings())
        assert config["dashboard"]["upcoming_release_days"] == 30
        assert config["backup"]["filename_prefix"] == "promodesk-backup"

    def test_yaml_merged_over_defaults(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "dashboard:\n  release_reminder_days: 3\n")
        config = load_config(path, settings=Settings())
        assert config["dashboard"]["release_reminder_days"] == 3
        assert config["dashboard"]["upcoming_release_days"] == 30

    def test_settings_override_app_section(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "app:\n  port: 1\n  cors_origins: ['http://x']\n")
        config = load_config(path, settings=Settings(app_port=9001, app_env="production"))
        assert config["app"]["port"] == 9001
        assert config["app"]["env"] == "production"
        assert config["app"]["cors_origins"] == ["http://x"]
        assert set(config) == {"dashboard", "backup", "app"}

    def test_malformed_yaml_raises_configuration_error(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "dashboard: [unclosed\n")
        with pytest.raises(ConfigurationError):
            load_config(path, settings=Settings())

    def test_non_mapping_yaml_raises_configuration_error(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "- just\n- a list\n")
        with pytest.raises(ConfigurationError):
            load_config(path, settings=Settings())
