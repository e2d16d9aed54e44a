"""Unit tests for settings and the YAML config loader."""

from __future__ import annotations

from pathlib import Path

import pytest

from src.config.loader import load_config
from src.config.settings import Settings
from src.utils.errors import ConfigurationError


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in ("SETLIST_FM_KEY", "EXPORT_DPI", "HTTP_TIMEOUT", "APP_ENV"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:
    def test_defaults(self, clean_env) -> None:
        settings = Settings(_env_file=None)

        assert settings.setlist_fm_key == ""
        assert settings.setlist_fm_base_url == "https://api.setlist.fm/rest/1.0"
        assert settings.http_timeout == 10.0
        assert settings.export_dpi == 300
        assert settings.ticket_width_mm == 200.0
        assert settings.ticket_height_mm == 56.6
        assert settings.get_available_providers() == []

    def test_env_overrides(self, clean_env) -> None:
        clean_env.setenv("SETLIST_FM_KEY", "abc123")
        clean_env.setenv("EXPORT_DPI", "600")

        settings = Settings(_env_file=None)

        assert settings.setlist_fm_key == "abc123"
        assert settings.export_dpi == 600
        assert settings.get_available_providers() == ["setlistfm"]


class TestLoadConfig:
    def test_merges_settings_over_yaml(self, tmp_path: Path, clean_env) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "ticket_defaults:\n"
            "  venue: Brixton Academy\n"
            "export:\n"
            "  dpi: 72\n"
            "  note: kept\n"
        )

        config = load_config(str(config_file), settings=Settings(_env_file=None, export_dpi=450))

        assert config["ticket_defaults"]["venue"] == "Brixton Academy"
        assert config["export"]["dpi"] == 450
        assert config["export"]["note"] == "kept"
        assert config["listing"]["timeout"] == 10.0

    def test_missing_file(self, tmp_path: Path, clean_env) -> None:
        config = load_config(str(tmp_path / "absent.yaml"), settings=Settings(_env_file=None))

        assert "ticket_defaults" not in config
        assert config["export"]["dpi"] == 300

    def test_repo_config(self, project_root: Path, clean_env) -> None:
        config = load_config(str(project_root / "config" / "config.yaml"), settings=Settings(_env_file=None))

        assert config["ticket_defaults"]["artist"] == "Artist Name"
        assert config["preview"]["max_scale"] == 1.5

    def test_non_mapping_yaml_raises(self, tmp_path: Path, clean_env) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- just\n- a list\n")

        with pytest.raises(ConfigurationError):
            load_config(str(config_file), settings=Settings(_env_file=None))
