"""Tests for configuration loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from termmon.config.settings import (
    HistoryConfig,
    ServerConfig,
    Settings,
    StorageConfig,
    load_settings,
)


class TestSettings:
    def test_default_settings(self) -> None:
        """Default Settings should be valid."""
        settings = Settings()
        assert settings.server.host == "127.0.0.1"
        assert settings.server.port == 3333
        assert settings.server.storage_failure == "respond"
        assert settings.storage.database_url == "sqlite:///termmon.db"
        assert settings.history.recent_limit == 500
        assert settings.logging.level == "INFO"

    def test_section_defaults(self) -> None:
        assert ServerConfig().port == 3333
        assert StorageConfig().echo is False
        assert HistoryConfig().recent_limit == 500

    def test_invalid_values(self) -> None:
        with pytest.raises(ValidationError):
            ServerConfig(port=0)
        with pytest.raises(ValidationError):
            ServerConfig(storage_failure="ignore")
        with pytest.raises(ValidationError):
            HistoryConfig(recent_limit=0)

    def test_load_settings_missing_file(self, tmp_path: Path) -> None:
        """load_settings with missing file should return defaults."""
        settings = load_settings(tmp_path / "nonexistent.yaml")
        assert settings.server.port == 3333

    def test_load_settings_from_yaml(self, tmp_path: Path) -> None:
        config = tmp_path / "termmon.yaml"
        config.write_text(
            "server:\n"
            "  port: 4000\n"
            "  storage_failure: exit\n"
            "storage:\n"
            "  database_url: sqlite:////var/lib/termmon/history.db\n"
            "history:\n"
            "  recent_limit: 100\n"
        )
        settings = load_settings(config)
        assert settings.server.port == 4000
        assert settings.server.host == "127.0.0.1"
        assert settings.server.storage_failure == "exit"
        assert settings.storage.database_url == "sqlite:////var/lib/termmon/history.db"
        assert settings.history.recent_limit == 100

    def test_empty_yaml(self, tmp_path: Path) -> None:
        config = tmp_path / "termmon.yaml"
        config.write_text("")
        assert load_settings(config).server.port == 3333

    def test_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TERMMON_SERVER__PORT", "9999")
        monkeypatch.setenv("TERMMON_HISTORY__RECENT_LIMIT", "25")
        settings = load_settings(tmp_path / "nonexistent.yaml")
        assert settings.server.port == 9999
        assert settings.history.recent_limit == 25
