"""Tests for settings and config files."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from pocket.config import EXAMPLE_CONFIG, Settings, load_config_file, save_config_file


class TestSettings:
    """Tests for Settings sources and validation."""

    def test_defaults(self) -> None:
        settings = Settings()

        assert settings.osascript_path == "osascript"
        assert settings.applescript_timeout == 30
        assert settings.default_reminders_list == "Reminders"

    def test_environment_override(self, monkeypatch) -> None:
        monkeypatch.setenv("POCKET_APPLESCRIPT_TIMEOUT", "90")
        monkeypatch.setenv("POCKET_OUTPUT_FORMAT", "table")

        settings = Settings()

        assert settings.applescript_timeout == 90
        assert settings.output_format == "table"

    def test_constructor_beats_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("POCKET_DEFAULT_LIMIT", "10")
        assert Settings(default_limit=3).default_limit == 3

    def test_rejects_zero_timeout(self, monkeypatch) -> None:
        monkeypatch.setenv("POCKET_APPLESCRIPT_TIMEOUT", "0")
        with pytest.raises(ValidationError):
            Settings()

    def test_config_path_follows_config_dir(self, tmp_path) -> None:
        settings = Settings(config_dir=tmp_path)

        settings.ensure_config_dir()

        assert settings.config_path == tmp_path / "config.yaml"


class TestConfigFile:
    """Tests for reading and writing config.yaml."""

    def test_missing_file_is_empty(self, tmp_path) -> None:
        assert load_config_file(tmp_path / "nope.yaml") == {}

    def test_save_then_load(self, tmp_path) -> None:
        path = tmp_path / "nested" / "config.yaml"

        save_config_file(path, EXAMPLE_CONFIG)

        assert path.read_text().startswith("# pocket configuration")
        assert load_config_file(path) == EXAMPLE_CONFIG

    def test_empty_file(self, tmp_path) -> None:
        path = Path(tmp_path / "config.yaml")
        path.write_text("# only comments\n")
        assert load_config_file(path) == {}
