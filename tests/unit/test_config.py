"""
Unit tests for configuration system.

Tests:
- Config singleton and defaults
- Environment overrides
- Config validation
"""

import logging

import pytest

from kotoba.config import Config, PathConfig, ProgressConfig, SearchConfig, config


class TestConfig:
    """Test suite for Config class."""

    def test_config_singleton(self):
        """Test that Config implements singleton pattern."""
        config1 = Config()
        config2 = Config()
        assert config1 is config2, "Config should be a singleton"
        assert config1 is config

    def test_progress_defaults(self):
        """Test progress rules default to the app's behaviour."""
        progress = ProgressConfig()
        assert progress.recent_lessons_limit == 5
        assert progress.daily_lesson_target == 2
        assert progress.points_per_correct_answer == 1

    def test_paths_configured(self):
        """Test that bundled resource paths point into the package."""
        assert config.paths.schemas_dir == config.paths.package_root / "schemas"
        assert config.paths.catalog_dir == config.paths.package_root / "catalog"
        assert (config.paths.catalog_dir / "builtin.json").exists()

    def test_config_validation_with_valid_config(self):
        """Test that the shipped config passes validation."""
        assert config.validate() == []

    def test_config_validation_detects_bad_limit(self, monkeypatch):
        """Test that a recent-lessons limit below 1 is reported."""
        monkeypatch.setattr(config.progress, "recent_lessons_limit", 0)

        errors = config.validate()

        assert any("recent_lessons_limit" in err for err in errors)

    def test_config_validation_detects_negative_debounce(self, monkeypatch):
        """Test that a negative debounce is reported."""
        monkeypatch.setattr(config.search, "debounce_seconds", -1.0)

        assert any("debounce" in err for err in config.validate())

    def test_config_validation_detects_unknown_log_level(self, monkeypatch):
        """Test that an unknown log level is reported."""
        monkeypatch.setattr(config.logging, "log_level", "CHATTY")

        assert any("log level" in err.lower() for err in config.validate())

    def test_configure_logging(self, monkeypatch):
        """Test the logging section reaches basicConfig."""
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
        monkeypatch.setattr(config.logging, "log_level", "debug")

        config.configure_logging()

        assert calls[0]["level"] == "DEBUG"


class TestEnvironmentOverrides:
    """Test settings read from the environment."""

    def test_search_defaults(self, monkeypatch):
        """Test search defaults with no overrides."""
        monkeypatch.delenv("KOTOBA_SEARCH_DEBOUNCE", raising=False)
        monkeypatch.delenv("KOTOBA_SEARCH_INCLUDE_CUSTOM", raising=False)

        search = SearchConfig()

        assert search.debounce_seconds == 0.3
        assert search.include_custom_lessons is False

    @pytest.mark.parametrize("value,expected", [("true", True), ("1", True), ("no", False)])
    def test_include_custom_flag(self, monkeypatch, value, expected):
        """Test boolean parsing of the custom-lesson search flag."""
        monkeypatch.setenv("KOTOBA_SEARCH_INCLUDE_CUSTOM", value)

        assert SearchConfig().include_custom_lessons is expected

    def test_debounce_override(self, monkeypatch):
        """Test the debounce delay can be overridden."""
        monkeypatch.setenv("KOTOBA_SEARCH_DEBOUNCE", "0.05")

        assert SearchConfig().debounce_seconds == 0.05

    def test_data_dir_override(self, monkeypatch, tmp_path):
        """Test the data directory can be overridden."""
        monkeypatch.setenv("KOTOBA_DATA_DIR", str(tmp_path / "kotoba"))

        paths = PathConfig()
        paths.prepare_filesystem()

        assert paths.data_dir == tmp_path / "kotoba"
        assert paths.data_dir.is_dir()
