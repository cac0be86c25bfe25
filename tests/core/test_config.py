"""Tests for settings loading."""

from pathlib import Path

import pytest

from c172perf.core.config import DEFAULT_SETTINGS, ConfigError, ConfigLoader, load_settings
from c172perf.core.resource_path import get_config_path, get_project_root, get_resource_path


class TestConfigLoader:
    """Tests for ConfigLoader."""

    def test_get_dot_notation(self) -> None:
        """Test nested values are reached with dotted keys."""
        config = ConfigLoader({"weather": {"timeout_s": 5}})

        assert config.get("weather.timeout_s") == 5
        assert config.get("weather.missing", default=3) == 3
        assert config.get("weather.timeout_s.deeper") is None

    def test_merge_is_deep(self) -> None:
        """Test merging overrides leaves while keeping siblings."""
        config = ConfigLoader({"weather": {"timeout_s": 10, "user_agent": "A"}})
        config.merge(ConfigLoader({"weather": {"timeout_s": 2}}))

        assert config.get("weather.timeout_s") == 2
        assert config.get("weather.user_agent") == "A"

    def test_load_missing_file(self, tmp_path: Path) -> None:
        """Test a missing file raises ConfigError."""
        with pytest.raises(ConfigError, match="not found"):
            ConfigLoader.load(tmp_path / "missing.yaml")

    def test_load_invalid_yaml(self, tmp_path: Path) -> None:
        """Test malformed YAML raises ConfigError."""
        path = tmp_path / "bad.yaml"
        path.write_text("weather: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="Failed to load"):
            ConfigLoader.load(path)

    def test_load_non_mapping(self, tmp_path: Path) -> None:
        """Test a YAML list at the root is rejected."""
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="mapping"):
            ConfigLoader.load(path)

    def test_load_empty_file(self, tmp_path: Path) -> None:
        """Test an empty file loads as no settings."""
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert ConfigLoader.load(path).get("weather") is None


class TestLoadSettings:
    """Tests for settings layered over defaults."""

    def test_partial_file_keeps_defaults(self, tmp_path: Path) -> None:
        """Test a partial file only overrides what it names."""
        path = tmp_path / "settings.yaml"
        path.write_text("weather:\n  timeout_s: 3\n", encoding="utf-8")

        settings = load_settings(path)

        assert settings.get("weather.timeout_s") == 3
        assert settings.get("weather.awc_url") == DEFAULT_SETTINGS["weather"]["awc_url"]
        assert settings.get("defaults.weight_kg") == 950

    def test_defaults_are_not_mutated(self) -> None:
        """Test changing loaded settings leaves the defaults alone."""
        settings = load_settings()
        settings.merge(ConfigLoader({"defaults": {"icao": "KPAO"}}))

        assert DEFAULT_SETTINGS["defaults"]["icao"] == "EGLL"

    def test_explicit_missing_file(self, tmp_path: Path) -> None:
        """Test an explicitly named file must exist."""
        with pytest.raises(ConfigError):
            load_settings(tmp_path / "absent.yaml")

    def test_packaged_settings(self) -> None:
        """Test the shipped settings file loads with the expected defaults."""
        settings = load_settings(get_config_path("settings.yaml"))

        assert settings.get("performance.table") == "data/performance/c172m_takeoff.json"
        assert len(settings.get("airports.sources.runways")) == 3
        assert settings.get("defaults.dry_grass") is False


class TestResourcePath:
    """Tests for project-relative resource paths."""

    def test_relative_path_resolves_under_root(self) -> None:
        """Test relative paths are anchored at the project root."""
        assert get_resource_path("data/airports") == get_project_root() / "data" / "airports"

    def test_absolute_path_unchanged(self, tmp_path: Path) -> None:
        """Test absolute paths pass through."""
        assert get_resource_path(tmp_path) == tmp_path

    def test_project_root_holds_config(self) -> None:
        """Test the root is the directory with config/ and src/."""
        root = get_project_root()
        assert (root / "config").is_dir()
        assert (root / "src" / "c172perf").is_dir()
