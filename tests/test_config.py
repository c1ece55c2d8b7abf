"""Tests for the config module."""

import json
import pytest
import yaml
from pytopic.config import Config


class TestConfig:
    """Tests for Config."""

    def test_defaults_when_file_missing(self, tmp_path):
        config = Config(str(tmp_path / "missing.yaml"))
        assert config.get("logging", "level") == "WARN"
        assert config.get("index", "validate_filters") is True
        assert config.get("monitoring", "prometheus_enabled") is False

    def test_yaml_file_overlays_defaults(self, tmp_path):
        """Test that a partial file keeps the other defaults."""
        path = tmp_path / "pytopic.yaml"
        path.write_text(yaml.dump({"logging": {"level": "DEBUG"}}))
        config = Config(str(path))
        assert config.get("logging", "level") == "DEBUG"
        assert config.get("logging", "component") == "pytopic"
        assert config.get("index", "validate_filters") is True

    def test_json_file(self, tmp_path):
        path = tmp_path / "pytopic.json"
        path.write_text(json.dumps({"index": {"validate_filters": False}}))
        assert Config(str(path)).get("index", "validate_filters") is False

    def test_malformed_file_falls_back(self, tmp_path):
        path = tmp_path / "pytopic.yaml"
        path.write_text("logging: [unclosed")
        assert Config(str(path)).get("logging", "level") == "WARN"

    def test_env_overrides(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PYTOPIC_LOG_LEVEL", "info")
        monkeypatch.setenv("PYTOPIC_VALIDATE_FILTERS", "false")
        monkeypatch.setenv("PYTOPIC_PROMETHEUS_PORT", "9100")
        config = Config(str(tmp_path / "missing.yaml"))
        assert config.get("logging", "level") == "INFO"
        assert config.get("index", "validate_filters") is False
        assert config.get("monitoring", "prometheus_port") == 9100

    def test_bad_env_value_ignored(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PYTOPIC_PROMETHEUS_PORT", "not-a-port")
        config = Config(str(tmp_path / "missing.yaml"))
        assert config.get("monitoring", "prometheus_port") == 9090

    def test_set_and_save(self, tmp_path):
        """Test that saved config loads back."""
        path = str(tmp_path / "out.yaml")
        config = Config(path)
        config.set("logging", "level", "ERROR")
        config.save()
        assert Config(path).get("logging", "level") == "ERROR"

    def test_validate_ok(self, tmp_path):
        assert Config(str(tmp_path / "missing.yaml")).validate() == (True, [])

    @pytest.mark.parametrize("section,key,value", [
        ("logging", "level", "LOUD"),
        ("monitoring", "prometheus_port", 70000),
    ])
    def test_validate_errors(self, tmp_path, section, key, value):
        config = Config(str(tmp_path / "missing.yaml"))
        config.set("monitoring", "prometheus_enabled", True)
        config.set(section, key, value)
        valid, errors = config.validate()
        assert valid is False
        assert len(errors) == 1
