"""Configuration management for pytopic."""

import os
import json
import yaml
from typing import Dict, Optional, Any


LOG_LEVELS = ("DEBUG", "INFO", "WARN", "ERROR")


def _to_bool(value: str) -> bool:
    return value.lower() == "true"


class Config:
    """Configuration manager with file and environment variable support."""

    def __init__(self, config_file: Optional[str] = None):
        self.config: Dict[str, Any] = {}
        self.config_file = config_file or os.getenv('PYTOPIC_CONFIG', 'pytopic.yaml')
        self._set_defaults()
        self._load_config()
        self._load_env_overrides()

    def _load_config(self):
        """Load configuration from file, on top of the defaults."""
        if not os.path.isfile(self.config_file):
            return

        try:
            with open(self.config_file, 'r') as f:
                if self.config_file.endswith('.yaml') or self.config_file.endswith('.yml'):
                    loaded = yaml.safe_load(f) or {}
                elif self.config_file.endswith('.json'):
                    loaded = json.load(f)
                else:
                    return
        except (OSError, ValueError, yaml.YAMLError):
            return

        if not isinstance(loaded, dict):
            return

        for section, values in loaded.items():
            if isinstance(values, dict):
                self.config.setdefault(section, {}).update(values)

    def _set_defaults(self):
        """Set default configuration values."""
        self.config = {
            "logging": {
                "level": "WARN",
                "component": "pytopic"
            },
            "index": {
                "validate_filters": True
            },
            "monitoring": {
                "prometheus_enabled": False,
                "prometheus_port": 9090
            }
        }

    def _load_env_overrides(self):
        """Override config with environment variables."""
        env_mappings = {
            "PYTOPIC_LOG_LEVEL": ("logging", "level", str.upper),
            "PYTOPIC_VALIDATE_FILTERS": ("index", "validate_filters", _to_bool),
            "PYTOPIC_PROMETHEUS_ENABLED": ("monitoring", "prometheus_enabled", _to_bool),
            "PYTOPIC_PROMETHEUS_PORT": ("monitoring", "prometheus_port", int)
        }

        for env_key, (section, key, *converters) in env_mappings.items():
            value = os.getenv(env_key)
            if value is not None:
                if converters:
                    converter = converters[0]
                    try:
                        value = converter(value)
                    except (ValueError, TypeError):
                        continue
                if section not in self.config:
                    self.config[section] = {}
                self.config[section][key] = value

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        return self.config.get(section, {}).get(key, default)

    def set(self, section: str, key: str, value: Any):
        """Set configuration value."""
        if section not in self.config:
            self.config[section] = {}
        self.config[section][key] = value

    def save(self, filename: Optional[str] = None):
        """Save configuration to file."""
        target_file = filename or self.config_file
        with open(target_file, 'w') as f:
            if target_file.endswith('.yaml') or target_file.endswith('.yml'):
                yaml.dump(self.config, f, default_flow_style=False)
            else:
                json.dump(self.config, f, indent=2)

    def validate(self) -> tuple[bool, list[str]]:
        """Validate configuration."""
        errors = []

        level = self.get("logging", "level")
        if level not in LOG_LEVELS:
            errors.append(f"Invalid log level: {level}")

        if self.get("monitoring", "prometheus_enabled"):
            port = self.get("monitoring", "prometheus_port")
            if not isinstance(port, int) or port < 1 or port > 65535:
                errors.append("Invalid prometheus port")

        return len(errors) == 0, errors
