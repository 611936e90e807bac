"""
config.py

Configuration management for printer-discovery.
Loads settings from a YAML file and provides access throughout the library.
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


CONFIG_ENV_VAR = "PRINTER_DISCOVERY_CONFIG"

DEFAULTS: Dict[str, Any] = {
    "logging": {
        "level": "INFO",
        "console_output": True,
        "file_output": False,
        "max_log_size_mb": 10,
        "backup_count": 5,
    },
    "paths": {
        "logs_dir": "logs",
    },
    "probe": {
        "timeout_ms": 3000,
    },
    "resolver": {
        "timeout_ms": 5000,
        "neighbor_table": "/proc/net/arp",
    },
    "scan": {
        "concurrency": 16,
        "show_progress": False,
    },
    "discovery": {
        "port": 9100,
        "common_hosts": [
            "192.168.1.87",
            "192.168.1.100",
            "192.168.1.101",
            "192.168.1.200",
            "192.168.1.201",
            "192.168.0.100",
            "192.168.0.101",
            "10.0.0.100",
            "10.0.0.101",
        ],
        "sweep": {
            "base_subnet": "192.168.1",
            "start_host": 80,
            "end_host": 120,
        },
        "use_neighbor_table": True,
    },
    "fallback": {
        "entries": [],
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class ConfigManager:
    """
    Singleton configuration manager that loads and provides access to settings.
    """

    _instance = None
    _config: Dict[str, Any] = {}
    _source: Optional[Path] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(ConfigManager, cls).__new__(cls)
            cls._instance._load_config()
        return cls._instance

    def _load_config(self, path: Optional[str] = None) -> None:
        """Load configuration from YAML, layered over the built-in defaults."""
        config_path = Path(path or os.environ.get(CONFIG_ENV_VAR, "config.yaml"))

        if not config_path.exists():
            self._config = copy.deepcopy(DEFAULTS)
            self._source = None
            return

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {config_path}: {e}")

        if not isinstance(loaded, dict):
            raise ValueError(f"{config_path} must contain a mapping at the top level")

        self._config = _merge(DEFAULTS, loaded)
        self._source = config_path

    def reload(self, path: Optional[str] = None) -> None:
        """Re-read configuration, optionally from an explicit file."""
        self._load_config(path)

    @property
    def source(self) -> Optional[Path]:
        """Path of the file the settings came from, or None for defaults."""
        return self._source

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Example:
            config.get("probe.timeout_ms")
            config.get("discovery.sweep.base_subnet")
        """
        keys = key_path.split(".")
        value = self._config

        try:
            for key in keys:
                value = value[key]
            return value
        except (KeyError, TypeError):
            return default

    def get_all(self) -> Dict[str, Any]:
        """Return the entire configuration dictionary."""
        return copy.deepcopy(self._config)


# Create a global instance for easy import
config = ConfigManager()
