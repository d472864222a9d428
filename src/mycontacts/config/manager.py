"""
Configuration Manager - Settings and preferences.

Handles YAML/JSON configuration with environment variable overrides.
"""

import json
import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import yaml
from loguru import logger


class ConfigManager:
    """
    Configuration manager for MyContacts.

    Features:
    - YAML/JSON configuration files
    - Environment variable overrides, kept out of saved files
    - Change watchers
    - Default values
    """

    DEFAULT_CONFIG = {
        "app": {
            "name": "MyContacts",
            "version": "0.1.0",
            "debug": False,
        },
        "menu": {
            # None means the Menu.plist bundled with the package
            "path": None,
        },
        "contacts": {
            "store_path": "data/contacts.md",
            "authorization": "not_determined",
            "grant_on_request": True,
        },
        "ui": {
            "title": "MyContacts",
            "width": 420,
            "height": 640,
            "row_height": 44.0,
            "edit_unknown_row_height": 81.0,
        },
        "demo": {
            "search_name": "Appleseed",
            "unknown_contact": {
                "email": "John-Appleseed@mac.com",
                "alternate_name": "John Appleseed",
                "title": "John Appleseed",
                "message": "Company, Inc",
            },
        },
    }

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to configuration file
        """
        self._config_path = Path(config_path) if config_path else Path("config.yaml")
        self._config: Dict[str, Any] = self._deep_copy(self.DEFAULT_CONFIG)
        # Dot-notation key -> value taken from the environment for this run only
        self._overrides: Dict[str, Any] = {}
        self._watchers: List[Callable[[str, Any], None]] = []
        self._loaded = False

    async def load(self) -> None:
        """Load configuration from file."""
        # Start with defaults
        self._config = self._deep_copy(self.DEFAULT_CONFIG)
        self._overrides = {}

        if self._config_path.exists():
            try:
                content = self._config_path.read_text(encoding="utf-8")

                if self._config_path.suffix in [".yaml", ".yml"]:
                    file_config = yaml.safe_load(content) or {}
                else:
                    file_config = json.loads(content)

                if not isinstance(file_config, dict):
                    raise ValueError("configuration root must be a mapping")

                self._deep_merge(self._config, file_config)
                logger.info(f"Configuration loaded from {self._config_path}")

            except Exception as e:
                logger.warning(f"Failed to load config: {e}, using defaults")
        else:
            logger.info(f"No configuration at {self._config_path}, using defaults")

        self._apply_env_overrides()

        self._loaded = True

    async def save(self) -> None:
        """Save configuration to file."""
        try:
            self._config_path.parent.mkdir(parents=True, exist_ok=True)

            if self._config_path.suffix in [".yaml", ".yml"]:
                content = yaml.safe_dump(self._config, default_flow_style=False, sort_keys=False)
            else:
                content = json.dumps(self._config, indent=2)

            self._config_path.write_text(content, encoding="utf-8")
            logger.debug(f"Configuration saved to {self._config_path}")

        except Exception as e:
            logger.error(f"Failed to save config: {e}")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Args:
            key: Dot-notation key (e.g., "contacts.store_path")
            default: Default value if not found

        Returns:
            Configuration value
        """
        value: Any = self._effective() if self._overrides else self._config

        for part in key.split("."):
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return default

        return default if value is None else value

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value.

        An explicit set replaces any environment override for `key` and is
        written by the next `save`.

        Args:
            key: Dot-notation key
            value: Value to set
        """
        self._overrides.pop(key, None)
        self._assign(self._config, key, value)

        for watcher in list(self._watchers):
            try:
                watcher(key, value)
            except Exception as e:
                logger.warning(f"Config watcher error: {e}")

    def watch(self, callback: Callable[[str, Any], None]) -> None:
        """Register a configuration change watcher."""
        self._watchers.append(callback)

    def unwatch(self, callback: Callable[[str, Any], None]) -> None:
        """Unregister a watcher."""
        if callback in self._watchers:
            self._watchers.remove(callback)

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides."""
        env_mappings = {
            "MYCONTACTS_DEBUG": ("app.debug", lambda x: x.lower() == "true"),
            "MYCONTACTS_MENU_PATH": ("menu.path", str),
            "MYCONTACTS_STORE_PATH": ("contacts.store_path", str),
            "MYCONTACTS_AUTHORIZATION": ("contacts.authorization", lambda x: x.strip().lower()),
        }

        for env_var, (config_key, converter) in env_mappings.items():
            value = os.getenv(env_var)
            if value:
                try:
                    self._overrides[config_key] = converter(value)
                    logger.debug(f"Applied env override: {env_var}")
                except Exception as e:
                    logger.warning(f"Failed to apply {env_var}: {e}")

    def _effective(self) -> Dict[str, Any]:
        """File configuration with environment overrides applied."""
        config = self._deep_copy(self._config)
        for key, value in self._overrides.items():
            self._assign(config, key, value)
        return config

    @staticmethod
    def _assign(config: Dict[str, Any], key: str, value: Any) -> None:
        parts = key.split(".")
        for part in parts[:-1]:
            if not isinstance(config.get(part), dict):
                config[part] = {}
            config = config[part]
        config[parts[-1]] = value

    def _deep_merge(self, base: dict, override: dict) -> None:
        """Deep merge override into base dict."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def _deep_copy(self, obj: Any) -> Any:
        """Deep copy a dictionary."""
        if isinstance(obj, dict):
            return {k: self._deep_copy(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [self._deep_copy(item) for item in obj]
        return obj

    @property
    def path(self) -> Path:
        return self._config_path

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def all(self) -> Dict[str, Any]:
        """Get all configuration, environment overrides included."""
        return self._effective()
