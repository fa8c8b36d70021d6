"""
Settings file management for codesync.

This module saves and loads the settings record that lets a sync be
restarted with ``codesync load``. Settings are JSON by default; files with
a ``.yaml`` or ``.yml`` suffix are read and written as YAML.
"""

import json
import logging
import os
from typing import Any, Dict, List, Optional

import pydantic
import yaml

from .exceptions import ConfigurationError
from .models import Settings

DEFAULT_SETTINGS_FILE = ".codesync.json"
YAML_SUFFIXES = (".yaml", ".yml")


class ConfigManager:
    """Reads and writes settings files relative to the invocation directory."""

    def __init__(self, config_path: Optional[str] = None, cwd: Optional[str] = None):
        """Initialize configuration manager.

        Args:
            config_path: Settings file name. Defaults to ``.codesync.json``.
            cwd: Invocation directory. Defaults to the current directory.
        """
        self.logger = logging.getLogger(__name__)
        self.cwd = cwd or os.getcwd()
        self.filename = config_path or DEFAULT_SETTINGS_FILE
        self.config_path = os.path.join(self.cwd, os.path.expanduser(self.filename))
        self.settings: Optional[Settings] = None

    @property
    def is_default(self) -> bool:
        """Whether the default settings file name is in use."""
        return self.filename == DEFAULT_SETTINGS_FILE

    @property
    def is_yaml(self) -> bool:
        return self.config_path.lower().endswith(YAML_SUFFIXES)

    def create_settings(
        self, source: str, destination: str, ignore_folders: Optional[List[str]] = None
    ) -> Settings:
        """Build a settings record, storing ``source`` relative to the invocation directory."""
        source_path = os.path.join(self.cwd, os.path.expanduser(source))
        relative = os.path.relpath(os.path.abspath(source_path), self.cwd)

        return Settings(
            source=relative or ".",
            destination=destination,
            ignore_folders=list(ignore_folders or []),
        )

    def save_settings(self, settings: Settings) -> str:
        """Write ``settings`` to the settings file.

        Returns:
            Path of the written file

        Raises:
            ConfigurationError: If the file cannot be written
        """
        data = settings.model_dump(by_alias=True)

        try:
            with open(self.config_path, "w", encoding="utf-8") as f:
                if self.is_yaml:
                    yaml.safe_dump(
                        data, f, default_flow_style=False, sort_keys=False, allow_unicode=True
                    )
                else:
                    f.write(json.dumps(data, indent=2, ensure_ascii=False))
        except OSError as e:
            raise ConfigurationError(
                f"Failed to save settings: {e.strerror or e}", config_path=self.config_path
            ) from e

        self.settings = settings
        self.logger.info(f"Saved settings to {self.config_path}")
        return self.config_path

    def load_settings(self) -> Settings:
        """Load and validate the settings file.

        Raises:
            ConfigurationError: If the file is missing, unreadable or invalid
        """
        if not os.path.exists(self.config_path):
            raise ConfigurationError(
                f"Settings file {self.filename} not found", config_path=self.config_path
            )

        raw = self._read_raw()
        if not isinstance(raw, dict):
            raise ConfigurationError(
                "Invalid settings file format", config_path=self.config_path
            )

        try:
            self.settings = Settings.model_validate(raw)
        except pydantic.ValidationError as e:
            raise ConfigurationError(
                "Invalid settings file format",
                config_path=self.config_path,
                validation_errors=[
                    f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                    for err in e.errors()
                ],
            ) from e

        self.logger.info(f"Loaded settings from {self.config_path}")
        return self.settings

    def _read_raw(self) -> Any:
        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                if self.is_yaml:
                    return yaml.safe_load(f)
                return json.load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Failed to load settings: invalid YAML: {e}", config_path=self.config_path
            ) from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Failed to load settings: invalid JSON: {e}", config_path=self.config_path
            ) from e
        except OSError as e:
            raise ConfigurationError(
                f"Failed to load settings: {e.strerror or e}", config_path=self.config_path
            ) from e

