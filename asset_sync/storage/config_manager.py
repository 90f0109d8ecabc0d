"""
Manages loading, validation, and migration of the INI configuration file.
"""

import configparser
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from asset_sync.exceptions import ConfigurationError
from asset_sync.models.config import SyncConfig

log = logging.getLogger(__name__)

_INT_KEYS = {"max_workers", "retry_max_attempts"}
_FLOAT_KEYS = {"retry_base_delay", "retry_max_delay", "request_timeout"}
_BOOL_KEYS = {"skip_unchanged"}
_LIST_KEYS = {"path_whitelist"}


class ConfigManager:
    """Handles all operations related to the application's INI config file."""

    def __init__(self, config_file_path: Path):
        self.config_file_path = config_file_path
        self._parser = configparser.ConfigParser(interpolation=None)

    def load_config(self, cli_options: dict[str, Any] | None = None) -> SyncConfig:
        """
        Loads configuration from the INI file, applies CLI overrides, and validates it.

        Args:
            cli_options: A dictionary of options provided via the command line.

        Returns:
            A validated SyncConfig object.

        Raises:
            ConfigurationError: If the config file is missing, invalid, or validation
            fails.
        """
        if not self.config_file_path.is_file():
            raise ConfigurationError(
                f"Configuration file not found at '{self.config_file_path}'. "
                "Please run 'asset-sync init' first."
            )

        try:
            self._parser.read(self.config_file_path, encoding="utf-8")
        except configparser.Error as e:
            raise ConfigurationError(f"Error parsing configuration file: {e}") from e

        if self._migrate_if_needed():
            log.info(
                "[yellow]Configuration file was updated with new default values."
                "[/yellow]"
            )

        config_from_file = self.get_config_as_dict()

        if cli_options:
            config_from_file.update(cli_options)

        try:
            config_dir = self.config_file_path.parent
            return SyncConfig(**config_from_file, config_path=str(config_dir))
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

    def save_new_config(self, settings: dict[str, Any]) -> None:
        """
        Creates and saves a new configuration file.

        Keys whose value is None are left out of the file, so an absent
        ``path_whitelist`` stays distinguishable from an empty one.
        """
        config = configparser.ConfigParser(interpolation=None)
        config["DEFAULT"] = {}

        for key in sorted(SyncConfig.get_ini_keys()):
            field = SyncConfig.model_fields[key]
            if key in settings:
                value = settings[key]
            elif field.is_required():
                continue
            else:
                value = field.default
            text = self._to_ini_value(value)
            if text is not None:
                config["DEFAULT"][key] = text

        try:
            self.config_file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, "w", encoding="utf-8") as configfile:
                config.write(configfile)
        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration file: {e}") from e

    def get_config_as_dict(self) -> dict[str, Any]:
        """Reads the 'DEFAULT' section of the INI file into a dictionary."""
        section = self._parser["DEFAULT"]
        result: dict[str, Any] = {}
        try:
            for key in SyncConfig.get_ini_keys():
                if key not in section:
                    continue
                if key in _INT_KEYS:
                    result[key] = section.getint(key)
                elif key in _FLOAT_KEYS:
                    result[key] = section.getfloat(key)
                elif key in _BOOL_KEYS:
                    result[key] = section.getboolean(key)
                elif key in _LIST_KEYS:
                    result[key] = [
                        s.strip() for s in section.get(key, "").split(",") if s.strip()
                    ]
                else:
                    result[key] = section.get(key)
        except ValueError as e:
            raise ConfigurationError(f"Invalid value in configuration file: {e}") from e
        return result

    @staticmethod
    def _to_ini_value(value: Any) -> str | None:
        if value is None:
            return None
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, list | tuple):
            return ",".join(map(str, value))
        return str(value)

    def _migrate_if_needed(self) -> bool:
        """Adds missing keys that carry a non-empty default to an existing config file."""
        needs_saving = False
        config_section = self._parser["DEFAULT"]

        for key in sorted(SyncConfig.get_ini_keys()):
            if key in config_section:
                continue
            field = SyncConfig.model_fields[key]
            if field.is_required():
                continue
            text = self._to_ini_value(field.default)
            if text is None:
                continue
            config_section[key] = text
            needs_saving = True
            log.debug(
                f"Migrating config: added missing key '{key}' with value '{text}'."
            )

        if needs_saving:
            try:
                with open(self.config_file_path, "w", encoding="utf-8") as f:
                    self._parser.write(f)
            except OSError as e:
                log.error(f"Could not save migrated configuration file: {e}")
                return False

        return needs_saving
