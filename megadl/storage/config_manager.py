"""
Manages loading and validation of the INI configuration file.
"""

import configparser
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from megadl.api.factory import SESSION_FACTORY_ENV
from megadl.exceptions import ConfigurationError
from megadl.models.config import DownloadConfig

log = logging.getLogger(__name__)


class ConfigManager:
    """Handles all operations related to the application's INI config file."""

    def __init__(self, config_file_path: Path):
        self.config_file_path = config_file_path
        self._parser = configparser.ConfigParser(interpolation=None)

    def load_config(self, cli_options: dict[str, Any] | None = None) -> DownloadConfig:
        """
        Loads configuration from the INI file, applies environment and CLI
        overrides, and validates it.

        A missing config file is not an error; defaults are used instead.

        Args:
            cli_options: A dictionary of options provided via the command line.

        Returns:
            A validated DownloadConfig object.

        Raises:
            ConfigurationError: If the config file is unreadable or validation fails.
        """
        config_values: dict[str, Any] = {}
        if self.config_file_path.is_file():
            try:
                self._parser.read(self.config_file_path, encoding="utf-8")
                config_values = self._get_config_as_dict()
            except (configparser.Error, ValueError) as e:
                raise ConfigurationError(
                    f"Error parsing configuration file: {e}"
                ) from e
            log.debug(f"Loaded configuration from '{self.config_file_path}'")
        else:
            log.debug(
                f"No configuration file at '{self.config_file_path}', using defaults"
            )

        if env_factory := os.getenv(SESSION_FACTORY_ENV):
            config_values["session_factory"] = env_factory

        if cli_options:
            config_values.update(cli_options)

        try:
            return DownloadConfig(**config_values)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

    def _get_config_as_dict(self) -> dict[str, Any]:
        """Reads the keys present in the 'DEFAULT' section into a dictionary."""
        section = self._parser["DEFAULT"]
        readers = {
            "path": section.get,
            "session_factory": section.get,
            "no_progress": section.getboolean,
            "print_names": section.getboolean,
            "max_attempts": section.getint,
            "initial_backoff": section.getfloat,
        }
        unknown = set(section) - DownloadConfig.get_ini_keys()
        if unknown:
            log.warning(
                f"[yellow]Ignoring unknown configuration keys: "
                f"{', '.join(sorted(unknown))}[/yellow]"
            )
        return {key: read(key) for key, read in readers.items() if key in section}
