# -*- coding: utf-8 -*-
"""
src/tint/config.py

Module for handling application configuration.

This module defines default settings for Tint, such as the global hotkey and
the history retention policy. It loads user-defined settings from a
configuration file (config.ini), creating one with default values on the
first run.
"""

import configparser
import logging
import platform
from datetime import timedelta
from pathlib import Path
from typing import Optional

from .core.persistence import HISTORY_KEY
from .utils.hotkey_manager import DEFAULT_HOTKEY

logger = logging.getLogger(__name__)

# --- Constants ---
APP_NAME = "Tint"
DEFAULT_CONFIG_FILENAME = "config.ini"
DEFAULT_RETENTION_HOURS = 8.0
DEFAULT_MAX_HISTORY = 200
DEFAULT_CLEANUP_INTERVAL = 900.0
DEFAULT_LOG_LEVEL = "INFO"


def get_app_dir() -> Path:
    """
    Gets the application's data directory in a cross-platform way.

    This directory holds the configuration file and the saved color history.

    - Windows: %APPDATA%/Tint
    - macOS: ~/Library/Application Support/Tint
    - Linux: ~/.config/Tint

    Returns:
        Path: A Path object to the application's data directory.
    """
    if platform.system() == "Windows":
        app_dir = Path.home() / "AppData" / "Roaming" / APP_NAME
    elif platform.system() == "Darwin":
        app_dir = Path.home() / "Library" / "Application Support" / APP_NAME
    else:
        app_dir = Path.home() / ".config" / APP_NAME

    app_dir.mkdir(parents=True, exist_ok=True)
    return app_dir


class Config:
    """
    Manages application configuration by loading defaults and overriding
    them with settings from a user-specific config file.
    """

    def __init__(self, app_dir: Optional[Path] = None):
        """
        Initializes the configuration manager.

        Args:
            app_dir (Optional[Path]): Directory for config and data files.
                Defaults to the per-platform application directory.
        """
        self.parser = configparser.ConfigParser()
        if app_dir is None:
            self.app_dir = get_app_dir()
        else:
            self.app_dir = Path(app_dir)
            self.app_dir.mkdir(parents=True, exist_ok=True)
        self.config_file_path = self.app_dir / DEFAULT_CONFIG_FILENAME

        self._load_defaults()
        self._load_from_file()

    def _load_defaults(self):
        """Sets the default configuration values in the parser object."""
        self.parser["General"] = {
            "hotkey": DEFAULT_HOTKEY,
            "log_level": DEFAULT_LOG_LEVEL,
        }
        self.parser["History"] = {
            "retention_hours": str(DEFAULT_RETENTION_HOURS),
            "max_history": str(DEFAULT_MAX_HISTORY),
            "cleanup_interval_seconds": str(DEFAULT_CLEANUP_INTERVAL),
            "storage_key": HISTORY_KEY,
        }

    def _load_from_file(self):
        """
        Loads settings from the config.ini file, overriding defaults.
        If the file doesn't exist, it will be created with default values.
        """
        if not self.config_file_path.exists():
            self._save_defaults()
            return
        try:
            self.parser.read(self.config_file_path)
        except configparser.Error as e:
            logger.error(f"Could not parse {self.config_file_path}, using defaults: {e}")
            self._load_defaults()

    def _save_defaults(self):
        """Saves the current (default) configuration to the config file."""
        try:
            with open(self.config_file_path, 'w') as configfile:
                configfile.write(f"# {APP_NAME} Configuration File\n")
                configfile.write("# You can edit these values. Restart the app for changes to take effect.\n\n")
                self.parser.write(configfile)
        except IOError as e:
            # Non-critical: the defaults are still in memory.
            logger.error(f"Could not write to config file at {self.config_file_path}: {e}")

    def _positive(self, getter, section: str, option: str, fallback):
        try:
            value = getter(section, option, fallback=fallback)
        except ValueError as e:
            logger.warning(f"Invalid [{section}] {option} in config, using {fallback}: {e}")
            return fallback
        if value <= 0:
            logger.warning(f"[{section}] {option} must be positive, using {fallback}.")
            return fallback
        return value

    # --- Properties to access settings easily and with correct types ---

    @property
    def hotkey(self) -> str:
        """The global hotkey combination for picking a color."""
        return self.parser.get("General", "hotkey", fallback=DEFAULT_HOTKEY)

    @property
    def log_level(self) -> str:
        """The logging level name (DEBUG, INFO, WARNING, ...)."""
        return self.parser.get("General", "log_level", fallback=DEFAULT_LOG_LEVEL).upper()

    @property
    def retention(self) -> timedelta:
        """How long a captured color stays in the history."""
        hours = self._positive(self.parser.getfloat, "History", "retention_hours", DEFAULT_RETENTION_HOURS)
        return timedelta(hours=hours)

    @property
    def max_history(self) -> int:
        """The maximum number of colors kept in the history."""
        return self._positive(self.parser.getint, "History", "max_history", DEFAULT_MAX_HISTORY)

    @property
    def cleanup_interval(self) -> float:
        """Seconds between background passes that drop expired colors."""
        return self._positive(
            self.parser.getfloat, "History", "cleanup_interval_seconds", DEFAULT_CLEANUP_INTERVAL
        )

    @property
    def storage_key(self) -> str:
        """The storage slot holding the saved history."""
        return self.parser.get("History", "storage_key", fallback=HISTORY_KEY)
