"""
Core settings management for pbs_editor.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from PySide6.QtCore import QSettings

from .types import ConfigError, ConfigVersion, ValidationResult
from .migration import SettingsMigrator
from .validation import SettingsValidator
from .paths import PathSettings
from .logging import LoggingSettings

logger = logging.getLogger(__name__)

ORGANIZATION = "pbs_editor"
APPLICATION = "pbs_editor"


class AppSettings:
    """
    Configuration management using QSettings.

    Values live in the platform's native store unless an INI file is given,
    which is what the command line ``--settings`` option and the tests use.
    """

    def __init__(
        self, profile: str = "default", ini_file: Optional[Union[str, Path]] = None
    ):
        """Initialize settings for a profile.

        Args:
            profile: Settings profile name (default: "default")
            ini_file: Store settings in this INI file instead of native storage

        Raises:
            ConfigError: The settings store cannot be read or written
        """
        if ini_file is not None:
            self.settings = QSettings(str(ini_file), QSettings.Format.IniFormat)
        else:
            self.settings = QSettings(ORGANIZATION, APPLICATION)
        self.profile = profile

        # Profile is a group: pbs_editor/<profile>/...
        self.settings.beginGroup(profile)

        self._migrator = SettingsMigrator(self.settings)
        self._validator = SettingsValidator(self)
        self._paths = PathSettings(self.settings)
        self._logging = LoggingSettings(self.settings)

        self._migrator.ensure_version()
        if self.settings.status() != QSettings.Status.NoError:
            raise ConfigError(f"Cannot access settings at {self.settings.fileName()}")

        logger.debug(
            f"Settings initialized for profile '{profile}', stored at: {self.settings.fileName()}"
        )

    # === SUBSYSTEM ACCESS ===

    @property
    def paths(self) -> PathSettings:
        """Access path settings subsystem."""
        return self._paths

    @property
    def logging(self) -> LoggingSettings:
        """Access logging settings subsystem."""
        return self._logging

    # === VERSION AND FIRST RUN ===

    @property
    def is_first_run(self) -> bool:
        """Check if this is the first run of the application."""
        return self._get_bool("app/first_run", True)

    def set_first_run_complete(self) -> None:
        self.settings.setValue("app/first_run", False)
        self.settings.sync()

    @property
    def version(self) -> str:
        """Get configuration version."""
        return self._get_str("app/version", ConfigVersion.CURRENT.value)

    # === HELPER METHODS ===

    def _get_str(self, key: str, default: str = "") -> str:
        """Type-safe string retrieval from settings."""
        value = self.settings.value(key, default)
        return str(value) if value is not None else default

    def _get_bool(self, key: str, default: bool = False) -> bool:
        """Type-safe boolean retrieval from settings."""
        value = self.settings.value(key, default)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ("true", "1", "yes")
        return bool(value) if value is not None else default

    # === PATH SETTINGS (DELEGATED) ===

    @property
    def project_root(self) -> Optional[Path]:
        """Get the game project folder."""
        return self._paths.project_root

    @project_root.setter
    def project_root(self, value: Optional[Path]) -> None:
        self._paths.project_root = value

    @property
    def pbs_dir(self) -> str:
        return self._paths.pbs_dir

    @property
    def output_dir(self) -> str:
        return self._paths.output_dir

    @property
    def recent_projects(self) -> List[str]:
        """Get list of recently opened projects."""
        return self._paths.recent_projects

    def add_recent_project(self, project_path: Union[str, Path]) -> None:
        """Add project to recent projects list (max 10 items)."""
        self._paths.add_recent_project(project_path)

    # === LOGGING SETTINGS (DELEGATED) ===

    @property
    def console_logging(self) -> bool:
        """Check if console logging is enabled."""
        return self._logging.console_logging

    @console_logging.setter
    def console_logging(self, value: bool) -> None:
        self._logging.console_logging = value

    @property
    def console_log_level(self) -> str:
        """Get console logging level."""
        return self._logging.console_log_level

    @console_log_level.setter
    def console_log_level(self, value: str) -> None:
        self._logging.console_log_level = value

    @property
    def console_use_colors(self) -> bool:
        """Check if console should use colors."""
        return self._logging.console_use_colors

    @console_use_colors.setter
    def console_use_colors(self, value: bool) -> None:
        self._logging.console_use_colors = value

    @property
    def file_logging(self) -> bool:
        """Check if file logging is enabled."""
        return self._logging.file_logging

    @file_logging.setter
    def file_logging(self, value: bool) -> None:
        self._logging.file_logging = value

    @property
    def log_file_path(self) -> str:
        """Get log file path (read-only)."""
        return self._logging.log_file_path

    @property
    def log_file_absolute_path(self) -> Path:
        """Get absolute path to log file."""
        return self._logging.log_file_absolute_path

    # === VALIDATION ===

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        return self._validator.validate()

    # === UTILITY METHODS ===

    def get_settings_file_path(self) -> str:
        """Get the file path where settings are stored."""
        return self.settings.fileName()

    def sync(self) -> None:
        """Force synchronization of settings to storage."""
        self.settings.sync()
