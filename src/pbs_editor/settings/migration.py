"""
Settings migration system for pbs_editor.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from .types import ConfigVersion

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings

logger = logging.getLogger(__name__)


class SettingsMigrator:
    """Handles configuration migration between versions."""

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def ensure_version(self) -> None:
        """Ensure configuration version is set and handle migrations."""
        current_version = str(self.settings.value("app/version", "") or "")

        if not current_version:
            self.settings.setValue("app/version", ConfigVersion.CURRENT.value)
            self.settings.setValue("app/first_run", True)
            self.settings.sync()
            logger.info("First run detected, initializing configuration")
        elif current_version != ConfigVersion.CURRENT.value:
            self._migrate_config(current_version, ConfigVersion.CURRENT.value)

    def _migrate_config(self, from_version: str, to_version: str) -> None:
        """Migrate configuration from old version to new version."""
        logger.info(f"Migrating configuration from {from_version} to {to_version}")

        if from_version == ConfigVersion.V1_0.value:
            self._migrate_1_0_to_1_1()

        self.settings.setValue("app/version", to_version)
        self.settings.setValue("app/migrated_from", from_version)
        self.settings.sync()
        logger.info(f"Migration from {from_version} to {to_version} completed")

    def _migrate_1_0_to_1_1(self) -> None:
        """Migrate from 1.0 to 1.1 - the PBS folder path becomes a project root."""
        logger.debug("Performing migration from 1.0 to 1.1")

        old_pbs_path = str(self.settings.value("paths/pbs", "") or "")
        if not old_pbs_path:
            return

        pbs_path = Path(old_pbs_path)
        if pbs_path.name.upper() == "PBS":
            project_root = pbs_path.parent
            self.settings.setValue("paths/pbs_dir", pbs_path.name)
            logger.info(f"Migrated PBS directory to project root: {pbs_path} -> {project_root}")
        else:
            # Assume the old value already pointed at the project
            project_root = pbs_path
            logger.warning(f"Migrated unverified path as project root: {pbs_path}")

        self.settings.setValue("paths/project_root", str(project_root))
        self.settings.remove("paths/pbs")
        self.settings.sync()
