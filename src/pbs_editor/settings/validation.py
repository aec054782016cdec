"""
Settings validation system for pbs_editor.
"""

import logging
from pathlib import Path
from typing import List, TYPE_CHECKING

from .types import ValidationResult

if TYPE_CHECKING:
    from .core import AppSettings

logger = logging.getLogger(__name__)


class SettingsValidator:
    """Validates configuration settings."""

    def __init__(self, settings: "AppSettings"):
        self.settings = settings

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        errors: List[str] = []
        warnings: List[str] = []

        paths = self.settings.paths
        root = paths.project_root
        if root:
            if not root.exists():
                errors.append(f"Project path does not exist: {root}")
            elif not (root / paths.pbs_dir).is_dir():
                warnings.append(
                    f"Project path might be invalid (no '{paths.pbs_dir}' directory): {root}"
                )
        else:
            warnings.append("Project path not set")

        if paths.pbs_dir.strip().lower() == paths.output_dir.strip().lower():
            errors.append(
                f"Output directory must differ from the PBS directory: {paths.output_dir}"
            )

        # Drop recent projects that no longer exist
        recent = paths.recent_projects
        valid_recent: List[str] = []
        for project in recent:
            if Path(project).exists():
                valid_recent.append(project)
            else:
                warnings.append(f"Recent project no longer exists: {project}")

        if len(valid_recent) != len(recent):
            self.settings.settings.setValue("paths/recent_projects", valid_recent)
            self.settings.settings.sync()

        for message in errors:
            logger.debug(f"Settings error: {message}")

        return ValidationResult(
            is_valid=len(errors) == 0, errors=errors, warnings=warnings
        )
