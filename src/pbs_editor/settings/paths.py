"""
Path-related settings for pbs_editor.
"""

from pathlib import Path
from typing import List, Optional, Union, TYPE_CHECKING, cast

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings

DEFAULT_PBS_DIR = "PBS"
DEFAULT_OUTPUT_DIR = "PBS_Output"
MAX_RECENT_PROJECTS = 10


class PathSettings:
    """Manages the project folder and its PBS input/output directories."""

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def _get_str(self, key: str, default: str = "") -> str:
        """Type-safe string retrieval from settings."""
        value = self.settings.value(key, default)
        return str(value) if value is not None else default

    def _get_list(self, key: str, default: Optional[List[str]] = None) -> List[str]:
        """Type-safe list retrieval from settings."""
        if default is None:
            default = []
        value = self.settings.value(key, default)
        if isinstance(value, list):
            return [
                str(item) if item is not None else ""
                for item in cast(list[object], value)
            ]
        # INI storage returns a single-item list as a plain string
        if isinstance(value, str) and value:
            return [value]
        return default

    @property
    def project_root(self) -> Optional[Path]:
        """Get the game project folder (the one containing PBS/)."""
        path_str = self._get_str("paths/project_root", "")
        return Path(path_str) if path_str else None

    @project_root.setter
    def project_root(self, value: Optional[Path]) -> None:
        self.settings.setValue("paths/project_root", str(value) if value else "")
        self.settings.sync()

    @property
    def pbs_dir(self) -> str:
        """Input folder name, relative to the project root."""
        return self._get_str("paths/pbs_dir", DEFAULT_PBS_DIR) or DEFAULT_PBS_DIR

    @pbs_dir.setter
    def pbs_dir(self, value: str) -> None:
        self.settings.setValue("paths/pbs_dir", value.strip() or DEFAULT_PBS_DIR)
        self.settings.sync()

    @property
    def output_dir(self) -> str:
        """Export folder name, relative to the project root."""
        return self._get_str("paths/output_dir", DEFAULT_OUTPUT_DIR) or DEFAULT_OUTPUT_DIR

    @output_dir.setter
    def output_dir(self, value: str) -> None:
        self.settings.setValue("paths/output_dir", value.strip() or DEFAULT_OUTPUT_DIR)
        self.settings.sync()

    @property
    def pbs_path(self) -> Optional[Path]:
        """Get the PBS input directory (derived from project_root)."""
        if self.project_root:
            return self.project_root / self.pbs_dir
        return None

    @property
    def output_path(self) -> Optional[Path]:
        """Get the export directory (derived from project_root)."""
        if self.project_root:
            return self.project_root / self.output_dir
        return None

    @property
    def recent_projects(self) -> List[str]:
        """Get list of recently opened projects."""
        return self._get_list("paths/recent_projects", [])

    def add_recent_project(self, project_path: Union[str, Path]) -> None:
        """Add a project to the recent list (max 10 items)."""
        recent = self.recent_projects
        path_str = str(project_path)

        if path_str in recent:
            recent.remove(path_str)
        recent.insert(0, path_str)

        self.settings.setValue("paths/recent_projects", recent[:MAX_RECENT_PROJECTS])
        self.settings.sync()

    def clear_recent_projects(self) -> None:
        """Clear recent projects list."""
        self.settings.setValue("paths/recent_projects", [])
        self.settings.sync()
