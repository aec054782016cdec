"""
Configuration type definitions and exceptions for pbs_editor.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List


class ConfigVersion(Enum):
    """Stored settings layout version.

    1.0 kept the path of the PBS folder itself (``paths/pbs``); 1.1 keeps
    the game project root plus folder names relative to it.
    """
    V1_0 = "1.0"  # paths/pbs
    V1_1 = "1.1"  # paths/project_root, paths/pbs_dir, paths/output_dir
    CURRENT = V1_1


class ConfigError(Exception):
    """Raised when the settings store cannot be read or written."""


@dataclass
class ValidationResult:
    """Outcome of checking the project paths and recent projects."""
    is_valid: bool
    errors: List[str]
    warnings: List[str]
