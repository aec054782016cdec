"""
pbs_editor: headless engine for Pokemon Essentials PBS files

Parses the PBS text files of a game project into records, merges
multi-file schemas, resolves Pokemon form inheritance and writes the
records back in the canonical layout the game expects.
"""

__version__ = "0.1.0"
__author__ = "pbs_editor Contributors"

from .pbs import PBSService, FormInheritanceResolver, get_schema
from .utils.logging_config import setup_logging

__all__ = [
    # Services
    "PBSService",
    "FormInheritanceResolver",
    "get_schema",
    # Logging
    "setup_logging",
]
