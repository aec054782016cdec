"""
Exception types raised by the PBS engine.

Parsing never raises: malformed lines are dropped. Errors only come from
export (empty or inconsistent record sets), payload decoding and file I/O.
"""

from pathlib import Path
from typing import List, Optional, Sequence


class PBSError(Exception):
    """Base class for all PBS engine errors."""
    pass


class EmptyExportError(PBSError):
    """Raised when an exporter is asked to write an empty record set."""
    pass


class UnknownSchemaError(PBSError):
    """Raised for a schema name that is not one of the supported PBS files."""
    pass


class PayloadError(PBSError):
    """Raised when a JSON payload does not match the record shape."""
    pass


class ProjectError(PBSError):
    """Raised when the project layout (PBS folder) is missing or unusable."""
    pass


class DuplicateIdentityError(PBSError):
    """Raised when two records of one collection share an identity key."""

    def __init__(self, schema: str, duplicates: Sequence[str]):
        self.schema = schema
        self.duplicates: List[str] = list(duplicates)
        super().__init__(
            f"Duplicate {schema} identities: {', '.join(self.duplicates)}"
        )


class ExportWriteError(PBSError):
    """Raised when writing one of several grouped output files fails.

    Files written before the failure are left in place and listed in
    ``written``.
    """

    def __init__(
        self, path: Path, written: Sequence[Path], cause: Optional[BaseException] = None
    ):
        self.path = path
        self.written: List[Path] = list(written)
        self.cause = cause
        super().__init__(f"Failed to write {path}: {cause}")
