"""
File access for PBS projects.

Discovers the files that make up a schema and reads or writes them. Text is
decoded as UTF-8 with an optional BOM; output bytes are written exactly as
produced by ``normalize_output``.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .models import Entry
from .schemas import SchemaSpec

PBS_DIR_NAME = "PBS"


def list_pbs_files(
    directory: Path, prefix: str, exclude: Sequence[str] = ()
) -> List[str]:
    """Return the file names that belong to ``prefix``.

    ``prefix.txt`` comes first, followed by every ``prefix_*.txt`` sorted
    lexically. Matching is case-insensitive; names starting with one of
    ``exclude`` are skipped.
    """
    if not directory.is_dir():
        return []

    main = f"{prefix}.txt".lower()
    prefixed = f"{prefix.lower()}_"
    excluded = tuple(item.lower() for item in exclude)

    primary: List[str] = []
    extras: List[str] = []
    for path in directory.iterdir():
        if not path.is_file():
            continue
        lower = path.name.lower()
        if not lower.endswith(".txt") or lower.startswith(excluded):
            continue
        if lower == main:
            primary.append(path.name)
        elif lower.startswith(prefixed):
            extras.append(path.name)
    return primary + sorted(extras)


def discover_project_root(start: Path) -> Path:
    """Find the project folder holding ``PBS/``.

    Looks at ``start`` and up to two parents; falls back to ``start``.
    """
    start = start.resolve()
    for candidate in [start, *list(start.parents)[:2]]:
        if (candidate / PBS_DIR_NAME).is_dir():
            return candidate
    return start


class PBSFileLoader:
    """Reads and parses the files of one schema."""

    def __init__(self, pbs_dir: Path):
        self.pbs_dir = Path(pbs_dir)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.logger.debug(f"PBSFileLoader initialized for {self.pbs_dir}")

    def files_for(self, schema: SchemaSpec) -> List[str]:
        return list_pbs_files(self.pbs_dir, schema.prefix, schema.exclude_prefixes)

    def read_text(self, filename: str) -> str:
        path = self.pbs_dir / filename
        self.logger.debug(f"Reading {path}")
        return path.read_text(encoding="utf-8-sig")

    def load_schema(
        self, schema: SchemaSpec, files: Optional[Sequence[str]] = None
    ) -> List[Tuple[str, List[Entry]]]:
        """Parse every file of ``schema``.

        Args:
            schema: Schema to load
            files: Explicit file names; discovered when omitted

        Returns:
            (filename, records) pairs in file order
        """
        names = list(files) if files is not None else self.files_for(schema)
        parsed: List[Tuple[str, List[Entry]]] = []
        for filename in names:
            entries = schema.parse(self.read_text(filename))
            self.logger.debug(f"Parsed {len(entries)} records from {filename}")
            parsed.append((filename, entries))
        return parsed


def write_output(path: Path, text: str) -> None:
    """Write already normalized output text as UTF-8 bytes."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as f:
        f.write(text.encode("utf-8"))
