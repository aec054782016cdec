"""
Merging same-prefix PBS files into one collection and splitting it back.

``items.txt`` and ``items_extra.txt`` are edited as a single collection;
each record remembers the file it came from so the export can write every
file separately again.
"""

from typing import Dict, List, Sequence, Tuple

from .models import Entry, MultiFile
from .ordering import renumber, source_of


def merge_parsed(parsed_files: Sequence[Tuple[str, Sequence[Entry]]]) -> MultiFile:
    """Concatenate per-file parse results in file order.

    Args:
        parsed_files: (filename, records) pairs, primary file first

    Returns:
        MultiFile whose records are copies tagged with their source file
    """
    merged = MultiFile()
    for filename, entries in parsed_files:
        merged.files.append(filename)
        merged.entries.extend(entry.copy(source_file=filename) for entry in entries)
    return merged


def split_by_source(
    entries: Sequence[Entry], default_source: str
) -> Dict[str, List[Entry]]:
    """Group records by their source file in first-seen order.

    Records without a tag belong to ``default_source``. Every group is
    sorted by ``order`` and renumbered from zero.
    """
    grouped: Dict[str, List[Entry]] = {}
    for entry in entries:
        grouped.setdefault(source_of(entry, default_source), []).append(entry)
    return {source: renumber(group) for source, group in grouped.items()}
