"""
Record ordering and identity checks.

``order`` is a record's position inside its source file. Every reorder
operation renumbers the touched source group to a dense ``0..n-1`` run;
records of other source files are returned untouched.
"""

from collections import Counter
from typing import Callable, Dict, Hashable, List, Sequence, TypeVar

from .errors import DuplicateIdentityError
from .models import EncounterEntry, Entry, PBSEntry, TrainerEntry

E = TypeVar("E", PBSEntry, EncounterEntry, TrainerEntry)

KeyFunc = Callable[[E], Hashable]


def source_of(entry: Entry, default_source: str) -> str:
    """Return the record's provenance tag, falling back to the primary file."""
    source = (entry.source_file or "").strip()
    return source or default_source


def renumber(entries: Sequence[E]) -> List[E]:
    """Return copies sorted by ``order`` with dense zero-based orders."""
    ordered = sorted(entries, key=lambda entry: entry.order)
    return [entry.copy(order=index) for index, entry in enumerate(ordered)]


def _replace_scoped(
    entries: Sequence[E], reordered: Sequence[E], source: str, default_source: str
) -> List[E]:
    """Put ``reordered`` back into the slots held by ``source`` records."""
    queue = iter(reordered)
    result: List[E] = []
    for entry in entries:
        if source_of(entry, default_source) == source:
            result.append(next(queue, entry))
        else:
            result.append(entry)
    return result


def _scoped(entries: Sequence[E], source: str, default_source: str) -> List[E]:
    scoped = [entry for entry in entries if source_of(entry, default_source) == source]
    return sorted(scoped, key=lambda entry: entry.order)


def move_entry_within_source(
    entries: Sequence[E],
    key: KeyFunc,
    identity: Hashable,
    source: str,
    target_index: int,
    default_source: str,
) -> List[E]:
    """Move the record whose ``key`` equals ``identity`` to ``target_index``.

    The index is clamped to the source group. Unknown identities leave the
    collection unchanged.
    """
    scoped = _scoped(entries, source, default_source)
    from_index = next(
        (index for index, entry in enumerate(scoped) if key(entry) == identity), -1
    )
    if from_index == -1:
        return list(entries)

    moved = scoped.pop(from_index)
    clamped = max(0, min(len(scoped), target_index))
    scoped.insert(clamped, moved)
    reordered = [entry.copy(order=index) for index, entry in enumerate(scoped)]
    return _replace_scoped(entries, reordered, source, default_source)


def move_group_within_source(
    entries: Sequence[E],
    group_key: KeyFunc,
    active: E,
    source: str,
    target_index: int,
    default_source: str,
) -> List[E]:
    """Move every record sharing ``active``'s group key as one block.

    ``target_index`` counts positions in the whole source group; the block
    lands after the non-group records that precede that position.
    """
    group_id = group_key(active)
    scoped = _scoped(entries, source, default_source)
    remaining = [entry for entry in scoped if group_key(entry) != group_id]
    group = [entry for entry in scoped if group_key(entry) == group_id]

    bounded = max(0, min(len(scoped), target_index))
    before_count = sum(1 for entry in scoped[:bounded] if group_key(entry) != group_id)
    insert_index = max(0, min(len(remaining), before_count))

    combined = remaining[:insert_index] + group + remaining[insert_index:]
    reordered = [entry.copy(order=index) for index, entry in enumerate(combined)]
    return _replace_scoped(entries, reordered, source, default_source)


def cluster_groups(
    entries: Sequence[E], group_key: KeyFunc, default_source: str
) -> List[E]:
    """Gather same-group records together inside each source file.

    Groups keep the position of their first member; the result is ordered
    source by source (first-seen) with dense orders per source.
    """
    by_source: Dict[str, List[E]] = {}
    for entry in sorted(entries, key=lambda entry: entry.order):
        by_source.setdefault(source_of(entry, default_source), []).append(entry)

    result: List[E] = []
    for source, group_entries in by_source.items():
        seen: set[Hashable] = set()
        clustered: List[E] = []
        for entry in group_entries:
            gid = group_key(entry)
            if gid in seen:
                continue
            seen.add(gid)
            clustered.extend(item for item in group_entries if group_key(item) == gid)
        result.extend(
            entry.copy(order=index, source_file=source)
            for index, entry in enumerate(clustered)
        )
    return result


def next_order_for_source(
    entries: Sequence[Entry], source: str, default_source: str
) -> int:
    """Order value for a record appended to ``source``."""
    orders = [
        entry.order + 1
        for entry in entries
        if source_of(entry, default_source) == source
    ]
    return max([0, *orders])


def ensure_unique_identities(
    entries: Sequence[E], identity: KeyFunc, schema: str
) -> None:
    """Raise DuplicateIdentityError if two records share an identity key."""
    counts = Counter(identity(entry) for entry in entries)
    duplicates = [
        _format_identity(key) for key, count in counts.items() if count > 1
    ]
    if duplicates:
        raise DuplicateIdentityError(schema, duplicates)


def _format_identity(key: Hashable) -> str:
    if isinstance(key, tuple):
        return ",".join(str(part) for part in key)
    return str(key)


# Group keys used when reordering related records as one block

def encounter_group_key(entry: EncounterEntry) -> Hashable:
    return entry.id


def trainer_group_key(entry: TrainerEntry) -> Hashable:
    return f"{entry.id}::{entry.name}"


def form_group_key(entry: PBSEntry) -> Hashable:
    return entry.id.split(",")[0].strip()
