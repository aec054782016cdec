"""
Data models for PBS records.

Contains the dataclasses used by parsers, exporters and the inheritance
resolver. Generic records keep their fields as an ordered association list
so duplicate keys and their positions survive a load/export cycle.
"""

from dataclasses import dataclass, field, replace
from typing import Callable, Dict, List, Optional, Sequence, TypeAlias, Union


# Number of move slots on a trainer's Pokemon and number of stats in IV/EV lists
MOVE_SLOTS = 4
STAT_COUNT = 6

# File order is HP, Attack, Defense, Speed, SpAtk, SpDef. Editors display
# HP, Attack, Defense, SpAtk, SpDef, Speed; entry i is the file index of
# display slot i.
STAT_EXPORT_INDEX = (0, 1, 2, 4, 5, 3)


def normalize_stat_list(values: Sequence[str]) -> List[str]:
    """Pad or truncate a stat list to exactly six string slots."""
    normalized = [str(value) for value in list(values)[:STAT_COUNT]]
    normalized.extend([""] * (STAT_COUNT - len(normalized)))
    return normalized


def stats_to_display(file_values: Sequence[str]) -> List[str]:
    """Reorder a file-order stat list into display order."""
    values = normalize_stat_list(file_values)
    return [values[file_index] for file_index in STAT_EXPORT_INDEX]


def stats_from_display(display_values: Sequence[str]) -> List[str]:
    """Reorder a display-order stat list back into file order."""
    values = normalize_stat_list(display_values)
    result = [""] * STAT_COUNT
    for display_index, file_index in enumerate(STAT_EXPORT_INDEX):
        result[file_index] = values[display_index]
    return result


# =============================================================================
# Generic records
# =============================================================================

@dataclass
class KeyValue:
    """One ``Key = Value`` line of a section."""
    key: str
    value: str


@dataclass
class PBSEntry:
    """A bracketed section of a generic PBS file.

    ``order`` is the position within the record's source file and decides
    the export order; ``source_file`` is the provenance tag used to split a
    merged collection back into files.
    """
    id: str
    fields: List[KeyValue] = field(default_factory=list)
    order: int = 0
    source_file: Optional[str] = None

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Return the value of the first field named ``key``."""
        for item in self.fields:
            if item.key == key:
                return item.value
        return default

    def values(self, key: str) -> List[str]:
        """Return every value stored under ``key`` in positional order."""
        return [item.value for item in self.fields if item.key == key]

    def has(self, key: str) -> bool:
        return any(item.key == key for item in self.fields)

    def field_map(self) -> Dict[str, str]:
        """Collapse fields into a mapping; later duplicates win."""
        return {item.key: item.value for item in self.fields}

    def copy(self, **changes: object) -> "PBSEntry":
        """Deep enough copy: fields are new objects, strings are shared."""
        copied = replace(self, fields=[KeyValue(f.key, f.value) for f in self.fields])
        return replace(copied, **changes) if changes else copied


# =============================================================================
# Encounter records
# =============================================================================

@dataclass
class EncounterSlot:
    """One weighted Pokemon choice inside an encounter type block."""
    chance: str = ""
    pokemon: str = ""
    form_number: str = ""
    level_min: str = ""
    level_max: str = ""


@dataclass
class EncounterType:
    """Encounter method (``Land``, ``Water``...) with optional probability."""
    type: str = ""
    probability: str = ""
    slots: List[EncounterSlot] = field(default_factory=list)


@dataclass
class EncounterEntry:
    """All encounter tables of one map version."""
    id: str
    version: int = 0
    name: str = ""
    order: int = 0
    encounter_types: List[EncounterType] = field(default_factory=list)
    source_file: Optional[str] = None

    @property
    def identity(self) -> tuple[str, int]:
        return (self.id, self.version)

    def copy(self, **changes: object) -> "EncounterEntry":
        copied = replace(
            self,
            encounter_types=[
                EncounterType(
                    type=enc.type,
                    probability=enc.probability,
                    slots=[replace(slot) for slot in enc.slots],
                )
                for enc in self.encounter_types
            ],
        )
        return replace(copied, **changes) if changes else copied


# =============================================================================
# Trainer records
# =============================================================================

@dataclass
class TrainerPokemon:
    """A roster slot with its per-Pokemon property block."""
    pokemon_id: str = ""
    level: str = ""
    name: str = ""
    gender: str = ""
    shiny: str = ""
    super_shiny: str = ""
    shadow: str = ""
    moves: List[str] = field(default_factory=list)
    ability: str = ""
    ability_index: str = ""
    item: str = ""
    nature: str = ""
    ivs: List[str] = field(default_factory=lambda: [""] * STAT_COUNT)
    evs: List[str] = field(default_factory=lambda: [""] * STAT_COUNT)
    happiness: str = ""
    ball: str = ""

    def __post_init__(self) -> None:
        self.moves = [str(move) for move in self.moves[:MOVE_SLOTS]]
        self.ivs = normalize_stat_list(self.ivs)
        self.evs = normalize_stat_list(self.evs)


@dataclass
class TrainerEntry:
    """One battle of one trainer (``[TYPE,Name,version]``)."""
    id: str
    name: str = ""
    version: int = 0
    order: int = 0
    flags: List[str] = field(default_factory=list)
    items: List[str] = field(default_factory=list)
    lose_text: str = ""
    pokemon: List[TrainerPokemon] = field(default_factory=list)
    source_file: Optional[str] = None

    @property
    def identity(self) -> tuple[str, str, int]:
        return (self.id, self.name, self.version)

    def copy(self, **changes: object) -> "TrainerEntry":
        copied = replace(
            self,
            flags=list(self.flags),
            items=list(self.items),
            pokemon=[
                replace(mon, moves=list(mon.moves), ivs=list(mon.ivs), evs=list(mon.evs))
                for mon in self.pokemon
            ],
        )
        return replace(copied, **changes) if changes else copied


# =============================================================================
# Collections
# =============================================================================

Entry: TypeAlias = Union[PBSEntry, EncounterEntry, TrainerEntry]
"""Any record kind handled by the engine."""

SpeciesLookup: TypeAlias = Callable[[str], Optional[PBSEntry]]
"""Read-only lookup of a base species record by its ID."""


@dataclass
class MultiFile:
    """A logical collection merged from one or more same-prefix files."""
    entries: List[Entry] = field(default_factory=list)
    files: List[str] = field(default_factory=list)


@dataclass
class ProjectStatus:
    """Summary of which supported PBS files a project provides."""
    root: str
    has_pbs: bool
    supported_files: List[str]
    missing_files: List[str]


def species_index(entries: Sequence[PBSEntry]) -> SpeciesLookup:
    """Build a lookup over a species collection; the first record per ID wins."""
    index: Dict[str, PBSEntry] = {}
    for entry in entries:
        index.setdefault(entry.id, entry)
    return index.get
