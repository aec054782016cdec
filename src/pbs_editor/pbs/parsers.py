"""
Parsers turning PBS text into records.

The generic parser knows nothing about any schema: it collects bracketed
sections and their ``Key = Value`` lines. Encounter and trainer files use
their own grammars built on the same line primitives. All parsers are
forgiving: anything they cannot place is dropped without raising.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .lines import (
    is_digits,
    iter_content_lines,
    match_section,
    split_csv,
    split_key_value,
    split_list,
)
from .models import (
    MOVE_SLOTS,
    EncounterEntry,
    EncounterSlot,
    EncounterType,
    KeyValue,
    PBSEntry,
    TrainerEntry,
    TrainerPokemon,
    normalize_stat_list,
)

logger = logging.getLogger(__name__)

ENCOUNTER_HEADER_RE = re.compile(r"^\[(.+?)\](.*)$")
FORM_SUFFIX_RE = re.compile(r"^(.*)_([0-9]+)$")


# =============================================================================
# Generic sections
# =============================================================================

@dataclass
class ParsedSection:
    """A raw section before it becomes a record."""
    id: str
    fields: List[KeyValue] = field(default_factory=list)


def parse_sections(text: str) -> List[ParsedSection]:
    """Collect ``[id]`` sections and their key/value lines.

    Lines before the first header and lines without ``=`` are dropped.
    """
    sections: List[ParsedSection] = []
    current: Optional[ParsedSection] = None
    dropped = 0

    for line in iter_content_lines(text):
        section_id = match_section(line)
        if section_id is not None:
            current = ParsedSection(id=section_id)
            sections.append(current)
            continue

        key, value = split_key_value(line)
        if current is None or key is None or value is None:
            dropped += 1
            continue
        current.fields.append(KeyValue(key, value))

    if dropped:
        logger.debug(f"Dropped {dropped} unplaceable lines while parsing sections")
    return sections


def parse_entries_file(text: str) -> List[PBSEntry]:
    """Parse a generic PBS file into records ordered by position."""
    return [
        PBSEntry(id=section.id, fields=section.fields, order=index)
        for index, section in enumerate(parse_sections(text))
    ]


# =============================================================================
# Encounters
# =============================================================================

def split_pokemon_form(token: str) -> Tuple[str, str]:
    """Split ``SPECIES_3`` into ("SPECIES", "3"); no suffix gives ("SPECIES", "")."""
    trimmed = token.strip()
    m = FORM_SUFFIX_RE.match(trimmed)
    if not m:
        return trimmed, ""
    return m.group(1), m.group(2)


def _parse_encounter_header(line: str) -> Optional[Tuple[str, int, str]]:
    m = ENCOUNTER_HEADER_RE.match(line)
    if not m:
        return None
    id_parts = split_csv(m.group(1))
    map_id = id_parts[0]
    version_raw = id_parts[1] if len(id_parts) > 1 else ""
    version = int(version_raw) if version_raw and is_digits(version_raw) else 0

    rest = m.group(2) or ""
    name = ""
    comment_index = rest.find("#")
    if comment_index != -1:
        name = rest[comment_index + 1:].strip()
    return map_id, version, name


def parse_encounters_file(text: str) -> List[EncounterEntry]:
    """Parse ``encounters.txt``.

    A line whose first comma token is all digits is a slot of the latest
    encounter type; any other line opens a new encounter type. Slots seen
    before any encounter type are dropped.
    """
    entries: List[EncounterEntry] = []
    current: Optional[EncounterEntry] = None
    current_type: Optional[EncounterType] = None

    for line in iter_content_lines(text):
        header = _parse_encounter_header(line)
        if header:
            map_id, version, name = header
            current = EncounterEntry(
                id=map_id, version=version, name=name, order=len(entries)
            )
            entries.append(current)
            current_type = None
            continue

        if current is None:
            continue

        parts = split_csv(line)
        if not is_digits(parts[0]):
            current_type = EncounterType(
                type=parts[0], probability=parts[1] if len(parts) > 1 else ""
            )
            current.encounter_types.append(current_type)
            continue

        if current_type is None:
            logger.debug(f"Dropped encounter slot outside a type block in map {current.id}")
            continue

        padded = parts + [""] * (4 - len(parts))
        chance, pokemon_raw, level_min, level_max = padded[:4]
        pokemon, form_number = split_pokemon_form(pokemon_raw)
        current_type.slots.append(
            EncounterSlot(
                chance=chance,
                pokemon=pokemon,
                form_number=form_number,
                level_min=level_min,
                level_max=level_max,
            )
        )

    return entries


# =============================================================================
# Trainers
# =============================================================================

def _apply_pokemon_property(mon: TrainerPokemon, key: str, value: str) -> bool:
    """Store one property line on ``mon``; False for an unknown key."""
    if key == "Moves":
        mon.moves = split_list(value)[:MOVE_SLOTS]
    elif key == "IV":
        mon.ivs = normalize_stat_list(split_csv(value))
    elif key == "EV":
        mon.evs = normalize_stat_list(split_csv(value))
    elif key in TRAINER_POKEMON_ATTRS:
        setattr(mon, TRAINER_POKEMON_ATTRS[key], value)
    else:
        return False
    return True


TRAINER_POKEMON_ATTRS = {
    "Name": "name",
    "Gender": "gender",
    "Shiny": "shiny",
    "SuperShiny": "super_shiny",
    "Shadow": "shadow",
    "Ability": "ability",
    "AbilityIndex": "ability_index",
    "Item": "item",
    "Nature": "nature",
    "Happiness": "happiness",
    "Ball": "ball",
}


def parse_trainers_file(text: str) -> List[TrainerEntry]:
    """Parse ``trainers.txt``.

    ``Pokemon = SPECIES,level`` switches context: every following key belongs
    to that Pokemon until the next ``Pokemon`` line or trainer header.
    Unrecognised keys are ignored.
    """
    entries: List[TrainerEntry] = []
    current: Optional[TrainerEntry] = None
    current_pokemon: Optional[TrainerPokemon] = None
    ignored = 0

    for line in iter_content_lines(text):
        header = match_section(line)
        if header is not None:
            parts = split_csv(header) + ["", ""]
            trainer_id, name, version_raw = parts[0], parts[1], parts[2]
            current = TrainerEntry(
                id=trainer_id,
                name=name,
                version=int(version_raw) if version_raw and is_digits(version_raw) else 0,
                order=len(entries),
            )
            entries.append(current)
            current_pokemon = None
            continue

        if current is None:
            continue
        key, value = split_key_value(line)
        if key is None or value is None:
            continue

        if key == "Pokemon":
            parts = split_csv(value) + [""]
            current_pokemon = TrainerPokemon(pokemon_id=parts[0], level=parts[1])
            current.pokemon.append(current_pokemon)
            continue

        if current_pokemon is None:
            if key == "Flags":
                current.flags = split_list(value)
            elif key == "Items":
                current.items = split_list(value)
            elif key == "LoseText":
                current.lose_text = value
            else:
                ignored += 1
            continue

        if not _apply_pokemon_property(current_pokemon, key, value):
            ignored += 1

    if ignored:
        logger.debug(f"Ignored {ignored} unrecognised trainer property lines")
    return entries
