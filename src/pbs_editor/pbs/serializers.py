"""
Serializers turning records back into PBS text.

Every exporter sorts records by ``order``, writes the standard file header
and closes each record with a separator line. The returned text uses ``\\n``
line endings; ``normalize_output`` produces the exact bytes the game expects.
"""

import logging
from typing import Callable, Iterable, List, Optional, Sequence, TypeVar

from .errors import EmptyExportError
from .inheritance import ALLOWED_FORM_FIELDS, FormInheritanceResolver
from .lines import BOM, LINE_BREAK_RE, is_digits
from .models import (
    STAT_COUNT,
    EncounterEntry,
    EncounterSlot,
    KeyValue,
    PBSEntry,
    TrainerEntry,
    TrainerPokemon,
)
from .ordering import ensure_unique_identities

logger = logging.getLogger(__name__)

SEPARATOR = "#-------------------------------"
EXPORT_HEADER = (
    "# See the documentation on the wiki to learn how to edit this file.",
    SEPARATOR,
)

MOVE_KEY_ORDER = (
    "Name",
    "Type",
    "Category",
    "Power",
    "Accuracy",
    "TotalPP",
    "Target",
    "Priority",
    "FunctionCode",
    "Flags",
    "EffectChance",
    "Description",
)

POKEMON_KEY_ORDER = (
    "Name",
    "FormName",
    "Types",
    "BaseStats",
    "GenderRatio",
    "GrowthRate",
    "BaseExp",
    "EVs",
    "CatchRate",
    "Happiness",
    "Abilities",
    "HiddenAbilities",
    "Moves",
    "TutorMoves",
    "EggMoves",
    "EggGroups",
    "HatchSteps",
    "Incense",
    "Offspring",
    "Height",
    "Weight",
    "Color",
    "Shape",
    "Habitat",
    "Category",
    "Pokedex",
    "Generation",
    "Flags",
    "WildItemCommon",
    "WildItemUncommon",
    "WildItemRare",
    "Evolutions",
)

FORM_KEY_ORDER = ALLOWED_FORM_FIELDS

TRAINER_PROPERTY_ORDER = (
    "Name",
    "Gender",
    "Shiny",
    "SuperShiny",
    "Shadow",
    "Moves",
    "Ability",
    "AbilityIndex",
    "Item",
    "Nature",
    "IV",
    "EV",
    "Happiness",
    "Ball",
)

# Per-Pokemon values that match the game default and are left out
_FALSE_FLAGS = ("Shiny", "SuperShiny", "Shadow")
DEFAULT_HAPPINESS = "70"

INDENT = "    "

R = TypeVar("R", PBSEntry, EncounterEntry, TrainerEntry)


# =============================================================================
# Shared helpers
# =============================================================================

def _sorted_by_order(entries: Sequence[R], kind: str) -> List[R]:
    if not entries:
        raise EmptyExportError(f"No {kind} records to export")
    return sorted(entries, key=lambda entry: entry.order)


def _finish(lines: List[str]) -> str:
    return "\n".join(lines).rstrip() + "\n"


def ordered_fields(fields: Sequence[KeyValue], key_order: Sequence[str]) -> List[KeyValue]:
    """Arrange fields in canonical key order.

    Every occurrence of each canonical key is kept in its positional order,
    followed by the remaining fields in insertion order.
    """
    canonical = set(key_order)
    arranged: List[KeyValue] = []
    for key in key_order:
        arranged.extend(item for item in fields if item.key == key)
    arranged.extend(item for item in fields if item.key not in canonical)
    return arranged


def _field_lines(fields: Iterable[KeyValue]) -> List[str]:
    return [f"{item.key} = {item.value}" for item in fields if item.value.strip()]


def _export_records(
    entries: Sequence[PBSEntry],
    kind: str,
    body: Callable[[PBSEntry], List[str]],
) -> str:
    ensure_unique_identities(entries, lambda entry: entry.id, kind)
    lines = list(EXPORT_HEADER)
    for entry in _sorted_by_order(entries, kind):
        lines.append(f"[{entry.id}]")
        lines.extend(body(entry))
        lines.append(SEPARATOR)
    logger.debug(f"Serialized {len(entries)} {kind} records")
    return _finish(lines)


# =============================================================================
# Generic schemas
# =============================================================================

def export_sections(
    entries: Sequence[PBSEntry], key_order: Sequence[str] = (), kind: str = "entries"
) -> str:
    """Serialize generic records, skipping fields with blank values."""
    return _export_records(
        entries, kind, lambda entry: _field_lines(ordered_fields(entry.fields, key_order))
    )


def _move_body(entry: PBSEntry) -> List[str]:
    category = (entry.get("Category") or "").strip()
    is_status = category.lower() == "status"

    fields = list(entry.fields)
    if not any(item.key == "Target" for item in fields):
        fields.append(KeyValue("Target", ""))

    body: List[str] = []
    for item in ordered_fields(fields, MOVE_KEY_ORDER):
        value = item.value.strip()
        if item.key == "Target" and not value:
            body.append("Target = None")
            continue
        if not value:
            continue
        if is_status and item.key == "Power":
            continue
        body.append(f"{item.key} = {item.value}")
    return body


def export_moves_file(entries: Sequence[PBSEntry]) -> str:
    """Serialize ``moves.txt``.

    Status moves never carry ``Power`` and every move gets a ``Target``.
    """
    return _export_records(entries, "moves", _move_body)


def export_pokemon_file(entries: Sequence[PBSEntry]) -> str:
    return export_sections(entries, POKEMON_KEY_ORDER, kind="pokemon")


def export_forms_file(
    entries: Sequence[PBSEntry], resolver: FormInheritanceResolver
) -> str:
    """Serialize ``pokemon_forms.txt`` keeping only the form's own fields.

    The resolver decides which fields differ from the base species; an
    override to an empty value is written as ``Key =`` so it survives a
    reload instead of falling back to the species value.
    """

    def body(entry: PBSEntry) -> List[str]:
        lines: List[str] = []
        for item in ordered_fields(resolver.export_fields(entry), FORM_KEY_ORDER):
            value = item.value.strip()
            lines.append(f"{item.key} = {value}" if value else f"{item.key} =")
        return lines

    return _export_records(entries, "pokemon_forms", body)


# =============================================================================
# Encounters
# =============================================================================

def _slot_line(slot: EncounterSlot) -> Optional[str]:
    chance = slot.chance.strip()
    pokemon = slot.pokemon.strip()
    level_min = slot.level_min.strip()
    level_max = slot.level_max.strip()
    if not chance or not pokemon or not level_min:
        return None

    form_number = slot.form_number.strip()
    if form_number and is_digits(form_number) and int(form_number) > 0:
        pokemon = f"{pokemon}_{int(form_number)}"

    parts = [chance, pokemon, level_min]
    if level_max:
        parts.append(level_max)
    return INDENT + ",".join(parts)


def export_encounters_file(entries: Sequence[EncounterEntry]) -> str:
    """Serialize ``encounters.txt``.

    Slots missing a chance, species or minimum level are left out.
    """
    ensure_unique_identities(entries, lambda entry: entry.identity, "encounters")
    lines = list(EXPORT_HEADER)
    dropped = 0

    for entry in _sorted_by_order(entries, "encounters"):
        id_part = f"{entry.id},{entry.version}" if entry.version > 0 else entry.id
        name = entry.name.strip()
        lines.append(f"[{id_part}] # {name}" if name else f"[{id_part}]")

        for encounter_type in entry.encounter_types:
            type_name = encounter_type.type.strip()
            if not type_name:
                continue
            probability = encounter_type.probability.strip()
            lines.append(f"{type_name},{probability}" if probability else type_name)
            for slot in encounter_type.slots:
                line = _slot_line(slot)
                if line is None:
                    dropped += 1
                    continue
                lines.append(line)

        lines.append(SEPARATOR)

    if dropped:
        logger.debug(f"Left out {dropped} incomplete encounter slots")
    return _finish(lines)


# =============================================================================
# Trainers
# =============================================================================

def _stat_value(values: Sequence[str]) -> str:
    trimmed = [value.strip() for value in values][:STAT_COUNT]
    if not any(trimmed):
        return ""
    return ",".join(value or "0" for value in trimmed)


def _pokemon_properties(mon: TrainerPokemon) -> List[str]:
    ability_index = mon.ability_index.strip()
    if ability_index.lower() == "none":
        ability_index = ""

    props = {
        "Name": mon.name.strip(),
        "Gender": mon.gender.strip(),
        "Shiny": mon.shiny.strip(),
        "SuperShiny": mon.super_shiny.strip(),
        "Shadow": mon.shadow.strip(),
        "Moves": ",".join(move.strip() for move in mon.moves if move.strip()),
        "Ability": mon.ability.strip(),
        "AbilityIndex": ability_index,
        "Item": mon.item.strip(),
        "Nature": mon.nature.strip(),
        "IV": _stat_value(mon.ivs),
        "EV": _stat_value(mon.evs),
        "Happiness": mon.happiness.strip(),
        "Ball": mon.ball.strip(),
    }

    lines: List[str] = []
    for key in TRAINER_PROPERTY_ORDER:
        value = props[key]
        if not value:
            continue
        if key == "AbilityIndex" and props["Ability"]:
            continue
        if key in _FALSE_FLAGS and value.lower() == "no":
            continue
        if key == "Happiness" and value == DEFAULT_HAPPINESS:
            continue
        lines.append(f"{INDENT}{key} = {value}")
    return lines


def export_trainers_file(entries: Sequence[TrainerEntry]) -> str:
    """Serialize ``trainers.txt``.

    Roster slots without a species or level are skipped and per-Pokemon
    properties equal to the game default are omitted.
    """
    ensure_unique_identities(entries, lambda entry: entry.identity, "trainers")
    lines = list(EXPORT_HEADER)

    for entry in _sorted_by_order(entries, "trainers"):
        header_parts = [part for part in (entry.id, entry.name) if part]
        if entry.version > 0:
            header_parts.append(str(entry.version))
        lines.append(f"[{','.join(header_parts)}]")

        flags = [flag.strip() for flag in entry.flags if flag.strip()]
        if flags:
            lines.append(f"Flags = {','.join(flags)}")
        items = [item.strip() for item in entry.items if item.strip()]
        if items:
            lines.append(f"Items = {','.join(items)}")
        if entry.lose_text.strip():
            lines.append(f"LoseText = {entry.lose_text.strip()}")

        for mon in entry.pokemon:
            if not mon.pokemon_id.strip() or not mon.level.strip():
                continue
            lines.append(f"Pokemon = {mon.pokemon_id.strip()},{mon.level.strip()}")
            lines.extend(_pokemon_properties(mon))

        lines.append(SEPARATOR)

    return _finish(lines)


# =============================================================================
# Output bytes
# =============================================================================

def normalize_output(text: str) -> str:
    """Convert to CRLF line endings and prefix a single BOM."""
    normalized = LINE_BREAK_RE.sub("\r\n", text)
    return normalized if normalized.startswith(BOM) else BOM + normalized
