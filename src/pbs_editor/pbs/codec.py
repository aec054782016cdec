"""
JSON encoding of record collections.

The wire shape uses camelCase keys (``sourceFile``, ``encounterTypes``,
``levelMin``...) so payloads stay interchangeable with the editor front end.
Encoding and decoding use orjson.
"""

from typing import Any, Dict, List, Optional

import orjson

from .errors import PayloadError
from .models import (
    EncounterEntry,
    EncounterSlot,
    EncounterType,
    Entry,
    KeyValue,
    MultiFile,
    PBSEntry,
    TrainerEntry,
    TrainerPokemon,
)
from .schemas import ENCOUNTERS, TRAINERS, SchemaSpec

JsonDict = Dict[str, Any]

# snake_case attribute -> wire key for trainer Pokemon
_POKEMON_WIRE_KEYS = {
    "pokemon_id": "pokemonId",
    "level": "level",
    "name": "name",
    "gender": "gender",
    "shiny": "shiny",
    "super_shiny": "superShiny",
    "shadow": "shadow",
    "ability": "ability",
    "ability_index": "abilityIndex",
    "item": "item",
    "nature": "nature",
    "happiness": "happiness",
    "ball": "ball",
}


# =============================================================================
# Encoding
# =============================================================================

def _source_dict(entry: Entry) -> JsonDict:
    return {"sourceFile": entry.source_file} if entry.source_file else {}


def entry_to_dict(entry: Entry) -> JsonDict:
    """Convert one record to its JSON-ready form."""
    if isinstance(entry, EncounterEntry):
        return {
            "id": entry.id,
            "version": entry.version,
            "name": entry.name,
            "order": entry.order,
            "encounterTypes": [
                {
                    "type": enc.type,
                    "probability": enc.probability,
                    "slots": [
                        {
                            "chance": slot.chance,
                            "pokemon": slot.pokemon,
                            "formNumber": slot.form_number,
                            "levelMin": slot.level_min,
                            "levelMax": slot.level_max,
                        }
                        for slot in enc.slots
                    ],
                }
                for enc in entry.encounter_types
            ],
            **_source_dict(entry),
        }
    if isinstance(entry, TrainerEntry):
        pokemon = []
        for mon in entry.pokemon:
            data = {wire: getattr(mon, attr) for attr, wire in _POKEMON_WIRE_KEYS.items()}
            data["moves"] = list(mon.moves)
            data["ivs"] = list(mon.ivs)
            data["evs"] = list(mon.evs)
            pokemon.append(data)
        return {
            "id": entry.id,
            "name": entry.name,
            "version": entry.version,
            "order": entry.order,
            "flags": list(entry.flags),
            "items": list(entry.items),
            "loseText": entry.lose_text,
            "pokemon": pokemon,
            **_source_dict(entry),
        }
    return {
        "id": entry.id,
        "fields": [{"key": item.key, "value": item.value} for item in entry.fields],
        "order": entry.order,
        **_source_dict(entry),
    }


def dumps_multifile(schema: SchemaSpec, multifile: MultiFile) -> bytes:
    """Encode a loaded collection as ``{"entries": [...], "files": [...]}``."""
    payload = {
        "schema": schema.name,
        "entries": [entry_to_dict(entry) for entry in multifile.entries],
        "files": list(multifile.files),
    }
    return orjson.dumps(payload, option=orjson.OPT_INDENT_2)


# =============================================================================
# Decoding
# =============================================================================

def _require(data: JsonDict, key: str, kind: type, where: str) -> Any:
    value = data.get(key)
    if not isinstance(value, kind) or (isinstance(value, bool) and kind is not bool):
        raise PayloadError(f"{where}: '{key}' must be {kind.__name__}")
    return value


def _text(data: JsonDict, key: str, where: str) -> str:
    value = data.get(key, "")
    if value is None:
        return ""
    if not isinstance(value, str):
        raise PayloadError(f"{where}: '{key}' must be a string")
    return value


def _text_list(data: JsonDict, key: str, where: str) -> List[str]:
    value = data.get(key, [])
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise PayloadError(f"{where}: '{key}' must be a list of strings")
    return list(value)


def _object_list(data: JsonDict, key: str, where: str) -> List[Any]:
    value = data.get(key, [])
    if not isinstance(value, list):
        raise PayloadError(f"{where}: '{key}' must be list")
    return value


def _non_negative(data: JsonDict, key: str, where: str, default: Optional[int] = None) -> int:
    if key not in data and default is not None:
        return default
    value = _require(data, key, int, where)
    if value < 0:
        raise PayloadError(f"{where}: '{key}' must not be negative")
    return value


def _common(data: Any, index: int) -> tuple[str, str, int, Optional[str]]:
    where = f"entries[{index}]"
    if not isinstance(data, dict):
        raise PayloadError(f"{where}: expected an object")
    entry_id = _require(data, "id", str, where).strip()
    if not entry_id:
        raise PayloadError(f"{where}: 'id' must not be blank")
    order = _non_negative(data, "order", where)
    source = _text(data, "sourceFile", where) or None
    return where, entry_id, order, source


def _generic_from_dict(data: JsonDict, index: int) -> PBSEntry:
    where, entry_id, order, source = _common(data, index)
    raw_fields = _require(data, "fields", list, where)
    fields: List[KeyValue] = []
    for position, item in enumerate(raw_fields):
        item_where = f"{where}.fields[{position}]"
        if not isinstance(item, dict):
            raise PayloadError(f"{item_where}: expected an object")
        fields.append(
            KeyValue(_require(item, "key", str, item_where), _text(item, "value", item_where))
        )
    return PBSEntry(id=entry_id, fields=fields, order=order, source_file=source)


def _encounter_from_dict(data: JsonDict, index: int) -> EncounterEntry:
    where, entry_id, order, source = _common(data, index)
    encounter_types: List[EncounterType] = []
    for position, raw_type in enumerate(_require(data, "encounterTypes", list, where)):
        type_where = f"{where}.encounterTypes[{position}]"
        if not isinstance(raw_type, dict):
            raise PayloadError(f"{type_where}: expected an object")
        slots: List[EncounterSlot] = []
        for slot_index, raw_slot in enumerate(_object_list(raw_type, "slots", type_where)):
            slot_where = f"{type_where}.slots[{slot_index}]"
            if not isinstance(raw_slot, dict):
                raise PayloadError(f"{slot_where}: expected an object")
            slots.append(
                EncounterSlot(
                    chance=_text(raw_slot, "chance", slot_where),
                    pokemon=_text(raw_slot, "pokemon", slot_where),
                    form_number=_text(raw_slot, "formNumber", slot_where),
                    level_min=_text(raw_slot, "levelMin", slot_where),
                    level_max=_text(raw_slot, "levelMax", slot_where),
                )
            )
        encounter_types.append(
            EncounterType(
                type=_text(raw_type, "type", type_where),
                probability=_text(raw_type, "probability", type_where),
                slots=slots,
            )
        )
    return EncounterEntry(
        id=entry_id,
        version=_non_negative(data, "version", where, default=0),
        name=_text(data, "name", where),
        order=order,
        encounter_types=encounter_types,
        source_file=source,
    )


def _trainer_from_dict(data: JsonDict, index: int) -> TrainerEntry:
    where, entry_id, order, source = _common(data, index)
    pokemon: List[TrainerPokemon] = []
    for position, raw_mon in enumerate(_object_list(data, "pokemon", where)):
        mon_where = f"{where}.pokemon[{position}]"
        if not isinstance(raw_mon, dict):
            raise PayloadError(f"{mon_where}: expected an object")
        values = {
            attr: _text(raw_mon, wire, mon_where)
            for attr, wire in _POKEMON_WIRE_KEYS.items()
        }
        pokemon.append(
            TrainerPokemon(
                moves=_text_list(raw_mon, "moves", mon_where),
                ivs=_text_list(raw_mon, "ivs", mon_where),
                evs=_text_list(raw_mon, "evs", mon_where),
                **values,
            )
        )
    return TrainerEntry(
        id=entry_id,
        name=_text(data, "name", where),
        version=_non_negative(data, "version", where, default=0),
        order=order,
        flags=_text_list(data, "flags", where),
        items=_text_list(data, "items", where),
        lose_text=_text(data, "loseText", where),
        pokemon=pokemon,
        source_file=source,
    )


def loads_entries(schema: SchemaSpec, data: bytes | str) -> List[Entry]:
    """Decode a payload of records for ``schema``.

    Raises:
        PayloadError: The payload is not valid JSON or does not match the
                      record shape of the schema
    """
    try:
        payload = orjson.loads(data)
    except orjson.JSONDecodeError as e:
        raise PayloadError(f"Invalid JSON payload: {e}") from e

    if not isinstance(payload, dict) or not isinstance(payload.get("entries"), list):
        raise PayloadError("Payload must be an object with an 'entries' list")
    raw_entries = payload["entries"]
    if not raw_entries:
        raise PayloadError("Payload 'entries' must not be empty")

    if schema.kind == ENCOUNTERS:
        decode = _encounter_from_dict
    elif schema.kind == TRAINERS:
        decode = _trainer_from_dict
    else:
        decode = _generic_from_dict
    return [decode(raw, index) for index, raw in enumerate(raw_entries)]
