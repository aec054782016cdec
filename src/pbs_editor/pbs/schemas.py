"""
Registry of the PBS files the engine understands.

Each schema ties a file name to its parser, its exporter and the identity
key that must be unique within one exported collection.
"""

from dataclasses import dataclass
from typing import Dict, Hashable, List, Optional, Sequence, Tuple

from .errors import UnknownSchemaError
from .inheritance import FormInheritanceResolver
from .models import Entry
from .parsers import parse_encounters_file, parse_entries_file, parse_trainers_file
from .serializers import (
    FORM_KEY_ORDER,
    MOVE_KEY_ORDER,
    POKEMON_KEY_ORDER,
    export_encounters_file,
    export_forms_file,
    export_moves_file,
    export_pokemon_file,
    export_sections,
    export_trainers_file,
)

# Record layouts
GENERIC = "generic"
ENCOUNTERS = "encounters"
TRAINERS = "trainers"
FORMS = "forms"


@dataclass(frozen=True)
class SchemaSpec:
    """Description of one supported PBS file."""
    name: str
    kind: str = GENERIC
    key_order: Tuple[str, ...] = ()
    exclude_prefixes: Tuple[str, ...] = ()

    @property
    def filename(self) -> str:
        """Primary file name, also the default provenance tag."""
        return f"{self.name}.txt"

    @property
    def prefix(self) -> str:
        return self.name

    def parse(self, text: str) -> List[Entry]:
        if self.kind == ENCOUNTERS:
            return list(parse_encounters_file(text))
        if self.kind == TRAINERS:
            return list(parse_trainers_file(text))
        return list(parse_entries_file(text))

    def identity(self, entry: Entry) -> Hashable:
        if self.kind in (ENCOUNTERS, TRAINERS):
            return entry.identity  # type: ignore[union-attr]
        return entry.id

    def export(
        self,
        entries: Sequence[Entry],
        resolver: Optional[FormInheritanceResolver] = None,
    ) -> str:
        """Serialize ``entries`` with this schema's exporter.

        Forms need a resolver built over the species collection.
        """
        if self.kind == ENCOUNTERS:
            return export_encounters_file(entries)  # type: ignore[arg-type]
        if self.kind == TRAINERS:
            return export_trainers_file(entries)  # type: ignore[arg-type]
        if self.kind == FORMS:
            if resolver is None:
                raise ValueError("Exporting pokemon_forms requires a FormInheritanceResolver")
            return export_forms_file(entries, resolver)  # type: ignore[arg-type]
        if self.name == "moves":
            return export_moves_file(entries)  # type: ignore[arg-type]
        if self.name == "pokemon":
            return export_pokemon_file(entries)  # type: ignore[arg-type]
        return export_sections(entries, self.key_order, kind=self.name)  # type: ignore[arg-type]


_SCHEMAS: Tuple[SchemaSpec, ...] = (
    SchemaSpec(
        "types",
        key_order=(
            "Name",
            "IconPosition",
            "IsSpecialType",
            "IsPseudoType",
            "Weaknesses",
            "Resistances",
            "Immunities",
            "Flags",
        ),
    ),
    SchemaSpec("abilities", key_order=("Name", "Description", "Flags")),
    SchemaSpec("berry_plants", key_order=("HoursPerStage", "DryingPerHour", "Yield")),
    SchemaSpec("ribbons", key_order=("Name", "IconPosition", "Description", "Flags")),
    SchemaSpec("moves", key_order=MOVE_KEY_ORDER),
    SchemaSpec(
        "items",
        key_order=(
            "Name",
            "NamePlural",
            "PortionName",
            "PortionNamePlural",
            "Pocket",
            "Price",
            "SellPrice",
            "BPPrice",
            "FieldUse",
            "BattleUse",
            "Flags",
            "Consumable",
            "ShowQuantity",
            "Move",
            "Description",
        ),
    ),
    SchemaSpec(
        "trainer_types",
        key_order=(
            "Name",
            "Gender",
            "BaseMoney",
            "SkillLevel",
            "Flags",
            "IntroBGM",
            "BattleBGM",
            "VictoryBGM",
        ),
    ),
    SchemaSpec(
        "pokemon",
        key_order=POKEMON_KEY_ORDER,
        exclude_prefixes=("pokemon_forms", "pokemon_metrics"),
    ),
    SchemaSpec("pokemon_forms", kind=FORMS, key_order=FORM_KEY_ORDER),
    SchemaSpec("encounters", kind=ENCOUNTERS),
    SchemaSpec("trainers", kind=TRAINERS),
)

SCHEMAS: Dict[str, SchemaSpec] = {schema.name: schema for schema in _SCHEMAS}

SUPPORTED_FILES: List[str] = [schema.filename for schema in _SCHEMAS]


def get_schema(name: str) -> SchemaSpec:
    """Look up a schema by name (``moves``) or file name (``moves.txt``)."""
    key = name.strip().lower()
    if key.endswith(".txt"):
        key = key[: -len(".txt")]
    schema = SCHEMAS.get(key)
    if schema is None:
        raise UnknownSchemaError(
            f"Unsupported PBS file {name!r}; expected one of {', '.join(SCHEMAS)}"
        )
    return schema
