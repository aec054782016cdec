"""
Inheritance resolution for Pokemon forms.

A form record in ``pokemon_forms.txt`` only stores the fields that differ
from its base species in ``pokemon.txt``; every other inheritable field is
taken from the species. The resolver fills those gaps on load, resets them
when a form is moved to another species, and computes the minimal field set
to write on export.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from .models import KeyValue, PBSEntry, SpeciesLookup

# Fields a form may define, in export order
ALLOWED_FORM_FIELDS: Tuple[str, ...] = (
    "FormName",
    "Types",
    "BaseStats",
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
    "PokedexForm",
    "MegaStone",
    "MegaMove",
    "MegaMessage",
    "UnmegaForm",
)

# Never inherited: absent means "not applicable"
OWN_ONLY_FORM_FIELDS = frozenset(
    {"PokedexForm", "MegaStone", "MegaMove", "MegaMessage", "UnmegaForm"}
)

INHERITED_FORM_FIELDS = frozenset(
    key for key in ALLOWED_FORM_FIELDS if key not in OWN_ONLY_FORM_FIELDS
)

# Valid in pokemon.txt but meaningless on a form
FORBIDDEN_FORM_FIELDS = frozenset({"Name", "GenderRatio", "GrowthRate", "Incense"})

# Keys the game overrides or inherits as a unit
OVERRIDE_GROUPS: Tuple[Tuple[str, ...], ...] = (
    ("Abilities", "HiddenAbilities"),
    ("WildItemCommon", "WildItemUncommon", "WildItemRare"),
)

FORBIDDEN_WARNING = (
    "Undefinable properties: {keys}. These will be ignored on export "
    "and may crash Essentials if left in PBS."
)


def parse_form_id(raw: str) -> Tuple[str, str]:
    """Split ``SPECIES,N`` into (species, form number)."""
    parts = [part.strip() for part in raw.split(",")]
    pokemon_id = parts[0] if parts else ""
    form_number = parts[1] if len(parts) > 1 else ""
    return pokemon_id, form_number


def build_form_id(pokemon_id: str, form_number: str) -> str:
    return f"{pokemon_id.strip().upper()},{form_number.strip()}"


def next_form_number(pokemon_id: str, entries: Sequence[PBSEntry]) -> int:
    """Smallest unused form number above every existing form of a species."""
    if not pokemon_id:
        return 1
    used: List[int] = []
    for entry in entries:
        species, number = parse_form_id(entry.id)
        if species != pokemon_id or not number.isdigit():
            continue
        if int(number) >= 1:
            used.append(int(number))
    return max(used) + 1 if used else 1


class FormInheritanceResolver:
    """Resolves form fields against their base species.

    The species collection is a read-only dependency passed in as a lookup
    callable; the resolver never mutates species records and returns new
    form records instead of editing the ones it is given.
    """

    def __init__(self, species_lookup: SpeciesLookup):
        """Initialize the resolver.

        Args:
            species_lookup: Function returning the base species record for a
                            species ID, or None when the species is unknown
        """
        self._species_lookup = species_lookup
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    # === BASELINES ===

    def baseline(self, pokemon_id: str) -> Dict[str, str]:
        """Return the base species' fields as a mapping (later keys win).

        Unknown species give an empty baseline, so every inheritable field
        compares against the empty string.
        """
        species = self._species_lookup(pokemon_id)
        if species is None:
            self.logger.debug(f"No base species record for {pokemon_id!r}")
            return {}
        return species.field_map()

    def _baseline_for_entry(self, entry: PBSEntry) -> Dict[str, str]:
        pokemon_id, _ = parse_form_id(entry.id)
        return self.baseline(pokemon_id)

    @staticmethod
    def _baseline_value(key: str, baseline: Dict[str, str]) -> str:
        if key in INHERITED_FORM_FIELDS:
            return baseline.get(key, "")
        return ""

    # === LOAD ===

    def _build_fields(
        self, existing: Sequence[KeyValue], baseline: Dict[str, str]
    ) -> List[KeyValue]:
        current = {item.key: item.value for item in existing}
        fields: List[KeyValue] = []
        for key in ALLOWED_FORM_FIELDS:
            if key in current:
                fields.append(KeyValue(key, current[key]))
            else:
                fields.append(KeyValue(key, self._baseline_value(key, baseline)))
        fields.extend(
            KeyValue(item.key, item.value)
            for item in existing
            if item.key not in ALLOWED_FORM_FIELDS
        )
        return fields

    def normalize_entry(self, entry: PBSEntry) -> PBSEntry:
        """Return a copy holding every allowed key exactly once.

        Keys the file defined keep their value, missing inheritable keys take
        the species value and missing own-only keys become empty. Fields
        outside the allow-list (including forbidden ones) are kept after the
        allowed block so they can be reported.
        """
        baseline = self._baseline_for_entry(entry)
        return entry.copy(fields=self._build_fields(entry.fields, baseline))

    def normalize_entries(self, entries: Sequence[PBSEntry]) -> List[PBSEntry]:
        return [self.normalize_entry(entry) for entry in entries]

    # === IDENTITY CHANGE ===

    def reassign(
        self,
        entry: PBSEntry,
        pokemon_id: str,
        form_number: str,
        reset_fields: bool = False,
    ) -> PBSEntry:
        """Move a form to another species and/or form number.

        With ``reset_fields`` every inheritable key is recomputed from the
        new species and own-only keys are cleared, discarding all previous
        overrides. Without it only the ID changes.
        """
        new_id = build_form_id(pokemon_id, form_number)
        if not reset_fields:
            return entry.copy(id=new_id)

        baseline = self.baseline(pokemon_id.strip().upper())
        fields = [
            KeyValue(key, self._baseline_value(key, baseline))
            for key in ALLOWED_FORM_FIELDS
        ]
        fields.extend(
            KeyValue(item.key, item.value)
            for item in entry.fields
            if item.key not in ALLOWED_FORM_FIELDS
        )
        self.logger.debug(f"Reset form {entry.id} -> {new_id} from species baseline")
        return entry.copy(id=new_id, fields=fields)

    # === EXPORT ===

    def changed_keys(self, entry: PBSEntry) -> Dict[str, bool]:
        """Report, per allowed key, whether the form overrides it.

        A key the record does not carry at all inherits and is never an
        override. A present key is an override when its trimmed value
        differs from the trimmed baseline.
        """
        baseline = self._baseline_for_entry(entry)
        current = entry.field_map()
        changes: Dict[str, bool] = {}
        for key in ALLOWED_FORM_FIELDS:
            if key not in current:
                changes[key] = False
                continue
            reference = self._baseline_value(key, baseline).strip()
            changes[key] = current[key].strip() != reference
        return changes

    def export_fields(self, entry: PBSEntry) -> List[KeyValue]:
        """Return the fields a form must write, in allow-list order.

        Overridden inheritable keys are written even when their new value is
        empty; grouped keys are written together when any member changed;
        own-only keys are written when non-empty; forbidden keys never are.
        """
        changes = self.changed_keys(entry)
        current = entry.field_map()
        group_changed: Dict[str, bool] = {}
        for group in OVERRIDE_GROUPS:
            changed = any(changes[key] for key in group)
            for key in group:
                group_changed[key] = changed

        fields: List[KeyValue] = []
        for key in ALLOWED_FORM_FIELDS:
            value = current.get(key, "").strip()
            if key in OWN_ONLY_FORM_FIELDS:
                if value:
                    fields.append(KeyValue(key, value))
                continue
            if key in group_changed:
                if group_changed[key] and (value or changes[key]):
                    fields.append(KeyValue(key, value))
                continue
            if changes[key]:
                fields.append(KeyValue(key, value))

        for item in entry.fields:
            if item.key in ALLOWED_FORM_FIELDS or item.key in FORBIDDEN_FORM_FIELDS:
                continue
            if not item.value.strip():
                continue
            fields.append(KeyValue(item.key, item.value))
        return fields

    def export_entry(self, entry: PBSEntry) -> PBSEntry:
        return entry.copy(fields=self.export_fields(entry))

    def export_entries(self, entries: Sequence[PBSEntry]) -> List[PBSEntry]:
        return [self.export_entry(entry) for entry in entries]

    # === FORBIDDEN FIELDS ===

    @staticmethod
    def forbidden_keys(entry: PBSEntry) -> List[str]:
        return [item.key for item in entry.fields if item.key in FORBIDDEN_FORM_FIELDS]

    def warnings(self, entry: PBSEntry) -> List[str]:
        forbidden = self.forbidden_keys(entry)
        if not forbidden:
            return []
        return [FORBIDDEN_WARNING.format(keys=", ".join(forbidden))]

    @staticmethod
    def strip_forbidden(entry: PBSEntry) -> PBSEntry:
        return entry.copy(
            fields=[item for item in entry.fields if item.key not in FORBIDDEN_FORM_FIELDS]
        )

    def species_of(self, entry: PBSEntry) -> Optional[PBSEntry]:
        pokemon_id, _ = parse_form_id(entry.id)
        return self._species_lookup(pokemon_id)
