"""
Module for working with Pokemon Essentials PBS files.

Provides parsers, exporters, multi-file merging, form inheritance
resolution and a service tying them to a project folder.
"""

from .service import PBSService
from .models import (
    KeyValue,
    PBSEntry,
    EncounterSlot,
    EncounterType,
    EncounterEntry,
    TrainerPokemon,
    TrainerEntry,
    Entry,
    MultiFile,
    ProjectStatus,
    SpeciesLookup,
    STAT_EXPORT_INDEX,
    species_index,
)
from .errors import (
    PBSError,
    EmptyExportError,
    DuplicateIdentityError,
    UnknownSchemaError,
    PayloadError,
    ProjectError,
    ExportWriteError,
)
from .parsers import parse_entries_file, parse_encounters_file, parse_trainers_file
from .serializers import (
    export_sections,
    export_moves_file,
    export_pokemon_file,
    export_forms_file,
    export_encounters_file,
    export_trainers_file,
    normalize_output,
)
from .inheritance import FormInheritanceResolver
from .schemas import SchemaSpec, get_schema, SCHEMAS, SUPPORTED_FILES
from .loaders import PBSFileLoader, list_pbs_files
from .multifile import merge_parsed, split_by_source

# Public exports
__all__ = [
    # Main service
    "PBSService",
    # Records
    "KeyValue",
    "PBSEntry",
    "EncounterSlot",
    "EncounterType",
    "EncounterEntry",
    "TrainerPokemon",
    "TrainerEntry",
    "Entry",
    "MultiFile",
    "ProjectStatus",
    "SpeciesLookup",
    "STAT_EXPORT_INDEX",
    "species_index",
    # Errors
    "PBSError",
    "EmptyExportError",
    "DuplicateIdentityError",
    "UnknownSchemaError",
    "PayloadError",
    "ProjectError",
    "ExportWriteError",
    # Parsing and export
    "parse_entries_file",
    "parse_encounters_file",
    "parse_trainers_file",
    "export_sections",
    "export_moves_file",
    "export_pokemon_file",
    "export_forms_file",
    "export_encounters_file",
    "export_trainers_file",
    "normalize_output",
    # Component classes (for advanced usage)
    "FormInheritanceResolver",
    "SchemaSpec",
    "get_schema",
    "SCHEMAS",
    "SUPPORTED_FILES",
    "PBSFileLoader",
    "list_pbs_files",
    "merge_parsed",
    "split_by_source",
]
