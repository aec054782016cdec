"""
Main service for working with a PBS project.

Provides the high-level API used by front ends: load a schema (merging its
files), resolve Pokemon forms against their species, and export a record
collection back to one file per source into the output directory.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Sequence

from .errors import EmptyExportError, ExportWriteError, ProjectError
from .inheritance import FormInheritanceResolver
from .loaders import PBSFileLoader, write_output
from .models import Entry, MultiFile, PBSEntry, ProjectStatus, species_index
from .multifile import merge_parsed, split_by_source
from .ordering import ensure_unique_identities
from .schemas import FORMS, SUPPORTED_FILES, SchemaSpec, get_schema
from .serializers import normalize_output

if TYPE_CHECKING:
    from ..settings import AppSettings

DEFAULT_PBS_DIR = "PBS"
DEFAULT_OUTPUT_DIR = "PBS_Output"


class PBSService:
    """Service for reading and writing the PBS files of one project.

    Reads from ``<root>/PBS`` and only ever writes to the output directory
    (``<root>/PBS_Output`` by default), so the source files are never
    overwritten.
    """

    def __init__(
        self,
        project_root: str | Path,
        pbs_dir: str = DEFAULT_PBS_DIR,
        output_dir: str = DEFAULT_OUTPUT_DIR,
    ):
        """Initialize the service.

        Args:
            project_root: Game project folder (contains ``PBS/``)
            pbs_dir: Input folder, relative to the project root
            output_dir: Export folder, relative to the project root

        Raises:
            ProjectError: The output folder is the input folder
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.project_root = Path(project_root)
        self.pbs_path = self.project_root / pbs_dir
        self.output_path = self.project_root / output_dir

        if self.pbs_path.resolve() == self.output_path.resolve():
            raise ProjectError(
                f"Output directory must differ from the PBS directory ({self.pbs_path})"
            )

        self.loader = PBSFileLoader(self.pbs_path)
        self.logger.info(f"Initializing PBSService with project: {self.project_root}")

    @classmethod
    def from_settings(
        cls, settings: "AppSettings", project_root: Optional[str | Path] = None
    ) -> "PBSService":
        """Build a service from the path settings.

        Raises:
            ProjectError: No project root was given or configured
        """
        root = project_root or settings.project_root
        if not root:
            raise ProjectError("No project root configured")
        return cls(root, pbs_dir=settings.pbs_dir, output_dir=settings.output_dir)

    def _require_pbs_dir(self) -> None:
        if not self.pbs_path.is_dir():
            raise ProjectError(f"PBS directory not found: {self.pbs_path}")

    # === LOAD ===

    def load(self, schema: str | SchemaSpec) -> MultiFile:
        """Load every file of a schema as one merged collection.

        Raises:
            UnknownSchemaError: Unsupported schema name
            ProjectError: The PBS directory is missing
        """
        spec = schema if isinstance(schema, SchemaSpec) else get_schema(schema)
        self._require_pbs_dir()

        merged = merge_parsed(self.loader.load_schema(spec))
        self.logger.info(
            f"Loaded {len(merged.entries)} {spec.name} records from {len(merged.files)} files"
        )
        if not merged.files:
            self.logger.warning(f"No {spec.filename} found in {self.pbs_path}")
        return merged

    def species_resolver(
        self, species: Optional[Sequence[PBSEntry]] = None
    ) -> FormInheritanceResolver:
        """Build a form resolver over ``species`` (loaded from disk if omitted)."""
        if species is None:
            species = self.load("pokemon").entries  # type: ignore[assignment]
        return FormInheritanceResolver(species_index(species))  # type: ignore[arg-type]

    def load_forms_resolved(
        self, species: Optional[Sequence[PBSEntry]] = None
    ) -> MultiFile:
        """Load ``pokemon_forms`` with every inherited field filled in."""
        forms = self.load("pokemon_forms")
        resolver = self.species_resolver(species)
        forms.entries = resolver.normalize_entries(forms.entries)  # type: ignore[arg-type]
        for entry in forms.entries:
            for warning in resolver.warnings(entry):  # type: ignore[arg-type]
                self.logger.warning(f"[{entry.id}] {warning}")
        return forms

    # === EXPORT ===

    def export(
        self,
        schema: str | SchemaSpec,
        entries: Sequence[Entry],
        species: Optional[Sequence[PBSEntry]] = None,
    ) -> List[Path]:
        """Write a collection to the output directory, one file per source.

        Records are grouped by their source file (untagged records go to the
        schema's primary file) and every group is renumbered before it is
        serialized. Writing is not transactional.

        Args:
            schema: Schema name or spec
            entries: Records to write
            species: Species collection for form exports; loaded from the
                     project when omitted

        Returns:
            Paths of the written files

        Raises:
            EmptyExportError: ``entries`` is empty
            DuplicateIdentityError: Two records share an identity key
            ExportWriteError: Writing a file failed; earlier files stay written
        """
        spec = schema if isinstance(schema, SchemaSpec) else get_schema(schema)
        if not entries:
            raise EmptyExportError(f"No {spec.name} records to export")
        ensure_unique_identities(entries, spec.identity, spec.name)  # type: ignore[arg-type]

        resolver = self.species_resolver(species) if spec.kind == FORMS else None
        groups = split_by_source(entries, spec.filename)

        rendered = [
            (source, normalize_output(spec.export(group, resolver)))
            for source, group in groups.items()
        ]

        written: List[Path] = []
        for source, text in rendered:
            path = self.output_path / Path(source).name
            try:
                write_output(path, text)
            except OSError as e:
                self.logger.error(f"Failed to write {path}: {e}")
                raise ExportWriteError(path, written, e) from e
            written.append(path)
            self.logger.debug(f"Wrote {path}")

        self.logger.info(f"Exported {len(entries)} {spec.name} records to {len(written)} files")
        return written

    # === STATUS ===

    def project_status(self) -> ProjectStatus:
        """Report which supported primary files the project provides."""
        has_pbs = self.pbs_path.is_dir()
        present = [
            filename
            for filename in SUPPORTED_FILES
            if has_pbs and (self.pbs_path / filename).is_file()
        ]
        missing = [filename for filename in SUPPORTED_FILES if filename not in present]
        return ProjectStatus(
            root=str(self.project_root),
            has_pbs=has_pbs,
            supported_files=present,
            missing_files=missing,
        )
