"""
Main entry point for pbs_editor.
Usage: python -m pbs_editor [--project DIR] {status,load,export} ...
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import orjson

from . import __version__
from .pbs import PBSError, PBSService, get_schema
from .pbs.codec import dumps_multifile, loads_entries
from .pbs.loaders import discover_project_root
from .settings import AppSettings, ConfigError
from .utils.logging_config import setup_logging

logger = logging.getLogger(f"{__name__}.main")


def _service(args: argparse.Namespace, settings: AppSettings) -> PBSService:
    # --project may point at the PBS folder itself or somewhere inside the game
    project = discover_project_root(Path(args.project)) if args.project else None
    service = PBSService.from_settings(settings, project_root=project)
    settings.add_recent_project(service.project_root.resolve())
    return service


def cmd_status(args: argparse.Namespace, settings: AppSettings) -> int:
    """Print which supported PBS files the project has."""
    status = _service(args, settings).project_status()
    payload = {
        "root": status.root,
        "hasPbs": status.has_pbs,
        "supportedFiles": status.supported_files,
        "missingFiles": status.missing_files,
    }
    sys.stdout.write(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode("utf-8") + "\n")
    return 0


def cmd_load(args: argparse.Namespace, settings: AppSettings) -> int:
    """Load a schema and print or save it as JSON."""
    schema = get_schema(args.schema)
    service = _service(args, settings)
    if args.resolve_forms and schema.name == "pokemon_forms":
        multifile = service.load_forms_resolved()
    else:
        multifile = service.load(schema)

    data = dumps_multifile(schema, multifile)
    if args.output:
        Path(args.output).write_bytes(data)
        logger.info(f"Wrote {len(multifile.entries)} records to {args.output}")
    else:
        sys.stdout.write(data.decode("utf-8") + "\n")
    return 0


def cmd_export(args: argparse.Namespace, settings: AppSettings) -> int:
    """Write a JSON payload back to PBS files in the output directory."""
    schema = get_schema(args.schema)
    entries = loads_entries(schema, Path(args.payload).read_bytes())

    species = None
    if args.species:
        species = loads_entries(get_schema("pokemon"), Path(args.species).read_bytes())

    paths = _service(args, settings).export(schema, entries, species=species)  # type: ignore[arg-type]
    for path in paths:
        print(path)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pbs_editor",
        description="Read and write Pokemon Essentials PBS files as JSON.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--project", help="Game project folder (contains PBS/)")
    parser.add_argument("--settings", help="Use this INI file instead of the native settings store")
    parser.add_argument("--profile", default="default", help="Settings profile name")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    status_p = subparsers.add_parser("status", help="Show which PBS files are present")
    status_p.set_defaults(func=cmd_status)

    load_p = subparsers.add_parser("load", help="Load a schema as JSON")
    load_p.add_argument("schema", help="Schema name, e.g. moves or moves.txt")
    load_p.add_argument("-o", "--output", help="Write JSON here instead of stdout")
    load_p.add_argument(
        "--resolve-forms",
        action="store_true",
        help="Fill inherited pokemon_forms fields from their species",
    )
    load_p.set_defaults(func=cmd_load)

    export_p = subparsers.add_parser("export", help="Write a JSON payload to PBS_Output")
    export_p.add_argument("schema", help="Schema name, e.g. moves or moves.txt")
    export_p.add_argument("payload", help="JSON file with an 'entries' list")
    export_p.add_argument(
        "--species", help="JSON payload of pokemon records used as form baselines"
    )
    export_p.set_defaults(func=cmd_export)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    try:
        settings = AppSettings(profile=args.profile, ini_file=args.settings)
    except ConfigError as e:
        # Logging is configured from settings, so report directly
        sys.stderr.write(f"Configuration error: {e}\n")
        return 1
    setup_logging(settings, console_level="DEBUG" if args.verbose else None)

    validation = settings.validate()
    for warning in validation.warnings:
        logger.debug(f"Configuration warning: {warning}")
    if not validation.is_valid and not args.project:
        for error in validation.errors:
            logger.error(f"  {error}")
        return 1

    try:
        return args.func(args, settings)
    except PBSError as e:
        logger.error(str(e))
        return 1
    except OSError as e:
        logger.error(f"File error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
