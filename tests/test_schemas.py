"""Tests for the schema registry."""

import pytest


class TestSchemaRegistry:
    """Test schema lookup and dispatch."""

    def test_supported_files(self) -> None:
        from pbs_editor.pbs.schemas import SUPPORTED_FILES

        assert SUPPORTED_FILES == [
            "types.txt",
            "abilities.txt",
            "berry_plants.txt",
            "ribbons.txt",
            "moves.txt",
            "items.txt",
            "trainer_types.txt",
            "pokemon.txt",
            "pokemon_forms.txt",
            "encounters.txt",
            "trainers.txt",
        ]

    def test_lookup_by_name_or_filename(self) -> None:
        from pbs_editor.pbs.schemas import get_schema

        assert get_schema("moves") is get_schema("moves.txt")
        assert get_schema("Moves.TXT").name == "moves"

    def test_unknown_schema(self) -> None:
        from pbs_editor.pbs.errors import UnknownSchemaError
        from pbs_editor.pbs.schemas import get_schema

        with pytest.raises(UnknownSchemaError):
            get_schema("pokemon_metrics")

    def test_identity_per_kind(self) -> None:
        from pbs_editor.pbs.models import EncounterEntry, PBSEntry, TrainerEntry
        from pbs_editor.pbs.schemas import get_schema

        assert get_schema("items").identity(PBSEntry(id="POTION")) == "POTION"
        assert get_schema("encounters").identity(EncounterEntry(id="003", version=1)) == ("003", 1)
        assert get_schema("trainers").identity(TrainerEntry(id="LASS", name="Ann")) == (
            "LASS",
            "Ann",
            0,
        )

    def test_parse_dispatch(self) -> None:
        from pbs_editor.pbs.models import EncounterEntry, TrainerEntry
        from pbs_editor.pbs.schemas import get_schema

        assert isinstance(get_schema("encounters").parse("[001]\nLand\n")[0], EncounterEntry)
        assert isinstance(get_schema("trainers").parse("[A,B]\n")[0], TrainerEntry)

    def test_forms_export_requires_resolver(self) -> None:
        from pbs_editor.pbs.models import PBSEntry
        from pbs_editor.pbs.schemas import get_schema

        with pytest.raises(ValueError):
            get_schema("pokemon_forms").export([PBSEntry(id="PIKACHU,1")])

    def test_berry_plants_order(self) -> None:
        from pbs_editor.pbs.parsers import parse_entries_file
        from pbs_editor.pbs.schemas import get_schema

        entries = parse_entries_file("[ORANBERRY]\nYield = 2,5\nHoursPerStage = 3\nDryingPerHour = 15\n")
        lines = get_schema("berry_plants").export(entries).splitlines()
        assert lines[3:6] == ["HoursPerStage = 3", "DryingPerHour = 15", "Yield = 2,5"]
