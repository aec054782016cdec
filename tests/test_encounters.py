"""Tests for encounters.txt parsing and export."""

ENCOUNTERS = (
    "# See the documentation on the wiki to learn how to edit this file.\n"
    "#-------------------------------\n"
    "[003] # Route 1\n"
    "Land,21\n"
    "    40,PIDGEY,2,4\n"
    "    30,RATTATA,3\n"
    "    30,RATTATA_1,3,5\n"
    "#-------------------------------\n"
    "[003,1] # Route 1 (night)\n"
    "Land\n"
    "    100,HOOTHOOT,3,5\n"
    "#-------------------------------\n"
)


class TestParseEncounters:
    """Test the encounter table grammar."""

    def test_headers(self) -> None:
        from pbs_editor.pbs.parsers import parse_encounters_file

        entries = parse_encounters_file(ENCOUNTERS)
        assert [(e.id, e.version, e.name, e.order) for e in entries] == [
            ("003", 0, "Route 1", 0),
            ("003", 1, "Route 1 (night)", 1),
        ]

    def test_types_and_slots(self) -> None:
        from pbs_editor.pbs.parsers import parse_encounters_file

        land = parse_encounters_file(ENCOUNTERS)[0].encounter_types[0]
        assert (land.type, land.probability) == ("Land", "21")
        assert len(land.slots) == 3

        rattata = land.slots[1]
        assert (rattata.chance, rattata.pokemon, rattata.level_min, rattata.level_max) == (
            "30",
            "RATTATA",
            "3",
            "",
        )
        assert rattata.form_number == ""

    def test_form_suffix_is_split(self) -> None:
        from pbs_editor.pbs.parsers import parse_encounters_file

        slot = parse_encounters_file(ENCOUNTERS)[0].encounter_types[0].slots[2]
        assert (slot.pokemon, slot.form_number) == ("RATTATA", "1")

    def test_non_numeric_version_is_zero(self) -> None:
        from pbs_editor.pbs.parsers import parse_encounters_file

        entry = parse_encounters_file("[010,night]\nCave\n    100,ZUBAT,5\n")[0]
        assert (entry.id, entry.version, entry.name) == ("010", 0, "")

    def test_slot_before_type_is_dropped(self) -> None:
        from pbs_editor.pbs.parsers import parse_encounters_file

        entry = parse_encounters_file("[010]\n100,ZUBAT,5\nCave\n100,GEODUDE,7\n")[0]
        assert len(entry.encounter_types) == 1
        assert [slot.pokemon for slot in entry.encounter_types[0].slots] == ["GEODUDE"]

    def test_lines_before_header_are_ignored(self) -> None:
        from pbs_editor.pbs.parsers import parse_encounters_file

        entries = parse_encounters_file("Land\n    100,ZUBAT,5\n[010]\nCave\n")
        assert len(entries) == 1
        assert entries[0].encounter_types[0].slots == []

    def test_split_pokemon_form(self) -> None:
        from pbs_editor.pbs.parsers import split_pokemon_form

        assert split_pokemon_form("EEVEE_2") == ("EEVEE", "2")
        assert split_pokemon_form("EEVEE") == ("EEVEE", "")
        assert split_pokemon_form("MR_MIME") == ("MR_MIME", "")


class TestExportEncounters:
    """Test encounter export rules."""

    def test_round_trip_is_exact(self) -> None:
        from pbs_editor.pbs.parsers import parse_encounters_file
        from pbs_editor.pbs.serializers import export_encounters_file

        assert export_encounters_file(parse_encounters_file(ENCOUNTERS)) == ENCOUNTERS

    def _entry(self, *slots):
        from pbs_editor.pbs.models import EncounterEntry, EncounterType

        return EncounterEntry(
            id="005", encounter_types=[EncounterType(type="Land", slots=list(slots))]
        )

    def test_form_number_folding(self) -> None:
        from pbs_editor.pbs.models import EncounterSlot
        from pbs_editor.pbs.serializers import export_encounters_file

        text = export_encounters_file(
            [
                self._entry(
                    EncounterSlot("50", "EEVEE", "2", "5"),
                    EncounterSlot("30", "EEVEE", "0", "5"),
                    EncounterSlot("20", "EEVEE", "", "5"),
                )
            ]
        )
        assert "    50,EEVEE_2,5\n" in text
        assert text.count("EEVEE_") == 1
        assert "    30,EEVEE,5\n" in text
        assert "    20,EEVEE,5\n" in text

    def test_form_suffix_round_trip(self) -> None:
        from pbs_editor.pbs.models import EncounterSlot
        from pbs_editor.pbs.parsers import parse_encounters_file
        from pbs_editor.pbs.serializers import export_encounters_file

        text = export_encounters_file([self._entry(EncounterSlot("100", "EEVEE", "2", "5"))])
        slot = parse_encounters_file(text)[0].encounter_types[0].slots[0]
        assert (slot.pokemon, slot.form_number) == ("EEVEE", "2")

    def test_incomplete_slots_are_dropped(self) -> None:
        from pbs_editor.pbs.models import EncounterSlot
        from pbs_editor.pbs.serializers import export_encounters_file

        text = export_encounters_file(
            [
                self._entry(
                    EncounterSlot("", "PIDGEY", "", "3"),
                    EncounterSlot("50", "", "", "3"),
                    EncounterSlot("50", "PIDGEY", "", ""),
                    EncounterSlot("50", "RATTATA", "", "3", "4"),
                )
            ]
        )
        assert "PIDGEY" not in text
        assert "    50,RATTATA,3,4\n" in text

    def test_header_without_version_or_name(self) -> None:
        from pbs_editor.pbs.models import EncounterEntry, EncounterType
        from pbs_editor.pbs.serializers import export_encounters_file

        text = export_encounters_file(
            [EncounterEntry(id="007", encounter_types=[EncounterType("Water", "2")])]
        )
        assert "\n[007]\nWater,2\n" in text

    def test_blank_type_block_is_skipped(self) -> None:
        from pbs_editor.pbs.models import EncounterEntry, EncounterSlot, EncounterType
        from pbs_editor.pbs.serializers import export_encounters_file

        entry = EncounterEntry(
            id="007",
            encounter_types=[EncounterType(" ", "", [EncounterSlot("100", "ZUBAT", "", "5")])],
        )
        assert "ZUBAT" not in export_encounters_file([entry])

    def test_duplicate_map_versions_raise(self) -> None:
        import pytest

        from pbs_editor.pbs.errors import DuplicateIdentityError
        from pbs_editor.pbs.models import EncounterEntry
        from pbs_editor.pbs.serializers import export_encounters_file

        with pytest.raises(DuplicateIdentityError):
            export_encounters_file([EncounterEntry(id="001"), EncounterEntry(id="001", order=1)])
