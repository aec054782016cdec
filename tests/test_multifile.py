"""Tests for multi-file discovery, merging and splitting."""

from pathlib import Path


def _touch(directory: Path, *names: str) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    for name in names:
        (directory / name).write_text("", encoding="utf-8")


class TestListPbsFiles:
    """Test discovery of same-prefix files."""

    def test_primary_first_then_sorted(self, tmp_path: Path) -> None:
        from pbs_editor.pbs.loaders import list_pbs_files

        _touch(tmp_path, "items_z.txt", "items.txt", "items_extra.txt", "moves.txt", "items.bak")
        assert list_pbs_files(tmp_path, "items") == ["items.txt", "items_extra.txt", "items_z.txt"]

    def test_extras_without_primary(self, tmp_path: Path) -> None:
        from pbs_editor.pbs.loaders import list_pbs_files

        _touch(tmp_path, "items_b.txt", "items_a.txt")
        assert list_pbs_files(tmp_path, "items") == ["items_a.txt", "items_b.txt"]

    def test_case_insensitive_match(self, tmp_path: Path) -> None:
        from pbs_editor.pbs.loaders import list_pbs_files

        _touch(tmp_path, "Items.TXT")
        assert list_pbs_files(tmp_path, "items") == ["Items.TXT"]

    def test_pokemon_excludes_forms_and_metrics(self, tmp_path: Path) -> None:
        from pbs_editor.pbs.loaders import list_pbs_files
        from pbs_editor.pbs.schemas import get_schema

        _touch(
            tmp_path,
            "pokemon.txt",
            "pokemon_forms.txt",
            "pokemon_metrics.txt",
            "pokemon_metrics_gen9.txt",
            "pokemon_gen9.txt",
        )
        schema = get_schema("pokemon")
        assert list_pbs_files(tmp_path, schema.prefix, schema.exclude_prefixes) == [
            "pokemon.txt",
            "pokemon_gen9.txt",
        ]
        assert list_pbs_files(tmp_path, "pokemon_forms") == ["pokemon_forms.txt"]

    def test_missing_directory(self, tmp_path: Path) -> None:
        from pbs_editor.pbs.loaders import list_pbs_files

        assert list_pbs_files(tmp_path / "nope", "items") == []


class TestDiscoverProjectRoot:
    """Test locating the folder that holds PBS/."""

    def test_from_root_pbs_and_subfolder(self, make_project) -> None:
        from pbs_editor.pbs.loaders import discover_project_root

        root = make_project()
        (root / "Data" / "Scripts").mkdir(parents=True)
        for start in (root, root / "PBS", root / "Data" / "Scripts"):
            assert discover_project_root(start) == root.resolve()

    def test_falls_back_to_start(self, tmp_path: Path) -> None:
        from pbs_editor.pbs.loaders import discover_project_root

        assert discover_project_root(tmp_path) == tmp_path.resolve()


class TestMergeAndSplit:
    """Test the merged collection and its split back into files."""

    def test_merge_tags_source_files(self) -> None:
        from pbs_editor.pbs.multifile import merge_parsed
        from pbs_editor.pbs.parsers import parse_entries_file

        main = parse_entries_file("[POTION]\nName = Potion\n[REPEL]\nName = Repel\n")
        extra = parse_entries_file("[GEM]\nName = Gem\n")
        merged = merge_parsed([("items.txt", main), ("items_2.txt", extra)])

        assert merged.files == ["items.txt", "items_2.txt"]
        assert [(e.id, e.source_file, e.order) for e in merged.entries] == [
            ("POTION", "items.txt", 0),
            ("REPEL", "items.txt", 1),
            ("GEM", "items_2.txt", 0),
        ]
        assert main[0].source_file is None

    def test_split_renumbers_each_group(self) -> None:
        from pbs_editor.pbs.models import PBSEntry
        from pbs_editor.pbs.multifile import split_by_source

        entries = [
            PBSEntry(id="A", order=5, source_file="items_2.txt"),
            PBSEntry(id="B", order=9, source_file="items.txt"),
            PBSEntry(id="C", order=2, source_file="items_2.txt"),
            PBSEntry(id="D", order=3),
        ]
        groups = split_by_source(entries, "items.txt")

        assert list(groups) == ["items_2.txt", "items.txt"]
        assert [(e.id, e.order) for e in groups["items_2.txt"]] == [("C", 0), ("A", 1)]
        assert [(e.id, e.order) for e in groups["items.txt"]] == [("D", 0), ("B", 1)]
        assert entries[0].order == 5

    def test_blank_source_goes_to_primary(self) -> None:
        from pbs_editor.pbs.models import PBSEntry
        from pbs_editor.pbs.multifile import split_by_source

        groups = split_by_source([PBSEntry(id="A", source_file="  ")], "types.txt")
        assert list(groups) == ["types.txt"]

    def test_split_then_export_two_files(self) -> None:
        from pbs_editor.pbs.models import KeyValue, PBSEntry
        from pbs_editor.pbs.multifile import split_by_source
        from pbs_editor.pbs.schemas import get_schema

        schema = get_schema("items")
        entries = [
            PBSEntry(id="POTION", fields=[KeyValue("Name", "Potion")], order=0, source_file="items.txt"),
            PBSEntry(id="GEM", fields=[KeyValue("Name", "Gem")], order=4, source_file="items_2.txt"),
            PBSEntry(id="REPEL", fields=[KeyValue("Name", "Repel")], order=1, source_file="items.txt"),
        ]
        outputs = {
            source: schema.export(group)
            for source, group in split_by_source(entries, schema.filename).items()
        }
        assert set(outputs) == {"items.txt", "items_2.txt"}
        assert "[GEM]" in outputs["items_2.txt"]
        assert "[GEM]" not in outputs["items.txt"]
        assert outputs["items.txt"].index("[POTION]") < outputs["items.txt"].index("[REPEL]")
