"""Tests for section detection and the usage map."""

from pathlib import Path

from grammardoc.tracker import SectionDetector, UsageMap, load_section_doc

from helpers import RecordingWriter

GRAMMAR_LINES = [
    "grammar T;",
    "",
    "// SECTION: Declarations",
    "",
    "decl: ID ;",
    "",
    "other: decl ;",
    "// SECTION: Not two lines above anything",
]


class TestSectionDetector:
    """Test section-marker detection above declarations."""

    def test_marker_two_lines_above(self) -> None:
        detector = SectionDetector(GRAMMAR_LINES)
        assert detector.section_for(5) == "Declarations"

    def test_unmarked_rule(self) -> None:
        detector = SectionDetector(GRAMMAR_LINES)
        assert detector.section_for(7) is None

    def test_out_of_range_lines(self) -> None:
        detector = SectionDetector(GRAMMAR_LINES)
        assert detector.section_for(1) is None
        assert detector.section_for(2) is None
        assert detector.section_for(100) is None

    def test_custom_offset(self) -> None:
        lines = ["// SECTION: Tight", "decl: ID ;"]
        assert SectionDetector(lines, offset=2).section_for(2) == "Tight"

    def test_custom_pattern(self) -> None:
        lines = ["", "-- part: Types", "", "type: ID ;"]
        detector = SectionDetector(lines, pattern=r"^-- part: (?P<section>\w+)$")
        assert detector.section_for(4) == "Types"

    def test_marker_must_match_whole_line(self) -> None:
        lines = ["x: y ; // SECTION: Late", "", "z: w ;"]
        assert SectionDetector(lines).section_for(3) is None

    def test_section_names_with_spaces(self) -> None:
        lines = ["// SECTION: Control flow", "", "loop: 'while' ;"]
        assert SectionDetector(lines).section_for(3) == "Control flow"


class TestLoadSectionDoc:
    """Test section blurb loading."""

    def test_reads_blurb(self, tmp_path: Path) -> None:
        (tmp_path / "Literals.txt").write_text("Numbers and *strings*.", encoding="utf-8")
        assert load_section_doc(tmp_path, "Literals") == "Numbers and *strings*."

    def test_missing_blurb(self, tmp_path: Path) -> None:
        assert load_section_doc(tmp_path, "Nothing") is None

    def test_missing_folder(self, tmp_path: Path) -> None:
        assert load_section_doc(tmp_path / "absent", "Literals") is None


class TestUsageMap:
    """Test who-references-what tracking."""

    def test_seeded_symbols_start_unused(self) -> None:
        usages = UsageMap(["decl", "ID"])
        assert not usages.is_used("ID")
        assert usages.referrers("ID") == set()

    def test_entries_do_not_share_referrers(self) -> None:
        usages = UsageMap(["a", "b"])
        usages.record("a", "r")
        assert usages.referrers("b") == set()

    def test_record_and_referrers(self) -> None:
        usages = UsageMap(["decl", "expr", "ID"])
        usages.record("ID", "decl")
        usages.record("ID", "expr")
        usages.record("ID", "decl")
        assert usages.is_used("ID")
        assert usages.referrers("ID") == {"decl", "expr"}

    def test_self_reference_is_ignored(self) -> None:
        usages = UsageMap(["expr"])
        usages.record("expr", "expr")
        assert not usages.is_used("expr")

    def test_unknown_symbols_are_tracked(self) -> None:
        usages = UsageMap()
        usages.record("'+'", "expr")
        assert usages.referrers("'+'") == {"expr"}
        assert usages.referrers("never") == set()

    def test_first_binding_wins(self) -> None:
        usages = UsageMap(["ID"])
        first, second = RecordingWriter(), RecordingWriter()
        usages.record("ID", "decl")
        usages.bind("ID", first)
        usages.bind("ID", second)
        usages.flush()
        assert first.usage_lists == [["decl"]]
        assert second.usage_lists == []

    def test_flush_writes_sorted_usages_once(self) -> None:
        usages = UsageMap(["ID", "decl", "unused"])
        id_writer, decl_writer, unused_writer = (RecordingWriter() for _ in range(3))
        usages.bind("ID", id_writer)
        usages.bind("decl", decl_writer)
        usages.bind("unused", unused_writer)
        usages.record("ID", "stmt")
        usages.record("ID", "decl")
        usages.record("decl", "stmt")

        assert usages.flush() == 2
        assert id_writer.usage_lists == [["decl", "stmt"]]
        assert decl_writer.usage_lists == [["stmt"]]
        assert unused_writer.usage_lists == []

    def test_unbound_symbols_are_not_flushed(self) -> None:
        usages = UsageMap(["ID"])
        usages.record("ID", "decl")
        usages.record("'+'", "expr")
        assert usages.flush() == 0
