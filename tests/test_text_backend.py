"""Tests for plain-text document generation."""

from pathlib import Path

from grammardoc.backends import TextBackend
from grammardoc.config import LayoutConfig, SectionsConfig, UnifiedConfig
from grammardoc.document import DocumentGenerator
from grammardoc.loader import load_grammars

from helpers import grammar_set


def render_text(source: str, config: UnifiedConfig | None = None) -> str:
    return DocumentGenerator(grammar_set(source), TextBackend(), config).generate()


class TestTextBackend:
    """Test the text layout of rules."""

    def test_single_reference(self) -> None:
        output = render_text("grammar T;\ndecl: ID ;\nID: [a-zA-Z]+ ;\n")
        assert output == (
            "ID\n"
            "  : [a-zA-Z]+\n"
            "  ;\n"
            "  // usages: decl\n"
            "\n"
            "decl\n"
            "  : ID\n"
            "  ;\n"
        )

    def test_alternatives_on_own_lines(self) -> None:
        output = render_text("grammar T;\natom: NUM | '(' atom ')' ;\nNUM: [0-9]+ ;\n")
        assert "atom\n  : NUM\n  | '(' atom ')'\n  ;\n" in output

    def test_annotations(self) -> None:
        config = UnifiedConfig(start_rules=["r"])
        output = render_text("grammar T;\nr: NUM ;\nNUM: D+ ;\nfragment D: [0-9] ;\n", config)
        assert "// helper\nD\n" in output
        assert "// start\nr\n" in output

    def test_wrapped_rule(self) -> None:
        config = UnifiedConfig(layout=LayoutConfig(length_for_rule_split=12))
        output = render_text("grammar T;\nr: alpha beta gamma delta ;\n", config)
        assert "r\n  : alpha beta\n    gamma delta\n  ;\n" in output

    def test_sections_and_docs(self, tmp_path: Path) -> None:
        (tmp_path / "Main.txt").write_text(
            "Entry points.\n\n- one\n- two\n", encoding="utf-8"
        )
        (tmp_path / "notation.txt").write_text("Read `x*` as *many*.", encoding="utf-8")
        config = UnifiedConfig(sections=SectionsConfig(docs_folder=tmp_path))
        output = render_text("grammar T;\n\n// SECTION: Main\n\nr: 'x' ;\n", config)
        assert output.startswith("// Read `x*` as many.\n\n")
        assert "// SECTION: Main\n// Entry points.\n//\n// - one\n// - two\n\nr\n" in output
        assert "END SECTION" not in output

    def test_parser_rules_leave_lexer_section(self) -> None:
        output = render_text("grammar T;\nr: A ;\n\n// SECTION: Tokens\n\nA: 'a' ;\n")
        assert output == (
            "// SECTION: Tokens\n"
            "\n"
            "A\n"
            "  : 'a'\n"
            "  ;\n"
            "  // usages: r\n"
            "\n"
            "// END SECTION\n"
            "\n"
            "r\n"
            "  : A\n"
            "  ;\n"
        )

    def test_fixture_grammar(self, fixtures_dir: Path) -> None:
        grammars = load_grammars(fixtures_dir / "Calc.g4")
        output = DocumentGenerator(grammars, TextBackend()).generate()
        assert "// SECTION: Statements" in output
        assert "// SECTION: Expressions" in output
        assert "\nWS\n" not in output
        assert "  // usages: ID, NUMBER\n" in output
        assert output.endswith("\n")
        assert not output.endswith("\n\n")
