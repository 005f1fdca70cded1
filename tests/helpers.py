"""Shared test helpers for grammardoc tests."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from grammardoc.models import GrammarSet, RuleEntry
from grammardoc.parser import G4Parser


class RecordingWriter:
    """MarkupWriter that keeps every marker it receives.

    ``text`` joins the markers the way a reader would see them, with a line
    break written as a single ``\\n``.
    """

    def __init__(self) -> None:
        self.markers: list[tuple[str, str]] = []
        self.annotations: list[str] = []
        self.declared: str | None = None
        self.usage_lists: list[list[str]] = []

    def annotation(self, text: str) -> None:
        self.annotations.append(text)

    def declaration(self, name: str) -> None:
        self.declared = name

    @contextmanager
    def description(self) -> Iterator[None]:
        yield

    def whitespace(self) -> None:
        self.markers.append(("whitespace", " "))

    def crlf(self) -> None:
        self.markers.append(("crlf", "\n"))

    def symbol(self, text: str) -> None:
        self.markers.append(("symbol", text))

    def string(self, text: str) -> None:
        self.markers.append(("string", text))

    def identifier(self, name: str) -> None:
        self.markers.append(("identifier", name))

    def other(self, text: str) -> None:
        self.markers.append(("other", text))

    def usages(self, names: Iterable[str]) -> None:
        self.usage_lists.append(list(names))

    @property
    def text(self) -> str:
        return "".join(value for _, value in self.markers)

    def of_kind(self, kind: str) -> list[str]:
        return [value for marker, value in self.markers if marker == kind]


def grammar_set(text: str, lexer_text: str | None = None) -> GrammarSet:
    """Build a GrammarSet from grammar source, split the way the loader does."""
    parser = G4Parser()
    parsed = parser.parse_text(text)
    grammars = GrammarSet(parser_lines=text.splitlines())
    if lexer_text is None:
        lexer_rules: Iterable[RuleEntry] = [e for e in parsed.rules if e.is_lexer_rule]
        parser_rules: Iterable[RuleEntry] = [e for e in parsed.rules if not e.is_lexer_rule]
        grammars.lexer_lines = grammars.parser_lines
    else:
        lexer_rules = parser.parse_text(lexer_text).rules
        parser_rules = parsed.rules
        grammars.lexer_lines = lexer_text.splitlines()
    grammars.lexer_rules = {e.name: e for e in lexer_rules}
    grammars.parser_rules = {e.name: e for e in parser_rules}
    return grammars
