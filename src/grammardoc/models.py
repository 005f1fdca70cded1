"""Data models for grammardoc: grammar rules and their syntax trees."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class GrammarMode(Enum):
    """Which grammar a rule was declared in."""

    LEXER = "lexer"
    PARSER = "parser"


class Quantifier(Enum):
    """EBNF suffix operators."""

    OPTIONAL = "?"
    PLUS = "+"
    STAR = "*"


@dataclass(frozen=True)
class Alt:
    """One alternative: a sequence of elements."""

    elements: tuple[GrammarNode, ...] = ()


@dataclass(frozen=True)
class Block:
    """A parenthesized (or rule-level) group of alternatives."""

    alternatives: tuple[Alt, ...]


@dataclass(frozen=True)
class TokenSet:
    """A set of single-token alternatives, as found under ``~( ... )``."""

    elements: tuple[GrammarNode, ...]


@dataclass(frozen=True)
class Quantified:
    """An element followed by ``?``, ``+`` or ``*``.

    ``greedy`` is False when the suffix carries the extra ``?`` marker.
    """

    child: GrammarNode
    quantifier: Quantifier
    greedy: bool = True


@dataclass(frozen=True)
class Not:
    """Negated set: ``~child``."""

    child: GrammarNode


@dataclass(frozen=True)
class Range:
    """Character range between two literals: ``'a'..'z'``."""

    left: Terminal
    right: Terminal


@dataclass(frozen=True)
class RuleRef:
    """Reference to a parser rule or a token (lexer rule)."""

    name: str


@dataclass(frozen=True)
class Terminal:
    """String literal; ``text`` keeps its quotes, e.g. ``'fun'``."""

    text: str


@dataclass(frozen=True)
class CharSet:
    """Lexer character set; ``text`` is the content between the brackets."""

    text: str


@dataclass(frozen=True)
class Wildcard:
    """The ``.`` wildcard."""


@dataclass(frozen=True)
class Predicate:
    """Semantic predicate ``{...}?``."""

    code: str


@dataclass(frozen=True)
class Action:
    """Embedded action ``{...}``; carries nothing worth documenting."""

    code: str


GrammarNode = (
    Alt
    | Block
    | TokenSet
    | Quantified
    | Not
    | Range
    | RuleRef
    | Terminal
    | CharSet
    | Wildcard
    | Predicate
    | Action
)


@dataclass(frozen=True)
class RuleEntry:
    """A named grammar rule as produced by the loader."""

    name: str
    body: Block
    line: int
    fragment: bool = False

    @property
    def is_lexer_rule(self) -> bool:
        return self.name[:1].isupper()

    def single_literal(self) -> Terminal | None:
        """Return the literal if the whole body is exactly one string literal."""
        if len(self.body.alternatives) != 1:
            return None
        elements = self.body.alternatives[0].elements
        if len(elements) == 1 and isinstance(elements[0], Terminal):
            return elements[0]
        return None


def _default_rule_list() -> list[RuleEntry]:
    return []


def _default_rule_dict() -> dict[str, RuleEntry]:
    return {}


def _default_lines() -> list[str]:
    return []


@dataclass
class ParsedGrammar:
    """Result of parsing a single ``.g4`` file."""

    name: str | None
    kind: str | None  # "lexer", "parser" or None for a combined grammar
    rules: list[RuleEntry] = field(default_factory=_default_rule_list)


@dataclass
class GrammarSet:
    """Lexer and parser rules plus the raw source lines they came from."""

    lexer_rules: dict[str, RuleEntry] = field(default_factory=_default_rule_dict)
    parser_rules: dict[str, RuleEntry] = field(default_factory=_default_rule_dict)
    lexer_lines: list[str] = field(default_factory=_default_lines)
    parser_lines: list[str] = field(default_factory=_default_lines)

    def source_lines(self, mode: GrammarMode) -> list[str]:
        return self.lexer_lines if mode is GrammarMode.LEXER else self.parser_lines

    def all_rule_names(self) -> list[str]:
        return [*self.lexer_rules, *self.parser_rules]
