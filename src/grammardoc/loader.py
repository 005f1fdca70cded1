"""Grammar loading: parse .g4 files and split their rules by mode."""

from __future__ import annotations

from pathlib import Path

from .exceptions import ParseError
from .logger import get_logger
from .models import GrammarSet, ParsedGrammar, RuleEntry
from .parser import G4Parser

logger = get_logger()


def _read_lines(path: Path) -> list[str]:
    return path.read_text(encoding="utf-8").splitlines()


def _add_rules(target: dict[str, RuleEntry], rules: list[RuleEntry], source: Path) -> None:
    for entry in rules:
        if entry.name in target:
            raise ParseError(f"{source}:{entry.line}: rule '{entry.name}' is declared twice")
        target[entry.name] = entry


def load_grammars(parser_path: Path | str, lexer_path: Path | str | None = None) -> GrammarSet:
    """Load the grammar files to document.

    With a separate lexer grammar every rule of the parser file is a parser
    rule. A combined grammar is split by name: rules starting with an
    uppercase letter are lexer rules.

    Args:
        parser_path: Path to the parser (or combined) grammar
        lexer_path: Optional path to the lexer grammar

    Returns:
        GrammarSet with rules in declaration order and the source lines used
        for section detection
    """
    parser_path = Path(parser_path)
    g4 = G4Parser()

    parsed = g4.parse_file(parser_path)
    grammars = GrammarSet(parser_lines=_read_lines(parser_path))

    if lexer_path is None:
        lexer_rules = [entry for entry in parsed.rules if entry.is_lexer_rule]
        parser_rules = [entry for entry in parsed.rules if not entry.is_lexer_rule]
        _add_rules(grammars.lexer_rules, lexer_rules, parser_path)
        _add_rules(grammars.parser_rules, parser_rules, parser_path)
        # Both kinds of rule live in the same file
        grammars.lexer_lines = grammars.parser_lines
    else:
        lexer_path = Path(lexer_path)
        lexer = g4.parse_file(lexer_path)
        _warn_on_kind(lexer, "lexer", lexer_path)
        _warn_on_kind(parsed, "parser", parser_path)
        _add_rules(grammars.lexer_rules, lexer.rules, lexer_path)
        _add_rules(grammars.parser_rules, parsed.rules, parser_path)
        grammars.lexer_lines = _read_lines(lexer_path)

    logger.progress(
        f"Loaded {len(grammars.parser_rules)} parser and "
        f"{len(grammars.lexer_rules)} lexer rules from {parser_path.name}"
        + (f" and {Path(lexer_path).name}" if lexer_path is not None else "")
    )
    return grammars


def _warn_on_kind(parsed: ParsedGrammar, expected: str, path: Path) -> None:
    if parsed.kind is not None and parsed.kind != expected:
        logger.warning(f"{path} declares a {parsed.kind} grammar, used as the {expected} grammar")
