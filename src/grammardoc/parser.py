"""ANTLR 4 grammar (.g4) parser for grammardoc.

Only the syntax matters here: the parser turns rule declarations into the
grammardoc rule model and throws away everything with no place in the
documentation (options, named actions, labels, element options, exception
handlers). No semantic checks are made.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cache
from pathlib import Path
from typing import Any

from lark import Lark, Token, Transformer
from lark.exceptions import UnexpectedInput

from .exceptions import ParseError
from .models import (
    Action,
    Alt,
    Block,
    CharSet,
    GrammarNode,
    Not,
    ParsedGrammar,
    Predicate,
    Quantified,
    Quantifier,
    Range,
    RuleEntry,
    RuleRef,
    Terminal,
    TokenSet,
    Wildcard,
)

G4_GRAMMAR = r"""
start: grammar_decl? prequel* (rule_spec | mode_spec)*

grammar_decl: GRAMMAR_KIND? "grammar" ident ";"
GRAMMAR_KIND: "lexer" | "parser"

?prequel: options_spec | tokens_spec | channels_spec | import_spec | named_action
options_spec: "options" ACTION_BLOCK
tokens_spec: "tokens" ACTION_BLOCK
channels_spec: "channels" ACTION_BLOCK
import_spec: "import" import_item ("," import_item)* ";"
import_item: ident ("=" ident)?
named_action: "@" ident ("::" ident)? ACTION_BLOCK

mode_spec: "mode" ident ";"

rule_spec: FRAGMENT? ident rule_header* ":" alt_list ";" exception_handler*
FRAGMENT: "fragment"
rule_header: ARG_ACTION
    | "returns" ARG_ACTION
    | "locals" ARG_ACTION
    | "throws" ident ("," ident)*
    | options_spec
    | named_action
exception_handler: "catch" ARG_ACTION ACTION_BLOCK
    | "finally" ACTION_BLOCK

alt_list: alternative ("|" alternative)*
alternative: ELEMENT_OPTIONS? element* lexer_commands? alt_label?
alt_label: "#" ident
lexer_commands: "->" lexer_command ("," lexer_command)*
lexer_command: ident ("(" (ident | INT) ")")?

?element: labeled_element
    | atom_element
    | ebnf
    | predicate
    | action

labeled_element: ident LABEL_ASSIGN (atom | block) SUFFIX?
atom_element: atom SUFFIX?
ebnf: block SUFFIX?
predicate: ACTION_BLOCK "?"
action: ACTION_BLOCK

block: "(" (options_spec ":")? alt_list ")"

?atom: range
    | literal
    | token_ref
    | rule_ref
    | not_set
    | wildcard
    | char_set

range: STRING_LITERAL ".." STRING_LITERAL
literal: STRING_LITERAL ELEMENT_OPTIONS?
token_ref: TOKEN_REF ELEMENT_OPTIONS?
rule_ref: RULE_REF ARG_ACTION? ELEMENT_OPTIONS?
not_set: "~" (set_element | block_set)
block_set: "(" set_element ("|" set_element)* ")"
?set_element: literal | token_ref | range | char_set
wildcard: WILDCARD ELEMENT_OPTIONS?
char_set: LEXER_CHAR_SET

?ident: TOKEN_REF | RULE_REF

TOKEN_REF: /[A-Z][A-Za-z0-9_]*/
RULE_REF: /[a-z][A-Za-z0-9_]*/
INT: /[0-9]+/
STRING_LITERAL: /'(?:\\.|[^'\\\r\n])*'/
LEXER_CHAR_SET: /\[(?:\\.|[^\\\]\r\n])*\]/
ARG_ACTION: /\[(?:\\.|[^\\\]])*\]/
ACTION_BLOCK: /\{(?:[^{}]|\{(?:[^{}]|\{[^{}]*\})*\})*\}/
ELEMENT_OPTIONS: /<[^<>]*>/
LABEL_ASSIGN: "+=" | "="
SUFFIX: /[?*+]\??/
WILDCARD: /\.(?!\.)/

LINE_COMMENT: /\/\/[^\n]*/
BLOCK_COMMENT: /\/\*(.|\n)*?\*\//

%import common.WS
%ignore WS
%ignore LINE_COMMENT
%ignore BLOCK_COMMENT
"""


@dataclass
class _GrammarHeader:
    kind: str | None
    name: str


def _with_suffix(node: Any, suffix: Token | None) -> Any:
    """Wrap ``node`` in the quantifier spelled by ``suffix`` (``*``, ``+?``, ...)."""
    if suffix is None:
        return node
    return Quantified(child=node, quantifier=Quantifier(suffix[0]), greedy=len(suffix) == 1)


def _suffix_of(children: list[Any]) -> Token | None:
    last = children[-1] if children else None
    if isinstance(last, Token) and last.type == "SUFFIX":
        return last
    return None


class G4Transformer(Transformer[Token, ParsedGrammar]):
    """Turn the lark parse tree of a .g4 file into grammardoc models."""

    def start(self, children: list[Any]) -> ParsedGrammar:
        header = next((c for c in children if isinstance(c, _GrammarHeader)), None)
        rules = [c for c in children if isinstance(c, RuleEntry)]
        return ParsedGrammar(
            name=header.name if header else None,
            kind=header.kind if header else None,
            rules=rules,
        )

    def grammar_decl(self, children: list[Any]) -> _GrammarHeader:
        kind = next((str(c) for c in children if c.type == "GRAMMAR_KIND"), None)
        return _GrammarHeader(kind=kind, name=str(children[-1]))

    def rule_spec(self, children: list[Any]) -> RuleEntry:
        tokens = [c for c in children if isinstance(c, Token)]
        name = next(t for t in tokens if t.type in ("TOKEN_REF", "RULE_REF"))
        body = next(c for c in children if isinstance(c, Block))
        return RuleEntry(
            name=str(name),
            body=body,
            line=name.line or 0,
            fragment=any(t.type == "FRAGMENT" for t in tokens),
        )

    def alt_list(self, children: list[Any]) -> Block:
        return Block(alternatives=tuple(children))

    def alternative(self, children: list[Any]) -> Alt:
        return Alt(elements=tuple(c for c in children if isinstance(c, GrammarNode)))

    def lexer_commands(self, children: list[Any]) -> Action:
        return Action(code="-> " + ", ".join(children))

    def lexer_command(self, children: list[Any]) -> str:
        name = str(children[0])
        return f"{name}({children[1]})" if len(children) > 1 else name

    def labeled_element(self, children: list[Any]) -> Any:
        # The label (x= or xs+=) is dropped
        return _with_suffix(children[2], _suffix_of(children))

    def atom_element(self, children: list[Any]) -> Any:
        return _with_suffix(children[0], _suffix_of(children))

    def ebnf(self, children: list[Any]) -> Any:
        return _with_suffix(children[0], _suffix_of(children))

    def predicate(self, children: list[Any]) -> Predicate:
        return Predicate(code=str(children[0]))

    def action(self, children: list[Any]) -> Action:
        return Action(code=str(children[0]))

    def block(self, children: list[Any]) -> Block:
        return next(c for c in children if isinstance(c, Block))

    def range(self, children: list[Any]) -> Range:
        return Range(left=Terminal(str(children[0])), right=Terminal(str(children[1])))

    def literal(self, children: list[Any]) -> Terminal:
        return Terminal(text=str(children[0]))

    def token_ref(self, children: list[Any]) -> RuleRef:
        return RuleRef(name=str(children[0]))

    def rule_ref(self, children: list[Any]) -> RuleRef:
        return RuleRef(name=str(children[0]))

    def not_set(self, children: list[Any]) -> Not:
        return Not(child=children[0])

    def block_set(self, children: list[Any]) -> TokenSet:
        return TokenSet(elements=tuple(children))

    def wildcard(self, children: list[Any]) -> Wildcard:
        return Wildcard()

    def char_set(self, children: list[Any]) -> CharSet:
        return CharSet(text=str(children[0])[1:-1])


@cache
def _g4_parser() -> Lark:
    return Lark(G4_GRAMMAR, parser="earley", lexer="dynamic", start="start")


class G4Parser:
    """Parser for ANTLR 4 grammar files.

    This parser only handles syntax. Splitting rules between lexer and
    parser, and reading source lines for section detection, is done by
    load_grammars() in grammardoc.loader.
    """

    def parse_file(self, file_path: Path | str) -> ParsedGrammar:
        """Parse a .g4 file into a ParsedGrammar."""
        path = Path(file_path)
        if not path.is_file():
            raise ParseError(f"File not found: {file_path}")
        return self.parse_text(path.read_text(encoding="utf-8"), source=str(path))

    def parse_text(self, text: str, source: str = "<string>") -> ParsedGrammar:
        """Parse grammar source text."""
        try:
            tree = _g4_parser().parse(text)
        except UnexpectedInput as e:
            summary = str(e).strip().splitlines()[0] if str(e).strip() else type(e).__name__
            raise ParseError(f"{source}:{e.line}:{e.column}: {summary}") from e
        return G4Transformer().transform(tree)
