"""Renderer turning grammar rule trees into RenderResults."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from grammardoc import layout
from grammardoc.backends.base import MarkupWriter
from grammardoc.config import UnifiedConfig
from grammardoc.layout import RenderResult
from grammardoc.models import CharSet, GrammarMode, GrammarSet, RuleEntry, RuleRef, Terminal
from grammardoc.tracker import SectionDetector, UsageMap
from grammardoc.visitor import TraversalContext


def build_literal_index(lexer_rules: Iterable[RuleEntry]) -> dict[str, str]:
    """Map literals like ``'fun'`` to the token rule that matches exactly them.

    Fragments are skipped: they never become tokens a parser rule can use.
    """
    index: dict[str, str] = {}
    for entry in lexer_rules:
        if entry.fragment:
            continue
        literal = entry.single_literal()
        if literal is not None:
            index.setdefault(literal.text, entry.name)
    return index


class RuleRenderer:
    """GrammarVisitor producing RenderResults and recording usages.

    Usages are recorded while the tree is visited, so filtering decisions can
    be made before anything is emitted. Declaration handles are bound when a
    rule is emitted into its backend item.
    """

    def __init__(
        self,
        grammars: GrammarSet,
        usages: UsageMap,
        config: UnifiedConfig | None = None,
    ):
        self.config = config or UnifiedConfig()
        self.usages = usages
        self.start_rules = set(self.config.start_rules)
        self.split_length = self.config.layout.length_for_rule_split
        self.literal_index = build_literal_index(grammars.lexer_rules.values())
        sections = self.config.sections
        self.section_detectors: Mapping[GrammarMode, SectionDetector] = {
            mode: SectionDetector(
                grammars.source_lines(mode), sections.declaration_offset, sections.pattern
            )
            for mode in GrammarMode
        }

    def rule(
        self, entry: RuleEntry, children: Sequence[RenderResult], ctx: TraversalContext
    ) -> RenderResult:
        body = layout.join_through_length(children, self.split_length)
        is_start = entry.name in self.start_rules

        def emit(writer: MarkupWriter) -> None:
            self.usages.bind(entry.name, writer)
            if is_start:
                writer.annotation("start")
            writer.declaration(entry.name)
            with writer.description():
                writer.whitespace()
                writer.whitespace()
                writer.symbol(":")
                writer.whitespace()
                body.emit(writer)
                layout.line_break(writer, layout.ALTERNATIVE_INDENT)
                writer.other(";")

        section_name = self.section_detectors[ctx.mode].section_for(entry.line)
        return RenderResult(body.content_length, emit, section_name)

    def block(self, needs_brackets: bool, children: Sequence[RenderResult]) -> RenderResult:
        return layout.group_using_pipe(children, needs_brackets)

    def token_set(self, needs_brackets: bool, children: Sequence[RenderResult]) -> RenderResult:
        return layout.group_using_pipe(children, needs_brackets)

    def alt(self, children: Sequence[RenderResult]) -> RenderResult:
        return layout.join_through_length(children, self.split_length)

    def optional(self, child: RenderResult, is_greedy: bool) -> RenderResult:
        return layout.optional(child, is_greedy)

    def plus(self, child: RenderResult, is_greedy: bool) -> RenderResult:
        return layout.plus(child, is_greedy)

    def star(self, child: RenderResult, is_greedy: bool) -> RenderResult:
        return layout.star(child, is_greedy)

    def not_(self, child: RenderResult) -> RenderResult:
        return layout.negate(child)

    def range_(self, left: RenderResult, right: RenderResult) -> RenderResult:
        return layout.range_(left, right)

    def rule_ref(self, node: RuleRef, ctx: TraversalContext) -> RenderResult:
        self.usages.record(node.name, ctx.referrer())
        return layout.identifier(node.name)

    def terminal(self, node: Terminal, ctx: TraversalContext) -> RenderResult:
        referrer = ctx.referrer()
        # Inside lexer rules a literal is always shown as written
        token_name = self.literal_index.get(node.text) if ctx.mode is GrammarMode.PARSER else None
        if token_name is not None:
            self.usages.record(token_name, referrer)
            return layout.identifier(token_name)
        self.usages.record(node.text, referrer)
        return layout.string(node.text)

    def chars_set(self, node: CharSet) -> RenderResult:
        def emit(writer: MarkupWriter) -> None:
            writer.symbol("[")
            writer.string(node.text)
            writer.symbol("]")

        return RenderResult(len(node.text) + 2, emit)

    def wildcard(self) -> RenderResult:
        return layout.symbol(".")

    def root(self) -> RenderResult:
        return layout.EMPTY

    def pred(self) -> RenderResult:
        return layout.EMPTY
