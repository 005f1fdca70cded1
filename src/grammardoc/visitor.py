"""Grammar visitor contract and the depth-first dispatcher.

The dispatcher walks one rule's tree bottom-up: children are visited first
and their results handed to the visitor operation for the parent node. The
rule being rendered travels in an explicit TraversalContext rather than in
visitor state, so every reference knows its referrer at the call site.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Protocol, TypeVar

from grammardoc.exceptions import TraversalError
from grammardoc.models import (
    Action,
    Alt,
    Block,
    CharSet,
    GrammarMode,
    GrammarNode,
    Not,
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

T = TypeVar("T")


@dataclass(frozen=True)
class TraversalContext:
    """Where the dispatcher currently is."""

    rule_name: str | None
    mode: GrammarMode
    depth: int = 0

    def referrer(self) -> str:
        """Name of the rule whose body is being visited."""
        if self.rule_name is None:
            raise TraversalError("Grammar reference visited outside of any rule")
        return self.rule_name

    def nested(self) -> TraversalContext:
        return replace(self, depth=self.depth + 1)


class GrammarVisitor(Protocol[T]):
    """One operation per grammar node kind."""

    def rule(self, entry: RuleEntry, children: Sequence[T], ctx: TraversalContext) -> T: ...

    def block(self, needs_brackets: bool, children: Sequence[T]) -> T: ...

    def token_set(self, needs_brackets: bool, children: Sequence[T]) -> T: ...

    def alt(self, children: Sequence[T]) -> T: ...

    def optional(self, child: T, is_greedy: bool) -> T: ...

    def plus(self, child: T, is_greedy: bool) -> T: ...

    def star(self, child: T, is_greedy: bool) -> T: ...

    def not_(self, child: T) -> T: ...

    def range_(self, left: T, right: T) -> T: ...

    def rule_ref(self, node: RuleRef, ctx: TraversalContext) -> T: ...

    def terminal(self, node: Terminal, ctx: TraversalContext) -> T: ...

    def chars_set(self, node: CharSet) -> T: ...

    def wildcard(self) -> T: ...

    def root(self) -> T:
        """Embedded actions and lexer commands."""
        ...

    def pred(self) -> T: ...


def needs_brackets(alternatives: Sequence[GrammarNode], ctx: TraversalContext) -> bool:
    """Decide whether a group visited in ``ctx`` is wrapped in brackets.

    The rule's own body never is; a nested group is unless it reduces to a
    single plain element. A suffixed or prefixed element keeps its brackets:
    ``(a*)?`` and ``a*?`` mean different things.
    """
    if ctx.depth == 0:
        return False
    if len(alternatives) > 1:
        return True
    only = alternatives[0] if alternatives else None
    if not isinstance(only, Alt):
        return isinstance(only, (Quantified, Not, Range))
    if len(only.elements) > 1:
        return True
    return bool(only.elements) and isinstance(only.elements[0], (Quantified, Not, Range))


def visit_rule(entry: RuleEntry, visitor: GrammarVisitor[T], mode: GrammarMode) -> T:
    """Visit one rule declaration and everything below it."""
    ctx = TraversalContext(rule_name=entry.name, mode=mode)
    body = visit(entry.body, visitor, ctx)
    return visitor.rule(entry, [body], ctx)


def visit(node: GrammarNode, visitor: GrammarVisitor[T], ctx: TraversalContext) -> T:  # noqa: PLR0911, PLR0912
    """Dispatch ``node`` to the matching visitor operation, children first."""
    if isinstance(node, Block):
        inner = ctx.nested()
        children = [visit(alt, visitor, inner) for alt in node.alternatives]
        return visitor.block(needs_brackets(node.alternatives, ctx), children)
    if isinstance(node, TokenSet):
        inner = ctx.nested()
        children = [visit(element, visitor, inner) for element in node.elements]
        return visitor.token_set(needs_brackets(node.elements, ctx), children)
    if isinstance(node, Alt):
        return visitor.alt([visit(element, visitor, ctx) for element in node.elements])
    if isinstance(node, Quantified):
        child = visit(node.child, visitor, ctx)
        if node.quantifier is Quantifier.OPTIONAL:
            return visitor.optional(child, node.greedy)
        if node.quantifier is Quantifier.PLUS:
            return visitor.plus(child, node.greedy)
        return visitor.star(child, node.greedy)
    if isinstance(node, Not):
        return visitor.not_(visit(node.child, visitor, ctx))
    if isinstance(node, Range):
        return visitor.range_(visit(node.left, visitor, ctx), visit(node.right, visitor, ctx))
    if isinstance(node, RuleRef):
        return visitor.rule_ref(node, ctx)
    if isinstance(node, Terminal):
        return visitor.terminal(node, ctx)
    if isinstance(node, CharSet):
        return visitor.chars_set(node)
    if isinstance(node, Wildcard):
        return visitor.wildcard()
    if isinstance(node, Predicate):
        return visitor.pred()
    if isinstance(node, Action):
        return visitor.root()
    raise TypeError(f"Unknown grammar node: {node!r}")
