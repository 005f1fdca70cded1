"""Render results and the layout combinators that compose them.

Every grammar subtree renders to a RenderResult: the length the subtree
occupies when written on one line, plus a deferred emitter that writes the
markup. Lengths are computed bottom-up from the children and fixed marker
costs, never measured from output, and drive one decision only: where a long
sequence gets a line break.

A line-break marker counts as one character and the indentation written
after it is not counted, so a result emitted without inserted breaks and
without indentation produces exactly ``content_length`` characters.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from grammardoc.backends.base import MarkupWriter

Emitter = Callable[[MarkupWriter], None]

ALTERNATIVE_INDENT = 2  # puts "|" and ";" under the rule's ":"
CONTINUATION_INDENT = 4  # puts a wrapped sequence under the first element after ": "


def _emit_nothing(writer: MarkupWriter) -> None:
    pass


@dataclass(frozen=True)
class RenderResult:
    """Rendered subtree: layout length, optional section and emitter."""

    content_length: int
    emit: Emitter = _emit_nothing
    section_name: str | None = None


EMPTY = RenderResult(0)


def line_break(writer: MarkupWriter, indent: int) -> None:
    """Write a line break followed by ``indent`` whitespace markers."""
    writer.crlf()
    for _ in range(indent):
        writer.whitespace()


def symbol(text: str) -> RenderResult:
    return RenderResult(len(text), lambda w: w.symbol(text))


def string(text: str) -> RenderResult:
    return RenderResult(len(text), lambda w: w.string(text))


def identifier(name: str) -> RenderResult:
    return RenderResult(len(name), lambda w: w.identifier(name))


def greedy_marker(is_greedy: bool) -> RenderResult:
    """The ``?`` that makes a quantifier non-greedy, or nothing."""
    return EMPTY if is_greedy else symbol("?")


def _quantified(child: RenderResult, quantifier: str, is_greedy: bool) -> RenderResult:
    marker = greedy_marker(is_greedy)

    def emit(writer: MarkupWriter) -> None:
        child.emit(writer)
        writer.symbol(quantifier)
        marker.emit(writer)

    return RenderResult(child.content_length + 1 + marker.content_length, emit)


def optional(child: RenderResult, is_greedy: bool = True) -> RenderResult:
    return _quantified(child, "?", is_greedy)


def plus(child: RenderResult, is_greedy: bool = True) -> RenderResult:
    return _quantified(child, "+", is_greedy)


def star(child: RenderResult, is_greedy: bool = True) -> RenderResult:
    return _quantified(child, "*", is_greedy)


def negate(child: RenderResult) -> RenderResult:
    def emit(writer: MarkupWriter) -> None:
        writer.symbol("~")
        child.emit(writer)

    return RenderResult(child.content_length + 1, emit)


def range_(left: RenderResult, right: RenderResult) -> RenderResult:
    def emit(writer: MarkupWriter) -> None:
        left.emit(writer)
        writer.string("..")
        right.emit(writer)

    return RenderResult(left.content_length + right.content_length + 2, emit)


def join_through_length(children: Sequence[RenderResult], split_length: int) -> RenderResult:
    """Join children with spaces, breaking the line when it grows too long.

    A running counter sums child lengths since the last break. When adding a
    child pushes it over ``split_length``, that child starts a new line and
    the counter restarts from the child's own length. The first child never
    breaks. EMPTY placeholders (actions, predicates) take no separator.
    """
    children = [child for child in children if child is not EMPTY]
    length = sum(child.content_length for child in children) + max(len(children) - 1, 0)

    def emit(writer: MarkupWriter) -> None:
        running = 0
        for index, child in enumerate(children):
            if index:
                if running + child.content_length > split_length:
                    line_break(writer, CONTINUATION_INDENT)
                    running = 0
                else:
                    writer.whitespace()
            running += child.content_length
            child.emit(writer)

    return RenderResult(length, emit)


def group_using_pipe(children: Sequence[RenderResult], needs_brackets: bool) -> RenderResult:
    """Render alternatives.

    Nested groups go on one line inside brackets: ``(a | b)``. A rule's
    top-level alternatives get no brackets and start a new line before every
    ``|``.
    """
    children = list(children)
    length = sum(child.content_length for child in children) + 3 * max(len(children) - 1, 0)
    if needs_brackets:
        length += 2

    def emit(writer: MarkupWriter) -> None:
        if needs_brackets:
            writer.symbol("(")
        for index, child in enumerate(children):
            if index:
                if needs_brackets:
                    writer.whitespace()
                else:
                    line_break(writer, ALTERNATIVE_INDENT)
                writer.symbol("|")
                writer.whitespace()
            child.emit(writer)
        if needs_brackets:
            writer.symbol(")")

    return RenderResult(length, emit)
