"""Plain-text backend for document generation.

The output reads like a grammar file: sections become ``// SECTION:``
comments, rule bodies keep their ``:``/``;`` layout and usages trail each
rule as a comment.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from grammardoc.backends import text_formatter

INDENT = "  "
END_SECTION = "// END SECTION"


def _comment_lines(doc: str) -> list[str]:
    return [f"// {line}".rstrip() for line in text_formatter.markdown_to_lines(doc)]


class TextItemWriter:
    """Collects one rule; rendered to lines when the document is finalized."""

    def __init__(self) -> None:
        self.annotations: list[str] = []
        self.name = ""
        self.body: list[str] = []
        self.usage_names: list[str] = []

    def annotation(self, text: str) -> None:
        self.annotations.append(text)

    def declaration(self, name: str) -> None:
        self.name = name

    @contextmanager
    def description(self) -> Iterator[None]:
        self.body.append("\n")
        yield

    def whitespace(self) -> None:
        self.body.append(" ")

    def crlf(self) -> None:
        self.body.append("\n")

    def symbol(self, text: str) -> None:
        self.body.append(text)

    def string(self, text: str) -> None:
        self.body.append(text)

    def identifier(self, name: str) -> None:
        self.body.append(name)

    def other(self, text: str) -> None:
        self.body.append(text)

    def usages(self, names: Iterable[str]) -> None:
        self.usage_names.extend(names)

    def render(self) -> list[str]:
        lines = [f"// {annotation}" for annotation in self.annotations]
        text = self.name + "".join(self.body)
        lines.extend(line.rstrip() for line in text.split("\n"))
        if self.usage_names:
            lines.append(f"{INDENT}// usages: {', '.join(self.usage_names)}")
        return lines


class TextBackend:
    """Backend for generating the plain-text grammar reference."""

    def __init__(self) -> None:
        self.blocks: list[TextItemWriter | list[str]] = []
        self.in_section = False

    def create_document(self) -> None:
        """Initialize a new text document."""
        self.blocks = []
        self.in_section = False

    def add_notation(self, doc: str) -> None:
        self.blocks.append(_comment_lines(doc))

    def open_section(self, name: str, doc: str | None) -> None:
        header = [f"// SECTION: {name}"]
        if doc is not None:
            header.extend(_comment_lines(doc))
        self.blocks.append(header)
        self.in_section = True

    def reset_section(self) -> None:
        # Rules that follow belong to no section until the next header
        if self.in_section:
            self.blocks.append([END_SECTION])
            self.in_section = False

    def add_item(self, helper: bool) -> TextItemWriter:
        writer = TextItemWriter()
        if helper:
            writer.annotation("helper")
        self.blocks.append(writer)
        return writer

    def finalize(self) -> str:
        """Finalize and return the text document."""
        rendered = [
            "\n".join(block.render() if isinstance(block, TextItemWriter) else block)
            for block in self.blocks
        ]
        return "\n\n".join(rendered) + "\n"
