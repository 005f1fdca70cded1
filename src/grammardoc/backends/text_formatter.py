"""Markdown handling for section blurbs in plain-text output.

Blurbs are written in markdown so the XML consumer can render them richly.
The text backend has no markup, so blurbs are parsed with mistune and
flattened to plain lines. Emphasis is dropped; code spans and link targets
survive as text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import mistune


@dataclass
class InlineText:
    """Run of blurb text."""

    text: str


@dataclass
class InlineCode:
    """Code span, usually a rule name or grammar snippet."""

    text: str


@dataclass
class InlineLink:
    """Link; its target is written out after the label."""

    url: str
    children: list[InlineElement]


@dataclass
class InlineEmphasis:
    """Bold or italic span; the emphasis itself is lost in plain text."""

    children: list[InlineElement]


InlineElement = InlineText | InlineCode | InlineLink | InlineEmphasis


@dataclass
class Paragraph:
    """Paragraph, flattened to a single line."""

    children: list[InlineElement]


@dataclass
class CodeBlock:
    """Code block element, e.g. a grammar excerpt."""

    code: str


@dataclass
class ListItem:
    """List item element."""

    children: list[BlockElement]


@dataclass
class List:
    """List block element."""

    ordered: bool
    items: list[ListItem]


BlockElement = Paragraph | CodeBlock | List | ListItem


def _convert_inline_tokens(tokens: list[dict[str, Any]]) -> list[InlineElement]:
    elements: list[InlineElement] = []

    for token in tokens:
        token_type = token["type"]

        if token_type == "text":
            elements.append(InlineText(text=token["raw"]))
        elif token_type in {"strong", "emphasis"}:
            elements.append(InlineEmphasis(children=_convert_inline_tokens(token["children"])))
        elif token_type == "codespan":
            elements.append(InlineCode(text=token["raw"]))
        elif token_type == "link":
            children = _convert_inline_tokens(token["children"])
            elements.append(InlineLink(url=token["attrs"]["url"], children=children))
        elif token_type in {"softbreak", "linebreak"}:
            elements.append(InlineText(text=" "))

    return elements


def _convert_block_tokens(tokens: list[dict[str, Any]]) -> list[BlockElement]:
    elements: list[BlockElement] = []

    for token in tokens:
        token_type = token["type"]

        if token_type in {"paragraph", "block_text", "heading"}:
            elements.append(Paragraph(children=_convert_inline_tokens(token["children"])))
        elif token_type == "block_code":
            elements.append(CodeBlock(code=token["raw"].rstrip()))
        elif token_type == "list":
            items: list[ListItem] = []
            for item_token in token["children"]:
                if item_token["type"] == "list_item":
                    items.append(ListItem(children=_convert_block_tokens(item_token["children"])))
            elements.append(List(ordered=token["attrs"]["ordered"], items=items))

    return elements


def parse_markdown(text: str) -> list[BlockElement]:
    """Parse a markdown blurb into block elements.

    Args:
        text: Blurb text as read from the docs folder

    Returns:
        Block elements in document order
    """
    markdown = mistune.create_markdown(renderer="ast")
    result = markdown(text)

    # The 'ast' renderer always returns a list of tokens
    assert isinstance(result, list), "AST renderer must return a list"

    return _convert_block_tokens(result)


def inline_to_text(elements: list[InlineElement]) -> str:
    """Flatten inline elements to a single string."""
    parts: list[str] = []
    for element in elements:
        if isinstance(element, InlineText):
            parts.append(element.text)
        elif isinstance(element, InlineCode):
            parts.append(f"`{element.text}`")
        elif isinstance(element, InlineLink):
            label = inline_to_text(element.children)
            parts.append(f"{label} ({element.url})" if label != element.url else label)
        else:
            parts.append(inline_to_text(element.children))
    return "".join(parts)


def blocks_to_lines(blocks: list[BlockElement], indent: str = "") -> list[str]:
    """Flatten block elements to plain lines, blocks separated by blank lines."""
    lines: list[str] = []
    for block in blocks:
        if lines and isinstance(block, Paragraph | CodeBlock | List):
            lines.append("")
        if isinstance(block, Paragraph):
            lines.append(indent + inline_to_text(block.children).strip())
        elif isinstance(block, CodeBlock):
            lines.extend(f"{indent}    {line}" for line in block.code.splitlines())
        elif isinstance(block, List):
            for number, item in enumerate(block.items, start=1):
                bullet = f"{number}. " if block.ordered else "- "
                item_lines = blocks_to_lines(item.children) or [""]
                lines.append(f"{indent}{bullet}{item_lines[0]}")
                pad = " " * len(bullet)
                lines.extend(f"{indent}{pad}{line}" if line else "" for line in item_lines[1:])
        else:
            lines.extend(blocks_to_lines(block.children, indent))
    return lines


def markdown_to_lines(text: str) -> list[str]:
    """Convert a markdown blurb to plain-text lines."""
    return blocks_to_lines(parse_markdown(text))
