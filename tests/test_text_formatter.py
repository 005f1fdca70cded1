"""Tests for flattening markdown section blurbs."""

from grammardoc.backends.text_formatter import (
    CodeBlock,
    InlineCode,
    InlineEmphasis,
    InlineLink,
    InlineText,
    List,
    Paragraph,
    blocks_to_lines,
    inline_to_text,
    markdown_to_lines,
    parse_markdown,
)


def test_parse_plain_text():
    """Test parsing plain text."""
    result = parse_markdown("Hello world")
    assert len(result) == 1
    assert isinstance(result[0], Paragraph)
    assert result[0].children == [InlineText(text="Hello world")]


def test_parse_emphasis():
    """Bold and italic both become emphasis."""
    result = parse_markdown("Some **bold** and *italic*")
    children = result[0].children
    assert isinstance(children[1], InlineEmphasis)
    assert isinstance(children[3], InlineEmphasis)
    assert inline_to_text(children) == "Some bold and italic"


def test_parse_inline_code():
    """Test parsing inline code."""
    result = parse_markdown("Use `expr*` here")
    children = result[0].children
    assert children[1] == InlineCode(text="expr*")
    assert inline_to_text(children) == "Use `expr*` here"


def test_parse_link():
    """Links keep their target."""
    result = parse_markdown("See [the manual](https://example.com/doc).")
    children = result[0].children
    assert isinstance(children[1], InlineLink)
    assert children[1].url == "https://example.com/doc"
    assert inline_to_text(children) == "See the manual (https://example.com/doc)."


def test_bare_link_text():
    """A link whose label is its target is written once."""
    link = InlineLink(url="https://x.org", children=[InlineText(text="https://x.org")])
    assert inline_to_text([link]) == "https://x.org"


def test_parse_code_block():
    """Fenced code is kept verbatim."""
    result = parse_markdown("```\nexpr: expr '+' expr ;\n```\n")
    assert result == [CodeBlock(code="expr: expr '+' expr ;")]


def test_parse_lists():
    """Test ordered and unordered lists."""
    result = parse_markdown("- one\n- two\n\n1. first\n2. second\n")
    assert [type(block) for block in result] == [List, List]
    assert not result[0].ordered
    assert result[1].ordered
    assert len(result[1].items) == 2


def test_lines_for_paragraphs_and_lists():
    """Blocks are separated by blank lines; lists keep their bullets."""
    lines = markdown_to_lines("Intro text.\n\n- one\n- two\n\n1. first\n2. second\n")
    assert lines == ["Intro text.", "", "- one", "- two", "", "1. first", "2. second"]


def test_lines_for_code_block():
    """Code blocks are indented."""
    lines = markdown_to_lines("Example:\n\n```\na: b ;\n```\n")
    assert lines == ["Example:", "", "    a: b ;"]


def test_soft_breaks_join_lines():
    """A paragraph spread over lines becomes one line."""
    assert markdown_to_lines("first part\nsecond part") == ["first part second part"]


def test_indent():
    """Indentation applies to every line."""
    blocks = [Paragraph(children=[InlineText(text="x")]), CodeBlock(code="y")]
    assert blocks_to_lines(blocks, indent="  ") == ["  x", "", "      y"]
