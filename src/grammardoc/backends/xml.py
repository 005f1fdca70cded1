"""XML backend for document generation."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from lxml import etree

CDATA_END = "]]>"


def _set_cdata(element: etree._Element, text: str) -> None:
    # A CDATA section cannot contain its own terminator; fall back to escaped text
    element.text = etree.CDATA(text) if CDATA_END not in text else text


class XmlItemWriter:
    """Writes one ``item`` element; stays usable for the usages pass."""

    def __init__(self, item: etree._Element):
        self.item = item
        self._parent = item

    def _marker(self, tag: str) -> etree._Element:
        return etree.SubElement(self._parent, tag)

    def annotation(self, text: str) -> None:
        self._marker("annotation").text = text

    def declaration(self, name: str) -> None:
        self._marker("declaration").set("name", name)

    @contextmanager
    def description(self) -> Iterator[None]:
        outer = self._parent
        self._parent = etree.SubElement(outer, "description")
        try:
            yield
        finally:
            self._parent = outer

    def whitespace(self) -> None:
        self._marker("whitespace")

    def crlf(self) -> None:
        self._marker("crlf")

    def symbol(self, text: str) -> None:
        _set_cdata(self._marker("symbol"), text)

    def string(self, text: str) -> None:
        _set_cdata(self._marker("string"), text)

    def identifier(self, name: str) -> None:
        self._marker("identifier").set("name", name)

    def other(self, text: str) -> None:
        self._marker("other").text = text

    def usages(self, names: Iterable[str]) -> None:
        usages = etree.SubElement(self.item, "usages")
        for name in names:
            etree.SubElement(usages, "declaration").text = name


class XmlBackend:
    """Backend for generating the XML grammar reference.

    Layout: ``tokens`` holds ``set`` and ``item`` elements; each ``set``
    carries a section name, an optional ``doc`` blurb and its items.
    """

    def __init__(self) -> None:
        self.root: etree._Element = etree.Element("tokens")
        self.container: etree._Element = self.root

    def create_document(self) -> None:
        """Initialize a new XML document."""
        self.root = etree.Element("tokens")
        self.container = self.root

    def add_notation(self, doc: str) -> None:
        notation = etree.SubElement(self.root, "set")
        _set_cdata(etree.SubElement(notation, "doc"), doc)

    def open_section(self, name: str, doc: str | None) -> None:
        self.container = etree.SubElement(self.root, "set", name=name)
        if doc is not None:
            _set_cdata(etree.SubElement(self.container, "doc"), doc)

    def reset_section(self) -> None:
        self.container = self.root

    def add_item(self, helper: bool) -> XmlItemWriter:
        item = etree.SubElement(self.container, "item")
        if helper:
            etree.SubElement(item, "annotation").text = "helper"
        return XmlItemWriter(item)

    def finalize(self) -> str:
        """Serialize the document with the pretty printer."""
        output: bytes = etree.tostring(
            self.root, pretty_print=True, xml_declaration=True, encoding="UTF-8"
        )
        return output.decode("utf-8")
