"""Base abstractions for document generation backends."""

from __future__ import annotations

from collections.abc import Iterable
from contextlib import AbstractContextManager
from typing import Protocol


class MarkupWriter(Protocol):
    """Item-scoped writer for one rule declaration.

    A writer stays live after the main emission finishes: the usages pass
    appends to it once every rule has been rendered, so it doubles as the
    output handle recorded in the usage map.
    """

    def annotation(self, text: str) -> None:
        """Mark the declaration (e.g. ``start`` or ``helper``)."""
        ...

    def declaration(self, name: str) -> None:
        """Emit the rule name as the declaration header."""
        ...

    def description(self) -> AbstractContextManager[None]:
        """Open the rule body; markers emitted inside belong to it."""
        ...

    def whitespace(self) -> None: ...

    def crlf(self) -> None:
        """Line break inside a rule body; any indentation follows as whitespace."""
        ...

    def symbol(self, text: str) -> None:
        """Grammar notation such as ``(``, ``|`` or ``*``."""
        ...

    def string(self, text: str) -> None:
        """Literal grammar text (quoted terminals, char set contents)."""
        ...

    def identifier(self, name: str) -> None:
        """Cross-linkable reference to another declaration."""
        ...

    def other(self, text: str) -> None: ...

    def usages(self, names: Iterable[str]) -> None:
        """Append the list of rules referring to this declaration."""
        ...


class DocumentBackend(Protocol):
    """Protocol for document generation backends.

    Backends are responsible for rendering document content in a specific
    format (xml, text). The DocumentGenerator decides what goes where and
    delegates format-specific rendering to the backend.
    """

    def create_document(self) -> None:
        """Initialize a new document."""
        ...

    def add_notation(self, doc: str) -> None:
        """Add the unnamed notation section that opens the document."""
        ...

    def open_section(self, name: str, doc: str | None) -> None:
        """Start a named section; following items go into it.

        Args:
            name: Section name taken from the grammar comment
            doc: Optional blurb describing the section
        """
        ...

    def reset_section(self) -> None:
        """Send following items to the document root again."""
        ...

    def add_item(self, helper: bool) -> MarkupWriter:
        """Add an item for one rule to the current section.

        Args:
            helper: True for fragment rules

        Returns:
            Writer for the new item
        """
        ...

    def finalize(self) -> str:
        """Finalize and return the document."""
        ...
