"""Section detection and cross-reference tracking for one render pass."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from grammardoc.backends.base import MarkupWriter
from grammardoc.config import DEFAULT_SECTION_DECLARATION_OFFSET, DEFAULT_SECTION_PATTERN
from grammardoc.logger import get_logger

logger = get_logger()


class SectionDetector:
    """Find section-marker comments above rule declarations.

    With the default offset of 3, a rule declared on (1-based) line ``n`` is
    checked against the 0-based line ``n - 3``: two lines above it.
    """

    def __init__(
        self,
        lines: list[str],
        offset: int = DEFAULT_SECTION_DECLARATION_OFFSET,
        pattern: str = DEFAULT_SECTION_PATTERN,
    ):
        self.lines = lines
        self.offset = offset
        self.pattern = re.compile(pattern)

    def section_for(self, line_number: int) -> str | None:
        """Return the section declared for a rule on ``line_number``, if any."""
        index = line_number - self.offset
        if index < 0 or index >= len(self.lines):
            return None
        match = self.pattern.search(self.lines[index])
        return match.group("section") if match else None


def load_section_doc(docs_folder: Path, name: str) -> str | None:
    """Read the blurb for section ``name``; a missing file is not an error."""
    doc_path = Path(docs_folder) / f"{name}.txt"
    if not doc_path.is_file():
        logger.debug(f"No documentation for section '{name}' at {doc_path}")
        return None
    return doc_path.read_text(encoding="utf-8")


def _default_referrers() -> set[str]:
    return set()


@dataclass
class UsageEntry:
    """Where a symbol was declared and who refers to it."""

    handle: MarkupWriter | None = None
    referrers: set[str] = field(default_factory=_default_referrers)


class UsageMap:
    """Who-references-what index for rules and literal terminals.

    Rule names are seeded up front so that references to rules declared later
    resolve no matter which order rules are visited in.
    """

    def __init__(self, symbols: Iterable[str] = ()):
        self.entries: dict[str, UsageEntry] = {}
        self.seed(symbols)

    def seed(self, symbols: Iterable[str]) -> None:
        for symbol in symbols:
            self.entries.setdefault(symbol, UsageEntry())

    def record(self, symbol: str, referrer: str) -> None:
        """Note that rule ``referrer`` refers to ``symbol``."""
        entry = self.entries.setdefault(symbol, UsageEntry())
        if symbol != referrer:
            entry.referrers.add(referrer)

    def bind(self, symbol: str, handle: MarkupWriter) -> None:
        """Remember where ``symbol`` was declared; the first binding wins."""
        entry = self.entries.setdefault(symbol, UsageEntry())
        if entry.handle is None:
            entry.handle = handle

    def referrers(self, symbol: str) -> set[str]:
        entry = self.entries.get(symbol)
        return set(entry.referrers) if entry else set()

    def is_used(self, symbol: str) -> bool:
        entry = self.entries.get(symbol)
        return bool(entry and entry.referrers)

    def flush(self) -> int:
        """Append a usages block to every declared, referenced symbol.

        Returns:
            Number of usages blocks written
        """
        written = 0
        for entry in self.entries.values():
            if entry.handle is not None and entry.referrers:
                entry.handle.usages(sorted(entry.referrers))
                written += 1
        return written
