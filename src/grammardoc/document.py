"""Backend-agnostic document generator for grammardoc."""

from __future__ import annotations

from typing import TYPE_CHECKING

from grammardoc.config import UnifiedConfig
from grammardoc.layout import RenderResult
from grammardoc.logger import details_enabled, get_logger
from grammardoc.models import GrammarMode, RuleEntry
from grammardoc.renderer import RuleRenderer
from grammardoc.tracker import UsageMap, load_section_doc
from grammardoc.visitor import visit_rule

if TYPE_CHECKING:
    from grammardoc.backends.base import DocumentBackend
    from grammardoc.models import GrammarSet

logger = get_logger()

NOTATION_DOC = "notation"

RenderedRule = tuple[RuleEntry, RenderResult]


class DocumentGenerator:
    """Generate a grammar reference using a pluggable backend.

    This class decides which rules are documented, in which order and under
    which section, delegating format-specific rendering to the backend.
    """

    def __init__(
        self,
        grammars: GrammarSet,
        backend: DocumentBackend,
        config: UnifiedConfig | None = None,
    ):
        """Initialize with the loaded grammars, a backend and optional configuration.

        Args:
            grammars: Lexer and parser rules with their source lines
            backend: Backend implementation for format-specific rendering
            config: Layout, section and start-rule settings
        """
        self.grammars = grammars
        self.backend = backend
        self.config = config or UnifiedConfig()
        self.docs_folder = self.config.sections.docs_folder
        self._section_docs: dict[str, str | None] = {}

    def generate(self) -> str:
        """Generate the complete document.

        Returns:
            Document content (format depends on backend)
        """
        self.backend.create_document()
        self._section_docs = {}

        usages = UsageMap(self.grammars.all_rule_names())
        renderer = RuleRenderer(self.grammars, usages, self.config)

        # Parser rules first: their references decide which lexer rules are documented
        parser_rules = [
            (entry, visit_rule(entry, renderer, GrammarMode.PARSER))
            for entry in self.grammars.parser_rules.values()
        ]
        lexer_rules = self._render_used_lexer_rules(renderer, usages)

        notation = self._section_doc(NOTATION_DOC)
        if notation is not None:
            self.backend.add_notation(notation)

        self._generate_rules(lexer_rules)
        self._generate_rules(parser_rules)

        written = usages.flush()
        logger.progress(
            f"Documented {len(lexer_rules)} lexer and {len(parser_rules)} parser rules "
            f"({written} with usages)"
        )
        return self.backend.finalize()

    def _render_used_lexer_rules(
        self, renderer: RuleRenderer, usages: UsageMap
    ) -> list[RenderedRule]:
        """Visit lexer rules that something refers to, in declaration order.

        Visiting a used rule can make the fragments it refers to used, so
        this repeats until no new rule qualifies.
        """
        rendered: dict[str, RenderResult] = {}
        pending = True
        while pending:
            pending = False
            for name, entry in self.grammars.lexer_rules.items():
                if name not in rendered and usages.is_used(name):
                    rendered[name] = visit_rule(entry, renderer, GrammarMode.LEXER)
                    pending = True

        if details_enabled():
            skipped = [name for name in self.grammars.lexer_rules if name not in rendered]
            if skipped:
                logger.details(f"Skipping unreferenced lexer rules: {', '.join(skipped)}")

        return [
            (entry, rendered[name])
            for name, entry in self.grammars.lexer_rules.items()
            if name in rendered
        ]

    def _section_doc(self, name: str) -> str | None:
        """Blurb for a section, read at most once per pass."""
        if name not in self._section_docs:
            self._section_docs[name] = load_section_doc(self.docs_folder, name)
        return self._section_docs[name]

    def _generate_rules(self, rules: list[RenderedRule]) -> None:
        """Emit rules, grouping them under the last section marker seen."""
        self.backend.reset_section()
        current_section: str | None = None

        for entry, result in rules:
            section_name = result.section_name
            if section_name is not None and section_name != current_section:
                logger.details(f"Opening section '{section_name}' at rule {entry.name}")
                self.backend.open_section(section_name, self._section_doc(section_name))
                current_section = section_name

            logger.debug(f"Emitting rule {entry.name}")
            writer = self.backend.add_item(helper=entry.fragment)
            result.emit(writer)
