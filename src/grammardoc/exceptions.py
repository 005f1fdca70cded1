"""Custom exceptions for grammardoc."""


class GrammarDocError(Exception):
    """Base exception for all grammardoc errors."""

    pass


class ParseError(GrammarDocError):
    """Raised when a grammar file cannot be read or parsed."""

    pass


class TraversalError(GrammarDocError):
    """Raised when a grammar reference is visited outside of any rule.

    This signals a broken traversal contract, not bad input.
    """

    pass
