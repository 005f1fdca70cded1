"""grammardoc: render ANTLR grammars as a browsable grammar reference."""

__version__ = "0.1.0"
