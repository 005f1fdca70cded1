"""Command-line interface for grammardoc."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from .backends import TextBackend, XmlBackend
from .backends.base import DocumentBackend
from .config import UnifiedConfig, discover_config, set_config_path
from .document import DocumentGenerator
from .exceptions import GrammarDocError
from .loader import load_grammars
from .logger import setup_logger

FORMATS = ("xml", "text")

app = typer.Typer(
    name="grammardoc",
    help="Render ANTLR grammars as a browsable grammar reference",
    add_completion=False,
)


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbosity level: 0=silent (default), 1=progress, 2=details, 3=debug",
            min=0,
            max=3,
        ),
    ] = 0,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to config file (default: grammardoc_config.yaml)",
        ),
    ] = None,
) -> None:
    """Global options for grammardoc commands."""
    setup_logger(verbose)
    set_config_path(config)


def _apply_overrides(
    config: UnifiedConfig,
    start_rules: list[str] | None,
    docs_folder: Path | None,
    split_length: int | None,
) -> UnifiedConfig:
    """Layer command-line options over the loaded config."""
    if start_rules:
        config = config.model_copy(update={"start_rules": list(start_rules)})
    if docs_folder is not None:
        sections = config.sections.model_copy(update={"docs_folder": docs_folder})
        config = config.model_copy(update={"sections": sections})
    if split_length is not None:
        layout = config.layout.model_copy(update={"length_for_rule_split": split_length})
        config = config.model_copy(update={"layout": layout})
    return config


@app.command()
def render(  # noqa: PLR0913 - CLI command needs multiple options
    parser: Annotated[
        Path, typer.Option("--parser", "-p", help="Parser (or combined) grammar file")
    ],
    *,
    lexer: Annotated[
        Path | None, typer.Option("--lexer", "-l", help="Separate lexer grammar file")
    ] = None,
    format: Annotated[  # noqa: A002 - 'format' is appropriate name for CLI option
        str,
        typer.Option("--format", "-f", help="Output format (xml or text)"),
    ] = "xml",
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
    start_rule: Annotated[
        list[str] | None,
        typer.Option("--start-rule", help="Rule to annotate as a grammar entry point"),
    ] = None,
    docs_folder: Annotated[
        Path | None,
        typer.Option("--docs-folder", help="Folder holding <section>.txt blurbs"),
    ] = None,
    split_length: Annotated[
        int | None,
        typer.Option("--split-length", help="Line length at which rule bodies wrap", min=1),
    ] = None,
) -> None:
    """Render the grammar reference as XML or text."""
    if format not in FORMATS:
        typer.echo(
            f"Error: Invalid format '{format}'. Must be 'xml' or 'text'.",
            err=True,
        )
        raise typer.Exit(1)

    try:
        config = discover_config(parser)
    except (FileNotFoundError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e
    config = _apply_overrides(config, start_rule, docs_folder, split_length)

    backend: DocumentBackend = TextBackend() if format == "text" else XmlBackend()

    try:
        grammars = load_grammars(parser, lexer)
        doc_output = DocumentGenerator(grammars, backend, config).generate()
    except GrammarDocError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e

    if output:
        output.write_text(doc_output, encoding="utf-8")
        typer.echo(f"Grammar reference written to {output}")
    else:
        typer.echo(doc_output, nl=False)


def main() -> int:
    """Main entry point."""
    # Typer handles sys.exit() internally
    app()
    return 0


if __name__ == "__main__":
    main()
