"""Configuration loading for grammardoc.

A single YAML file (grammardoc_config.yaml) tunes layout, section detection
and the start rules. Every setting has a default, so the file is optional.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

CONFIG_FILE_NAME = "grammardoc_config.yaml"

DEFAULT_LENGTH_FOR_RULE_SPLIT = 120
DEFAULT_SECTION_DECLARATION_OFFSET = 3
DEFAULT_SECTION_PATTERN = r"^// SECTION: (?P<section>[ \w]*?)$"
DEFAULT_DOCS_FOLDER = "docs"


class LayoutConfig(BaseModel):
    """Line-splitting policy for rule bodies."""

    length_for_rule_split: int = Field(default=DEFAULT_LENGTH_FOR_RULE_SPLIT, ge=1)


class SectionsConfig(BaseModel):
    """How section markers are found and where their blurbs live."""

    declaration_offset: int = Field(default=DEFAULT_SECTION_DECLARATION_OFFSET, ge=1)
    pattern: str = DEFAULT_SECTION_PATTERN
    docs_folder: Path = Path(DEFAULT_DOCS_FOLDER)

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        """Ensure the pattern compiles and exposes a 'section' group."""
        try:
            compiled = re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid section pattern: {e}") from e
        if "section" not in compiled.groupindex:
            raise ValueError("Section pattern must define a named group 'section'")
        return v


def _default_start_rules() -> list[str]:
    return []


class UnifiedConfig(BaseModel):
    """Top-level grammardoc configuration."""

    start_rules: list[str] = Field(default_factory=_default_start_rules)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    sections: SectionsConfig = Field(default_factory=SectionsConfig)


class _ConfigContext:
    """Config path chosen on the command line, shared with commands."""

    def __init__(self) -> None:
        self.config_path: Path | None = None


_context = _ConfigContext()


def get_config_path() -> Path | None:
    """Get the config path set by the CLI, if any."""
    return _context.config_path


def set_config_path(path: Path | None) -> None:
    """Set the config path (called from the CLI callback)."""
    _context.config_path = path


def load_unified_config(config_path: Path | str) -> UnifiedConfig:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to grammardoc_config.yaml

    Returns:
        Validated UnifiedConfig

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ValueError: If the config is invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with config_path.open(encoding="utf-8") as f:
        try:
            data: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse config YAML: {e}") from e

    if data is None:
        return UnifiedConfig()
    if not isinstance(data, dict):
        raise ValueError("Config must contain a mapping at the root level")

    try:
        config = UnifiedConfig.model_validate(data)
    except PydanticValidationError as e:
        raise ValueError(f"Invalid config {config_path}: {e}") from e

    # A relative docs folder is relative to the config file, not the cwd
    if not config.sections.docs_folder.is_absolute():
        config.sections.docs_folder = config_path.parent / config.sections.docs_folder
    return config


def discover_config(grammar_path: Path | None, config_path: Path | None = None) -> UnifiedConfig:
    """Find and load configuration, falling back to defaults.

    Search order:
    1. Explicit config_path argument
    2. Global context (set via CLI --config)
    3. grammar directory / grammardoc_config.yaml
    4. Current directory / grammardoc_config.yaml
    """
    if config_path is not None:
        return load_unified_config(config_path)

    ctx_config = get_config_path()
    if ctx_config is not None:
        return load_unified_config(ctx_config)

    candidates: list[Path] = []
    if grammar_path is not None:
        candidates.append(Path(grammar_path).parent / CONFIG_FILE_NAME)
    candidates.append(Path(CONFIG_FILE_NAME))

    for candidate in candidates:
        if candidate.exists():
            return load_unified_config(candidate)

    return UnifiedConfig()
