"""Pytest configuration and fixtures for grammardoc tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from grammardoc.config import set_config_path
from grammardoc.logger import reset_logger

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding the .g4 fixtures."""
    return FIXTURES


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """Factory writing a file below tmp_path and returning its path."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def reset_global_state() -> Iterator[None]:
    """Leave no CLI config path or logger handlers behind between tests."""
    yield
    set_config_path(None)
    reset_logger()
