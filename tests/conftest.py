"""Shared fixtures for routecheck tests."""

from collections.abc import Callable
from pathlib import Path

import pytest

TreeWriter = Callable[[dict[str, str]], Path]


@pytest.fixture
def write_tree(tmp_path: Path) -> TreeWriter:
    """Write ``{relative_path: content}`` files under ``tmp_path``."""

    def _write(files: dict[str, str]) -> Path:
        for relative, content in files.items():
            path = tmp_path / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return tmp_path

    return _write
