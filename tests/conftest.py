from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Callable

import pytest


@pytest.fixture
def write_module(tmp_path: Path) -> Callable[..., Path]:
    """Write a dedented Python source file under ``tmp_path`` and return its path."""

    def _write(name: str, source: str, directory: Path | None = None) -> Path:
        target_dir = directory or tmp_path
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / name
        path.write_text(textwrap.dedent(source), encoding="utf-8")
        return path

    return _write
