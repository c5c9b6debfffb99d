"""Helpers for loading test modules from source files."""
from __future__ import annotations

import contextlib
import importlib.util
import re
import sys
import uuid
from pathlib import Path
from types import ModuleType
from typing import Callable, Iterator, Optional, Union

# Tried in order; the first callable attribute is the test entry point.
ENTRY_POINT_CANDIDATES = ("default", "run_tests", "runTests")


def resolve_entry_point(module: ModuleType) -> Callable:
    """Return the first callable entry point candidate defined by ``module``."""

    for name in ENTRY_POINT_CANDIDATES:
        candidate = getattr(module, name, None)
        if callable(candidate):
            return candidate
    raise AttributeError(
        f"Test file must define a callable {' or '.join(ENTRY_POINT_CANDIDATES)}"
    )


@contextlib.contextmanager
def fresh_module(source: Union[str, Path], token: Optional[str] = None) -> Iterator[ModuleType]:
    """Execute ``source`` as a brand new module and yield it.

    The module is compiled from the current file contents under a unique
    alias, so neither ``sys.modules`` nor ``__pycache__`` can serve a stale
    copy. The file's directory is on ``sys.path`` while the context is open
    so sibling imports resolve. Both are cleaned up on exit.
    """

    path = Path(source).expanduser().resolve()
    if not path.is_file():
        raise FileNotFoundError(f"Test file not found: {path}")
    module_name = f"skilltest_inproc_{_identifier(path.name)}_{token or uuid.uuid4().hex}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None:
        raise ImportError(f"Unable to load module from {path}")
    module = importlib.util.module_from_spec(spec)
    code = compile(path.read_text(encoding="utf-8"), str(path), "exec")
    search_path = str(path.parent)
    sys.path.insert(0, search_path)
    sys.modules[module_name] = module
    try:
        # Compiled from the current text; exec_module could reuse a stale __pycache__ entry.
        exec(code, module.__dict__)
        yield module
    finally:
        sys.modules.pop(module_name, None)
        with contextlib.suppress(ValueError):
            sys.path.remove(search_path)


def _identifier(name: str) -> str:
    return re.sub(r"\W", "_", name)
