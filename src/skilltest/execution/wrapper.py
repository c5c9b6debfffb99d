"""Inline program that runs one test module inside a child interpreter.

The program is passed to the interpreter with ``-c`` and receives the test
file path and a unique token as ``argv``. It never imports skilltest, so any
Python 3 interpreter can host it.
"""
from __future__ import annotations

import inspect
import string
import sys
import uuid
from pathlib import Path
from typing import List, Optional, Union

from skilltest.utils.importing import ENTRY_POINT_CANDIDATES

from .payload import normalize_hint

WRAPPER_TEMPLATE = string.Template(
    '''\
from __future__ import annotations

import asyncio
import importlib.util
import inspect
import json
import sys
import traceback
from collections.abc import Mapping
from typing import Any, Dict

sys.dont_write_bytecode = True

CANDIDATES = $candidates


$normalize_source

def _load(path, token):
    name = "skilltest_run_" + token
    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None:
        raise ImportError("Unable to load test module from " + path)
    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    with open(path, encoding="utf-8") as handle:
        source = handle.read()
    exec(compile(source, path, "exec"), module.__dict__)
    return module


async def _settle(awaitable):
    return await awaitable


def _run(path, token):
    module = _load(path, token)
    for name in CANDIDATES:
        entry = getattr(module, name, None)
        if callable(entry):
            break
    else:
        raise AttributeError("Test file must define a callable " + " or ".join(CANDIDATES))
    value = entry()
    if inspect.isawaitable(value):
        value = asyncio.run(_settle(value))
    return normalize_hint(value)


def _emit(payload, code):
    sys.stdout.flush()
    sys.stdout.write("\\n" + json.dumps(payload) + "\\n")
    sys.stdout.flush()
    sys.exit(code)


try:
    hint = _run(sys.argv[1], sys.argv[2])
except Exception as exc:
    _emit({"success": False, "error": str(exc) or type(exc).__name__, "stack": traceback.format_exc()}, 1)
else:
    _emit({"success": True, "result": hint}, 1 if hint["failed"] else 0)
'''
)


def build_wrapper_source() -> str:
    """Render the wrapper program."""

    return WRAPPER_TEMPLATE.substitute(
        candidates=repr(tuple(ENTRY_POINT_CANDIDATES)),
        normalize_source=inspect.getsource(normalize_hint),
    )


def build_command(test_file_path: Union[str, Path], interpreter: Optional[str] = None) -> List[str]:
    """Argv for running ``test_file_path`` under the wrapper.

    A fresh token is generated per call and used as the module alias.
    """

    # Unbuffered, so output printed before a timeout or crash reaches the parent.
    return [
        interpreter or sys.executable,
        "-u",
        "-c",
        build_wrapper_source(),
        str(test_file_path),
        uuid.uuid4().hex,
    ]
