"""Run a test module inside the calling process.

Faster than ``run_isolated`` but without fault containment: there is no
timeout, so a module that hangs blocks the caller, and any global state the
module mutates is shared with the caller.
"""
from __future__ import annotations

import inspect
import time
from pathlib import Path
from typing import Union

from skilltest.core.models import TestResult
from skilltest.log_config import get_logger
from skilltest.utils.importing import fresh_module, resolve_entry_point
from skilltest.utils.timing import elapsed_ms

from .payload import normalize_hint

logger = get_logger(__name__)


async def run_in_process(test_file_path: Union[str, Path]) -> TestResult:
    """Import ``test_file_path`` afresh, call its entry point and report."""

    start = time.perf_counter()
    try:
        with fresh_module(test_file_path) as module:
            value = resolve_entry_point(module)()
            if inspect.isawaitable(value):
                value = await value
        hint = normalize_hint(value)
    except (Exception, SystemExit) as exc:
        message = _describe(exc)
        logger.warning("in_process.error", test_file=str(test_file_path), error=message)
        return TestResult.failure(message, duration_ms=elapsed_ms(start))

    return TestResult(
        success=hint["failed"] == 0,
        passed_count=hint["passed"],
        failed_count=hint["failed"],
        errors=hint["errors"],
        duration_ms=elapsed_ms(start),
    )


def _describe(exc: BaseException) -> str:
    if isinstance(exc, SystemExit):
        return f"Test module called exit({exc.code})"
    return str(exc) or type(exc).__name__
