"""Run one test module in a child interpreter with a timeout.

The child process protects the caller from modules that raise, hang, mutate
global state or print garbage. ``run_isolated`` always resolves to a
``TestResult``; spawn failures, timeouts and malformed output are all
reported as failed results rather than raised.
"""
from __future__ import annotations

import asyncio
import contextlib
import os
import time
from pathlib import Path
from typing import Optional, Union

from skilltest.config import DEFAULT_TIMEOUT_MS
from skilltest.core.models import TestResult
from skilltest.log_config import get_logger
from skilltest.utils.timing import elapsed_ms

from .payload import interpret_output
from .wrapper import build_command

logger = get_logger(__name__)

TIMEOUT_MESSAGE = "Test timeout exceeded"

_CHUNK_SIZE = 64 * 1024


async def run_isolated(
    test_file_path: Union[str, Path],
    *,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    verbose: bool = False,
    interpreter: Optional[str] = None,
) -> TestResult:
    """Run ``test_file_path`` in a fresh interpreter and collect its result.

    Args:
        test_file_path: Test module to execute.
        timeout_ms: Wall-clock budget for the child process.
        verbose: Attach captured stderr to the result.
        interpreter: Python executable to spawn (default: the running one).

    Returns:
        TestResult for the run. Never raises for test-level failures.
    """
    start = time.perf_counter()
    test_file = Path(test_file_path).expanduser().absolute()
    argv = build_command(test_file, interpreter)
    logger.debug("isolated.spawn", test_file=str(test_file), interpreter=argv[0], timeout_ms=timeout_ms)

    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(test_file.parent),
            env=dict(os.environ),
        )
    except (OSError, ValueError) as exc:
        logger.warning("isolated.spawn_failed", test_file=str(test_file), error=str(exc))
        return TestResult.failure(str(exc), duration_ms=elapsed_ms(start))

    stdout = bytearray()
    stderr = bytearray()
    try:
        await asyncio.wait_for(
            asyncio.gather(
                _drain(process.stdout, stdout),
                _drain(process.stderr, stderr),
                process.wait(),
            ),
            timeout=timeout_ms / 1000,
        )
    except asyncio.TimeoutError:
        _terminate(process)
        logger.warning("isolated.timeout", test_file=str(test_file), timeout_ms=timeout_ms)
        result = TestResult.failure(TIMEOUT_MESSAGE, output=_decode(stdout), duration_ms=elapsed_ms(start))
        if verbose:
            result.stderr_output = _decode(stderr)
        return result

    result = interpret_output(_decode(stdout), _decode(stderr), process.returncode)
    result.duration_ms = elapsed_ms(start)
    if verbose:
        result.stderr_output = _decode(stderr)
    logger.debug(
        "isolated.complete",
        test_file=str(test_file),
        returncode=process.returncode,
        success=result.success,
        passed=result.passed_count,
        failed=result.failed_count,
    )
    return result


async def _drain(stream: Optional[asyncio.StreamReader], sink: bytearray) -> None:
    if stream is None:
        return
    while True:
        chunk = await stream.read(_CHUNK_SIZE)
        if not chunk:
            return
        sink.extend(chunk)


def _terminate(process: asyncio.subprocess.Process) -> None:
    # The child is not awaited. Closing the transport releases its pipes and
    # kills the child if SIGTERM has not ended it yet.
    with contextlib.suppress(ProcessLookupError):
        process.terminate()
    transport = getattr(process, "_transport", None)
    if transport is not None:
        transport.close()


def _decode(data: bytearray) -> str:
    return bytes(data).decode("utf-8", errors="replace")
