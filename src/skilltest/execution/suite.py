"""Run a collection of discovered tests and fold their results."""
from __future__ import annotations

import asyncio
import time
from typing import Iterable, List, Optional

from skilltest.config import DEFAULT_TIMEOUT_MS
from skilltest.core.models import SuiteEntry, SuiteResult, TestInfo
from skilltest.log_config import get_logger
from skilltest.utils.timing import elapsed_ms

from .in_process import run_in_process
from .isolated import run_isolated

logger = get_logger(__name__)


async def run_suite(
    tests: Iterable[TestInfo],
    *,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    verbose: bool = False,
    parallel: bool = False,
    in_process: bool = False,
    interpreter: Optional[str] = None,
) -> SuiteResult:
    """Run every test and aggregate the outcome.

    Sequential mode awaits each test before starting the next. Parallel mode
    starts all of them at once. Either way ``SuiteResult.results`` follows
    the input order.

    Args:
        tests: Discovered tests, in the order they should be reported.
        timeout_ms: Per-test budget for isolated runs.
        verbose: Attach captured stderr to each isolated result.
        parallel: Run all tests concurrently.
        in_process: Use the in-process runner instead of child processes.
        interpreter: Python executable for isolated runs.
    """
    start = time.perf_counter()
    pending = list(tests)
    total = len(pending)

    async def run_one(index: int, info: TestInfo) -> SuiteEntry:
        if in_process:
            result = await run_in_process(info.test_file_path)
        else:
            result = await run_isolated(
                info.test_file_path,
                timeout_ms=timeout_ms,
                verbose=verbose,
                interpreter=interpreter,
            )
        logger.info(
            "suite.test_finished",
            unit=info.unit_name,
            index=index,
            total=total,
            success=result.success,
            passed=result.passed_count,
            failed=result.failed_count,
            duration_ms=round(result.duration_ms, 2),
        )
        return SuiteEntry(info=info, result=result)

    entries: List[SuiteEntry] = []
    if parallel:
        entries.extend(
            await asyncio.gather(*(run_one(index, info) for index, info in enumerate(pending, start=1)))
        )
    else:
        for index, info in enumerate(pending, start=1):
            entries.append(await run_one(index, info))

    suite = SuiteResult.from_entries(entries, duration_ms=elapsed_ms(start))
    logger.info(
        "suite.complete",
        total_tests=suite.total_tests,
        total_passed=suite.total_passed,
        total_failed=suite.total_failed,
        success=suite.success,
        parallel=parallel,
    )
    return suite
