"""Value objects produced by discovery and test execution."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


@dataclass(frozen=True)
class TestInfo:
    """Binding between a catalog unit and its test module on disk."""

    __test__ = False  # keep pytest from collecting this class

    unit_name: str
    short_name: str
    unit_kind: str
    test_file_path: Path
    unit_dir: Optional[Path] = None


@dataclass
class TestResult:
    """Outcome of running exactly one test module."""

    __test__ = False

    success: bool
    passed_count: int = 0
    failed_count: int = 0
    errors: List[str] = field(default_factory=list)
    output: str = ""
    stderr_output: Optional[str] = None
    duration_ms: float = 0.0

    @classmethod
    def failure(cls, message: str, *, output: str = "", duration_ms: float = 0.0) -> "TestResult":
        """Result for a run that never produced counts of its own."""

        return cls(
            success=False,
            passed_count=0,
            failed_count=1,
            errors=[message],
            output=output,
            duration_ms=duration_ms,
        )


@dataclass(frozen=True)
class SuiteEntry:
    """A discovered test paired with the result of running it."""

    info: TestInfo
    result: TestResult

    @property
    def success(self) -> bool:
        return self.result.success


@dataclass
class SuiteResult:
    """Aggregate across the results of a suite run."""

    success: bool
    total_tests: int
    total_passed: int
    total_failed: int
    results: List[SuiteEntry] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    duration_ms: float = 0.0

    @classmethod
    def from_entries(cls, entries: List[SuiteEntry], duration_ms: float) -> "SuiteResult":
        total_passed = sum(entry.result.passed_count for entry in entries)
        total_failed = sum(entry.result.failed_count for entry in entries)
        errors = [message for entry in entries for message in entry.result.errors]
        return cls(
            success=total_failed == 0 and all(entry.success for entry in entries),
            total_tests=len(entries),
            total_passed=total_passed,
            total_failed=total_failed,
            results=list(entries),
            errors=errors,
            duration_ms=duration_ms,
        )
