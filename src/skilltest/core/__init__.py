"""Core value objects exposed at the package level."""
from .models import SuiteEntry, SuiteResult, TestInfo, TestResult

__all__ = [
    "SuiteEntry",
    "SuiteResult",
    "TestInfo",
    "TestResult",
]
