"""Isolated, in-process and suite test execution."""
from .in_process import run_in_process
from .isolated import TIMEOUT_MESSAGE, run_isolated
from .payload import PAYLOAD_SCHEMA, extract_trailing_json, interpret_output, normalize_hint
from .suite import run_suite

__all__ = [
    "PAYLOAD_SCHEMA",
    "TIMEOUT_MESSAGE",
    "extract_trailing_json",
    "interpret_output",
    "normalize_hint",
    "run_in_process",
    "run_isolated",
    "run_suite",
]
