"""Reporting exports."""
from .json_reporter import entry_to_dict, suite_to_dict, write_report
from .schema import JSON_SCHEMA_V1, SCHEMA_VERSION

__all__ = [
    "JSON_SCHEMA_V1",
    "SCHEMA_VERSION",
    "entry_to_dict",
    "suite_to_dict",
    "write_report",
]
