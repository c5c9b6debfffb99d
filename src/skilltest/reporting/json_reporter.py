"""JSON reporter emitting structured suite results."""
from __future__ import annotations

import datetime as dt
import json
import pathlib
from typing import Any, Dict, Optional

from jsonschema import validate

from skilltest.core.models import SuiteEntry, SuiteResult

from .schema import JSON_SCHEMA_V1, SCHEMA_VERSION


def suite_to_dict(suite: SuiteResult) -> Dict[str, Any]:
    """Schema-validated report payload for ``suite``."""

    payload = {
        "schema_version": SCHEMA_VERSION,
        "generated_at": dt.datetime.now(dt.timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
        "summary": {
            "success": suite.success,
            "total_tests": suite.total_tests,
            "total_passed": suite.total_passed,
            "total_failed": suite.total_failed,
            "duration_ms": suite.duration_ms,
        },
        "tests": [entry_to_dict(entry) for entry in suite.results],
        "errors": list(suite.errors),
    }
    validate(instance=payload, schema=JSON_SCHEMA_V1)
    return payload


def entry_to_dict(entry: SuiteEntry) -> Dict[str, Any]:
    info, result = entry.info, entry.result
    record: Dict[str, Any] = {
        "unit_name": info.unit_name,
        "short_name": info.short_name,
        "unit_kind": info.unit_kind,
        "test_file": str(info.test_file_path),
        "unit_dir": str(info.unit_dir) if info.unit_dir else None,
        "success": result.success,
        "passed": result.passed_count,
        "failed": result.failed_count,
        "errors": list(result.errors),
        "duration_ms": result.duration_ms,
        "output": result.output,
    }
    if result.stderr_output is not None:
        record["stderr"] = result.stderr_output
    return record


def write_report(suite: SuiteResult, path: Optional[str] = None) -> str:
    """Serialize ``suite``; write it to ``path`` when given.

    Returns the JSON text.
    """

    text = json.dumps(suite_to_dict(suite), indent=2)
    if path:
        target = pathlib.Path(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise RuntimeError(f"Failed to write JSON report to {target}: {exc}") from exc
    return text
