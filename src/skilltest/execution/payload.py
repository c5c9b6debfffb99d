"""Result payload exchanged over a test subprocess's stdout.

The child prints exactly one JSON object as the last thing on stdout::

    {"success": true, "result": {"passed": 3, "failed": 0, "errors": []}}
    {"success": false, "error": "boom", "stack": "Traceback ..."}

Anything printed before it is kept as diagnostic output. When no valid
payload can be found the process exit code is the only signal left.
"""
from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Dict, Optional

from jsonschema import Draft7Validator

from skilltest.core.models import TestResult

_decoder = json.JSONDecoder()


def normalize_hint(value: Any) -> Dict[str, Any]:
    """Coerce an entry point's return value into ``{passed, failed, errors}``.

    Accepts a mapping, an object exposing the same attributes, or ``None``.
    """

    def pick(key: str) -> Any:
        if value is None:
            return None
        if isinstance(value, Mapping):
            return value.get(key)
        return getattr(value, key, None)

    def count(raw: Any) -> int:
        try:
            return max(0, int(raw or 0))
        except (TypeError, ValueError):
            return 0

    errors = pick("errors") or []
    if isinstance(errors, (str, bytes)):
        errors = [errors]
    return {
        "passed": count(pick("passed")),
        "failed": count(pick("failed")),
        "errors": [str(error) for error in errors],
    }


def extract_trailing_json(text: str) -> Optional[Dict[str, Any]]:
    """Return the outermost JSON object that ends the trimmed ``text``."""

    trimmed = text.strip()
    if not trimmed.endswith("}"):
        return None
    # Candidates are tried from the end, so log text before the payload is never decoded.
    start = trimmed.rfind("{")
    while start != -1:
        try:
            value, end = _decoder.raw_decode(trimmed, start)
        except json.JSONDecodeError:
            pass
        else:
            if end == len(trimmed) and isinstance(value, dict):
                return value
        start = trimmed.rfind("{", 0, start)
    return None


def interpret_output(stdout: str, stderr: str, returncode: Optional[int]) -> TestResult:
    """Build a ``TestResult`` from a finished test subprocess."""

    payload = extract_trailing_json(stdout)
    if payload is not None and not _validator.is_valid(payload):
        payload = None

    if payload is not None and "result" in payload:
        hint = payload["result"]
        failed = hint["failed"]
        return TestResult(
            success=payload["success"] and failed == 0 and returncode == 0,
            passed_count=hint["passed"],
            failed_count=failed,
            errors=list(hint.get("errors", [])),
            output=stdout,
        )

    if payload is not None and "error" in payload:
        return TestResult(
            success=False,
            passed_count=0,
            failed_count=1,
            errors=[payload["error"]],
            output=stdout,
        )

    if returncode == 0:
        return TestResult(success=True, output=stdout)
    message = stderr.strip() or f"Test process exited with code {returncode}"
    return TestResult(success=False, failed_count=1, errors=[message], output=stdout)


PAYLOAD_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "skilltest result payload",
    "type": "object",
    "required": ["success"],
    "properties": {
        "success": {"type": "boolean"},
        "result": {
            "type": "object",
            "required": ["passed", "failed"],
            "properties": {
                "passed": {"type": "integer", "minimum": 0},
                "failed": {"type": "integer", "minimum": 0},
                "errors": {"type": "array", "items": {"type": "string"}},
            },
        },
        "error": {"type": "string"},
        "stack": {"type": "string"},
    },
}
_validator = Draft7Validator(PAYLOAD_SCHEMA)
