"""JSON schema definition for reporter output."""
from __future__ import annotations

SCHEMA_VERSION = "1.0.0"

JSON_SCHEMA_V1 = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "skilltest report",
    "type": "object",
    "required": ["schema_version", "generated_at", "summary", "tests", "errors"],
    "properties": {
        "schema_version": {"type": "string"},
        "generated_at": {"type": "string", "format": "date-time"},
        "summary": {
            "type": "object",
            "required": ["success", "total_tests", "total_passed", "total_failed", "duration_ms"],
            "properties": {
                "success": {"type": "boolean"},
                "total_tests": {"type": "integer", "minimum": 0},
                "total_passed": {"type": "integer", "minimum": 0},
                "total_failed": {"type": "integer", "minimum": 0},
                "duration_ms": {"type": "number"},
            },
        },
        "tests": {
            "type": "array",
            "items": {
                "type": "object",
                "required": [
                    "unit_name",
                    "short_name",
                    "unit_kind",
                    "test_file",
                    "success",
                    "passed",
                    "failed",
                    "errors",
                    "duration_ms",
                    "output",
                ],
                "properties": {
                    "unit_name": {"type": "string"},
                    "short_name": {"type": "string"},
                    "unit_kind": {"type": "string"},
                    "test_file": {"type": "string"},
                    "unit_dir": {"type": ["string", "null"]},
                    "success": {"type": "boolean"},
                    "passed": {"type": "integer", "minimum": 0},
                    "failed": {"type": "integer", "minimum": 0},
                    "errors": {"type": "array", "items": {"type": "string"}},
                    "duration_ms": {"type": "number"},
                    "output": {"type": "string"},
                    "stderr": {"type": "string"},
                },
            },
        },
        "errors": {"type": "array", "items": {"type": "string"}},
    },
}
