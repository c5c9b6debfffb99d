"""YAML configuration loader with schema validation."""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from jsonschema import Draft7Validator

CONFIG_FILE_NAME = "skilltest.yaml"
DEFAULT_TIMEOUT_MS = 30000

ENV_TIMEOUT_MS = "SKILLTEST_TIMEOUT_MS"
ENV_PYTHON = "SKILLTEST_PYTHON"


@dataclass(frozen=True)
class SkilltestConfig:
    """Settings shared by the CLI and programmatic callers."""

    project_root: Path
    tests_dir: str = "tests"
    skills_dir: str = ".AchillesSkills"
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    verbose: bool = False
    parallel: bool = False
    interpreter: Optional[str] = None

    @property
    def tests_path(self) -> Path:
        return (self.project_root / self.tests_dir).resolve()

    @property
    def skills_path(self) -> Path:
        return (self.project_root / self.skills_dir).resolve()


def load_config(path: Optional[str] = None, project_root: Optional[str] = None) -> SkilltestConfig:
    """Load settings from ``skilltest.yaml`` and the environment.

    An explicit ``path`` must exist. Without one, ``<project_root>/skilltest.yaml``
    is read when present and defaults are used otherwise.
    """

    root = Path(project_root or ".").expanduser().resolve()
    if path:
        config_path = Path(path).expanduser().resolve()
        if not config_path.is_file():
            raise ValueError(f"Config file not found: {config_path}")
    else:
        config_path = root / CONFIG_FILE_NAME

    config = SkilltestConfig(project_root=root)
    if config_path.is_file():
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
        config = _apply_mapping(config, raw)
    return _apply_env(config, os.environ)


def _apply_mapping(config: SkilltestConfig, raw: Any) -> SkilltestConfig:
    if not isinstance(raw, Mapping):
        raise ValueError("Config file must contain a mapping at the top level")
    errors = sorted(_validator.iter_errors(raw), key=lambda e: list(e.path))
    if errors:
        messages = "; ".join(f"{'/'.join(map(str, err.path)) or 'root'}: {err.message}" for err in errors)
        raise ValueError(f"Config schema validation failed: {messages}")
    return replace(config, **dict(raw))


def _apply_env(config: SkilltestConfig, env: Mapping[str, str]) -> SkilltestConfig:
    timeout = env.get(ENV_TIMEOUT_MS)
    if timeout:
        try:
            timeout_ms = int(timeout)
        except ValueError as exc:
            raise ValueError(f"{ENV_TIMEOUT_MS} must be an integer, got '{timeout}'") from exc
        if timeout_ms < 1:
            raise ValueError(f"{ENV_TIMEOUT_MS} must be positive, got {timeout_ms}")
        config = replace(config, timeout_ms=timeout_ms)
    interpreter = env.get(ENV_PYTHON)
    if interpreter:
        config = replace(config, interpreter=interpreter)
    return config


CONFIG_SCHEMA = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "tests_dir": {"type": "string", "minLength": 1},
        "skills_dir": {"type": "string", "minLength": 1},
        "timeout_ms": {"type": "integer", "minimum": 1},
        "verbose": {"type": "boolean"},
        "parallel": {"type": "boolean"},
        "interpreter": {"type": ["string", "null"]},
    },
}
_validator = Draft7Validator(CONFIG_SCHEMA)
