from __future__ import annotations

from pathlib import Path

import pytest

from skilltest.config import (
    CONFIG_FILE_NAME,
    DEFAULT_TIMEOUT_MS,
    ENV_PYTHON,
    ENV_TIMEOUT_MS,
    load_config,
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(ENV_TIMEOUT_MS, raising=False)
    monkeypatch.delenv(ENV_PYTHON, raising=False)


def test_defaults_without_config_file(tmp_path: Path) -> None:
    config = load_config(project_root=str(tmp_path))
    assert config.project_root == tmp_path.resolve()
    assert config.timeout_ms == DEFAULT_TIMEOUT_MS
    assert config.parallel is False
    assert config.interpreter is None
    assert config.tests_path == tmp_path.resolve() / "tests"
    assert config.skills_path == tmp_path.resolve() / ".AchillesSkills"


def test_project_config_file_is_read(tmp_path: Path) -> None:
    (tmp_path / CONFIG_FILE_NAME).write_text(
        "tests_dir: checks\nskills_dir: skills\ntimeout_ms: 1500\nparallel: true\n",
        encoding="utf-8",
    )
    config = load_config(project_root=str(tmp_path))
    assert config.tests_path == tmp_path.resolve() / "checks"
    assert config.skills_path == tmp_path.resolve() / "skills"
    assert config.timeout_ms == 1500
    assert config.parallel is True


def test_empty_config_file_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / CONFIG_FILE_NAME).write_text("", encoding="utf-8")
    assert load_config(project_root=str(tmp_path)).timeout_ms == DEFAULT_TIMEOUT_MS


def test_explicit_config_path_must_exist(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="Config file not found"):
        load_config(str(tmp_path / "missing.yaml"), str(tmp_path))


def test_schema_errors_are_reported(tmp_path: Path) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text("timeout_ms: -5\nunknown: 1\n", encoding="utf-8")
    with pytest.raises(ValueError) as excinfo:
        load_config(str(path), str(tmp_path))
    message = str(excinfo.value)
    assert "Config schema validation failed" in message
    assert "timeout_ms" in message
    assert "unknown" in message


def test_top_level_must_be_mapping(tmp_path: Path) -> None:
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError, match="mapping"):
        load_config(str(path), str(tmp_path))


def test_environment_overrides_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / CONFIG_FILE_NAME).write_text("timeout_ms: 1500\n", encoding="utf-8")
    monkeypatch.setenv(ENV_TIMEOUT_MS, "2500")
    monkeypatch.setenv(ENV_PYTHON, "/opt/python/bin/python3")
    config = load_config(project_root=str(tmp_path))
    assert config.timeout_ms == 2500
    assert config.interpreter == "/opt/python/bin/python3"


@pytest.mark.parametrize("value", ["soon", "0"])
def test_invalid_timeout_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, value: str) -> None:
    monkeypatch.setenv(ENV_TIMEOUT_MS, value)
    with pytest.raises(ValueError, match=ENV_TIMEOUT_MS):
        load_config(project_root=str(tmp_path))
