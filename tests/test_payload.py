from __future__ import annotations

import json
from types import SimpleNamespace

from skilltest.execution import extract_trailing_json, interpret_output, normalize_hint
from skilltest.execution.wrapper import build_command, build_wrapper_source


def test_extract_trailing_json_ignores_leading_noise() -> None:
    text = 'log {not json}\n{"a": 1} trailing\n{"success": true, "result": {"passed": 1, "failed": 0}}\n\n'
    assert extract_trailing_json(text) == {"success": True, "result": {"passed": 1, "failed": 0}}


def test_extract_trailing_json_returns_outermost_object() -> None:
    text = json.dumps({"success": False, "error": "x", "nested": {"inner": {}}})
    assert extract_trailing_json(text)["error"] == "x"


def test_extract_trailing_json_requires_object_at_end() -> None:
    assert extract_trailing_json("") is None
    assert extract_trailing_json('{"success": true}\nbye') is None
    assert extract_trailing_json("[1, 2]") is None
    assert extract_trailing_json("{broken}") is None


def test_interpret_result_payload() -> None:
    stdout = 'hello\n{"success": true, "result": {"passed": 3, "failed": 0, "errors": []}}\n'
    result = interpret_output(stdout, "", 0)
    assert result.success is True
    assert result.passed_count == 3
    assert result.output == stdout


def test_interpret_result_payload_requires_zero_failures_and_exit_code() -> None:
    failing = interpret_output('{"success": true, "result": {"passed": 1, "failed": 1, "errors": ["e"]}}', "", 1)
    assert failing.success is False
    assert failing.errors == ["e"]

    bad_exit = interpret_output('{"success": true, "result": {"passed": 1, "failed": 0}}', "", 1)
    assert bad_exit.success is False
    assert bad_exit.failed_count == 0


def test_interpret_error_payload() -> None:
    result = interpret_output('{"success": false, "error": "boom", "stack": "Traceback"}', "", 1)
    assert result.success is False
    assert result.errors == ["boom"]
    assert result.failed_count == 1


def test_payload_failing_schema_falls_back_to_exit_code() -> None:
    negative = '{"success": true, "result": {"passed": -1, "failed": 0}}'
    assert interpret_output(negative, "", 0).success is True
    assert interpret_output(negative, "", 0).passed_count == 0

    not_bool = '{"success": "yes", "result": {"passed": 1, "failed": 0}}'
    result = interpret_output(not_bool, "stack trace here\n", 1)
    assert result.success is False
    assert result.errors == ["stack trace here"]


def test_unparseable_output_uses_exit_code() -> None:
    assert interpret_output("garbage", "", 0).success is True
    crashed = interpret_output("garbage", "  Segmentation fault  \n", -11)
    assert crashed.success is False
    assert crashed.errors == ["Segmentation fault"]
    silent = interpret_output("", "", 4)
    assert silent.errors == ["Test process exited with code 4"]


def test_normalize_hint_variants() -> None:
    assert normalize_hint(None) == {"passed": 0, "failed": 0, "errors": []}
    assert normalize_hint({"passed": "2", "failed": None}) == {"passed": 2, "failed": 0, "errors": []}
    assert normalize_hint(SimpleNamespace(passed=1, failed=2, errors=("a", 3))) == {
        "passed": 1,
        "failed": 2,
        "errors": ["a", "3"],
    }
    assert normalize_hint({"failed": -3, "errors": "single"}) == {"passed": 0, "failed": 0, "errors": ["single"]}
    assert normalize_hint({"passed": "many"})["passed"] == 0


def test_wrapper_source_compiles_and_embeds_candidates() -> None:
    source = build_wrapper_source()
    compile(source, "<wrapper>", "exec")
    assert "('default', 'run_tests', 'runTests')" in source
    assert "def normalize_hint" in source


def test_build_command_uses_unique_tokens(tmp_path) -> None:
    first = build_command(tmp_path / "a.tests.py", "python3")
    second = build_command(tmp_path / "a.tests.py", "python3")
    assert first[0] == "python3"
    assert first[1:3] == ["-u", "-c"]
    assert first[4] == str(tmp_path / "a.tests.py")
    assert first[5] != second[5]


def test_extract_trailing_json_with_long_brace_heavy_log() -> None:
    noise = "".join(f'{{"event": "step", "index": {index}}}\n' for index in range(20000))
    text = noise + '{"success": true, "result": {"passed": 7, "failed": 0}}\n'
    assert extract_trailing_json(text)["result"]["passed"] == 7
