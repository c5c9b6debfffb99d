"""Catalog loading and test discovery."""
from .catalog import SKILL_DEFINITION_FILES, SkillRecord, load_catalog
from .finder import TEST_FILE_SUFFIX, expected_test_file, find_all_tests, find_test, resolve_tests_dir

__all__ = [
    "SKILL_DEFINITION_FILES",
    "SkillRecord",
    "load_catalog",
    "TEST_FILE_SUFFIX",
    "find_all_tests",
    "find_test",
    "resolve_tests_dir",
    "expected_test_file",
]
