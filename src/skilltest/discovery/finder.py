"""Map catalog units to ``<tests_dir>/<short_name>.tests.py`` modules.

Discovery never imports or executes anything; it only checks the
filesystem, so both lookups are pure for a given filesystem state.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence, Union

from skilltest.core.models import TestInfo

TEST_FILE_SUFFIX = ".tests.py"

PathLike = Union[str, Path]

_SHORT_NAME_KEYS = ("short_name", "shortName")
_KIND_KEYS = ("kind", "unit_kind", "type")
_DIR_KEYS = ("skill_dir", "unit_dir", "skillDir")


def resolve_tests_dir(project_root: PathLike, tests_dir: str = "tests") -> Optional[Path]:
    """Return the absolute tests directory, or ``None`` when it is missing."""

    path = (Path(project_root).expanduser() / tests_dir).resolve()
    return path if path.is_dir() else None


def expected_test_file(short_name: str, tests_dir: PathLike) -> Path:
    """Path a unit's test module must have, whether or not it exists."""

    return Path(tests_dir).expanduser().resolve() / f"{short_name}{TEST_FILE_SUFFIX}"


def find_all_tests(
    catalog: Optional[Mapping[str, Any]], tests_dir: Optional[PathLike]
) -> List[TestInfo]:
    """Return one ``TestInfo`` per catalog unit whose test module exists.

    Catalog iteration order is preserved. Units sharing a short name resolve
    to the same test module and are all reported.
    """

    if not catalog or tests_dir is None or not Path(tests_dir).is_dir():
        return []
    tests: List[TestInfo] = []
    for unit_name, record in catalog.items():
        info = _build_info(unit_name, record, tests_dir)
        if info is not None:
            tests.append(info)
    return tests


def find_test(
    catalog: Optional[Mapping[str, Any]], unit_name: str, tests_dir: Optional[PathLike]
) -> Optional[TestInfo]:
    """Return the ``TestInfo`` for one unit, or ``None`` if unknown or untested."""

    if not catalog or unit_name not in catalog:
        return None
    if tests_dir is None or not Path(tests_dir).is_dir():
        return None
    return _build_info(unit_name, catalog[unit_name], tests_dir)


def _build_info(unit_name: str, record: Any, tests_dir: PathLike) -> Optional[TestInfo]:
    short_name = _field(record, _SHORT_NAME_KEYS) or unit_name
    test_file = expected_test_file(str(short_name), tests_dir)
    if not test_file.is_file():
        return None
    unit_dir = _field(record, _DIR_KEYS)
    return TestInfo(
        unit_name=unit_name,
        short_name=str(short_name),
        unit_kind=str(_field(record, _KIND_KEYS) or "unknown"),
        test_file_path=test_file,
        unit_dir=Path(unit_dir) if unit_dir else None,
    )


def _field(record: Any, keys: Sequence[str]) -> Any:
    for key in keys:
        if isinstance(record, Mapping):
            value = record.get(key)
        else:
            value = getattr(record, key, None)
        if value:
            return value
    return None
