"""Directory-backed skill catalog.

Each skill lives in its own directory under the skills root and is defined
by exactly one typed markdown file, e.g. ``.AchillesSkills/area/tskill.md``.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Union

SKILL_DEFINITION_FILES = {
    "tskill.md": "tskill",
    "cskill.md": "cskill",
    "iskill.md": "iskill",
    "oskill.md": "oskill",
    "mskill.md": "mskill",
    "skill.md": "skill",
}


@dataclass(frozen=True)
class SkillRecord:
    """Catalog metadata for one skill."""

    name: str
    short_name: str
    kind: str
    skill_dir: Path
    definition_file: Path


def load_catalog(skills_root: Union[str, Path]) -> Dict[str, SkillRecord]:
    """Return skill records keyed by directory name, in sorted order."""

    root = Path(skills_root).expanduser()
    catalog: Dict[str, SkillRecord] = {}
    if not root.is_dir():
        return catalog
    for entry in sorted(root.iterdir(), key=lambda p: p.name):
        if not entry.is_dir() or entry.name.startswith((".", "_")):
            continue
        record = _read_skill_dir(entry.resolve())
        if record is not None:
            catalog[record.name] = record
    return catalog


def _read_skill_dir(skill_dir: Path) -> SkillRecord | None:
    for file_name, kind in SKILL_DEFINITION_FILES.items():
        definition = skill_dir / file_name
        if definition.is_file():
            return SkillRecord(
                name=skill_dir.name,
                short_name=skill_dir.name,
                kind=kind,
                skill_dir=skill_dir,
                definition_file=definition,
            )
    return None
