"""Skill directory discovery.

Finds directories that contain a SKILL.md file below a scan root, or
normalizes an explicit list of skill paths supplied by the caller.
"""

import re
from pathlib import Path
from typing import List, Union

from skillpack_engine.config import DEFAULT_DISCOVERY_DEPTH

SKILL_FILE = "SKILL.md"

_LINE_SPLIT = re.compile(r"\r?\n")


def discover_skill_paths(skills_dir: Union[str, Path], max_depth: int = DEFAULT_DISCOVERY_DEPTH) -> List[str]:
    """Find every skill directory under skills_dir.

    Depth is counted from skills_dir: a SKILL.md directly inside it is depth 0.
    Files deeper than max_depth are ignored.

    Args:
        skills_dir: Root directory to scan
        max_depth: Deepest SKILL.md location still considered

    Returns:
        Sorted, de-duplicated list of skill directory paths
    """
    root = Path(skills_dir)
    if not root.is_dir():
        return []

    seen = set()
    paths: List[str] = []

    for skill_file in root.rglob(SKILL_FILE):
        if not skill_file.is_file():
            continue

        relative = skill_file.relative_to(root)
        depth = len(relative.parts) - 1
        if depth > max_depth:
            continue

        skill_dir = str(root / relative.parent)
        if skill_dir in seen:
            continue

        seen.add(skill_dir)
        paths.append(skill_dir)

    return sorted(paths)


def normalize_skill_paths(raw: str) -> List[str]:
    """Turn a newline-separated list of skill paths into skill directories.

    Blank lines are dropped, entries naming SKILL.md itself are rewritten to
    their directory, and duplicates are removed keeping first-seen order.
    """
    paths: List[str] = []
    seen = set()

    for line in _LINE_SPLIT.split(raw):
        entry = line.strip()
        if not entry:
            continue

        if entry == SKILL_FILE:
            entry = "."
        elif entry.endswith(("/" + SKILL_FILE, "\\" + SKILL_FILE)):
            entry = entry[: -len(SKILL_FILE) - 1] or "/"
        elif len(entry) > 1:
            entry = entry.rstrip("/\\") or entry

        if entry in seen:
            continue
        seen.add(entry)
        paths.append(entry)

    return paths
