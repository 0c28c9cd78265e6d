"""Plugin grouping.

A plugin.json somewhere above a skill directory groups every skill below it
into one release. Skills without a plugin are released on their own.
"""

import json
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from loguru import logger

from skillpack_engine.bundle.schema import PackageResult, PluginMeta, SkillGroup
from skillpack_engine.config import DEFAULT_PLUGIN_LEVELS

PLUGIN_FILE = "plugin.json"

# Returns file content, or None when the file does not exist
ReadText = Callable[[Path], Optional[str]]


def read_text_if_exists(path: Path) -> Optional[str]:
    """Default descriptor reader backed by the real filesystem."""
    if not path.is_file():
        return None
    return path.read_text(encoding="utf-8")


def parse_plugin_descriptor(content: str, plugin_dir: Union[str, Path]) -> PluginMeta:
    """Build PluginMeta from plugin.json content.

    Raises:
        ValueError: If the content is not a JSON object with a non-empty string name
    """
    data = json.loads(content)
    if not isinstance(data, dict):
        raise ValueError("plugin.json must contain a JSON object")

    name = data.get("name")
    if not isinstance(name, str) or not name:
        raise ValueError("missing required 'name' field")

    version = data.get("version")
    return PluginMeta(
        name=name,
        version=version if isinstance(version, str) and version else None,
        path=str(plugin_dir),
    )


def find_plugin_for_skill(
    skill_path: Union[str, Path],
    read_text: ReadText = read_text_if_exists,
    max_levels: int = DEFAULT_PLUGIN_LEVELS,
) -> Optional[PluginMeta]:
    """Walk up from a skill directory looking for plugin.json.

    Parent directories are checked one level at a time, nearest first, for at
    most max_levels levels or until the filesystem root. An unreadable or
    invalid descriptor is skipped with a warning and the search continues
    upward.

    Args:
        skill_path: Skill directory to start from
        read_text: Reader returning descriptor content or None when absent
        max_levels: Number of parent levels to check

    Returns:
        PluginMeta for the nearest valid descriptor, or None
    """
    current = Path(skill_path).resolve()

    for _ in range(max_levels):
        parent = current.parent
        if parent == current:
            break
        current = parent

        descriptor_path = current / PLUGIN_FILE
        try:
            content = read_text(descriptor_path)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read {descriptor_path}: {e}")
            continue

        if content is None:
            continue

        try:
            return parse_plugin_descriptor(content, current)
        except ValueError as e:
            logger.warning(f"Ignoring {descriptor_path}: {e}")
            continue

    return None


def group_skills_by_plugin(
    skills: Sequence[Tuple[PackageResult, Optional[str]]],
    read_text: ReadText = read_text_if_exists,
) -> List[SkillGroup]:
    """Fold packaged skills into release groups.

    Skills sharing the same plugin directory end up in one group, keyed by
    the directory and not by the declared plugin name. Skills without a plugin
    each get a standalone group. Groups keep first-encounter order.

    The descriptor is read again here; if it disappeared or became invalid
    since discovery, its skills degrade to standalone groups.

    Args:
        skills: Packaged skills paired with their plugin directory, if any

    Returns:
        Ordered list of SkillGroups
    """
    plugin_members: Dict[str, List[PackageResult]] = {}
    ordered: List[Tuple[Optional[str], List[PackageResult]]] = []

    for result, plugin_path in skills:
        if not plugin_path:
            ordered.append((None, [result]))
            continue

        members = plugin_members.get(plugin_path)
        if members is None:
            members = plugin_members[plugin_path] = []
            ordered.append((plugin_path, members))
        members.append(result)

    groups: List[SkillGroup] = []
    for plugin_path, members in ordered:
        if plugin_path is None:
            groups.append(SkillGroup(skills=members))
            continue

        descriptor_path = Path(plugin_path) / PLUGIN_FILE
        try:
            content = read_text(descriptor_path)
            if content is None:
                raise FileNotFoundError(f"{descriptor_path} no longer exists")
            plugin = parse_plugin_descriptor(content, plugin_path)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to read {descriptor_path}, treating skills as standalone: {e}")
            groups.extend(SkillGroup(skills=[member]) for member in members)
            continue

        groups.append(SkillGroup(plugin=plugin, skills=members))

    return groups
