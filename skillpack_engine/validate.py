"""SKILL.md frontmatter parsing and structural validation."""

import re
from pathlib import Path
from typing import Optional, Union

from skillpack_engine.discovery import SKILL_FILE
from skillpack_engine.models import SkillMeta, ValidationResult

FRONTMATTER_PATTERN = re.compile(r"^---\r?\n([\s\S]*?)\r?\n---")
NAME_PATTERN = re.compile(r"^[a-z0-9-]+$")


def _strip_quotes(value: str) -> str:
    return re.sub(r"^['\"]|['\"]$", "", value)


def parse_frontmatter(content: str) -> Optional[SkillMeta]:
    """Parse the key/value header of a SKILL.md file.

    Only name, description, version and spec are read; other keys are
    ignored. Returns None when there is no header or no name.
    """
    match = FRONTMATTER_PATTERN.match(content)
    if not match:
        return None

    fields = {}
    for line in match.group(1).splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or ":" not in stripped:
            continue

        key, _, raw_value = stripped.partition(":")
        key = key.strip()
        value = _strip_quotes(raw_value.strip())

        if key in ("name", "description", "version"):
            fields[key] = value
        elif key == "spec":
            spec_match = re.match(r"^[+-]?\d+", value)
            if spec_match:
                fields["spec"] = int(spec_match.group(0))

    if not fields.get("name"):
        return None

    return SkillMeta(
        name=fields["name"],
        description=fields.get("description") or None,
        version=fields.get("version") or None,
        spec=fields.get("spec"),
    )


def read_skill_meta(skill_path: Union[str, Path]) -> Optional[SkillMeta]:
    """Read and parse the SKILL.md inside skill_path."""
    skill_md = Path(skill_path) / SKILL_FILE
    if not skill_md.is_file():
        return None
    return parse_frontmatter(skill_md.read_text(encoding="utf-8"))


def validate_skill(skill_path: Union[str, Path]) -> ValidationResult:
    """Check that a skill directory has a usable SKILL.md."""
    errors = []
    warnings = []

    skill_md = Path(skill_path) / SKILL_FILE
    if not skill_md.is_file():
        errors.append(f"{SKILL_FILE} not found in {skill_path}")
        return ValidationResult(valid=False, errors=errors, warnings=warnings)

    try:
        content = skill_md.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        errors.append(f"Could not read {skill_md}: {e}")
        return ValidationResult(valid=False, errors=errors, warnings=warnings)

    meta = parse_frontmatter(content)
    if meta is None:
        errors.append(f"Invalid or missing YAML frontmatter in {skill_md}")
        return ValidationResult(valid=False, errors=errors, warnings=warnings)

    if not meta.description:
        errors.append(f"Missing required 'description' field in {skill_md}")

    if meta.version and ("/" in meta.version or "\\" in meta.version or ".." in meta.version):
        errors.append(f"Version '{meta.version}' in {skill_md} must not contain path separators or '..'")

    if not meta.version:
        warnings.append(f"No 'version' field in {skill_md} - archive name will not include a version")

    if not NAME_PATTERN.match(meta.name):
        errors.append(f"Skill name '{meta.name}' should be lowercase with hyphens only")

    return ValidationResult(valid=not errors, errors=errors, warnings=warnings)
