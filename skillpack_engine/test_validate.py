"""Tests for frontmatter parsing and skill validation."""

from skillpack_engine.validate import parse_frontmatter, validate_skill


def _write_skill(tmp_path, frontmatter: str):
    skill_dir = tmp_path / "skill"
    skill_dir.mkdir()
    (skill_dir / "SKILL.md").write_text(frontmatter, encoding="utf-8")
    return skill_dir


def test_parse_all_fields():
    content = "---\nname: my-skill\ndescription: 'Does things: well'\nversion: \"1.2.0\"\nspec: 2\n---\n# Body\n"

    meta = parse_frontmatter(content)

    assert meta.name == "my-skill"
    assert meta.description == "Does things: well"
    assert meta.version == "1.2.0"
    assert meta.spec == 2


def test_parse_ignores_unknown_keys_comments_and_bad_spec():
    content = "---\r\n# comment\r\nname: tool\r\nowner: someone\r\nspec: latest\r\nno colon here\r\n---\r\n"

    meta = parse_frontmatter(content)

    assert meta.name == "tool"
    assert meta.spec is None
    assert meta.version is None


def test_parse_requires_block_and_name():
    assert parse_frontmatter("# Just markdown\n") is None
    assert parse_frontmatter("---\ndescription: nameless\n---\n") is None
    assert parse_frontmatter("\n---\nname: late\n---\n") is None


def test_valid_skill_without_version_warns(tmp_path):
    skill_dir = _write_skill(tmp_path, "---\nname: good-skill\ndescription: fine\n---\n")

    result = validate_skill(skill_dir)

    assert result.valid
    assert result.errors == []
    assert len(result.warnings) == 1


def test_invalid_name(tmp_path):
    skill_dir = _write_skill(tmp_path, "---\nname: My_Skill\ndescription: bad\nversion: 1.0.0\n---\n")

    result = validate_skill(skill_dir)

    assert not result.valid
    assert "My_Skill" in result.errors[0]


def test_missing_description(tmp_path):
    skill_dir = _write_skill(tmp_path, "---\nname: skill\nversion: 1.0.0\n---\n")

    result = validate_skill(skill_dir)

    assert not result.valid
    assert "description" in result.errors[0]


def test_missing_skill_file(tmp_path):
    result = validate_skill(tmp_path)

    assert not result.valid
    assert "SKILL.md not found" in result.errors[0]


def test_missing_frontmatter(tmp_path):
    skill_dir = _write_skill(tmp_path, "no frontmatter")

    result = validate_skill(skill_dir)

    assert not result.valid
    assert "frontmatter" in result.errors[0]


def test_version_with_path_separators_is_rejected(tmp_path):
    skill_dir = _write_skill(tmp_path, "---\nname: escape\ndescription: bad\nversion: ../../x\n---\n")

    result = validate_skill(skill_dir)

    assert not result.valid
    assert any("../../x" in error for error in result.errors)
