"""
Core models for the skillpack engine.

Bundle-level records produced while validating skills and publishing releases.
Manifest records live in skillpack_engine.bundle.schema.
"""

from typing import List, Optional
from pydantic import BaseModel, Field


class SkillMeta(BaseModel):
    """Fields read from the frontmatter block of a SKILL.md file."""

    name: str
    description: Optional[str] = None
    version: Optional[str] = None
    spec: Optional[int] = Field(default=None, description="Skill spec version declared by the author")


class ValidationResult(BaseModel):
    """Outcome of structural validation for one skill directory."""

    valid: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class ReleaseResult(BaseModel):
    """A release that was created for one group or standalone skill."""

    tag: str
    url: str
    plugin: Optional[str] = Field(default=None, description="Plugin name when the release covers a plugin group")
    assets: List[str] = Field(default_factory=list)
