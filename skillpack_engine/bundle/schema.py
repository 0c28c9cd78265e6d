"""Manifest schema - contract between the packager and release consumers."""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class PackageResult(BaseModel):
    """A skill that was archived successfully."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    version: Optional[str] = None
    spec_version: Optional[int] = Field(default=None, alias="specVersion")
    path: str = Field(..., description="Archive path inside the output directory")
    size: int = Field(..., description="Archive size in bytes")
    integrity_token: str = Field(..., alias="integrityToken", description="sha256 hex digest of the archive")


class PluginMeta(BaseModel):
    """Group descriptor read from a plugin.json above one or more skills."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    version: Optional[str] = None
    path: str = Field(..., description="Directory containing plugin.json")


class SkillGroup(BaseModel):
    """Skills released together. A group without a plugin has exactly one skill."""

    model_config = ConfigDict(populate_by_name=True)

    plugin: Optional[PluginMeta] = Field(default=None, alias="group")
    skills: List[PackageResult] = Field(default_factory=list, alias="bundles")


class Manifest(BaseModel):
    """Terminal artifact of a packaging run."""

    model_config = ConfigDict(populate_by_name=True)

    generated: str
    skills: List[PackageResult] = Field(default_factory=list, alias="bundles")
    groups: Optional[List[SkillGroup]] = None

    def to_json_dict(self) -> dict:
        """Serialize with wire names, dropping unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
