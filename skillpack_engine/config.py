"""Run configuration shared by every pipeline component."""

from pathlib import Path
from typing import Optional
from pydantic import BaseModel, Field

DEFAULT_DISCOVERY_DEPTH = 3
DEFAULT_PLUGIN_LEVELS = 5


class PackagerConfig(BaseModel):
    """Configuration for one packaging run, built once at process start."""

    skill_paths: Optional[str] = Field(default=None, description="Newline-separated explicit skill paths")
    skills_dir: Path = Field(default=Path("skills"), description="Root directory scanned for SKILL.md files")
    output_dir: Path = Field(default=Path("dist"), description="Directory receiving archives and manifest")
    full_build: bool = Field(default=False, description="Skip change detection and package everything")
    baseline: Optional[str] = Field(default=None, description="Explicit baseline ref for change detection")

    release: bool = Field(default=False, description="Create releases after packaging")
    release_prefix: str = Field(default="", description="Prefix prepended to every release tag")
    draft: bool = False

    event_name: Optional[str] = Field(default=None, description="CI event that triggered the run")
    base_ref: Optional[str] = Field(default=None, description="Pull request base branch")
    output_file: Optional[Path] = Field(default=None, description="File receiving key=value pipeline outputs")

    github_token: Optional[str] = None
    github_repository: Optional[str] = Field(default=None, description="owner/repo used for releases")
    github_api_url: str = "https://api.github.com"

    max_discovery_depth: int = Field(default=DEFAULT_DISCOVERY_DEPTH, ge=0)
    max_plugin_levels: int = Field(default=DEFAULT_PLUGIN_LEVELS, ge=0)

    @property
    def has_explicit_paths(self) -> bool:
        return bool(self.skill_paths and self.skill_paths.strip())

    @property
    def is_pull_request(self) -> bool:
        return self.event_name == "pull_request" and bool(self.base_ref)
