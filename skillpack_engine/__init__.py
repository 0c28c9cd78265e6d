"""
Skillpack engine - packages SKILL.md directories into versioned, checksummed archives.
"""

from skillpack_engine.config import PackagerConfig
from skillpack_engine.pipeline import PipelineResult, release_manifest, run_pipeline, validate_skills

__all__ = ["PackagerConfig", "PipelineResult", "run_pipeline", "validate_skills", "release_manifest"]
