import json
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from loguru import logger

from skillpack_engine.bundle.schema import Manifest, PackageResult, SkillGroup

MANIFEST_FILE = "manifest.json"


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def assemble_manifest(
    results: List[PackageResult], groups: Optional[List[SkillGroup]] = None, generated: Optional[str] = None
) -> Manifest:
    """Combine packaged skills and their groups into a manifest.

    The flat skills list keeps processing order and is never de-duplicated.
    groups is only attached when at least one group exists.
    """
    manifest = Manifest(generated=generated or _timestamp(), skills=list(results))
    if groups:
        manifest.groups = list(groups)
    return manifest


def write_manifest(
    output_dir: Path, results: List[PackageResult], groups: Optional[List[SkillGroup]] = None
) -> Path:
    """Write manifest.json into output_dir and return its path."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    manifest = assemble_manifest(results, groups)
    manifest_path = output_dir / MANIFEST_FILE

    with open(manifest_path, "w", encoding="utf-8") as f:
        json.dump(manifest.to_json_dict(), f, indent=2)

    logger.info(f"Manifest written to {manifest_path}")
    return manifest_path


def load_manifest(manifest_path: Path) -> Manifest:
    """Read a manifest.json written by write_manifest."""
    with open(manifest_path, "r", encoding="utf-8") as f:
        return Manifest.model_validate(json.load(f))
