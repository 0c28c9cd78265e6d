"""Packaging pipeline.

selection -> validation/archiving/hashing -> plugin grouping -> manifest ->
optional releases -> pipeline outputs. Everything runs sequentially; a
failure in one skill or one release never stops the others.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from loguru import logger

from skillpack_engine.base import Archiver, ReleasePublisher, RevisionControl
from skillpack_engine.bundle.manifest import load_manifest, write_manifest
from skillpack_engine.bundle.schema import PackageResult, SkillGroup
from skillpack_engine.bundle.writer import ZipArchiver, archive_filename, sha256_file
from skillpack_engine.changes import select_changed_skills
from skillpack_engine.config import PackagerConfig
from skillpack_engine.discovery import discover_skill_paths, normalize_skill_paths
from skillpack_engine.errors import ArchiveError
from skillpack_engine.models import ReleaseResult
from skillpack_engine.outputs import ActionOutputs
from skillpack_engine.plugins import ReadText, find_plugin_for_skill, group_skills_by_plugin, read_text_if_exists
from skillpack_engine.releases import create_releases_from_groups
from skillpack_engine.validate import read_skill_meta, validate_skill


@dataclass
class PipelineResult:
    """Everything a packaging run produced."""

    skill_paths: List[str]
    results: List[PackageResult] = field(default_factory=list)
    groups: List[SkillGroup] = field(default_factory=list)
    manifest_path: Optional[Path] = None
    releases: List[ReleaseResult] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return len(self.results) == len(self.skill_paths)


def _dump(model) -> dict:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def select_skill_paths(config: PackagerConfig, revisions: Optional[RevisionControl] = None) -> List[str]:
    """Decide which skill directories this run processes.

    Explicit paths win over everything. Otherwise skills are discovered under
    skills_dir and narrowed by change detection unless a full build was
    requested or no revision control is available.

    Raises:
        ChangeDetectionError: If a resolved baseline cannot be fetched or diffed
    """
    if config.has_explicit_paths:
        return normalize_skill_paths(config.skill_paths)

    skill_paths = discover_skill_paths(config.skills_dir, config.max_discovery_depth)

    if config.full_build:
        logger.info("Full build requested, skipping change detection")
        return skill_paths

    if not skill_paths:
        return skill_paths

    if revisions is None:
        logger.warning("No revision control available, packaging all skills")
        return skill_paths

    return select_changed_skills(skill_paths, config, revisions)


def package_skill(
    skill_path: str,
    output_dir: Path,
    archiver: Archiver,
    claimed_names: Dict[str, str],
    claimed_archives: Optional[Dict[str, str]] = None,
) -> Optional[PackageResult]:
    """Validate, archive and hash one skill.

    claimed_names maps skill names already packaged in this run to their
    directory, and claimed_archives does the same for archive file names.
    A skill whose name or archive file is already claimed is rejected so
    that it cannot overwrite an earlier archive.

    Returns:
        PackageResult, or None when the skill was rejected
    """
    if claimed_archives is None:
        claimed_archives = {}

    validation = validate_skill(skill_path)

    for warning in validation.warnings:
        logger.warning(warning)

    if not validation.valid:
        for error in validation.errors:
            logger.error(error)
        return None

    meta = read_skill_meta(skill_path)
    if meta is None:
        logger.error(f"Missing frontmatter in {Path(skill_path) / 'SKILL.md'}")
        return None

    if meta.name in claimed_names:
        logger.error(
            f"Duplicate skill name '{meta.name}' in {skill_path}, already packaged from {claimed_names[meta.name]}"
        )
        return None

    filename = archive_filename(meta.name, meta.version)
    if filename in claimed_archives:
        logger.error(
            f"Archive {filename} for {skill_path} collides with the archive packaged from {claimed_archives[filename]}"
        )
        return None

    out_path = Path(output_dir) / filename

    try:
        written = Path(archiver.archive(Path(skill_path), out_path))
    except ArchiveError as e:
        logger.error(str(e))
        return None

    try:
        size = written.stat().st_size
        digest = sha256_file(written)
    except OSError as e:
        logger.error(f"Could not read archive {written} for {skill_path}: {e}")
        return None

    claimed_names[meta.name] = skill_path
    claimed_archives[filename] = skill_path
    if written.name != filename:
        claimed_archives[written.name] = skill_path

    display_version = f" v{meta.version}" if meta.version else ""
    logger.info(f"Packaged {meta.name}{display_version} -> {written.name} ({size / 1024:.1f}KB)")

    return PackageResult(
        name=meta.name,
        version=meta.version,
        spec_version=meta.spec,
        path=str(written),
        size=size,
        integrity_token=digest,
    )


def run_pipeline(
    config: PackagerConfig,
    archiver: Optional[Archiver] = None,
    revisions: Optional[RevisionControl] = None,
    publisher: Optional[ReleasePublisher] = None,
    outputs: Optional[ActionOutputs] = None,
    read_text: ReadText = read_text_if_exists,
) -> PipelineResult:
    """Run a full packaging pass.

    Args:
        config: Run configuration
        archiver: Archive backend, zip by default
        revisions: Revision control for change detection; None packages everything
        publisher: Release backend, required when config.release is set
        outputs: Sink for pipeline outputs
        read_text: Reader used for plugin.json lookups

    Returns:
        PipelineResult describing what was produced
    """
    if config.release and publisher is None:
        raise ValueError("A release publisher is required when releases are requested")

    archiver = archiver or ZipArchiver()
    outputs = outputs or ActionOutputs(config.output_file)
    output_dir = Path(config.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    skill_paths = select_skill_paths(config, revisions)
    run = PipelineResult(skill_paths=skill_paths)

    if not skill_paths:
        logger.info("No skills found to process")
        return run

    logger.info(f"Found {len(skill_paths)} skill(s) to process")

    packaged = []
    claimed_names: Dict[str, str] = {}
    claimed_archives: Dict[str, str] = {}
    for skill_path in skill_paths:
        result = package_skill(skill_path, output_dir, archiver, claimed_names, claimed_archives)
        if result is None:
            continue
        plugin = find_plugin_for_skill(skill_path, read_text, config.max_plugin_levels)
        packaged.append((result, plugin.path if plugin else None))

    run.results = [result for result, _ in packaged]
    run.groups = group_skills_by_plugin(packaged, read_text)
    run.manifest_path = write_manifest(output_dir, run.results, run.groups)

    outputs.set("packages", [_dump(result) for result in run.results])
    outputs.set("manifest", str(run.manifest_path))
    outputs.set("valid", run.valid)
    outputs.set("groups", [_dump(group) for group in run.groups])

    if config.release:
        if run.groups:
            run.releases = create_releases_from_groups(
                run.groups, run.manifest_path, publisher, prefix=config.release_prefix, draft=config.draft
            )
        else:
            logger.info("Nothing packaged, no releases created")
        outputs.set("releases", [_dump(release) for release in run.releases])

    logger.info(f"Packaged {len(run.results)}/{len(skill_paths)} skill(s)")
    return run


def validate_skills(
    config: PackagerConfig,
    revisions: Optional[RevisionControl] = None,
    outputs: Optional[ActionOutputs] = None,
) -> bool:
    """Validate the selected skills without writing archives."""
    outputs = outputs or ActionOutputs(config.output_file)
    skill_paths = select_skill_paths(config, revisions)

    if not skill_paths:
        logger.info("No skills found to process")
        return True

    all_valid = True
    for skill_path in skill_paths:
        logger.info(f"Validating {skill_path}...")
        result = validate_skill(skill_path)

        for warning in result.warnings:
            logger.warning(warning)
        for error in result.errors:
            logger.error(error)

        if not result.valid:
            all_valid = False

    outputs.set("valid", all_valid)
    return all_valid


def release_manifest(
    manifest_path: Path,
    publisher: ReleasePublisher,
    prefix: str = "",
    draft: bool = False,
    outputs: Optional[ActionOutputs] = None,
) -> List[ReleaseResult]:
    """Create releases for a manifest written by an earlier run."""
    manifest = load_manifest(manifest_path)
    groups = manifest.groups or [SkillGroup(skills=[skill]) for skill in manifest.skills]

    releases = create_releases_from_groups(groups, Path(manifest_path), publisher, prefix=prefix, draft=draft)
    if outputs is not None:
        outputs.set("releases", [_dump(release) for release in releases])
    return releases
