"""Git-based change detection for incremental packaging.

Works out which skill directories changed since a baseline ref so that
unchanged skills are not repackaged.
"""

from pathlib import Path
from typing import Iterable, List, Optional

from loguru import logger

from skillpack_engine.base import RevisionControl
from skillpack_engine.config import PackagerConfig


def detect_baseline(config: PackagerConfig, revisions: RevisionControl) -> Optional[str]:
    """Pick the ref that change detection diffs against.

    Priority: explicit override, pull request base branch, most recent tag.
    None means there is no baseline and every skill should be packaged.
    """
    if config.baseline:
        logger.info(f"Using configured baseline: {config.baseline}")
        return config.baseline

    if config.is_pull_request:
        pr_base = f"origin/{config.base_ref}"
        logger.info(f"Detected PR context, using base: {pr_base}")
        return pr_base

    tag = revisions.latest_tag()
    if tag:
        logger.info(f"Detected most recent tag: {tag}")
        return tag

    logger.info("No previous release tag found")
    return None


def ensure_ref_available(revisions: RevisionControl, ref: str) -> None:
    """Make sure ref resolves locally, fetching it in shallow clones."""
    if revisions.has_ref(ref):
        return
    revisions.fetch_ref(ref)


def _normalize(path: str) -> str:
    return path.replace("\\", "/")


def _repo_relative(skill_dir: str, root: Optional[Path]) -> str:
    normalized = _normalize(skill_dir).rstrip("/")
    if root is None:
        return normalized
    try:
        return Path(skill_dir).resolve().relative_to(root).as_posix()
    except ValueError:
        return normalized


def filter_changed_skills(
    skill_dirs: Iterable[str], changed_files: Iterable[str], root: Optional[Path] = None
) -> List[str]:
    """Keep only skill directories containing at least one changed file.

    A changed path equal to the skill directory itself does not count; the
    file has to live inside the directory tree.

    Args:
        skill_dirs: Candidate skill directories, in order
        changed_files: Paths reported by the diff, relative to the repository root
        root: Repository root used to relativize skill directories, if known

    Returns:
        The matching skill directories in their original order
    """
    normalized_files = [_normalize(f) for f in changed_files]
    kept = []
    for skill_dir in skill_dirs:
        prefix = f"{_repo_relative(skill_dir, root)}/"
        if any(f.startswith(prefix) for f in normalized_files):
            kept.append(skill_dir)
    return kept


def select_changed_skills(
    skill_dirs: List[str], config: PackagerConfig, revisions: RevisionControl
) -> List[str]:
    """Apply change detection to discovered skill directories.

    Returns skill_dirs untouched when no baseline can be resolved.

    Raises:
        ChangeDetectionError: If the baseline cannot be fetched or diffed
    """
    baseline = detect_baseline(config, revisions)
    if baseline is None:
        logger.info("No baseline available, packaging all skills")
        return list(skill_dirs)

    ensure_ref_available(revisions, baseline)
    changed = revisions.changed_files(baseline)
    logger.debug(f"{len(changed)} file(s) changed since {baseline}")

    selected = filter_changed_skills(skill_dirs, changed, revisions.root)
    logger.info(f"{len(selected)}/{len(skill_dirs)} skill(s) changed since {baseline}")
    return selected
