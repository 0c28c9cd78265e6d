"""Configuration loading for the CLI.

The process environment is read here, once, and turned into a
PackagerConfig that the engine receives explicitly.
"""

import os
from typing import Any, Mapping, Optional

from loguru import logger

from skillpack_engine.base import ReleasePublisher, RevisionControl
from skillpack_engine.gitrepo import GitRevisionControl
from skillpack_engine.config import PackagerConfig
from skillpack_engine.errors import ChangeDetectionError
from skillpack_engine.releases import GitHubReleasePublisher


def _env(environ: Mapping[str, str], *names: str) -> Optional[str]:
    for name in names:
        value = environ.get(name)
        if value:
            return value
    return None


def load_config(environ: Optional[Mapping[str, str]] = None, **options: Any) -> PackagerConfig:
    """Build the run configuration from CLI options and CI environment variables.

    Options left as None fall back to PackagerConfig defaults.
    """
    environ = os.environ if environ is None else environ

    values = {
        "event_name": _env(environ, "GITHUB_EVENT_NAME"),
        "base_ref": _env(environ, "GITHUB_BASE_REF"),
        "output_file": _env(environ, "GITHUB_OUTPUT"),
        "github_token": _env(environ, "GITHUB_TOKEN", "GH_TOKEN"),
        "github_repository": _env(environ, "GITHUB_REPOSITORY"),
        "github_api_url": _env(environ, "GITHUB_API_URL"),
    }
    values.update(options)

    return PackagerConfig(**{key: value for key, value in values.items() if value is not None})


def open_revision_control(config: PackagerConfig, repo_path: str = ".") -> Optional[RevisionControl]:
    """Git access for change detection, or None when it is not needed or not possible."""
    if config.has_explicit_paths or config.full_build:
        return None
    try:
        return GitRevisionControl(repo_path)
    except ChangeDetectionError as e:
        logger.warning(f"{e} - change detection disabled")
        return None


def open_publisher(config: PackagerConfig) -> ReleasePublisher:
    """Release backend for the configured repository."""
    return GitHubReleasePublisher(
        repository=config.github_repository or "",
        token=config.github_token or "",
        api_url=config.github_api_url,
    )
