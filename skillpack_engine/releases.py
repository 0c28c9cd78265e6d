"""Release creation for packaged skill groups."""

from pathlib import Path
from typing import List, Optional

import requests
from loguru import logger

from skillpack_engine.base import ReleasePublisher
from skillpack_engine.bundle.schema import SkillGroup
from skillpack_engine.errors import ReleaseError
from skillpack_engine.models import ReleaseResult

DEFAULT_VERSION = "0.0.0"

_CONTENT_TYPES = {
    ".zip": "application/zip",
    ".json": "application/json",
}


class GitHubReleasePublisher(ReleasePublisher):
    """Creates GitHub releases through the REST API and uploads assets to them."""

    def __init__(
        self,
        repository: str,
        token: str,
        api_url: str = "https://api.github.com",
        session: Optional[requests.Session] = None,
        timeout: int = 30,
    ):
        if not repository:
            raise ValueError("GitHub repository (owner/repo) is required to create releases")
        if not token:
            raise ValueError("GitHub token is required to create releases")
        self.repository = repository
        self.api_url = api_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self.headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def publish(self, tag: str, assets: List[str], draft: bool = False) -> str:
        """Create the release as a draft, attach every asset, then publish it.

        A release whose assets could not all be uploaded is deleted again so
        that a rerun can reuse the tag.
        """
        logger.info(f"Creating release {tag}...")

        payload = {"tag_name": tag, "name": tag, "draft": True, "generate_release_notes": True}
        try:
            response = self.session.post(
                f"{self.api_url}/repos/{self.repository}/releases",
                json=payload,
                headers=self.headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            release = response.json()
            release_id = release["id"]
            upload_url = release["upload_url"].split("{", 1)[0]
            url = release.get("html_url") or ""
        except requests.exceptions.RequestException as e:
            raise ReleaseError(f"Failed to create release {tag}: {e}") from e
        except (KeyError, ValueError) as e:
            raise ReleaseError(f"Invalid release response for {tag}: {e}") from e

        try:
            if not url.startswith("http"):
                raise ReleaseError(f"Failed to parse release URL for {tag}: {url!r}")

            for asset in assets:
                self._upload_asset(tag, upload_url, Path(asset))

            if not draft:
                url = self._publish_draft(tag, release_id)
        except ReleaseError:
            self._delete_release(tag, release_id)
            raise

        logger.info(f"Created release {tag}: {url}")
        return url

    def _release_url(self, release_id) -> str:
        return f"{self.api_url}/repos/{self.repository}/releases/{release_id}"

    def _publish_draft(self, tag: str, release_id) -> str:
        try:
            response = self.session.patch(
                self._release_url(release_id), json={"draft": False}, headers=self.headers, timeout=self.timeout
            )
            response.raise_for_status()
            url = response.json().get("html_url") or ""
        except requests.exceptions.RequestException as e:
            raise ReleaseError(f"Failed to publish release {tag}: {e}") from e
        except ValueError as e:
            raise ReleaseError(f"Invalid release response for {tag}: {e}") from e

        if not url.startswith("http"):
            raise ReleaseError(f"Failed to parse release URL for {tag}: {url!r}")
        return url

    def _delete_release(self, tag: str, release_id) -> None:
        try:
            response = self.session.delete(self._release_url(release_id), headers=self.headers, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.warning(f"Could not delete incomplete release {tag}: {e}")
            return
        logger.warning(f"Deleted incomplete release {tag}")

    def _upload_asset(self, tag: str, upload_url: str, asset: Path) -> None:
        headers = dict(self.headers)
        headers["Content-Type"] = _CONTENT_TYPES.get(asset.suffix, "application/octet-stream")
        try:
            with open(asset, "rb") as f:
                response = self.session.post(
                    upload_url, params={"name": asset.name}, data=f, headers=headers, timeout=300
                )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise ReleaseError(f"Failed to upload {asset.name} to release {tag}: {e}") from e
        except OSError as e:
            raise ReleaseError(f"Could not read asset {asset} for {tag}: {e}") from e


def release_tag(prefix: str, name: str, version: Optional[str] = None) -> str:
    """Tag for a release, e.g. rel-pack-v2.0.0."""
    return f"{prefix}{name}-v{version or DEFAULT_VERSION}"


def create_releases_from_groups(
    groups: List[SkillGroup],
    manifest_path: Path,
    publisher: ReleasePublisher,
    prefix: str = "",
    draft: bool = False,
) -> List[ReleaseResult]:
    """Create one release per plugin group and one per standalone skill.

    Every release carries the manifest. A failed release is logged and the
    remaining groups are still attempted.

    Args:
        groups: Groups produced by group_skills_by_plugin
        manifest_path: manifest.json attached to every release
        publisher: Release backend
        prefix: Prefix prepended to every tag
        draft: Create releases as drafts

    Returns:
        Releases that were created successfully
    """
    results: List[ReleaseResult] = []

    for group in groups:
        if group.plugin:
            tag = release_tag(prefix, group.plugin.name, group.plugin.version)
            assets = [str(manifest_path)] + [skill.path for skill in group.skills]
            try:
                url = publisher.publish(tag, assets, draft=draft)
            except Exception as e:
                logger.error(f"Failed to create release for plugin {group.plugin.name}: {e}")
                continue
            results.append(ReleaseResult(tag=tag, url=url, plugin=group.plugin.name, assets=assets))
            continue

        for skill in group.skills:
            tag = release_tag(prefix, skill.name, skill.version)
            assets = [str(manifest_path), skill.path]
            try:
                url = publisher.publish(tag, assets, draft=draft)
            except Exception as e:
                logger.error(f"Failed to create release for standalone skill {skill.name}: {e}")
                continue
            results.append(ReleaseResult(tag=tag, url=url, assets=assets))

    return results
