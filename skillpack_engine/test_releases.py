"""Tests for release tag derivation and publishing."""

from typing import List

import pytest
import requests

from skillpack_engine.base import ReleasePublisher
from skillpack_engine.bundle.schema import PackageResult, PluginMeta, SkillGroup
from skillpack_engine.errors import ReleaseError
from skillpack_engine.releases import GitHubReleasePublisher, create_releases_from_groups, release_tag


class FakePublisher(ReleasePublisher):
    def __init__(self, failing=()):
        self.failing = set(failing)
        self.calls: List[tuple] = []

    def publish(self, tag: str, assets: List[str], draft: bool = False) -> str:
        self.calls.append((tag, list(assets), draft))
        if tag in self.failing:
            raise ReleaseError(f"Failed to create release {tag}")
        return f"https://example.com/releases/{tag}"


def _result(name: str, version=None) -> PackageResult:
    return PackageResult(name=name, version=version, path=f"dist/{name}.zip", size=1, integrity_token="f" * 64)


def test_release_tag():
    assert release_tag("rel-", "pack", "2.0.0") == "rel-pack-v2.0.0"
    assert release_tag("", "solo", None) == "solo-v0.0.0"


def test_plugin_group_and_standalone_releases():
    groups = [
        SkillGroup(plugin=PluginMeta(name="pack", version="2.0.0", path="/p"), skills=[_result("a"), _result("b")]),
        SkillGroup(skills=[_result("solo")]),
    ]
    publisher = FakePublisher()

    releases = create_releases_from_groups(groups, "dist/manifest.json", publisher, prefix="rel-", draft=True)

    assert [r.tag for r in releases] == ["rel-pack-v2.0.0", "rel-solo-v0.0.0"]
    assert releases[0].plugin == "pack"
    assert releases[0].assets == ["dist/manifest.json", "dist/a.zip", "dist/b.zip"]
    assert releases[1].plugin is None
    assert releases[1].assets == ["dist/manifest.json", "dist/solo.zip"]
    assert all(call[2] for call in publisher.calls)


def test_plugin_without_version_defaults():
    groups = [SkillGroup(plugin=PluginMeta(name="pack", path="/p"), skills=[_result("a", "3.0.0")])]

    releases = create_releases_from_groups(groups, "m.json", FakePublisher())

    assert releases[0].tag == "pack-v0.0.0"


def test_failure_is_isolated(log_messages):
    groups = [
        SkillGroup(skills=[_result("one", "1.0.0")]),
        SkillGroup(plugin=PluginMeta(name="pack", version="1.0.0", path="/p"), skills=[_result("two")]),
        SkillGroup(skills=[_result("three")]),
    ]
    publisher = FakePublisher(failing={"pack-v1.0.0"})

    releases = create_releases_from_groups(groups, "m.json", publisher)

    assert [r.tag for r in releases] == ["one-v1.0.0", "three-v0.0.0"]
    assert len(publisher.calls) == 3
    assert any(m.startswith("ERROR") and "pack" in m for m in log_messages)


class FakeResponse:
    def __init__(self, payload=None, status_code=201):
        self.payload = payload or {}
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.payload


class FakeSession:
    def __init__(self, responses):
        self.responses = list(responses)
        self.requests = []

    def _respond(self, method, url, kwargs):
        self.requests.append((method, url, kwargs))
        return self.responses.pop(0)

    def post(self, url, **kwargs):
        return self._respond("POST", url, kwargs)

    def patch(self, url, **kwargs):
        return self._respond("PATCH", url, kwargs)

    def delete(self, url, **kwargs):
        return self._respond("DELETE", url, kwargs)


def _created(tag: str) -> FakeResponse:
    return FakeResponse(
        {
            "id": 7,
            "upload_url": "https://uploads.example.com/releases/7/assets{?name,label}",
            "html_url": f"https://github.com/o/r/releases/tag/untagged-{tag}",
        }
    )


def test_github_publisher_creates_draft_release_and_uploads(tmp_path):
    asset = tmp_path / "one-v1.0.0.zip"
    asset.write_bytes(b"zip")
    session = FakeSession([_created("one-v1.0.0"), FakeResponse()])
    publisher = GitHubReleasePublisher("o/r", "token", session=session)

    url = publisher.publish("one-v1.0.0", [str(asset)], draft=True)

    assert url == "https://github.com/o/r/releases/tag/untagged-one-v1.0.0"
    assert [r[0] for r in session.requests] == ["POST", "POST"]
    _, create_url, create_kwargs = session.requests[0]
    assert create_url == "https://api.github.com/repos/o/r/releases"
    assert create_kwargs["json"]["tag_name"] == "one-v1.0.0"
    assert create_kwargs["json"]["draft"] is True
    _, upload_url, upload_kwargs = session.requests[1]
    assert upload_url == "https://uploads.example.com/releases/7/assets"
    assert upload_kwargs["params"] == {"name": "one-v1.0.0.zip"}
    assert upload_kwargs["headers"]["Content-Type"] == "application/zip"


def test_github_publisher_publishes_after_uploads(tmp_path):
    asset = tmp_path / "one-v1.0.0.zip"
    asset.write_bytes(b"zip")
    published = FakeResponse({"html_url": "https://github.com/o/r/releases/tag/one-v1.0.0"}, status_code=200)
    session = FakeSession([_created("one-v1.0.0"), FakeResponse(), published])
    publisher = GitHubReleasePublisher("o/r", "token", session=session)

    url = publisher.publish("one-v1.0.0", [str(asset)])

    assert url == "https://github.com/o/r/releases/tag/one-v1.0.0"
    assert session.requests[0][2]["json"]["draft"] is True
    method, patch_url, patch_kwargs = session.requests[2]
    assert method == "PATCH"
    assert patch_url == "https://api.github.com/repos/o/r/releases/7"
    assert patch_kwargs["json"] == {"draft": False}


def test_github_publisher_deletes_release_when_upload_fails(tmp_path, log_messages):
    first = tmp_path / "a.zip"
    second = tmp_path / "b.zip"
    first.write_bytes(b"a")
    second.write_bytes(b"b")
    session = FakeSession([_created("pack-v1.0.0"), FakeResponse(), FakeResponse(status_code=500), FakeResponse()])
    publisher = GitHubReleasePublisher("o/r", "token", session=session)

    with pytest.raises(ReleaseError, match="b.zip"):
        publisher.publish("pack-v1.0.0", [str(first), str(second)])

    assert [r[0] for r in session.requests] == ["POST", "POST", "POST", "DELETE"]
    assert session.requests[3][1] == "https://api.github.com/repos/o/r/releases/7"
    assert not session.responses
    assert any(m.startswith("WARNING") and "Deleted incomplete release pack-v1.0.0" in m for m in log_messages)


def test_github_publisher_checks_release_url_before_uploading(tmp_path):
    asset = tmp_path / "a.zip"
    asset.write_bytes(b"a")
    created = FakeResponse({"id": 7, "upload_url": "https://uploads.example.com/releases/7/assets", "html_url": ""})
    session = FakeSession([created, FakeResponse()])
    publisher = GitHubReleasePublisher("o/r", "token", session=session)

    with pytest.raises(ReleaseError):
        publisher.publish("a-v1.0.0", [str(asset)])

    assert [r[0] for r in session.requests] == ["POST", "DELETE"]


def test_github_publisher_http_error():
    publisher = GitHubReleasePublisher("o/r", "token", session=FakeSession([FakeResponse(status_code=422)]))

    with pytest.raises(ReleaseError):
        publisher.publish("dup-v1.0.0", [])


def test_github_publisher_requires_credentials():
    with pytest.raises(ValueError):
        GitHubReleasePublisher("o/r", "")
    with pytest.raises(ValueError):
        GitHubReleasePublisher("", "token")
