"""Shared test fixtures for kernsync."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest

from kernsync.core.fingerprint import Fingerprinter
from kernsync.errors import ConfigPersistFailure, NetworkFailure, NotFound
from kernsync.models.releases import Asset, Release

V1_IMAGE = b"bzImage v1 " * 4096
V2_IMAGE = b"bzImage v2 " * 4096


# ---------------------------------------------------------------------------
# In-memory collaborators
# ---------------------------------------------------------------------------


class FakeReleaseSource:
    """In-memory ``ReleaseSource`` with GitHub-like ``latest`` semantics.

    ``releases`` is ordered newest first.  ``blobs`` maps asset ids to
    content.  ``fail_after_chunks`` makes downloads raise ``NetworkFailure``
    part-way through.
    """

    def __init__(
        self,
        releases: list[Release],
        blobs: dict[int, bytes],
        *,
        chunk_size: int = 1024,
        fail_after_chunks: int | None = None,
    ) -> None:
        self.releases = releases
        self.blobs = blobs
        self.chunk_size = chunk_size
        self.fail_after_chunks = fail_after_chunks
        self.calls: list[tuple[str, Any]] = []
        self.downloads: list[int] = []
        self.closed: list[int] = []

    def get_latest_release(self, owner: str, repo: str) -> Release:
        self.calls.append(("get_latest_release", f"{owner}/{repo}"))
        for release in self.releases:
            if release.is_stable:
                return release
        raise NotFound(f"{owner}/{repo} has no releases")

    def get_release_by_tag(self, owner: str, repo: str, tag: str) -> Release:
        self.calls.append(("get_release_by_tag", tag))
        for release in self.releases:
            if release.tag == tag:
                return release
        raise NotFound(f"{owner}/{repo}@{tag} not found")

    def list_releases(self, owner: str, repo: str) -> list[Release]:
        self.calls.append(("list_releases", f"{owner}/{repo}"))
        return list(self.releases)

    def download_asset(
        self, owner: str, repo: str, asset_id: int, *, expected_size: int = 0
    ) -> Iterator[bytes]:
        self.downloads.append(asset_id)
        return self._chunks(asset_id)

    def _chunks(self, asset_id: int) -> Iterator[bytes]:
        data = self.blobs[asset_id]
        try:
            for n, start in enumerate(range(0, len(data), self.chunk_size)):
                if self.fail_after_chunks is not None and n >= self.fail_after_chunks:
                    raise NetworkFailure("download_asset", f"asset {asset_id}", "connection reset")
                yield data[start:start + self.chunk_size]
        finally:
            self.closed.append(asset_id)


class FakeConfigStore:
    """In-memory ``ConfigStore``; ``fail`` makes writes raise."""

    def __init__(self, kernel_path: str = "", *, fail: bool = False) -> None:
        self.kernel_path = kernel_path
        self.fail = fail
        self.writes: list[str] = []

    def get_kernel_path(self) -> str:
        return self.kernel_path

    def set_kernel_path(self, path: str) -> None:
        if self.fail:
            raise ConfigPersistFailure("memory", "read-only store")
        self.writes.append(path)
        self.kernel_path = path


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_release() -> Callable[..., Release]:
    """Factory fixture: build a Release with one asset per ``assets`` entry."""

    def _factory(
        tag: str,
        assets: dict[str, int] | None = None,
        *,
        day: int = 1,
        **overrides: Any,
    ) -> Release:
        defaults: dict[str, Any] = {
            "tag": tag,
            "name": f"Release {tag}",
            "published_at": datetime(2021, 2, day, tzinfo=timezone.utc),
            "assets": tuple(
                Asset(id=asset_id, name=name, size=0, release_tag=tag)
                for name, asset_id in (assets or {}).items()
            ),
        }
        defaults.update(overrides)
        return Release(**defaults)

    return _factory


@pytest.fixture
def make_source(make_release: Callable[..., Release]) -> Callable[..., FakeReleaseSource]:
    """Factory fixture: a source holding v2 (newer) and v1 (older)."""

    def _factory(**kwargs: Any) -> FakeReleaseSource:
        releases = [
            make_release("v2", {"bzImage": 21, "modules.tar.gz": 22}, day=10),
            make_release("v1", {"bzImage": 11}, day=1),
        ]
        blobs = {21: V2_IMAGE, 22: b"modules", 11: V1_IMAGE}
        return FakeReleaseSource(releases, blobs, **kwargs)

    return _factory


@pytest.fixture
def source(make_source: Callable[..., FakeReleaseSource]) -> FakeReleaseSource:
    return make_source()


@pytest.fixture
def config_store() -> FakeConfigStore:
    return FakeConfigStore()


@pytest.fixture
def fingerprinter() -> Fingerprinter:
    return Fingerprinter()


@pytest.fixture
def kernel_dir(tmp_path: Path) -> Path:
    """Provide an empty download directory."""
    path = tmp_path / "wsl2-kernels"
    path.mkdir()
    return path


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep KERNSYNC_* settings and ~/.wslconfig out of every test."""
    for key in list(os.environ):
        if key.startswith("KERNSYNC_") or key == "GITHUB_TOKEN":
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("KERNSYNC_WSLCONFIG_PATH", str(tmp_path / ".wslconfig"))


@pytest.fixture
def v1_image() -> bytes:
    return V1_IMAGE


@pytest.fixture
def v2_image() -> bytes:
    return V2_IMAGE


@pytest.fixture
def make_config_store() -> Callable[..., FakeConfigStore]:
    """Factory fixture: an in-memory config store."""
    return FakeConfigStore
