"""Tests for SyncSettings — defaults and env-driven overrides."""

from __future__ import annotations

from pathlib import Path

from kernsync.config import DEFAULT_IMAGE_NAME, DEFAULT_REPOSITORY, SyncSettings
from kernsync.models.sync import LatestPolicy


class TestSyncSettings:
    def test_defaults(self):
        settings = SyncSettings()
        assert settings.repository == DEFAULT_REPOSITORY
        assert settings.image_name == DEFAULT_IMAGE_NAME == "bzImage"
        assert settings.latest_policy == LatestPolicy.STABLE
        assert settings.tag_image is True
        assert settings.install is False
        assert settings.download_dir is None
        assert settings.digest_algorithm == "sha256"
        assert settings.log_level == "WARNING"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("KERNSYNC_REPOSITORY", "me/kernel")
        monkeypatch.setenv("KERNSYNC_LATEST_POLICY", "prerelease")
        monkeypatch.setenv("KERNSYNC_TAG_IMAGE", "false")
        monkeypatch.setenv("KERNSYNC_DOWNLOAD_DIR", "/data/kernels")
        settings = SyncSettings()
        assert settings.repository == "me/kernel"
        assert settings.latest_policy == LatestPolicy.PRERELEASE
        assert settings.tag_image is False
        assert settings.download_dir == Path("/data/kernels")

    def test_github_token_alias(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "from-actions")
        assert SyncSettings().github_token == "from-actions"

    def test_prefixed_token_wins(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "from-actions")
        monkeypatch.setenv("KERNSYNC_GITHUB_TOKEN", "mine")
        assert SyncSettings().github_token == "mine"

    def test_env_file(self, tmp_path: Path):
        (tmp_path / ".env").write_text("KERNSYNC_IMAGE_NAME=vmlinux\n", encoding="utf-8")
        assert SyncSettings().image_name == "vmlinux"

    def test_default_wslconfig_path(self, monkeypatch, tmp_path: Path):
        monkeypatch.delenv("KERNSYNC_WSLCONFIG_PATH", raising=False)
        assert SyncSettings().resolved_wslconfig_path(home=tmp_path) == tmp_path / ".wslconfig"

    def test_explicit_wslconfig_path(self, tmp_path: Path):
        assert SyncSettings().resolved_wslconfig_path() == tmp_path / ".wslconfig"
