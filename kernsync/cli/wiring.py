"""Builds the collaborators a CLI command needs from ``SyncSettings``."""

from __future__ import annotations

from pathlib import Path

from kernsync.config import SyncSettings
from kernsync.sources.base import ReleaseSource
from kernsync.sources.github import GitHubReleaseSource
from kernsync.stores.base import ConfigStore
from kernsync.stores.wslconfig import WslConfigStore


def build_source(settings: SyncSettings) -> ReleaseSource:
    return GitHubReleaseSource.from_settings(settings)


def build_config_store(settings: SyncSettings) -> ConfigStore:
    return WslConfigStore(settings.resolved_wslconfig_path())


def home_dir() -> Path:
    return Path.home()
