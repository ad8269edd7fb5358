"""Runtime configuration — env-driven via pydantic-settings.

Reads ``KERNSYNC_*`` environment variables and an optional ``.env`` file.
Command-line options override these values; the resulting settings are
threaded explicitly into the source, resolver and synchronizer, never read
as process globals by the core.

Examples
--------
Override via environment::

    export KERNSYNC_REPOSITORY=nathanchance/WSL2-Linux-Kernel
    export KERNSYNC_LATEST_POLICY=prerelease
    export KERNSYNC_LOG_LEVEL=DEBUG

``GITHUB_TOKEN`` is honored as well as ``KERNSYNC_GITHUB_TOKEN``.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from kernsync.models.sync import LatestPolicy

DEFAULT_REPOSITORY = "nathanchance/WSL2-Linux-Kernel"
DEFAULT_IMAGE_NAME = "bzImage"


class SyncSettings(BaseSettings):
    """kernsync configuration with environment variable overrides."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="KERNSYNC_",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # What to track
    repository: str = DEFAULT_REPOSITORY
    image_name: str = DEFAULT_IMAGE_NAME
    latest_policy: LatestPolicy = LatestPolicy.STABLE

    # Where it lands
    download_dir: Path | None = None
    tag_image: bool = True
    install: bool = False
    wslconfig_path: Path | None = None  # defaults to ~/.wslconfig

    # Fingerprinting
    digest_algorithm: str = "sha256"

    # Release source
    github_api_url: str = "https://api.github.com"
    github_token: str = Field(
        default="",
        validation_alias=AliasChoices("KERNSYNC_GITHUB_TOKEN", "GITHUB_TOKEN"),
    )
    connect_timeout: float = 10.0
    metadata_timeout: float = 30.0
    download_base_timeout: float = 60.0
    download_min_rate: float = 256 * 1024  # bytes/s
    retries: int = 2

    # Observability
    log_level: str = "WARNING"

    def resolved_wslconfig_path(self, home: Path | None = None) -> Path:
        """Path of the WSL config file, ``~/.wslconfig`` unless overridden."""
        if self.wslconfig_path is not None:
            return self.wslconfig_path
        return (home or Path.home()) / ".wslconfig"
