"""Release sources: the ``ReleaseSource`` Protocol and its GitHub adapter."""

from kernsync.sources.base import ReleaseSource
from kernsync.sources.github import GitHubReleaseSource, download_timeout

__all__ = ["ReleaseSource", "GitHubReleaseSource", "download_timeout"]
