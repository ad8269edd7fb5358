"""Release resolution — which release, and which asset within it.

The resolver only inspects metadata.  Asset bytes are never fetched here,
so a resolution failure cannot leave anything on disk.
"""

from __future__ import annotations

import logging

from kernsync.errors import (
    AssetNotFound,
    InvalidRepository,
    NotFound,
    ReleaseNotFound,
)
from kernsync.models.releases import Asset, Release
from kernsync.models.sync import LatestPolicy
from kernsync.sources.base import ReleaseSource

logger = logging.getLogger(__name__)

LATEST = "latest"


def parse_repository(repository: str) -> tuple[str, str]:
    """Split ``<owner>/<name>`` into its two components.

    Raises ``InvalidRepository`` for anything else, before any I/O.
    """
    parts = repository.split("/")
    if len(parts) != 2 or not all(p and p == p.strip() for p in parts):
        raise InvalidRepository(repository)
    return parts[0], parts[1]


def is_latest(selector: str | None) -> bool:
    return not selector or selector == LATEST


class Resolver:
    """Resolves a selector to a (release, asset) pair.

    Parameters
    ----------
    source:
        The release source to query.
    latest_policy:
        How the ``latest`` selector treats drafts and prereleases.
        Explicit tags are always honored.
    """

    def __init__(
        self,
        source: ReleaseSource,
        latest_policy: LatestPolicy = LatestPolicy.STABLE,
    ) -> None:
        self._source = source
        self._policy = LatestPolicy(latest_policy)

    @property
    def latest_policy(self) -> LatestPolicy:
        return self._policy

    def resolve(
        self,
        repository: str,
        selector: str | None,
        asset_name: str,
    ) -> tuple[Release, Asset]:
        """Return the selected release and its asset named *asset_name*.

        Raises ``InvalidRepository``, ``ReleaseNotFound`` or
        ``AssetNotFound``; transport errors propagate as ``NetworkFailure``.
        """
        owner, repo = parse_repository(repository)

        if is_latest(selector):
            release = self._resolve_latest(repository, owner, repo)
        else:
            try:
                release = self._source.get_release_by_tag(owner, repo, selector)
            except NotFound as exc:
                raise ReleaseNotFound(repository, selector) from exc

        asset = release.find_asset(asset_name)
        if asset is None:
            raise AssetNotFound(repository, release.tag, asset_name)

        logger.info(
            "Resolved %s@%s to release %s, asset %s (id %s, %d bytes)",
            repository, selector or LATEST, release.tag, asset.name, asset.id, asset.size,
        )
        return release, asset

    def _resolve_latest(self, repository: str, owner: str, repo: str) -> Release:
        if self._policy == LatestPolicy.PRERELEASE:
            for release in self._source.list_releases(owner, repo):
                if not release.draft:
                    return release
            raise ReleaseNotFound(repository, LATEST, "no published releases")

        try:
            release = self._source.get_latest_release(owner, repo)
        except NotFound as exc:
            raise ReleaseNotFound(repository, LATEST, "no published releases") from exc

        if self._policy == LatestPolicy.STABLE and not release.is_stable:
            raise ReleaseNotFound(
                repository,
                LATEST,
                f"latest release {release.tag} is a draft or prerelease "
                f"(policy {self._policy.value})",
            )
        return release


def list_releases(source: ReleaseSource, repository: str) -> list[Release]:
    """Enumerate every release of *repository*, newest first.

    Read-only: no asset resolution, no download, no local state touched.
    """
    owner, repo = parse_repository(repository)
    releases = list(source.list_releases(owner, repo))
    logger.info("Listed %d releases from %s", len(releases), repository)
    return releases
