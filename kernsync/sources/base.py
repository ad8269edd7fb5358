"""The ``ReleaseSource`` capability the resolver and synchronizer depend on.

Any object with these four methods is substitutable: the GitHub adapter in
``kernsync.sources.github``, or an in-memory fake in tests.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Protocol, runtime_checkable

from kernsync.models.releases import Release


@runtime_checkable
class ReleaseSource(Protocol):
    """Protocol for release-hosting backends."""

    def get_latest_release(self, owner: str, repo: str) -> Release:
        """Return the release the source considers latest.

        Raises ``NotFound`` when the repository has no published release.
        """
        ...

    def get_release_by_tag(self, owner: str, repo: str, tag: str) -> Release:
        """Return the release carrying *tag*; raises ``NotFound`` if unknown."""
        ...

    def list_releases(self, owner: str, repo: str) -> Sequence[Release]:
        """Return all releases, newest first."""
        ...

    def download_asset(
        self,
        owner: str,
        repo: str,
        asset_id: int,
        *,
        expected_size: int = 0,
    ) -> Iterator[bytes]:
        """Stream the asset's bytes in chunks.

        The returned iterator owns the underlying connection; callers close
        it (``contextlib.closing``) on every exit path.  ``expected_size``
        lets the implementation scale its download deadline.
        """
        ...
