"""Release and asset models, as reported by a release source."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class Asset(BaseModel):
    """A named downloadable binary attached to exactly one release.

    ``id`` is the opaque fetch handle passed back to
    ``ReleaseSource.download_asset``; ``release_tag`` is denormalized for
    reporting.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    size: int = 0
    download_url: str = ""
    release_tag: str = ""


class Release(BaseModel):
    """A published release: a tag plus an ordered sequence of assets."""

    model_config = ConfigDict(frozen=True)

    tag: str
    name: str = ""
    draft: bool = False
    prerelease: bool = False
    published_at: datetime | None = None
    body: str = ""
    assets: tuple[Asset, ...] = ()

    @property
    def is_stable(self) -> bool:
        """Whether the release is neither a draft nor a prerelease."""
        return not (self.draft or self.prerelease)

    def find_asset(self, name: str) -> Asset | None:
        """Return the asset whose name equals *name* exactly, if any."""
        for asset in self.assets:
            if asset.name == name:
                return asset
        return None
