"""Synchronizer inputs, decisions and reports."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from kernsync.models.fingerprint import Fingerprint


class LatestPolicy(str, Enum):
    """What the ``latest`` selector is allowed to resolve to.

    - ``source``     : whatever the release source calls latest.
    - ``stable``     : the source's latest, rejected if draft or prerelease.
    - ``prerelease`` : the newest non-draft release, prereleases included.
    """

    SOURCE = "source"
    STABLE = "stable"
    PRERELEASE = "prerelease"


class SyncAction(str, Enum):
    """Terminal action of a sync run."""

    ADOPT = "adopt"
    NO_OP_IDENTICAL = "no_op_identical"


class SyncOptions(BaseModel):
    """Policy flags for a single sync run."""

    model_config = ConfigDict(frozen=True)

    download_dir: Path
    tag_image: bool = True
    install: bool = False


class SyncDecision(BaseModel):
    """Outcome of comparing the local and candidate fingerprints.

    Derived once per run and never persisted.
    """

    model_config = ConfigDict(frozen=True)

    action: SyncAction
    release_tag: str
    new_path: Path | None = None


class SyncReport(BaseModel):
    """Everything an operator needs to know about one sync run."""

    model_config = ConfigDict(frozen=True)

    repository: str
    release_tag: str
    asset_name: str
    local_path: Path | None
    local_fingerprint: Fingerprint
    remote_fingerprint: Fingerprint
    action: SyncAction
    destination: Path | None = None
    config_updated: bool = False
    config_error: str | None = None

    @property
    def adopted(self) -> bool:
        return self.action == SyncAction.ADOPT

    @property
    def partial(self) -> bool:
        """Image adopted but the config store was not updated."""
        return self.adopted and self.config_error is not None
