"""Release synchronization — read local state, fetch, compare, adopt.

The workflow is strictly sequential because each step gates the next:

1. Fingerprint the installed image (absent sentinel if there is none).
2. Resolve the release and asset, then stream the asset into a hidden
   ``.part`` sibling inside the download directory.
3. Fingerprint the downloaded candidate.
4. Identical fingerprints: discard the candidate, report NO_OP_IDENTICAL.
5. Otherwise atomically replace the destination with the candidate.
6. Optionally record the new path in the config store.  This is a separate
   transaction: a failure is reported, and the adopted image stays.

Concurrent runs against the same download directory are not coordinated.
"""

from __future__ import annotations

import logging
from pathlib import Path

from kernsync.core.adopt import (
    atomic_replace,
    discard,
    ensure_directory,
    stream_to_partial,
    sweep_partials,
)
from kernsync.core.fingerprint import Fingerprinter, LocalImage, equal
from kernsync.core.layout import destination_path
from kernsync.core.resolver import Resolver, parse_repository
from kernsync.errors import ConfigPersistFailure, KernsyncError
from kernsync.models.fingerprint import Fingerprint
from kernsync.models.sync import (
    LatestPolicy,
    SyncAction,
    SyncDecision,
    SyncOptions,
    SyncReport,
)
from kernsync.sources.base import ReleaseSource
from kernsync.stores.base import ConfigStore

logger = logging.getLogger(__name__)


def decide(
    local: Fingerprint,
    remote: Fingerprint,
    release_tag: str,
    destination: Path,
) -> SyncDecision:
    """Compare fingerprints and produce the run's single decision.

    An adopt decision carries *destination*, the path the image will occupy
    once adopted.
    """
    if equal(local, remote):
        return SyncDecision(action=SyncAction.NO_OP_IDENTICAL, release_tag=release_tag)
    return SyncDecision(
        action=SyncAction.ADOPT, release_tag=release_tag, new_path=destination
    )


class Synchronizer:
    """Keeps a local kernel image in sync with a release asset.

    Parameters
    ----------
    source:
        Release source used for metadata and the asset download.
    config_store:
        Where the adopted path is recorded when ``options.install`` is set.
        ``None`` disables persistence.
    fingerprinter:
        Digest used for both the local image and the candidate.
    latest_policy:
        Passed through to the ``Resolver``.
    """

    def __init__(
        self,
        source: ReleaseSource,
        *,
        config_store: ConfigStore | None = None,
        fingerprinter: Fingerprinter | None = None,
        latest_policy: LatestPolicy = LatestPolicy.STABLE,
    ) -> None:
        self._source = source
        self._config_store = config_store
        self._fingerprinter = fingerprinter or Fingerprinter()
        self._resolver = Resolver(source, latest_policy=latest_policy)

    @property
    def resolver(self) -> Resolver:
        return self._resolver

    def sync(
        self,
        local_path: Path | str | None,
        repository: str,
        selector: str | None,
        asset_name: str,
        options: SyncOptions,
    ) -> SyncReport:
        """Run the full workflow once and report what happened."""
        owner, repo = parse_repository(repository)

        local = LocalImage(local_path, self._fingerprinter)
        local_fp = local.fingerprint
        if local_fp.is_absent:
            logger.info("No local kernel image installed")
        else:
            logger.info("Local kernel %s digest: %s", local.path, local_fp)

        release, asset = self._resolver.resolve(repository, selector, asset_name)
        download_dir = options.download_dir
        destination = destination_path(
            download_dir, asset.name, release.tag, options.tag_image
        )

        ensure_directory(download_dir)
        sweep_partials(download_dir, asset.name)

        logger.info(
            "Downloading %s from %s release %s", asset.name, repository, release.tag
        )
        chunks = self._source.download_asset(
            owner, repo, asset.id, expected_size=asset.size
        )
        try:
            candidate = stream_to_partial(chunks, download_dir, asset.name)
        finally:
            # Releases the connection on every exit path.
            close = getattr(chunks, "close", None)
            if close is not None:
                close()

        try:
            remote_fp = self._fingerprinter.fingerprint(candidate)
            logger.info("Remote kernel tagged %s digest: %s", release.tag, remote_fp)
            decision = decide(local_fp, remote_fp, release.tag, destination)
        except BaseException:
            discard(candidate)
            raise

        fields = {
            "repository": repository,
            "release_tag": release.tag,
            "asset_name": asset.name,
            "local_path": local.path,
            "local_fingerprint": local_fp,
            "remote_fingerprint": remote_fp,
            "action": decision.action,
        }

        if decision.action == SyncAction.NO_OP_IDENTICAL:
            discard(candidate)
            logger.info(
                "Release %s (%s) already installed", release.tag, asset.name
            )
            return SyncReport(**fields)

        logger.info("Digests differ, adopting new kernel at %s", destination)
        atomic_replace(candidate, destination)
        if local.path == destination:
            local.invalidate()

        config_updated, config_error = False, None
        if options.install:
            config_updated, config_error = self._persist(destination)

        return SyncReport(
            **fields,
            destination=destination,
            config_updated=config_updated,
            config_error=config_error,
        )

    def _persist(self, destination: Path) -> tuple[bool, str | None]:
        if self._config_store is None:
            logger.warning("Install requested but no config store is configured")
            return False, "no config store configured"
        try:
            self._config_store.set_kernel_path(str(destination))
        except ConfigPersistFailure as exc:
            logger.error("Kernel adopted but config not updated: %s", exc)
            return False, str(exc)
        except KernsyncError as exc:
            failure = ConfigPersistFailure(destination, str(exc))
            logger.error("Kernel adopted but config not updated: %s", failure)
            return False, str(failure)
        logger.info("Config now points at %s", destination)
        return True, None
