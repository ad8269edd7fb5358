"""Error taxonomy for the release-synchronization workflow.

Every error is terminal for the current run.  Messages carry the context an
operator needs (repository, path, remote call) to diagnose the failure
without re-running under a debugger.  A missing local image or a missing
config file is never an error and has no class here.
"""

from __future__ import annotations


class KernsyncError(RuntimeError):
    """Base class for every fail-fast condition raised by kernsync."""


class InvalidRepository(KernsyncError, ValueError):
    """Raised when a repository identifier is not ``<owner>/<name>``."""

    def __init__(self, repository: str) -> None:
        self.repository = repository
        super().__init__(
            f"unexpected repository format {repository!r}, should be <owner>/<name>"
        )


class NotFound(KernsyncError):
    """Raised by a release source when the requested object does not exist."""


class ReleaseNotFound(KernsyncError):
    """Raised when no usable release matches the selector."""

    def __init__(self, repository: str, selector: str, reason: str = "") -> None:
        self.repository = repository
        self.selector = selector
        message = f"release {selector!r} not found in {repository}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class AssetNotFound(KernsyncError):
    """Raised when the resolved release has no asset with the configured name."""

    def __init__(self, repository: str, tag: str, asset_name: str) -> None:
        self.repository = repository
        self.tag = tag
        self.asset_name = asset_name
        super().__init__(
            f"asset {asset_name!r} not found in release {tag!r} of {repository}"
        )


class NetworkFailure(KernsyncError):
    """Transport-level failure or timeout talking to the release source.

    ``operation`` names the remote call that failed; the underlying
    exception is available as ``__cause__``.
    """

    def __init__(self, operation: str, target: str, detail: str) -> None:
        self.operation = operation
        self.target = target
        super().__init__(f"{operation} failed for {target}: {detail}")


class UnreadableSource(KernsyncError):
    """Raised when a local path exists but cannot be opened or read."""

    def __init__(self, path: object, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"cannot read {path}: {detail}")


class UnwritableDestination(KernsyncError):
    """Raised when a download, temp file or atomic replace cannot be written."""

    def __init__(self, path: object, detail: str) -> None:
        self.path = path
        super().__init__(f"cannot write {path}: {detail}")


class ConfigPersistFailure(KernsyncError):
    """Raised when the config store cannot record the new kernel path.

    The synchronizer reports this instead of propagating it: the image
    adoption that preceded it is not undone.
    """

    def __init__(self, path: object, detail: str) -> None:
        self.path = path
        super().__init__(f"cannot update config {path}: {detail}")
