"""kernsync: keep a local kernel image in sync with a GitHub release asset.

Resolves a release (latest or tagged), streams the named image asset to a
private sibling file, compares content fingerprints with the installed
image and atomically adopts the new one when they differ, optionally
pointing the WSL2 ``.wslconfig`` at it.
"""

__version__ = "0.2.0"
__description__ = "Keep a locally installed kernel image in sync with a GitHub release asset"

from kernsync.core.fingerprint import Fingerprinter
from kernsync.core.resolver import Resolver, list_releases
from kernsync.core.synchronizer import Synchronizer
from kernsync.cli.app import app as cli

__all__ = [
    "Fingerprinter",
    "Resolver",
    "Synchronizer",
    "cli",
    "list_releases",
    "__version__",
]
