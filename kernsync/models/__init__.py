"""kernsync data models — all Pydantic v2, all frozen (immutable)."""

from kernsync.models.fingerprint import ABSENT_DIGEST, Fingerprint
from kernsync.models.releases import Asset, Release
from kernsync.models.sync import (
    LatestPolicy,
    SyncAction,
    SyncDecision,
    SyncOptions,
    SyncReport,
)

__all__ = [
    # releases
    "Asset",
    "Release",
    # fingerprints
    "ABSENT_DIGEST",
    "Fingerprint",
    # sync
    "LatestPolicy",
    "SyncAction",
    "SyncDecision",
    "SyncOptions",
    "SyncReport",
]
