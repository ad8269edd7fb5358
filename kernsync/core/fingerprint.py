"""Fingerprint comparator — the decision oracle for "is an update needed".

Content is streamed through the digest in fixed-size chunks, so memory use
is bounded regardless of artifact size.  Only fingerprint equality decides
whether two files are identical; names and timestamps are never consulted.
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path

from kernsync.errors import UnreadableSource
from kernsync.models.fingerprint import Fingerprint

logger = logging.getLogger(__name__)

DEFAULT_ALGORITHM = "sha256"
DEFAULT_CHUNK_SIZE = 1024 * 1024


class Fingerprinter:
    """Computes streamed content digests with a pluggable hash algorithm.

    Parameters
    ----------
    algorithm:
        Any name accepted by ``hashlib.new`` (``sha256``, ``sha1``, ...).
    chunk_size:
        Bytes read per iteration.
    """

    def __init__(
        self,
        algorithm: str = DEFAULT_ALGORITHM,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        # Fail at construction on an unknown algorithm, not mid-run.
        hashlib.new(algorithm)
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self._algorithm = algorithm
        self._chunk_size = chunk_size

    @property
    def algorithm(self) -> str:
        return self._algorithm

    @property
    def absent(self) -> Fingerprint:
        """The sentinel used for a path that does not exist."""
        return Fingerprint.absent(self._algorithm)

    def fingerprint(self, path: Path | str) -> Fingerprint:
        """Return the fingerprint of the file at *path*.

        A path that does not exist yields the absent sentinel.  A path that
        exists but cannot be opened or read raises ``UnreadableSource``.
        """
        path = Path(path)
        digest = hashlib.new(self._algorithm)
        try:
            with path.open("rb") as fh:
                for chunk in iter(lambda: fh.read(self._chunk_size), b""):
                    digest.update(chunk)
        except FileNotFoundError:
            logger.debug("No file at %s, using absent fingerprint", path)
            return self.absent
        except OSError as exc:
            raise UnreadableSource(path, exc.strerror or str(exc)) from exc
        return Fingerprint(algorithm=self._algorithm, hexdigest=digest.hexdigest())

    def fingerprint_bytes(self, data: bytes) -> Fingerprint:
        """Fingerprint an in-memory buffer with the same algorithm."""
        return Fingerprint(
            algorithm=self._algorithm,
            hexdigest=hashlib.new(self._algorithm, data).hexdigest(),
        )


def equal(a: Fingerprint, b: Fingerprint) -> bool:
    """Return True iff *a* and *b* identify the same content.

    Fingerprints from different algorithms cannot be compared.
    """
    if a.algorithm != b.algorithm:
        raise ValueError(
            f"cannot compare {a.algorithm} fingerprint with {b.algorithm} fingerprint"
        )
    return a.hexdigest == b.hexdigest


class LocalImage:
    """The artifact currently considered installed.

    The fingerprint is computed on first access and cached for the lifetime
    of this object only; ``invalidate()`` drops it after the path contents
    change.
    """

    def __init__(self, path: Path | str | None, fingerprinter: Fingerprinter) -> None:
        self._path = Path(path) if path else None
        self._fingerprinter = fingerprinter
        self._cached: Fingerprint | None = None

    @property
    def path(self) -> Path | None:
        return self._path

    @property
    def exists(self) -> bool:
        return self._path is not None and self._path.exists()

    @property
    def fingerprint(self) -> Fingerprint:
        if self._cached is None:
            if self._path is None:
                self._cached = self._fingerprinter.absent
            else:
                self._cached = self._fingerprinter.fingerprint(self._path)
        return self._cached

    def invalidate(self) -> None:
        self._cached = None
