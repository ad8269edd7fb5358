"""Streamed download into a sibling temp file, then atomic replace.

The temp file is always created in the destination directory, so the final
``os.replace`` never crosses a filesystem boundary and a reader of the
destination sees either the old content or the new content, never a
partial file.  If the replace fails anyway, the temp file is removed and
``UnwritableDestination`` is raised; there is no copy fallback.
"""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path

from kernsync.errors import UnwritableDestination

logger = logging.getLogger(__name__)

PARTIAL_SUFFIX = ".part"


def ensure_directory(path: Path) -> None:
    """Create *path* (and parents) if needed."""
    if path.is_dir():
        return
    logger.info("Creating download directory for kernel images: %s", path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise UnwritableDestination(path, exc.strerror or str(exc)) from exc


def sweep_partials(directory: Path, name: str) -> list[Path]:
    """Remove *name*'s ``.part`` files left behind by an interrupted run.

    Only files named like those from ``stream_to_partial(..., name)`` are
    touched; other hidden files in *directory* are left alone.
    """
    removed: list[Path] = []
    if not directory.is_dir():
        return removed
    prefix = f".{name}."
    candidates = (
        p for p in directory.iterdir()
        if p.name.startswith(prefix) and p.name.endswith(PARTIAL_SUFFIX) and p.is_file()
    )
    for stale in sorted(candidates):
        try:
            stale.unlink()
        except OSError as exc:
            logger.warning("Could not remove stale partial %s: %s", stale, exc)
            continue
        logger.info("Removed stale partial download %s", stale)
        removed.append(stale)
    return removed


def stream_to_partial(chunks: Iterable[bytes], directory: Path, name: str) -> Path:
    """Write *chunks* to a new hidden ``.part`` file in *directory*.

    The file is flushed and fsynced before returning.  On any failure,
    including one raised by the chunk iterator itself, the partial file is
    removed and the error propagates.
    """
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{name}.", suffix=PARTIAL_SUFFIX, dir=directory
        )
    except OSError as exc:
        raise UnwritableDestination(directory, exc.strerror or str(exc)) from exc

    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as out:
            for chunk in chunks:
                out.write(chunk)
            out.flush()
            os.fsync(out.fileno())
    except OSError as exc:
        discard(tmp_path)
        raise UnwritableDestination(tmp_path, exc.strerror or str(exc)) from exc
    except BaseException:
        discard(tmp_path)
        raise
    return tmp_path


def atomic_replace(source: Path, destination: Path) -> None:
    """Atomically move *source* onto *destination* (same directory).

    On failure *source* is removed and *destination* is left untouched.
    """
    try:
        os.replace(source, destination)
    except OSError as exc:
        discard(source)
        raise UnwritableDestination(destination, exc.strerror or str(exc)) from exc
    _fsync_directory(destination.parent)


def atomic_write_bytes(destination: Path, data: bytes) -> None:
    """Write *data* to *destination* through a sibling temp file."""
    destination.parent.mkdir(parents=True, exist_ok=True)
    tmp = stream_to_partial([data], destination.parent, destination.name)
    atomic_replace(tmp, destination)


def discard(path: Path) -> None:
    """Remove *path* if it exists."""
    with contextlib.suppress(FileNotFoundError):
        path.unlink()


def _fsync_directory(directory: Path) -> None:
    # Persists the rename itself; not supported on every platform.
    try:
        fd = os.open(directory, os.O_RDONLY)
    except OSError:
        return
    try:
        with contextlib.suppress(OSError):
            os.fsync(fd)
    finally:
        os.close(fd)
