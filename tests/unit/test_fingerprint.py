"""Tests for the fingerprint comparator — determinism, sentinel, streaming."""

from __future__ import annotations

import hashlib
import os
from pathlib import Path

import pytest

from kernsync.core.fingerprint import Fingerprinter, LocalImage, equal
from kernsync.errors import UnreadableSource
from kernsync.models.fingerprint import Fingerprint


class TestFingerprinter:
    def test_matches_hashlib(self, tmp_path: Path, fingerprinter: Fingerprinter):
        data = b"kernel bytes"
        path = tmp_path / "img"
        path.write_bytes(data)
        fp = fingerprinter.fingerprint(path)
        assert fp.algorithm == "sha256"
        assert fp.hexdigest == hashlib.sha256(data).hexdigest()
        assert str(fp) == f"sha256:{fp.hexdigest}"

    def test_deterministic(self, tmp_path: Path, fingerprinter: Fingerprinter):
        path = tmp_path / "img"
        path.write_bytes(b"same")
        assert equal(fingerprinter.fingerprint(path), fingerprinter.fingerprint(path))

    def test_identical_content_different_paths(self, tmp_path: Path, fingerprinter: Fingerprinter):
        a = tmp_path / "a"
        b = tmp_path / "sub" / "b"
        b.parent.mkdir()
        a.write_bytes(b"payload")
        b.write_bytes(b"payload")
        os.utime(a, (0, 0))
        os.chmod(b, 0o600)
        assert equal(fingerprinter.fingerprint(a), fingerprinter.fingerprint(b))

    def test_different_content_differs(self, tmp_path: Path, fingerprinter: Fingerprinter):
        a = tmp_path / "a"
        b = tmp_path / "b"
        a.write_bytes(b"payload-1")
        b.write_bytes(b"payload-2")
        assert not equal(fingerprinter.fingerprint(a), fingerprinter.fingerprint(b))

    def test_streams_in_small_chunks(self, tmp_path: Path):
        data = os.urandom(10_000)
        path = tmp_path / "img"
        path.write_bytes(data)
        fp = Fingerprinter(chunk_size=7).fingerprint(path)
        assert fp.hexdigest == hashlib.sha256(data).hexdigest()

    def test_pluggable_algorithm(self, tmp_path: Path):
        path = tmp_path / "img"
        path.write_bytes(b"abc")
        fp = Fingerprinter("sha1").fingerprint(path)
        assert fp.hexdigest == hashlib.sha1(b"abc").hexdigest()

    def test_unknown_algorithm_rejected(self):
        with pytest.raises(ValueError):
            Fingerprinter("not-a-digest")

    def test_fingerprint_bytes_matches_file(self, tmp_path: Path, fingerprinter: Fingerprinter):
        path = tmp_path / "img"
        path.write_bytes(b"xyz")
        assert fingerprinter.fingerprint_bytes(b"xyz") == fingerprinter.fingerprint(path)


class TestAbsentSentinel:
    def test_missing_file_is_absent(self, tmp_path: Path, fingerprinter: Fingerprinter):
        fp = fingerprinter.fingerprint(tmp_path / "nope")
        assert fp.is_absent
        assert fp == fingerprinter.absent

    def test_sentinel_stable_across_calls(self, fingerprinter: Fingerprinter):
        assert equal(fingerprinter.absent, Fingerprint.absent("sha256"))

    def test_sentinel_differs_from_empty_file(self, tmp_path: Path, fingerprinter: Fingerprinter):
        empty = tmp_path / "empty"
        empty.write_bytes(b"")
        assert not equal(fingerprinter.absent, fingerprinter.fingerprint(empty))

    def test_sentinel_differs_from_real_content(self, tmp_path: Path, fingerprinter: Fingerprinter):
        path = tmp_path / "img"
        path.write_bytes(b"\x00")
        assert not equal(fingerprinter.absent, fingerprinter.fingerprint(path))


class TestUnreadable:
    def test_directory_is_unreadable(self, tmp_path: Path, fingerprinter: Fingerprinter):
        with pytest.raises(UnreadableSource):
            fingerprinter.fingerprint(tmp_path)

    @pytest.mark.skipif(
        not hasattr(os, "geteuid") or os.geteuid() == 0,
        reason="permission bits are not enforced for root",
    )
    def test_permission_denied_is_unreadable(self, tmp_path: Path, fingerprinter: Fingerprinter):
        path = tmp_path / "locked"
        path.write_bytes(b"secret")
        path.chmod(0)
        try:
            with pytest.raises(UnreadableSource, match="locked"):
                fingerprinter.fingerprint(path)
        finally:
            path.chmod(0o600)


class TestEqual:
    def test_mixed_algorithms_rejected(self):
        a = Fingerprint(algorithm="sha1", hexdigest="00")
        b = Fingerprint(algorithm="sha256", hexdigest="00")
        with pytest.raises(ValueError):
            equal(a, b)


class TestLocalImage:
    def test_none_path_is_absent(self, fingerprinter: Fingerprinter):
        image = LocalImage(None, fingerprinter)
        assert image.path is None
        assert image.exists is False
        assert image.fingerprint.is_absent

    def test_fingerprint_cached_until_invalidated(self, tmp_path: Path, fingerprinter: Fingerprinter):
        path = tmp_path / "img"
        path.write_bytes(b"old")
        image = LocalImage(path, fingerprinter)
        first = image.fingerprint
        path.write_bytes(b"new")
        assert image.fingerprint == first
        image.invalidate()
        assert image.fingerprint == fingerprinter.fingerprint_bytes(b"new")
