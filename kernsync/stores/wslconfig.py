"""WSL2 ``.wslconfig`` store — the ``[wsl2] kernel`` key of an INI file.

Layout::

    [wsl2]
    kernel = C:\\Users\\me\\wsl2-kernels\\bzImage.5.10.16.3

A missing file, section or key reads as ``""``.  Parsing is lenient: a
duplicated key or section is accepted and the last value wins.

Writes touch only the ``kernel`` line(s) of ``[wsl2]``.  Comments, blank
lines, key order and line endings are kept as they were; the section or key
is appended when missing.  The file is replaced atomically.
"""

from __future__ import annotations

import codecs
import configparser
import logging
import re
from pathlib import Path

from kernsync.core.adopt import atomic_write_bytes
from kernsync.errors import ConfigPersistFailure, KernsyncError, UnreadableSource

logger = logging.getLogger(__name__)

WSL2_SECTION = "wsl2"
KERNEL_KEY = "kernel"

_SECTION_RE = re.compile(r"^\s*\[(?P<name>[^\]]+)\]")
_KEY_RE = re.compile(r"^(?P<indent>\s*)(?P<key>[^=:\s][^=:]*?)\s*[=:]")
_COMMENT_PREFIXES = ("#", ";")


def set_ini_value(text: str, section: str, key: str, value: str) -> str:
    """Return *text* with ``key = value`` set inside ``[section]``.

    Every existing *key* line in every *section* block is rewritten, along
    with any continuation lines of its old value.  All other lines are
    returned unchanged.
    """
    newline = "\r\n" if "\r\n" in text else "\n"
    lines = text.splitlines(keepends=True)
    out: list[str] = []
    current: str | None = None
    replaced = False
    skipping_continuation = False
    last_in_section = -1  # index in *out* after the last content line of *section*

    for line in lines:
        stripped = line.strip()
        if skipping_continuation:
            if stripped and line[0].isspace() and not stripped.startswith(_COMMENT_PREFIXES):
                continue
            skipping_continuation = False

        header = _SECTION_RE.match(line)
        if header:
            current = header.group("name").strip()
            out.append(line)
            if current == section:
                last_in_section = len(out)
            continue

        match = _KEY_RE.match(line) if current == section else None
        if match and match.group("key") == key:
            ending = line[len(line.rstrip("\r\n")):] or newline
            out.append(f"{match.group('indent')}{key} = {value}{ending}")
            replaced = True
            skipping_continuation = True
            last_in_section = len(out)
            continue

        out.append(line)
        if current == section and stripped:
            last_in_section = len(out)

    if replaced:
        return "".join(out)

    entry = f"{key} = {value}{newline}"
    if last_in_section >= 0:
        before = out[last_in_section - 1]
        if not before.endswith(("\n", "\r")):
            out[last_in_section - 1] = before + newline
        out.insert(last_in_section, entry)
        return "".join(out)

    if out and not out[-1].endswith(("\n", "\r")):
        out[-1] += newline
    if out and out[-1].strip():
        out.append(newline)
    out.append(f"[{section}]{newline}")
    out.append(entry)
    return "".join(out)


class WslConfigStore:
    """Reads and writes the kernel path in a ``.wslconfig`` file.

    Parameters
    ----------
    path:
        The config file, usually ``~/.wslconfig``.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def get_kernel_path(self) -> str:
        loaded = self._load()
        if loaded is None:
            return ""
        parser = self._parse(loaded[0])
        return parser.get(WSL2_SECTION, KERNEL_KEY, fallback="").strip()

    def set_kernel_path(self, path: str) -> None:
        try:
            loaded = self._load()
            if loaded is None:
                logger.info("Creating %s", self._path)
                text, bom = "", b""
            else:
                text, bom = loaded
                self._parse(text)
        except UnreadableSource as exc:
            raise ConfigPersistFailure(self._path, exc.detail) from exc

        updated = set_ini_value(text, WSL2_SECTION, KERNEL_KEY, path)
        try:
            atomic_write_bytes(self._path, bom + updated.encode("utf-8"))
        except KernsyncError as exc:
            raise ConfigPersistFailure(self._path, str(exc)) from exc
        except OSError as exc:
            raise ConfigPersistFailure(self._path, exc.strerror or str(exc)) from exc
        logger.debug("Set [%s] %s = %s in %s", WSL2_SECTION, KERNEL_KEY, path, self._path)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _load(self) -> tuple[str, bytes] | None:
        """Return ``(text, bom)`` or ``None`` when the file does not exist."""
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise UnreadableSource(self._path, exc.strerror or str(exc)) from exc
        bom = codecs.BOM_UTF8 if raw.startswith(codecs.BOM_UTF8) else b""
        try:
            return raw[len(bom):].decode("utf-8"), bom
        except UnicodeDecodeError as exc:
            raise UnreadableSource(self._path, f"not UTF-8: {exc}") from exc

    def _parse(self, text: str) -> configparser.ConfigParser:
        parser = configparser.ConfigParser(interpolation=None, strict=False)
        parser.optionxform = str  # type: ignore[assignment,method-assign]
        try:
            parser.read_string(text, source=str(self._path))
        except configparser.Error as exc:
            raise UnreadableSource(self._path, f"malformed INI: {exc}") from exc
        return parser
