"""Where downloaded kernel images live on disk."""

from __future__ import annotations

from pathlib import Path, PurePosixPath, PureWindowsPath

from kernsync.errors import UnwritableDestination

DEFAULT_KERNEL_DIR = "wsl2-kernels"


def resolve_download_dir(
    explicit: Path | None,
    current_kernel: str,
    home: Path,
) -> Path:
    """Pick the directory that receives new images.

    An explicit directory wins; otherwise the directory of the currently
    configured kernel; otherwise ``<home>/wsl2-kernels``.
    """
    if explicit is not None:
        return Path(explicit)
    if current_kernel:
        return Path(current_kernel).parent
    return home / DEFAULT_KERNEL_DIR


def destination_path(
    download_dir: Path,
    asset_name: str,
    release_tag: str,
    tag_image: bool,
) -> Path:
    """Final path of an adopted image: ``<dir>/<asset>[.<tag>]``."""
    name = asset_name
    if tag_image and release_tag:
        name = f"{asset_name}.{release_tag}"
    # Names come from the remote; they must stay inside download_dir.
    for candidate in (PurePosixPath(name), PureWindowsPath(name)):
        if len(candidate.parts) != 1 or name in (".", ".."):
            raise UnwritableDestination(
                download_dir / name, "image name contains a path separator"
            )
    return download_dir / name
