"""``kernsync sync`` — download the selected release and adopt it if it differs.

Resolves the release (``latest`` or ``--tag``), streams the image asset next
to its destination, compares digests with the installed kernel and, when
they differ, atomically moves the new image into place.  With ``--install``
the WSL config is pointed at the new image.

Exit codes: 0 updated or already current, 1 on any failure, 2 when the
image was adopted but the config could not be updated.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from kernsync.cli import wiring
from kernsync.cli.renderer import ReportRenderer
from kernsync.config import SyncSettings
from kernsync.core.fingerprint import Fingerprinter
from kernsync.core.layout import resolve_download_dir
from kernsync.core.resolver import list_releases
from kernsync.core.synchronizer import Synchronizer
from kernsync.errors import KernsyncError
from kernsync.models.sync import LatestPolicy, SyncOptions

EXIT_FAILURE = 1
EXIT_PARTIAL = 2

err_console = Console(stderr=True)


def fail(exc: Exception) -> typer.Exit:
    """Print *exc* on stderr and return the matching ``typer.Exit``."""
    err_console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
    return typer.Exit(code=EXIT_FAILURE)


def sync_cmd(
    repo: Optional[str] = typer.Option(
        None, "--repo", "-r", help="Release repository as <owner>/<name>."
    ),
    download_dir: Optional[Path] = typer.Option(
        None,
        "--dir",
        "-d",
        help="Directory for downloaded images; overrides the configured kernel's directory.",
    ),
    image_name: Optional[str] = typer.Option(
        None, "--image-name", "-i", help="Kernel image asset name in the release."
    ),
    tag: Optional[str] = typer.Option(
        None, "--tag", "-t", help="Download a specific release tag instead of 'latest'."
    ),
    tag_image: Optional[bool] = typer.Option(
        None,
        "--tag-image/--no-tag-image",
        help="Suffix the image file name with the release tag.",
    ),
    install: Optional[bool] = typer.Option(
        None,
        "--install/--no-install",
        help="Point .wslconfig at the new kernel (requires a WSL restart).",
    ),
    policy: Optional[LatestPolicy] = typer.Option(
        None,
        "--policy",
        case_sensitive=False,
        help="Whether 'latest' may resolve to drafts or prereleases.",
    ),
    list_only: bool = typer.Option(
        False, "--list", help="List recent releases without downloading anything."
    ),
) -> None:
    """Sync the local kernel image with a release."""
    renderer = ReportRenderer()

    try:
        settings = SyncSettings()
        repository = repo or settings.repository
        source = wiring.build_source(settings)

        if list_only:
            renderer.print_releases(repository, list_releases(source, repository))
            return

        store = wiring.build_config_store(settings)
        current = store.get_kernel_path()
        directory = resolve_download_dir(
            download_dir or settings.download_dir, current, wiring.home_dir()
        )
        options = SyncOptions(
            download_dir=directory,
            tag_image=settings.tag_image if tag_image is None else tag_image,
            install=settings.install if install is None else install,
        )
        synchronizer = Synchronizer(
            source,
            config_store=store,
            fingerprinter=Fingerprinter(settings.digest_algorithm),
            latest_policy=policy or settings.latest_policy,
        )
        report = synchronizer.sync(
            current or None,
            repository,
            tag,
            image_name or settings.image_name,
            options,
        )
    except (KernsyncError, ValueError) as exc:
        raise fail(exc) from exc

    renderer.print_report(report)
    if report.partial:
        raise typer.Exit(code=EXIT_PARTIAL)
