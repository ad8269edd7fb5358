"""``kernsync list`` — show a repository's releases without touching local state."""

from __future__ import annotations

from typing import Optional

import typer

from kernsync.cli import wiring
from kernsync.cli.commands.sync_cmd import fail
from kernsync.cli.renderer import ReportRenderer
from kernsync.config import SyncSettings
from kernsync.core.resolver import list_releases
from kernsync.errors import KernsyncError


def list_cmd(
    repo: Optional[str] = typer.Option(
        None, "--repo", "-r", help="Release repository as <owner>/<name>."
    ),
) -> None:
    """List releases with publish date and draft/prerelease status."""
    try:
        settings = SyncSettings()
        repository = repo or settings.repository
        releases = list_releases(wiring.build_source(settings), repository)
    except (KernsyncError, ValueError) as exc:
        raise fail(exc) from exc
    ReportRenderer().print_releases(repository, releases)
