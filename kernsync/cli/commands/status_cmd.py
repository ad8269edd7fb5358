"""``kernsync status`` — show the configured kernel and its digest."""

from __future__ import annotations

import typer

from kernsync.cli import wiring
from kernsync.cli.commands.sync_cmd import fail
from kernsync.cli.renderer import ReportRenderer
from kernsync.config import SyncSettings
from kernsync.core.fingerprint import Fingerprinter
from kernsync.errors import KernsyncError


def status_cmd() -> None:
    """Show the kernel path recorded in .wslconfig and its fingerprint."""
    try:
        settings = SyncSettings()
        kernel = wiring.build_config_store(settings).get_kernel_path()
        fingerprint = (
            Fingerprinter(settings.digest_algorithm).fingerprint(kernel)
            if kernel
            else None
        )
    except (KernsyncError, ValueError) as exc:
        raise fail(exc) from exc
    ReportRenderer().print_status(
        settings.resolved_wslconfig_path(), kernel, fingerprint
    )
