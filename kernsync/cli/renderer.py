"""Rich terminal rendering for release listings and sync reports.

Color scheme
------------
- green   : adopted / stable release
- cyan    : already up to date
- yellow  : prerelease, partial success
- magenta : draft
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from kernsync.models.fingerprint import Fingerprint
from kernsync.models.releases import Release
from kernsync.models.sync import SyncReport


def _release_status(release: Release) -> str:
    if release.draft:
        return "[magenta]draft[/magenta]"
    if release.prerelease:
        return "[yellow]pre-release[/yellow]"
    return "[green]stable[/green]"


def _fingerprint_text(fp: Fingerprint) -> str:
    if fp.is_absent:
        return "[dim]none[/dim]"
    return escape(str(fp))


class ReportRenderer:
    """Renders kernsync results as Rich terminal output.

    Parameters
    ----------
    console:
        Rich console to print to.  Defaults to a new stdout console.
    """

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    @property
    def console(self) -> Console:
        return self._console

    def build_release_table(self, repository: str, releases: Sequence[Release]) -> Table:
        table = Table(title=f"Releases of {escape(repository)}")
        table.add_column("Tag", style="cyan", no_wrap=True)
        table.add_column("Published")
        table.add_column("Status", justify="center")
        table.add_column("Assets", justify="right")
        for release in releases:
            published = (
                release.published_at.strftime("%Y-%m-%d")
                if release.published_at
                else "-"
            )
            table.add_row(
                escape(release.tag),
                published,
                _release_status(release),
                str(len(release.assets)),
            )
        return table

    def print_releases(self, repository: str, releases: Sequence[Release]) -> None:
        if not releases:
            self._console.print(f"[dim]No releases found in {escape(repository)}.[/dim]")
            return
        self._console.print(self.build_release_table(repository, releases))

    def print_report(self, report: SyncReport) -> None:
        lines = [
            f"[bold]Repository:[/bold] {escape(report.repository)}",
            f"[bold]Release:[/bold]    {escape(report.release_tag)}",
            f"[bold]Asset:[/bold]      {escape(report.asset_name)}",
            f"[bold]Local:[/bold]      {_fingerprint_text(report.local_fingerprint)}",
            f"[bold]Remote:[/bold]     {_fingerprint_text(report.remote_fingerprint)}",
            "",
        ]
        if not report.adopted:
            lines.append("[bold cyan]Already up to date.[/bold cyan]")
            border, title = "cyan", "No change"
        else:
            lines.append(
                f"[bold green]New kernel installed at[/bold green] "
                f"{escape(str(report.destination))}"
            )
            border, title = "green", "Kernel updated"
            if report.config_updated:
                lines.append("[green]Config updated, restart WSL to use it.[/green]")
            elif report.config_error:
                lines.append(
                    f"[bold yellow]Config not updated:[/bold yellow] "
                    f"{escape(report.config_error)}"
                )
                border, title = "yellow", "Kernel updated, config unchanged"
        self._console.print(
            Panel(
                "\n".join(lines),
                title=f"[bold]{title}[/bold]",
                border_style=border,
                padding=(1, 2),
            )
        )

    def print_status(
        self,
        config_path: Path,
        kernel_path: str,
        fingerprint: Fingerprint | None,
    ) -> None:
        table = Table(title="Installed kernel", show_header=False)
        table.add_column("Key", style="bold")
        table.add_column("Value")
        table.add_row("Config", escape(str(config_path)))
        table.add_row("Kernel", escape(kernel_path) if kernel_path else "[dim]not set[/dim]")
        if fingerprint is not None:
            table.add_row("Digest", _fingerprint_text(fingerprint))
        self._console.print(table)
