"""Main Typer application — logging setup and command registration.

Entry point: ``kernsync`` (configured via pyproject.toml project.scripts).

Commands: sync, list, status.
"""

from __future__ import annotations

import logging
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from kernsync.cli.commands.list_cmd import list_cmd
from kernsync.cli.commands.status_cmd import status_cmd
from kernsync.cli.commands.sync_cmd import fail, sync_cmd
from kernsync.config import SyncSettings

app = typer.Typer(
    name="kernsync",
    help="kernsync: keep a WSL2 kernel image in sync with a GitHub release.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


def configure_logging(level: str) -> None:
    """Route log records to stderr through Rich."""
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=False,
    )
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )


@app.callback()
def main_callback(
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Logging level (default from KERNSYNC_LOG_LEVEL)."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Shortcut for --log-level INFO."
    ),
) -> None:
    """Keep a locally installed kernel image in sync with a release asset."""
    try:
        level = "INFO" if verbose else (log_level or SyncSettings().log_level)
        configure_logging(level)
    except ValueError as exc:
        raise fail(exc) from exc


# Register subcommands
app.command(name="sync", help="Download the selected release and adopt it if it differs.")(sync_cmd)
app.command(name="list", help="List releases without downloading anything.")(list_cmd)
app.command(name="status", help="Show the configured kernel and its digest.")(status_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
