"""kernsync CLI — Typer-based command-line interface.

Provides the ``kernsync`` command with ``sync``, ``list`` and ``status``
subcommands.  All output uses Rich for formatted terminal display.
"""
