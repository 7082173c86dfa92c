"""Subcommand modules for cmdsrv.

Provides register_commands() which uses deferred imports to keep
``cmdsrv --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the standalone commands on the root CLI group."""
    from cmdsrv.commands.send import send
    from cmdsrv.commands.serve import serve

    cli.add_command(serve)
    cli.add_command(send)
